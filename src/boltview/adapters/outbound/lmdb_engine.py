"""LMDB implementation of the StorageEngine port.

LMDB is a memory-mapped, copy-on-write B+Tree with single-writer,
multi-reader transactions. boltview opens it in single-file mode
(``subdir=False``): the database is exactly the path given on the
command line, with the engine's lock file next to it.

Buckets:
    A bucket is an LMDB named database. The names of all named databases
    are keys of the environment's main database. A main-database key that
    is a plain record rather than a named database is not a bucket and is
    skipped when buckets are enumerated.

Errors:
    Every ``lmdb.Error`` is re-raised as ``EngineError`` carrying the
    engine's message unchanged, so callers never import lmdb.
"""

from __future__ import annotations

from contextlib import AbstractContextManager, contextmanager
from pathlib import Path
from typing import Iterator

import lmdb

from boltview.domain.entities import BucketStats, KeyValuePair
from boltview.domain.errors import DatabaseFileNotFoundError, EngineError
from boltview.domain.value_objects import BucketName, Key, TransactionMode, Value
from boltview.infrastructure.config import EngineConfig, get_config
from boltview.infrastructure.logging import get_logger
from boltview.infrastructure.metrics import MetricsRegistry, get_metrics
from boltview.infrastructure.tracing import transaction_span


logger = get_logger(__name__)


@contextmanager
def _engine_errors() -> Iterator[None]:
    """Translate lmdb exceptions into EngineError."""
    try:
        yield
    except lmdb.Error as e:
        raise EngineError(str(e)) from e


class LMDBBucket:
    """A named database resolved inside an LMDB transaction."""

    def __init__(self, txn: lmdb.Transaction, db: lmdb._Database, name: BucketName) -> None:
        self._txn = txn
        self._db = db
        self._name = name

    @property
    def name(self) -> BucketName:
        return self._name

    def stats(self) -> BucketStats:
        with _engine_errors():
            entries = self._txn.stat(self._db)["entries"]
        return BucketStats(name=self._name, key_count=entries)

    def cursor(self) -> Iterator[KeyValuePair]:
        with _engine_errors():
            with self._txn.cursor(db=self._db) as cursor:
                for key, value in cursor:
                    yield KeyValuePair(key=Key(key), value=Value(value))

    def put(self, key: Key, value: Value) -> None:
        with _engine_errors():
            self._txn.put(key, value, db=self._db, overwrite=True)

    def delete(self, key: Key) -> bool:
        with _engine_errors():
            return self._txn.delete(key, db=self._db)


class LMDBTransaction:
    """A read or read-write LMDB transaction."""

    def __init__(self, env: lmdb.Environment, txn: lmdb.Transaction, mode: TransactionMode) -> None:
        self._env = env
        self._txn = txn
        self._mode = mode

    @property
    def mode(self) -> TransactionMode:
        return self._mode

    def _open_bucket(self, name: bytes) -> LMDBBucket | None:
        """Open the named database ``name``, or None if it is not one."""
        try:
            db = self._env.open_db(name, txn=self._txn, create=False)
        except (lmdb.NotFoundError, lmdb.IncompatibleError):
            return None
        except lmdb.Error as e:
            raise EngineError(str(e)) from e
        return LMDBBucket(self._txn, db, BucketName(name))

    def buckets(self) -> Iterator[BucketStats]:
        # Names are collected before any bucket is opened.
        with _engine_errors():
            with self._txn.cursor() as cursor:
                names = [key for key in cursor.iternext(keys=True, values=False)]

        for name in names:
            bucket = self._open_bucket(name)
            if bucket is not None:
                yield bucket.stats()

    def bucket(self, name: BucketName) -> LMDBBucket | None:
        if not name:
            return None
        return self._open_bucket(name)


class LMDBDatabase:
    """An open LMDB environment backed by a single file."""

    def __init__(
        self,
        path: Path,
        env: lmdb.Environment,
        readonly: bool,
        metrics: MetricsRegistry,
    ) -> None:
        self._path = path
        self._env = env
        self._readonly = readonly
        self._metrics = metrics
        self._closed = False
        self._in_transaction = False

    @property
    def path(self) -> Path:
        return self._path

    @property
    def readonly(self) -> bool:
        return self._readonly

    @property
    def closed(self) -> bool:
        return self._closed

    @contextmanager
    def _begin(self, mode: TransactionMode) -> Iterator[LMDBTransaction]:
        if self._closed:
            raise EngineError("database not open")
        if self._in_transaction:
            raise EngineError("transaction already in progress")

        self._in_transaction = True
        status = "abort"
        try:
            with transaction_span(mode.value, self._path):
                with _engine_errors():
                    txn = self._env.begin(write=mode.is_write)
                try:
                    yield LMDBTransaction(self._env, txn, mode)
                except BaseException:
                    txn.abort()
                    raise
                with _engine_errors():
                    txn.commit()
                status = "commit"
        finally:
            self._in_transaction = False
            self._metrics.transactions_total.labels(mode=mode.value, status=status).inc()
            logger.debug("transaction_finished", mode=mode.value, status=status)

    def view(self) -> AbstractContextManager[LMDBTransaction]:
        return self._begin(TransactionMode.READ)

    def update(self) -> AbstractContextManager[LMDBTransaction]:
        if self._readonly:
            raise PermissionError(f"{self._path} is open read-only")
        return self._begin(TransactionMode.WRITE)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._env.close()
        logger.debug("database_closed", path=str(self._path))

    def __enter__(self) -> LMDBDatabase:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class LMDBStorageEngine:
    """Opens existing LMDB database files.

    Attributes:
        config: Engine tuning (handle limit, map size, locking, sync).
    """

    def __init__(
        self,
        config: EngineConfig | None = None,
        metrics: MetricsRegistry | None = None,
    ) -> None:
        self.config = config or get_config().engine
        self._metrics = metrics or get_metrics()

    def _open_env(self, path: Path, readonly: bool, max_dbs: int) -> lmdb.Environment:
        with _engine_errors():
            return lmdb.open(
                str(path),
                map_size=self.config.map_size,
                subdir=False,
                readonly=readonly,
                create=False,
                max_dbs=max_dbs,
                lock=self.config.lock,
                sync=self.config.sync,
                readahead=self.config.readahead,
            )

    def open(self, path: str | Path, readonly: bool = False) -> LMDBDatabase:
        """Open an existing database file.

        ``config.max_buckets`` is a floor on the handle limit. A file whose
        main database holds more keys than that is reopened with one handle
        per key, since any of them may be a bucket that ``buckets()`` opens.

        Raises:
            DatabaseFileNotFoundError: If ``path`` does not exist.
            EngineError: If the engine cannot open the file.
        """
        path = Path(path)
        if not path.exists():
            raise DatabaseFileNotFoundError()

        max_dbs = self.config.max_buckets
        env = self._open_env(path, readonly, max_dbs)
        try:
            with _engine_errors():
                entries = env.stat()["entries"]
        except EngineError:
            env.close()
            raise

        if entries + 1 > max_dbs:
            env.close()
            max_dbs = entries + 1
            env = self._open_env(path, readonly, max_dbs)

        logger.debug("database_opened", path=str(path), readonly=readonly, max_dbs=max_dbs)
        return LMDBDatabase(path, env, readonly, self._metrics)
