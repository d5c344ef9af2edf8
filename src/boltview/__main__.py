"""Allow ``python -m boltview``."""

from boltview.adapters.inbound.cli import main

main()
