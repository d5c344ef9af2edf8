"""Inbound adapters for boltview.

Exports:
    Command line:
        - Main: Program state (streams, engine) and dispatcher
        - Command: The closed set of command names
        - run_cli: Run with an argument list and return the exit status
        - main: Console entry point
"""

from boltview.adapters.inbound.cli import Command, Main, main, run_cli

__all__ = [
    "Command",
    "Main",
    "main",
    "run_cli",
]
