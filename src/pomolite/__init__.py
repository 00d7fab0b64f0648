"""Schema lifecycle for the pomolite time-tracking store."""

from .bootstrap import initialize
from .cli import cli
from .probe import probe_version
from .result import ErrorKind, ErrorRecord, Result, ResultCode, ResultValueError
from .schema import CURRENT_VERSION
from .store import Severity, StoreHandle, open

__all__ = [
    "CURRENT_VERSION",
    "ErrorKind",
    "ErrorRecord",
    "Result",
    "ResultCode",
    "ResultValueError",
    "Severity",
    "StoreHandle",
    "cli",
    "initialize",
    "main",
    "open",
    "probe_version",
]


def main() -> None:
    """Entry point for the pomolite CLI."""
    cli()
