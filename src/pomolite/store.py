"""Store handle: owns the SQLite connection for one store file."""

import logging
import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from os import PathLike
from pathlib import Path
from typing import TYPE_CHECKING, Any, Iterable, Iterator, Sequence

from .schema import CURRENT_VERSION

if TYPE_CHECKING:
    from .migrations import MigrationStep
    from .result import Result

logger = logging.getLogger(__name__)


class Severity(Enum):
    """Level of the last reported diagnostic."""

    NONE = 0
    INFO = 1
    WARNING = 2
    ERROR = 3


_LOG_LEVELS = {
    Severity.NONE: logging.DEBUG,
    Severity.INFO: logging.INFO,
    Severity.WARNING: logging.WARNING,
    Severity.ERROR: logging.ERROR,
}


@dataclass(frozen=True)
class Diagnostic:
    severity: Severity
    message: str


class StoreHandle:
    """Single owner of a store connection.

    The file is opened (and created if absent) on construction. Use the
    handle as a context manager, or call ``close()`` when done; closing is
    idempotent. Handles cannot be copied or pickled.

    ``message()``/``severity()`` hold only the most recent diagnostic.
    ``diagnostics()`` keeps every report made through the handle.
    """

    def __init__(self, path: str | PathLike[str]):
        self._path = str(path)
        self._conn: sqlite3.Connection | None = None
        self._message = ""
        self._severity = Severity.NONE
        self._diagnostics: list[Diagnostic] = []

        try:
            conn = sqlite3.connect(self._path, isolation_level=None)
        except sqlite3.Error as e:
            self.report_error(f'Failed to open store at "{self._path}": {e}.')
            return

        try:
            conn.execute("PRAGMA foreign_keys = ON")
        except sqlite3.Error as e:
            conn.close()
            self.report_error(f'Failed to open store at "{self._path}": {e}.')
            return

        self._conn = conn
        self.report_info(f'Opened store at "{self._path}".')

    def __enter__(self) -> "StoreHandle":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __copy__(self):
        raise TypeError("StoreHandle cannot be copied")

    def __deepcopy__(self, memo):
        raise TypeError("StoreHandle cannot be copied")

    def __getstate__(self):
        raise TypeError("StoreHandle cannot be pickled")

    def __repr__(self) -> str:
        state = "open" if self.is_open() else "closed"
        return f"<StoreHandle {self._path!r} ({state})>"

    # Accessors

    def path(self) -> str:
        return self._path

    def is_open(self) -> bool:
        return self._conn is not None

    def message(self) -> str:
        return self._message

    def severity(self) -> Severity:
        return self._severity

    def diagnostics(self) -> list[Diagnostic]:
        return list(self._diagnostics)

    # Lifecycle

    def close(self) -> None:
        """Release the connection. Errors are reported, never raised."""
        if self._conn is None:
            return

        conn, self._conn = self._conn, None
        self.report_info(f'Closing store "{self._path}".')
        try:
            conn.close()
        except sqlite3.Error as e:
            self.report_error(f'Failed to close store "{self._path}": {e}.')

    def initialize(
        self,
        target: int = CURRENT_VERSION,
        migrations: "dict[int, MigrationStep] | None" = None,
    ) -> "Result[None]":
        """Bring the store to ``target`` version. See ``bootstrap.initialize``."""
        from .bootstrap import initialize

        return initialize(self, target=target, migrations=migrations)

    # Reporting

    def report(self, message: str, severity: Severity) -> None:
        self._message = message
        self._severity = severity
        self._diagnostics.append(Diagnostic(severity, message))
        logger.log(_LOG_LEVELS[severity], message)

    def report_info(self, message: str) -> None:
        self.report(message, Severity.INFO)

    def report_warning(self, message: str) -> None:
        self.report(message, Severity.WARNING)

    def report_error(self, message: str) -> None:
        self.report(message, Severity.ERROR)

    # Statements

    def _connection(self) -> sqlite3.Connection:
        if self._conn is None:
            raise sqlite3.ProgrammingError(f'Store "{self._path}" is not open')
        return self._conn

    def execute(self, sql: str, params: Sequence[Any] = ()) -> sqlite3.Cursor:
        return self._connection().execute(sql, params)

    def executemany(self, sql: str, rows: Iterable[Sequence[Any]]) -> sqlite3.Cursor:
        return self._connection().executemany(sql, rows)

    def query_scalar(self, sql: str, params: Sequence[Any] = ()) -> Any | None:
        """First column of the first row, or None when there are no rows."""
        row = self._connection().execute(sql, params).fetchone()
        return None if row is None else row[0]

    def query_all(self, sql: str, params: Sequence[Any] = ()) -> list[tuple]:
        return self._connection().execute(sql, params).fetchall()

    def begin(self) -> None:
        self._connection().execute("BEGIN")

    def commit(self) -> None:
        conn = self._connection()
        if conn.in_transaction:
            conn.execute("COMMIT")

    def rollback(self) -> None:
        conn = self._connection()
        if conn.in_transaction:
            conn.execute("ROLLBACK")

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        """Run a block in one transaction, rolling back if it raises."""
        conn = self._connection()
        self.begin()
        try:
            yield conn
        except BaseException:
            self.rollback()
            raise
        self.commit()


def open(path: str | PathLike[str] | Path) -> StoreHandle:  # noqa: A001
    """Open (creating if needed) the store at ``path``."""
    return StoreHandle(path)
