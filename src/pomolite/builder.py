"""Create the full schema and seed rows in an empty store."""

import sqlite3

from .fixtures import activity_type_rows, version_row
from .result import ErrorKind, ErrorRecord, Result
from .schema import TABLE_ACTIVITY_TYPE, TABLE_INFO, TABLES, ordered_tables
from .store import StoreHandle

INSERT_INFO_SQL = f"INSERT INTO {TABLE_INFO}(property, value) VALUES (?, ?)"
INSERT_ACTIVITY_TYPE_SQL = (
    f"INSERT INTO {TABLE_ACTIVITY_TYPE}(short_name, full_name, description) VALUES (?, ?, ?)"
)


def build(handle: StoreHandle) -> Result[None]:
    """Create every contract table and insert the seed rows.

    Only call this for a store with no recorded version. Every statement is
    attempted even after a failure so all problems are reported, but the
    whole build is rolled back if any of them failed; the store is then left
    as it was before the call.
    """
    if not handle.is_open():
        message = "No store opened."
        handle.report_error(message)
        return Result.fail([ErrorRecord(ErrorKind.NOT_OPEN, message)])

    errors: list[ErrorRecord] = []

    def fail(kind: ErrorKind, message: str, table: str) -> None:
        errors.append(ErrorRecord(kind, message, table=table))
        handle.report_error(message)

    try:
        handle.begin()
    except sqlite3.Error as e:
        message = f"Failed to start schema build: {e}."
        handle.report_error(message)
        return Result.fail([ErrorRecord(ErrorKind.TRANSACTION, message)])

    for table in ordered_tables(TABLES):
        try:
            handle.execute(table.create_statement())
        except sqlite3.Error as e:
            fail(ErrorKind.TABLE_CREATION, f'Creation of table "{table.name}" failed: {e}.', table.name)

    try:
        handle.execute(INSERT_INFO_SQL, version_row())
    except sqlite3.Error as e:
        fail(ErrorKind.SEED_INSERT, f"Failed to set version number: {e}.", TABLE_INFO)

    try:
        handle.executemany(INSERT_ACTIVITY_TYPE_SQL, activity_type_rows())
    except sqlite3.Error as e:
        fail(ErrorKind.SEED_INSERT, f"Failed to add default activity types: {e}.", TABLE_ACTIVITY_TYPE)

    if errors:
        handle.rollback()
        return Result.fail(errors)

    handle.commit()
    return Result.success()
