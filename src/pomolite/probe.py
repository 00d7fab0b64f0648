"""Read-only inspection of a store: schema version, tables, row counts."""

import logging
import re
import sqlite3

from .schema import TABLE_INFO, TABLES, VERSION_PROPERTY, TableSpec
from .store import StoreHandle

logger = logging.getLogger(__name__)

VERSION_QUERY = f"SELECT value FROM {TABLE_INFO} WHERE property = ?"
VERSION_PATTERN = re.compile(r"[0-9]+")


def parse_version(value: object) -> int | None:
    """Parse a stored version value, or None if it is not a usable version."""
    if value is None:
        return None
    text = str(value).strip()
    if not VERSION_PATTERN.fullmatch(text):
        return None
    return int(text)


def probe_version(handle: StoreHandle) -> int | None:
    """Return the recorded schema version, or None if there is none.

    A closed handle, a missing db_info table, a missing version row and an
    unparsable value all mean "no usable version".
    """
    if not handle.is_open():
        return None

    try:
        value = handle.query_scalar(VERSION_QUERY, (VERSION_PROPERTY,))
    except sqlite3.Error as e:
        logger.debug("Version probe of %s found nothing: %s", handle.path(), e)
        return None

    version = parse_version(value)
    if version is None and value is not None:
        logger.debug("Ignoring unparsable version %r in %s", value, handle.path())
    return version


def existing_tables(handle: StoreHandle) -> set[str]:
    """Names of user tables present in the store."""
    if not handle.is_open():
        return set()
    rows = handle.query_all(
        "SELECT name FROM sqlite_master WHERE type = 'table' AND name NOT LIKE 'sqlite_%'"
    )
    return {name for (name,) in rows}


def missing_tables(
    handle: StoreHandle, tables: tuple[TableSpec, ...] = TABLES
) -> list[str]:
    """Contract tables absent from the store, in creation order."""
    present = existing_tables(handle)
    return [t.name for t in tables if t.name not in present]


def row_counts(
    handle: StoreHandle, tables: tuple[TableSpec, ...] = TABLES
) -> dict[str, int]:
    """Row count per contract table that exists in the store."""
    present = existing_tables(handle)
    return {
        t.name: handle.query_scalar(f"SELECT COUNT(*) FROM {t.name}")
        for t in tables
        if t.name in present
    }
