"""Bring a store to the schema version the running code expects.

    no store opened      -> fail
    no recorded version  -> build (then migrate if target is above the built version)
    version == target    -> nothing to do
    version <  target    -> migrate
    version >  target    -> fail, the store belongs to a newer release
"""

import logging

from .builder import build
from .migrations import MigrationStep, migrate
from .probe import missing_tables, probe_version
from .result import ErrorKind, ErrorRecord, Result
from .schema import CURRENT_VERSION
from .store import StoreHandle

logger = logging.getLogger(__name__)


def _check_complete(handle: StoreHandle) -> Result[None]:
    missing = missing_tables(handle)
    if missing:
        message = f"Store is missing tables: {', '.join(missing)}."
        handle.report_error(message)
        return Result.fail([ErrorRecord(ErrorKind.PARTIAL_STORE, message)])
    return Result.success()


def initialize(
    handle: StoreHandle,
    target: int = CURRENT_VERSION,
    migrations: dict[int, MigrationStep] | None = None,
) -> Result[None]:
    """Create or upgrade the store behind ``handle`` to ``target``.

    Safe to call repeatedly: a store already at ``target`` is only read.

    Args:
        handle: Open store handle.
        target: Schema version to reach.
        migrations: Step registry, defaults to the registered migrations.

    Returns:
        Success, or Fail carrying every error recorded on the way. The most
        recent message is also left on the handle.
    """
    if not handle.is_open():
        message = "No store opened."
        handle.report_error(message)
        return Result.fail([ErrorRecord(ErrorKind.NOT_OPEN, message)])

    version = probe_version(handle)

    if version is None and target < CURRENT_VERSION:
        message = (
            f"Cannot create a store at version {target}: "
            f"new stores start at version {CURRENT_VERSION}."
        )
        handle.report_error(message)
        return Result.fail([ErrorRecord(ErrorKind.NEWER_STORE, message)])

    if version is None:
        logger.info("No schema version in %s, building schema", handle.path())
        result = build(handle)
        if not result.successful():
            return result
        version = CURRENT_VERSION

    if version != target:
        result = migrate(handle, version, target, migrations)
        if not result.successful():
            return result

    result = _check_complete(handle)
    if not result.successful():
        return result

    handle.report_info(f'Store "{handle.path()}" is at version {target}.')
    return Result.success()
