"""Forward-only schema migrations.

Each step upgrades a store from version N to N+1 and is registered with the
``migration`` decorator under its starting version. A step runs inside its
own transaction together with the version bump, so a store is never left at
a half-applied version: a failed step is rolled back and retried from the
same version on the next run.

No steps exist yet; schema version 1 is the only one. A future step looks
like:

    @migration(1, "Add note column to session")
    def _add_session_note(conn: sqlite3.Connection) -> None:
        conn.execute("ALTER TABLE session ADD COLUMN note TEXT")
"""

import logging
import sqlite3
from dataclasses import dataclass
from typing import Callable

from .result import ErrorKind, ErrorRecord, Result
from .schema import TABLE_INFO, VERSION_PROPERTY
from .store import StoreHandle

logger = logging.getLogger(__name__)

UPDATE_VERSION_SQL = f"UPDATE {TABLE_INFO} SET value = ? WHERE property = ?"


@dataclass(frozen=True)
class MigrationStep:
    from_version: int
    description: str
    apply: Callable[[sqlite3.Connection], None]

    @property
    def to_version(self) -> int:
        return self.from_version + 1


# Registered steps: starting version -> step
MIGRATIONS: dict[int, MigrationStep] = {}


def migration(from_version: int, description: str):
    """Decorator to register a migration step starting at ``from_version``."""
    def decorator(func: Callable[[sqlite3.Connection], None]):
        if from_version in MIGRATIONS:
            raise ValueError(f"Migration from version {from_version} already registered")
        MIGRATIONS[from_version] = MigrationStep(from_version, description, func)
        return func
    return decorator


def pending_steps(
    from_version: int, to_version: int, steps: dict[int, MigrationStep]
) -> tuple[list[MigrationStep], list[int]]:
    """Steps needed to go from ``from_version`` to ``to_version``.

    Returns:
        (steps in order, starting versions with no registered step)
    """
    found: list[MigrationStep] = []
    missing: list[int] = []
    for version in range(from_version, to_version):
        step = steps.get(version)
        if step is None:
            missing.append(version)
        else:
            found.append(step)
    return found, missing


def migrate(
    handle: StoreHandle,
    from_version: int,
    to_version: int,
    steps: dict[int, MigrationStep] | None = None,
) -> Result[None]:
    """Apply migration steps ``from_version -> ... -> to_version``.

    A store newer than ``to_version`` is rejected without writing anything.
    Steps stop at the first failure; steps committed before it stay applied.
    """
    if steps is None:
        steps = MIGRATIONS

    if not handle.is_open():
        message = "No store opened."
        handle.report_error(message)
        return Result.fail([ErrorRecord(ErrorKind.NOT_OPEN, message)])

    if from_version == to_version:
        return Result.success()

    if from_version > to_version:
        message = f"Store version {from_version} is newer than supported version {to_version}."
        handle.report_error(message)
        return Result.fail([ErrorRecord(ErrorKind.NEWER_STORE, message)])

    plan, missing = pending_steps(from_version, to_version, steps)
    if missing:
        errors = [
            ErrorRecord(
                ErrorKind.MISSING_MIGRATION,
                f"No migration from version {v} to {v + 1}.",
                step=v,
            )
            for v in missing
        ]
        handle.report_error(errors[-1].message)
        return Result.fail(errors)

    logger.info("Migrating %s from version %d to %d", handle.path(), from_version, to_version)

    for step in plan:
        try:
            with handle.transaction() as conn:
                step.apply(conn)
                conn.execute(UPDATE_VERSION_SQL, (str(step.to_version), VERSION_PROPERTY))
        except Exception as e:
            message = (
                f"Migration from version {step.from_version} to {step.to_version} failed: {e}."
            )
            handle.report_error(message)
            return Result.fail(
                [ErrorRecord(ErrorKind.MIGRATION_STEP, message, step=step.from_version)]
            )
        handle.report_info(
            f"Migrated store from version {step.from_version} to {step.to_version}: "
            f"{step.description}."
        )

    return Result.success()
