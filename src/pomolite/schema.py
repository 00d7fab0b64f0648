"""Store schema contract.

Schema versions:
- v1: Base tables (db_info, activity_type, user, session)

The builder creates ``TABLES`` in the order they are declared here. A table
may only reference tables declared before it; ``dependency_problems`` checks
that so a bad ordering is caught in tests instead of at bootstrap time.
"""

from dataclasses import dataclass, field

# Schema version the running code creates and migrates to
CURRENT_VERSION = 1

# Table names
TABLE_INFO = "db_info"
TABLE_ACTIVITY_TYPE = "activity_type"
TABLE_USER = "user"
TABLE_SESSION = "session"

# db_info key holding the schema version
VERSION_PROPERTY = "version"


class SchemaOrderError(ValueError):
    """Raised when table specs reference unknown or later tables."""


@dataclass(frozen=True)
class ColumnSpec:
    name: str
    type: str
    constraints: str = ""

    def definition(self) -> str:
        return f"{self.name} {self.type} {self.constraints}".strip()


@dataclass(frozen=True)
class ForeignKey:
    column: str
    table: str
    ref_column: str = "id"

    def definition(self) -> str:
        return f"FOREIGN KEY({self.column}) REFERENCES {self.table}({self.ref_column})"


@dataclass(frozen=True)
class TableSpec:
    """Declarative description of one table."""

    name: str
    columns: tuple[ColumnSpec, ...]
    foreign_keys: tuple[ForeignKey, ...] = field(default=())

    @property
    def depends_on(self) -> frozenset[str]:
        return frozenset(fk.table for fk in self.foreign_keys)

    def column_definitions(self) -> str:
        parts = [c.definition() for c in self.columns]
        parts.extend(fk.definition() for fk in self.foreign_keys)
        return ",".join(parts)

    def create_statement(self) -> str:
        return f"CREATE TABLE {self.name}({self.column_definitions()});"


_ID = ColumnSpec("id", "INTEGER", "NOT NULL PRIMARY KEY ASC AUTOINCREMENT")

INFO_TABLE = TableSpec(
    TABLE_INFO,
    (
        ColumnSpec("property", "TEXT", "NOT NULL UNIQUE PRIMARY KEY"),
        ColumnSpec("value", "TEXT", "NOT NULL"),
    ),
)

ACTIVITY_TYPE_TABLE = TableSpec(
    TABLE_ACTIVITY_TYPE,
    (
        _ID,
        ColumnSpec("short_name", "TEXT", "NOT NULL UNIQUE"),
        ColumnSpec("full_name", "TEXT", "NOT NULL"),
        ColumnSpec("description", "TEXT"),
    ),
)

USER_TABLE = TableSpec(
    TABLE_USER,
    (
        _ID,
        ColumnSpec("full_name", "TEXT", "NOT NULL UNIQUE"),
    ),
)

SESSION_TABLE = TableSpec(
    TABLE_SESSION,
    (
        _ID,
        ColumnSpec("user_id", "INTEGER", "NOT NULL"),
        ColumnSpec("activity_type_id", "INTEGER", "NOT NULL"),
        ColumnSpec("start_time", "DATETIME", "NOT NULL"),
        ColumnSpec("end_time", "DATETIME", "NOT NULL"),
        ColumnSpec("rating", "INTEGER"),
    ),
    (
        ForeignKey("user_id", TABLE_USER),
        ForeignKey("activity_type_id", TABLE_ACTIVITY_TYPE),
    ),
)

# Creation order
TABLES: tuple[TableSpec, ...] = (
    INFO_TABLE,
    ACTIVITY_TYPE_TABLE,
    USER_TABLE,
    SESSION_TABLE,  # Depends: activity_type, user
)


def dependency_problems(tables: tuple[TableSpec, ...] | list[TableSpec]) -> list[str]:
    """List ordering problems in a sequence of table specs.

    Args:
        tables: Specs in intended creation order.

    Returns:
        One message per problem; empty when every dependency is declared
        earlier in the sequence.
    """
    problems: list[str] = []
    all_names = [t.name for t in tables]
    seen: set[str] = set()

    for table in tables:
        if table.name in seen:
            problems.append(f"Table {table.name!r} is declared more than once")
        for dep in sorted(table.depends_on):
            if dep not in all_names:
                problems.append(f"Table {table.name!r} references unknown table {dep!r}")
            elif dep not in seen:
                problems.append(f"Table {table.name!r} is declared before its dependency {dep!r}")
        seen.add(table.name)

    return problems


def ordered_tables(tables: tuple[TableSpec, ...] = TABLES) -> tuple[TableSpec, ...]:
    """Return ``tables`` after checking their creation order.

    Raises:
        SchemaOrderError: If any spec depends on an unknown or later table.
    """
    problems = dependency_problems(tables)
    if problems:
        raise SchemaOrderError("; ".join(problems))
    return tuple(tables)


def table_names(tables: tuple[TableSpec, ...] = TABLES) -> list[str]:
    return [t.name for t in tables]
