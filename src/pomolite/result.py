"""Success/failure envelope returned by every store operation.

Expected failures (store not opened, a table that could not be created, a
stale schema that cannot be migrated) travel as ``Result.fail`` carrying the
full list of ``ErrorRecord`` entries. Only reading the value of a failed
result raises.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar("T")


class ResultCode(Enum):
    SUCCESS = "success"
    FAIL = "fail"


class ErrorKind(Enum):
    """Categories of recoverable failures."""

    NOT_OPEN = "not_open"
    TABLE_CREATION = "table_creation"
    SEED_INSERT = "seed_insert"
    MIGRATION_STEP = "migration_step"
    MISSING_MIGRATION = "missing_migration"
    NEWER_STORE = "newer_store"
    PARTIAL_STORE = "partial_store"
    TRANSACTION = "transaction"


class ResultValueError(RuntimeError):
    """Raised when the value of a failed result is accessed."""


@dataclass(frozen=True)
class ErrorRecord:
    """A single structured failure.

    Attributes:
        kind: Failure category.
        message: Human-readable description, as reported on the store handle.
        table: Table involved, for table creation and seed failures.
        step: Starting version of the migration step that failed.
    """

    kind: ErrorKind
    message: str
    table: str | None = None
    step: int | None = None


class Result(Generic[T]):
    """Outcome of an operation plus an optional value."""

    __slots__ = ("_code", "_value", "_errors")

    def __init__(
        self,
        code: ResultCode,
        value: T | None = None,
        errors: tuple[ErrorRecord, ...] = (),
    ) -> None:
        self._code = code
        self._value = value
        self._errors = tuple(errors)

    @classmethod
    def success(cls, value: T | None = None) -> "Result[T]":
        return cls(ResultCode.SUCCESS, value)

    @classmethod
    def fail(cls, errors: "list[ErrorRecord] | tuple[ErrorRecord, ...]" = ()) -> "Result[T]":
        return cls(ResultCode.FAIL, None, tuple(errors))

    @property
    def code(self) -> ResultCode:
        return self._code

    @property
    def errors(self) -> tuple[ErrorRecord, ...]:
        return self._errors

    def successful(self) -> bool:
        return self._code is ResultCode.SUCCESS

    def value(self) -> T:
        """Return the payload of a successful result.

        Raises:
            ResultValueError: If the result is a failure.
        """
        if not self.successful():
            raise ResultValueError("Cannot access value of failed result.")
        return self._value  # type: ignore[return-value]

    def first_error(self) -> ErrorRecord | None:
        return self._errors[0] if self._errors else None

    def last_error(self) -> ErrorRecord | None:
        return self._errors[-1] if self._errors else None

    def __repr__(self) -> str:
        if self.successful():
            return f"Result.success({self._value!r})"
        return f"Result.fail({list(self._errors)!r})"
