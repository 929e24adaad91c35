"""
Generic Result type for explicit error handling.

Store adapters and the repository return a Result instead of raising, so
callers (presentation code) always get either a value or a typed failure.
"""

from typing import Generic, cast

from typing_extensions import TypeVar

ValueT = TypeVar("ValueT")
ErrorT = TypeVar("ErrorT", bound=BaseException, default=Exception)

_MISSING = object()


class Result(Generic[ValueT, ErrorT]):
    """
    Explicit error handling without exceptions for expected failures.

    A successful Result may carry ``None`` (e.g. ``delete_all``); the error
    slot is what decides ok vs err.
    """

    __slots__ = ("_value", "_error")

    def __init__(self, value: object = _MISSING, error: ErrorT | None = None) -> None:
        if value is not _MISSING and error is not None:
            raise ValueError("Result cannot have both value and error")
        if value is _MISSING and error is None:
            raise ValueError("Result must have either value or error")
        self._value = None if value is _MISSING else value
        self._error: ErrorT | None = error

    @classmethod
    def ok(cls, value: ValueT) -> "Result[ValueT, ErrorT]":
        return cls(value=value)

    @classmethod
    def err(cls, error: ErrorT) -> "Result[ValueT, ErrorT]":
        return cls(error=error)

    def is_ok(self) -> bool:
        return self._error is None

    def is_err(self) -> bool:
        return self._error is not None

    def unwrap(self) -> ValueT:
        if self._error is not None:
            raise self._error
        return cast(ValueT, self._value)

    def unwrap_or(self, default: ValueT) -> ValueT:
        return cast(ValueT, self._value) if self._error is None else default

    def unwrap_err(self) -> ErrorT:
        if self._error is None:
            raise ValueError("Called unwrap_err() on an Ok value")
        return self._error

    def __repr__(self) -> str:
        if self._error is not None:
            return f"Result.err({self._error!r})"
        return f"Result.ok({self._value!r})"
