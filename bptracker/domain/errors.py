"""Error kinds surfaced by the reading core."""


class ReadingError(Exception):
    """Base class for every failure the core reports to its callers."""


class ValidationError(ReadingError):
    """Caller-supplied reading data violates field constraints. Nothing was persisted."""

    def __init__(self, messages: list[str]) -> None:
        self.messages = list(messages)
        super().__init__("; ".join(self.messages) or "invalid reading data")


class NotFoundError(ReadingError):
    """The operation targets an id absent from the current reading set."""

    def __init__(self, reading_id: str) -> None:
        self.reading_id = reading_id
        super().__init__(f"Reading {reading_id!r} not found")


class StoreError(ReadingError):
    """The persistence boundary failed (I/O fault, malformed response, network fault)."""

    def __init__(self, operation: str, cause: BaseException) -> None:
        self.operation = operation
        self.cause = cause
        super().__init__(f"{operation} failed: {cause}")
        self.__cause__ = cause
