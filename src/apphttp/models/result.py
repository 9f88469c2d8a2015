from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, model_validator

from .errors import AppHttpError, ErrorKind, error_for_kind

T = TypeVar("T")


class ErrorDetail(BaseModel):
    """Exception captured while a call was being executed."""

    model_config = ConfigDict(frozen=True)

    kind: ErrorKind
    type: str
    message: str

    @classmethod
    def from_exception(cls, exc: BaseException) -> "ErrorDetail":
        kind = exc.kind if isinstance(exc, AppHttpError) else ErrorKind.TRANSPORT
        message = exc.message if isinstance(exc, AppHttpError) else str(exc)
        return cls(kind=kind, type=type(exc).__name__, message=message)


class Result(BaseModel, Generic[T]):
    """Outcome of a single HTTP call.

    A successful result carries the decoded, non-``None`` ``payload`` and no
    ``message``.
    A failed result carries a ``message`` and no ``payload``; ``status_code``
    is ``None`` when no response was received and ``error`` is set when the
    failure was caused by an exception rather than an HTTP error status.

    Examples:
        >>> result = client.get("https://api.example.com/items/1", Item)
        >>> if result.success:
        ...     print(result.payload.name)
        ... else:
        ...     print(result.status_code, result.message)
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    success: bool
    message: Optional[str] = None
    payload: Optional[T] = None
    status_code: Optional[int] = None
    error: Optional[ErrorDetail] = None

    @model_validator(mode="after")
    def _check_outcome(self) -> "Result[T]":
        if self.success:
            if self.message is not None or self.error is not None:
                raise ValueError("A successful result cannot carry a message or error")
            if self.payload is None:
                raise ValueError("A successful result needs a payload")
        elif self.message is None or self.payload is not None:
            raise ValueError("A failed result needs a message and no payload")
        return self

    @classmethod
    def success_result(cls, payload: T, status_code: Optional[int] = None):
        return cls(success=True, payload=payload, status_code=status_code)

    @classmethod
    def failure_result(
        cls,
        message: str,
        status_code: Optional[int] = None,
        error: Optional[ErrorDetail] = None,
    ):
        return cls(success=False, message=message, status_code=status_code, error=error)

    @property
    def error_kind(self) -> Optional[ErrorKind]:
        """Category of the failure, or ``None`` for a successful result."""
        if self.success:
            return None
        if self.error is None:
            return ErrorKind.HTTP_FAILURE
        return self.error.kind

    def unwrap(self) -> Optional[T]:
        """Return the payload, raising the matching ``AppHttpError`` on failure."""
        if self.success:
            return self.payload
        if self.error is not None:
            raise error_for_kind(self.error.kind, self.error.message, self.status_code)
        raise error_for_kind(ErrorKind.HTTP_FAILURE, self.message or "", self.status_code)
