from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """Category of a failed call."""

    HTTP_FAILURE = "http_failure"
    TRANSPORT = "transport"
    SERIALIZATION = "serialization"
    DESERIALIZATION = "deserialization"
    ENCODING = "encoding"
    CANCELLED = "cancelled"


class AppHttpError(Exception):
    """Base class for every error raised inside the request pipeline.

    These errors are raised by the encoding, building and decoding layers and
    are converted into a failure ``Result`` by the client. They only reach
    callers through ``Result.unwrap()``.
    """

    kind: ErrorKind = ErrorKind.TRANSPORT

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class HttpFailure(AppHttpError):
    """A response arrived with a non-success status code."""

    kind = ErrorKind.HTTP_FAILURE

    def __init__(self, status_code: int, body: str):
        self.body = body
        super().__init__(body, status_code)


class TransportException(AppHttpError):
    """The request could not be sent or the response could not be read."""

    kind = ErrorKind.TRANSPORT


class SerializationError(AppHttpError):
    """The outbound body could not be serialized."""

    kind = ErrorKind.SERIALIZATION


class DeserializationError(AppHttpError):
    """A successful response body could not be decoded into the target type."""

    kind = ErrorKind.DESERIALIZATION


class EncodingError(AppHttpError):
    """A form or multipart body was shaped in a way that cannot be encoded."""

    kind = ErrorKind.ENCODING


class Cancelled(AppHttpError):
    """The call was aborted through its cancellation event."""

    kind = ErrorKind.CANCELLED

    def __init__(self, message: str = "The operation was cancelled."):
        super().__init__(message)


_ERRORS_BY_KIND = {
    ErrorKind.TRANSPORT: TransportException,
    ErrorKind.SERIALIZATION: SerializationError,
    ErrorKind.DESERIALIZATION: DeserializationError,
    ErrorKind.ENCODING: EncodingError,
}


def error_for_kind(
    kind: ErrorKind, message: str, status_code: Optional[int] = None
) -> AppHttpError:
    if kind is ErrorKind.HTTP_FAILURE:
        return HttpFailure(status_code or 0, message)
    if kind is ErrorKind.CANCELLED:
        return Cancelled(message)
    return _ERRORS_BY_KIND[kind](message, status_code)
