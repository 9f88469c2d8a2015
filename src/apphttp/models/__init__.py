"""Data models returned by and passed to the HTTP client."""

from .errors import (
    AppHttpError,
    Cancelled,
    DeserializationError,
    EncodingError,
    ErrorKind,
    HttpFailure,
    SerializationError,
    TransportException,
)
from .multipart import (
    FileField,
    FileListField,
    FilePart,
    MapField,
    MultipartField,
    TextField,
    TextListField,
    TextPart,
    UploadFile,
)
from .result import ErrorDetail, Result

__all__ = [
    "AppHttpError",
    "Cancelled",
    "DeserializationError",
    "EncodingError",
    "ErrorKind",
    "HttpFailure",
    "SerializationError",
    "TransportException",
    "FileField",
    "FileListField",
    "FilePart",
    "MapField",
    "MultipartField",
    "TextField",
    "TextListField",
    "TextPart",
    "UploadFile",
    "ErrorDetail",
    "Result",
]
