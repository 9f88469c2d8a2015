"""Convenience HTTP client returning uniform ``Result`` envelopes.

Builds JSON, URL-encoded form and multipart requests, sends them through a
pooled httpx client and maps every outcome into a ``Result``.
"""

from ._config import Config
from ._services import AppHttpClient, ClientProvider, HttpClientProvider
from ._utils._body import (
    FormBody,
    JsonBody,
    MultipartBody,
    NoBody,
    encode_body,
    multipart_fields,
)
from ._utils._curl import render_curl
from ._utils._json import deserialize, serialize
from ._utils._request_spec import RequestSpec, build_request
from .models import (
    AppHttpError,
    Cancelled,
    DeserializationError,
    EncodingError,
    ErrorDetail,
    ErrorKind,
    FileField,
    FileListField,
    HttpFailure,
    MapField,
    Result,
    SerializationError,
    TextField,
    TextListField,
    TransportException,
    UploadFile,
)

__all__ = [
    "AppHttpClient",
    "ClientProvider",
    "Config",
    "HttpClientProvider",
    "FormBody",
    "JsonBody",
    "MultipartBody",
    "NoBody",
    "RequestSpec",
    "build_request",
    "encode_body",
    "multipart_fields",
    "render_curl",
    "serialize",
    "deserialize",
    "AppHttpError",
    "Cancelled",
    "DeserializationError",
    "EncodingError",
    "ErrorDetail",
    "ErrorKind",
    "HttpFailure",
    "SerializationError",
    "TransportException",
    "Result",
    "FileField",
    "FileListField",
    "MapField",
    "TextField",
    "TextListField",
    "UploadFile",
]
