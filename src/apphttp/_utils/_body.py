import dataclasses
from contextlib import ExitStack, contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence, Tuple, Union
from urllib.parse import urlencode

from pydantic import BaseModel

from ..models.errors import EncodingError
from ..models.multipart import (
    FileField,
    FileListField,
    FilePart,
    MapField,
    MultipartField,
    MultipartPart,
    TextField,
    TextListField,
    TextPart,
    UploadFile,
)
from ._json import serialize
from .constants import APPLICATION_JSON, FORM_URLENCODED, MULTIPART_FORM_DATA

_MULTIPART_FIELD_TYPES = (TextField, FileField, FileListField, TextListField, MapField)


@dataclass(frozen=True)
class NoBody:
    content_type: Optional[str] = None

    @property
    def content_type_header(self) -> Optional[str]:
        return None

    def to_text(self) -> str:
        return ""

    @contextmanager
    def open(self) -> Iterator[Dict[str, Any]]:
        yield {}


@dataclass(frozen=True)
class JsonBody:
    content: bytes
    content_type: str = APPLICATION_JSON

    @property
    def content_type_header(self) -> str:
        return f"{self.content_type}; charset=utf-8"

    def to_text(self) -> str:
        return self.content.decode("utf-8")

    @contextmanager
    def open(self) -> Iterator[Dict[str, Any]]:
        yield {"content": self.content}


@dataclass(frozen=True)
class FormBody:
    fields: Dict[str, str]
    content_type: str = FORM_URLENCODED

    @property
    def content(self) -> bytes:
        return urlencode(self.fields).encode("ascii")

    @property
    def content_type_header(self) -> str:
        return self.content_type

    def to_text(self) -> str:
        return self.content.decode("ascii")

    @contextmanager
    def open(self) -> Iterator[Dict[str, Any]]:
        yield {"content": self.content}


@dataclass(frozen=True)
class MultipartBody:
    parts: List[MultipartPart] = field(default_factory=list)
    content_type: str = MULTIPART_FORM_DATA

    @property
    def content_type_header(self) -> None:
        # The transport adds the header together with the generated boundary.
        return None

    def to_text(self) -> str:
        return ""

    @contextmanager
    def open(self) -> Iterator[Dict[str, Any]]:
        """Open every file part and yield the transport's ``files`` argument.

        Streams opened from a path are closed on exit; caller supplied file
        objects are left open.

        Raises:
            EncodingError: If a file part cannot be opened for reading.
        """
        with ExitStack() as stack:
            files: List[Tuple[str, Tuple[Any, ...]]] = []
            for part in self.parts:
                if isinstance(part, TextPart):
                    files.append((part.name, (None, part.value)))
                    continue

                try:
                    stream = part.file.open()
                except OSError as e:
                    raise EncodingError(
                        f"Cannot open file '{part.filename or part.file.path}' "
                        f"for field '{part.name}': {e}"
                    ) from e
                if part.file.owns_stream:
                    stack.callback(stream.close)
                files.append((part.name, (part.filename, stream, part.content_type)))

            yield {"files": files}


BodyDescriptor = Union[NoBody, JsonBody, FormBody, MultipartBody]


def encode_body(value: Any, content_type: str = APPLICATION_JSON) -> BodyDescriptor:
    """Encode ``value`` into the body variant selected by ``content_type``.

    Args:
        value: The in-memory body. ``None`` always produces an empty body.
        content_type: ``multipart/form-data``,
            ``application/x-www-form-urlencoded`` or a JSON media type.

    Returns:
        BodyDescriptor: The encoded body.

    Raises:
        SerializationError: If a JSON body (or a JSON encoded multipart field)
            cannot be serialized.
        EncodingError: If a form or multipart body is not shaped correctly.
    """
    if value is None:
        return NoBody()

    media_type = content_type.split(";")[0].strip().lower()
    if media_type == MULTIPART_FORM_DATA:
        return encode_multipart(value)
    if media_type == FORM_URLENCODED:
        return encode_form(value)
    return JsonBody(content=serialize(value).encode("utf-8"), content_type=media_type)


def encode_form(value: Any) -> FormBody:
    if not isinstance(value, Mapping):
        raise EncodingError(
            f"Form bodies must be a mapping of strings, got {type(value).__name__}"
        )
    for key, item in value.items():
        if not isinstance(key, str) or not isinstance(item, str):
            raise EncodingError(
                f"Form field {key!r} must map a string key to a string value"
            )
    return FormBody(fields=dict(value))


def encode_multipart(value: Any) -> MultipartBody:
    parts: List[MultipartPart] = []
    for multipart_field in multipart_fields(value):
        parts.extend(_field_parts(multipart_field))
    return MultipartBody(parts=parts)


def multipart_fields(model: Any) -> List[MultipartField]:
    """Turn ``model`` into explicit multipart fields.

    ``model`` may already be a sequence of fields (``TextField``,
    ``FileField``, ...), in which case it is used as-is. Otherwise it is read as
    a record (mapping, pydantic model, dataclass or plain object) and each
    non-``None`` attribute is classified:

    - an ``UploadFile`` becomes a ``FileField``;
    - a sequence of ``UploadFile`` becomes a ``FileListField``;
    - a sequence of strings becomes a ``TextListField``;
    - a mapping becomes a ``MapField``;
    - anything else becomes a ``TextField``.
    """
    if isinstance(model, Sequence) and not isinstance(model, (str, bytes, bytearray)):
        for item in model:
            if not isinstance(item, _MULTIPART_FIELD_TYPES):
                raise EncodingError(
                    f"Expected multipart fields, got {type(item).__name__}"
                )
        return list(model)

    return [
        _classify(name, value)
        for name, value in _named_values(model)
        if value is not None
    ]


def _classify(name: str, value: Any) -> MultipartField:
    if isinstance(value, _MULTIPART_FIELD_TYPES):
        return value
    if isinstance(value, UploadFile):
        return FileField(name, value)
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        items = list(value)
        if items and all(isinstance(item, UploadFile) for item in items):
            return FileListField(name, items)
        if all(isinstance(item, str) for item in items):
            return TextListField(name, items)
    if isinstance(value, Mapping):
        return MapField(name, value)
    return TextField(name, value)


def _named_values(model: Any) -> List[Tuple[str, Any]]:
    if isinstance(model, Mapping):
        return [(str(key), value) for key, value in model.items()]
    if isinstance(model, BaseModel):
        return [
            (info.alias or name, getattr(model, name))
            for name, info in type(model).model_fields.items()
        ]
    if dataclasses.is_dataclass(model) and not isinstance(model, type):
        return [(f.name, getattr(model, f.name)) for f in dataclasses.fields(model)]
    if hasattr(model, "__dict__"):
        return [
            (name, value)
            for name, value in vars(model).items()
            if not name.startswith("_")
        ]
    raise EncodingError(
        f"Cannot read multipart fields from a {type(model).__name__} value"
    )


def _field_parts(multipart_field: MultipartField) -> List[MultipartPart]:
    # None values and None list items produce no part
    if isinstance(multipart_field, FileField):
        if multipart_field.file is None:
            return []
        return [FilePart(multipart_field.name, multipart_field.file)]
    if isinstance(multipart_field, FileListField):
        return [
            FilePart(multipart_field.name, f)
            for f in multipart_field.files or []
            if f is not None
        ]
    if isinstance(multipart_field, TextListField):
        return [
            TextPart(f"{multipart_field.name}[]", str(value))
            for value in multipart_field.values or []
            if value is not None
        ]
    if isinstance(multipart_field, MapField):
        if multipart_field.value is None:
            return []
        return [TextPart(multipart_field.name, serialize(dict(multipart_field.value)))]
    value = multipart_field.value
    if value is None:
        return []
    return [TextPart(multipart_field.name, value if isinstance(value, str) else str(value))]
