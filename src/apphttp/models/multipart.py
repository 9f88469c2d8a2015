import io
import mimetypes
from dataclasses import dataclass
from pathlib import Path
from typing import Any, BinaryIO, Mapping, Optional, Sequence, Union

from .._utils.constants import OCTET_STREAM


@dataclass
class UploadFile:
    """A file to be sent as one part of a multipart body.

    Either ``path`` or ``file`` must be given. A ``path`` is opened when the
    request is sent; a ``file`` object is read as-is and stays owned by the
    caller.
    """

    filename: Optional[str] = None
    content_type: str = OCTET_STREAM
    path: Optional[Union[str, Path]] = None
    file: Optional[BinaryIO] = None

    def __post_init__(self) -> None:
        if (self.path is None) == (self.file is None):
            raise ValueError("Exactly one of path or file must be provided")

    @classmethod
    def from_path(
        cls, path: Union[str, Path], content_type: Optional[str] = None
    ) -> "UploadFile":
        path = Path(path)
        if content_type is None:
            content_type, _ = mimetypes.guess_type(path.name)
        return cls(
            filename=path.name,
            content_type=content_type or OCTET_STREAM,
            path=path,
        )

    @classmethod
    def from_bytes(
        cls, data: bytes, filename: Optional[str] = None, content_type: str = OCTET_STREAM
    ) -> "UploadFile":
        return cls(filename=filename, content_type=content_type, file=io.BytesIO(data))

    @property
    def owns_stream(self) -> bool:
        return self.file is None

    def open(self) -> BinaryIO:
        """Return a readable binary stream; raises ``OSError`` if it cannot be opened."""
        if self.file is not None:
            return self.file
        if self.path is None:
            raise ValueError("UploadFile has neither a path nor a file")
        return open(self.path, "rb")


@dataclass(frozen=True)
class TextField:
    """A single text part; non-string values are sent as ``str(value)``."""

    name: str
    value: Any


@dataclass(frozen=True)
class FileField:
    name: str
    file: UploadFile


@dataclass(frozen=True)
class FileListField:
    """Several files sent as repeated parts sharing ``name``."""

    name: str
    files: Sequence[UploadFile]


@dataclass(frozen=True)
class TextListField:
    """Several text values sent as repeated ``name[]`` parts."""

    name: str
    values: Sequence[str]


@dataclass(frozen=True)
class MapField:
    """A mapping sent as a single JSON text part."""

    name: str
    value: Mapping[str, Any]


MultipartField = Union[TextField, FileField, FileListField, TextListField, MapField]


@dataclass(frozen=True)
class TextPart:
    name: str
    value: str


@dataclass(frozen=True)
class FilePart:
    name: str
    file: UploadFile

    @property
    def filename(self) -> Optional[str]:
        return self.file.filename

    @property
    def content_type(self) -> str:
        return self.file.content_type


MultipartPart = Union[TextPart, FilePart]
