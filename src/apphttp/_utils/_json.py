from typing import Any, Type, TypeVar

from pydantic import PydanticSchemaGenerationError, TypeAdapter, ValidationError
from pydantic_core import to_json

from ..models.errors import DeserializationError, SerializationError

T = TypeVar("T")


def serialize(value: Any) -> str:
    """Serialize ``value`` to compact JSON text.

    Pydantic models, dataclasses, datetimes, UUIDs and the other types known to
    pydantic-core are supported.

    Raises:
        SerializationError: If the value contains an unsupported type or a
            reference cycle. The message is the codec's own.
    """
    try:
        return to_json(value).decode("utf-8")
    except (ValueError, TypeError) as e:
        raise SerializationError(str(e)) from e


def deserialize(text: str, target_type: Type[T]) -> T:
    """Parse JSON ``text`` and validate it as ``target_type``."""
    try:
        adapter = TypeAdapter(target_type)
    except PydanticSchemaGenerationError as e:
        raise DeserializationError(str(e)) from e

    try:
        return adapter.validate_json(text)
    except ValidationError as e:
        raise DeserializationError(str(e)) from e
