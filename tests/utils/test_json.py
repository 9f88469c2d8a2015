import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, List

import pytest
from pydantic import BaseModel

from apphttp import DeserializationError, SerializationError, deserialize, serialize


class Item(BaseModel):
    name: str
    tags: List[str] = []


@dataclass
class Point:
    x: int
    y: int


class Opaque:
    pass


class TestSerialize:
    def test_compact_output(self):
        assert serialize({"Price": 39.99, "Name": "Desk"}) == '{"Price":39.99,"Name":"Desk"}'

    def test_models_and_dataclasses(self):
        assert serialize(Item(name="a")) == '{"name":"a","tags":[]}'
        assert serialize([Point(1, 2)]) == '[{"x":1,"y":2}]'

    def test_datetimes_and_uuids(self):
        value = {
            "at": datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc),
            "id": uuid.UUID("12345678-1234-5678-1234-567812345678"),
        }

        assert serialize(value) == (
            '{"at":"2024-01-02T03:04:05Z","id":"12345678-1234-5678-1234-567812345678"}'
        )

    def test_unsupported_type(self):
        with pytest.raises(SerializationError):
            serialize(Opaque())

    def test_cycle(self):
        value: dict = {}
        value["again"] = value

        with pytest.raises(SerializationError):
            serialize(value)


class TestDeserialize:
    def test_into_model(self):
        assert deserialize('{"name": "a", "tags": ["x"]}', Item) == Item(name="a", tags=["x"])

    def test_into_generic_types(self):
        assert deserialize('{"a": [1, 2]}', Dict[str, List[int]]) == {"a": [1, 2]}

    def test_invalid_json(self):
        with pytest.raises(DeserializationError):
            deserialize("{not json", Item)

    def test_shape_mismatch(self):
        with pytest.raises(DeserializationError):
            deserialize('{"tags": "x"}', Item)

    def test_type_without_schema(self):
        with pytest.raises(DeserializationError):
            deserialize("{}", Opaque)
