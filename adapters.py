"""
adapters.py - Thin wrappers around the two JSON codecs.

Each adapter exposes exactly what the checker needs:
- serialize(value) -> str          wire text for a live value (enum constants)
- declared_name(model, field)      wire name the codec declares for a field, or None

The checker never looks inside a codec; swapping either side only requires a
new adapter class registered in CODECS.
"""

from __future__ import annotations

import functools
from enum import Enum
from typing import Any, Optional, Protocol

import orjson
from pydantic import BaseModel, TypeAdapter

from logging_config import get_logger
from wire import json_key_of, json_value

logger = get_logger(__name__)


class CodecAdapter(Protocol):
    name: str

    def serialize(self, value: Any) -> str: ...

    def declared_name(self, model_class: type[BaseModel], field_name: str) -> Optional[str]: ...


@functools.lru_cache(maxsize=None)
def _type_adapter(value_type: type) -> TypeAdapter:
    return TypeAdapter(value_type)


class PydanticCodec:
    """Codec A: pydantic's own JSON serializer and field aliases."""

    name = "pydantic"

    def serialize(self, value: Any) -> str:
        return _type_adapter(type(value)).dump_json(value).decode()

    def declared_name(self, model_class: type[BaseModel], field_name: str) -> Optional[str]:
        field_info = model_class.model_fields.get(field_name)
        if field_info is None:
            raise KeyError(f"{model_class.__name__} has no field '{field_name}'")
        # alias_generator output lands in field_info.alias as well.
        return field_info.serialization_alias or field_info.alias

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class OrjsonCodec:
    """Codec B: orjson with JsonKey field markers and __json_values__ enum overrides."""

    name = "orjson"

    def serialize(self, value: Any) -> str:
        if isinstance(value, Enum):
            value = json_value(value)
        return orjson.dumps(value).decode()

    def declared_name(self, model_class: type[BaseModel], field_name: str) -> Optional[str]:
        if field_name not in model_class.model_fields:
            raise KeyError(f"{model_class.__name__} has no field '{field_name}'")
        return json_key_of(model_class, field_name)

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


CODECS: dict[str, type] = {
    PydanticCodec.name: PydanticCodec,
    OrjsonCodec.name: OrjsonCodec,
}


def get_codec(name: str) -> CodecAdapter:
    """Instantiate a registered codec adapter by name."""
    key = str(name or "").strip().lower()
    if key not in CODECS:
        raise ValueError(f"Unknown codec '{name}'. Available: {sorted(CODECS)}")
    logger.debug("codec_selected | name=%s", key)
    return CODECS[key]()
