"""
wire.py - Wire-format annotations shared by the generated models.

The models carry metadata for two JSON codecs side by side:

    codec A (pydantic) - Field(alias=...) / serialization_alias, enum .value
    codec B (orjson)   - Annotated[..., JsonKey("wireName")], enum .value
                         unless the enum class lists an override in
                         __json_values__ = {"MEMBER": "wire"}

This module owns the codec B markers, the orjson-side model encoder and the
helper that assembles a discriminator-based polymorphic family.
"""

from __future__ import annotations

import typing
from dataclasses import dataclass
from enum import Enum
from typing import Annotated, Any, Literal, Optional, Union

import orjson
from pydantic import BaseModel, Field

from models import PolymorphicFamily

DISCRIMINATOR_ATTR = "__discriminator__"
JSON_VALUES_ATTR = "__json_values__"


@dataclass(frozen=True)
class JsonKey:
    """Declares the orjson-side wire name of a model field."""

    name: str

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name:
            raise ValueError("JsonKey name must be a non-empty string")


def qualified_name(cls: type) -> str:
    return f"{cls.__module__}.{cls.__qualname__}"


def json_key_of(model_class: type[BaseModel], field_name: str) -> Optional[str]:
    """Return the JsonKey name declared on a field, or None."""
    field_info = model_class.model_fields.get(field_name)
    if field_info is None:
        return None
    for marker in field_info.metadata:
        if isinstance(marker, JsonKey):
            return marker.name
    return None


def json_value(member: Enum) -> Any:
    """Value orjson emits for an enum member, honouring __json_values__ overrides."""
    overrides = getattr(type(member), JSON_VALUES_ATTR, None) or {}
    if member.name in overrides:
        return overrides[member.name]
    return member


def _to_orjson(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return _model_payload(value)
    if isinstance(value, Enum):
        return json_value(value)
    if isinstance(value, (list, tuple)):
        return [_to_orjson(item) for item in value]
    if isinstance(value, dict):
        return {key: _to_orjson(item) for key, item in value.items()}
    return value


def _model_payload(model: BaseModel) -> dict[str, Any]:
    payload: dict[str, Any] = {}
    for field_name in type(model).model_fields:
        value = getattr(model, field_name)
        if value is None:
            continue
        key = json_key_of(type(model), field_name) or field_name
        payload[key] = _to_orjson(value)
    return payload


def dump_orjson(model: BaseModel) -> str:
    """Serialize a model the way the orjson codec sees it (None fields omitted)."""
    return orjson.dumps(_model_payload(model)).decode()


# -- Polymorphic families --


def discriminator_of(model_class: type[BaseModel]) -> tuple[Optional[str], Optional[str]]:
    """Return (discriminator field, discriminator value) for a model class.

    The field name comes from the family base's __discriminator__ class
    variable. The value is the single Literal argument of that field on a
    variant; the base itself has no value.
    """
    field_name = getattr(model_class, DISCRIMINATOR_ATTR, None)
    if not field_name:
        return None, None
    field_info = model_class.model_fields.get(field_name)
    if field_info is None:
        return field_name, None
    annotation = field_info.annotation
    if typing.get_origin(annotation) is Literal:
        args = typing.get_args(annotation)
        if len(args) == 1:
            return field_name, str(args[0])
    return field_name, None


def discriminated_union(*variants: type[BaseModel]) -> tuple[Any, PolymorphicFamily]:
    """Build the pydantic union annotation and the family description.

    Raises ValueError at model-definition time when the variants do not share
    one discriminator field or when a discriminator value repeats.
    """
    if len(variants) < 2:
        raise ValueError("A polymorphic family needs at least two variants")

    field_names = {discriminator_of(variant)[0] for variant in variants}
    if len(field_names) != 1 or None in field_names:
        raise ValueError(
            "All variants must share one discriminator field, found: "
            f"{sorted(str(name) for name in field_names)}"
        )
    field_name = field_names.pop()

    mapping: dict[str, str] = {}
    for variant in variants:
        _, value = discriminator_of(variant)
        if value is None:
            raise ValueError(
                f"{variant.__name__}.{field_name} must be annotated with a single Literal value"
            )
        if value in mapping:
            raise ValueError(
                f"Discriminator value '{value}' used by both {mapping[value]} and {qualified_name(variant)}"
            )
        mapping[value] = qualified_name(variant)

    bases = {family_base(variant) for variant in variants}
    if len(bases) != 1:
        raise ValueError(
            f"Variants declaring discriminator '{field_name}' belong to different family bases: "
            f"{sorted(qualified_name(base) for base in bases)}"
        )
    base = bases.pop()
    family = PolymorphicFamily(
        base=qualified_name(base),
        discriminator_field=field_name,
        variants=mapping,
    )
    annotation = Annotated[Union[tuple(variants)], Field(discriminator=field_name)]
    return annotation, family


def family_base(model_class: type[BaseModel]) -> type[BaseModel]:
    """The most derived class in the MRO that declares __discriminator__."""
    for candidate in model_class.__mro__:
        if DISCRIMINATOR_ATTR in vars(candidate):
            return candidate
    raise ValueError(f"{model_class.__name__} does not belong to a polymorphic family")
