"""
models.py - Data Models for the Serialization Conformance Checker

This file defines ALL data structures used across the checker.
Every module in the pipeline communicates exclusively through these models:

    registry.py    ->  set[ModelType], set[EnumType]
    extract.py     ->  list[FieldDescriptor], list[EnumConstant]
    conformance.py ->  list[DivergenceRecord]
    report.py      ->  GateResult

Design principles:
1. Each layer's output is the next layer's input
2. A codec that declares nothing is represented as None, never as a default
3. Divergences are data, not exceptions - a run collects every one of them
4. All models are frozen so discovered sets can be hashed and compared

Schema relationships:
    ModelType     --described by--> FieldDescriptor.model_type
    EnumType      --described by--> EnumConstant.enum_type
    EnumConstant  --compared into--> EnumMismatch
    FieldDescriptor --compared into--> FieldNameMismatch
    DivergenceRecord --summarized by--> GateResult
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

UNDECLARED = "<undeclared>"
# Display sentinel for a codec that declares no wire name or cannot produce a
# wire value. Internally the absence is always None.

CHECK_KIND_ORDER: dict[str, int] = {
    "enum_value": 0,
    "field_name": 1,
}


def display_value(value: Optional[str]) -> str:
    """Render a wire value for humans, using the undeclared sentinel for None."""
    return UNDECLARED if value is None else value


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, protected_namespaces=())


class ModelType(_Frozen):
    """One discoverable value type from the model namespace.

    Created by registry discovery at startup and immutable for the run.
    Field-level wire metadata is not stored here: the extractor reads it
    per codec through `fields_of()`.
    """

    qualified_name: str = Field(
        ...,
        description="Dotted module path plus class name, e.g. 'checkout.amount.Amount'.",
    )
    model_class: type[BaseModel] = Field(
        ...,
        description="The live pydantic model class the metadata is read from.",
    )
    field_names: tuple[str, ...] = Field(
        default=(),
        description=(
            "Identifiers of the fields declared on this class, in declaration "
            "order. Inherited fields belong to the class that declares them."
        ),
    )
    discriminator_field: Optional[str] = Field(
        default=None,
        description="Name of the discriminator field when the type belongs to a polymorphic family.",
    )
    discriminator_value: Optional[str] = Field(
        default=None,
        description="This variant's discriminator value, e.g. 'googlepay'. None for the family base.",
    )

    @property
    def is_polymorphic(self) -> bool:
        """Whether this type carries a discriminator."""
        return self.discriminator_field is not None

    @property
    def short_name(self) -> str:
        return self.qualified_name.rsplit(".", 1)[-1]


class FieldDescriptor(_Frozen):
    """Per-field wire metadata as declared under each codec.

    If both wire names are present they SHOULD be equal. A violation is what
    the checker detects; it is not enforced here.
    """

    model_type: str = Field(..., description="Qualified name of the declaring model type.")
    name: str = Field(..., description="Field identifier as written in the model class.")
    wire_name_a: Optional[str] = Field(
        default=None,
        description="Wire name declared under codec A, or None when nothing is declared.",
    )
    wire_name_b: Optional[str] = Field(
        default=None,
        description="Wire name declared under codec B, or None when nothing is declared.",
    )
    is_enum: bool = Field(default=False, description="Whether the field's type refers to an Enum.")
    enum_type: Optional[str] = Field(
        default=None,
        description="Qualified name of the referenced enum, when is_enum is True.",
    )

    @property
    def has_custom_mapping(self) -> bool:
        """Whether at least one codec renames this field away from its identifier."""
        return any(
            declared is not None and declared != self.name
            for declared in (self.wire_name_a, self.wire_name_b)
        )


class EnumType(_Frozen):
    """An enum referenced by the model set or defined in the namespace, deduplicated by class identity."""

    qualified_name: str
    enum_class: type[Enum]

    @property
    def member_names(self) -> list[str]:
        return [member.name for member in self.enum_class]

    @property
    def short_name(self) -> str:
        return self.qualified_name.rsplit(".", 1)[-1]


class EnumConstant(_Frozen):
    """One enum constant with the wire text each codec produced for it."""

    enum_type: str
    name: str
    member: Any = Field(..., description="The live enum member that was serialized.")
    value_a: Optional[str] = Field(
        default=None,
        description="Codec A's serialized output, or None when the codec produced nothing.",
    )
    value_b: Optional[str] = Field(
        default=None,
        description="Codec B's serialized output, or None when the codec produced nothing.",
    )
    error_a: Optional[str] = None
    error_b: Optional[str] = None


class EnumMismatch(_Frozen):
    """Both codecs disagree on the wire value of one enum constant."""

    kind: Literal["enum_value"] = "enum_value"
    enum_type: str
    constant: str
    value_a: Optional[str] = None
    value_b: Optional[str] = None
    detail: Optional[str] = Field(
        default=None,
        description="Captured adapter failure, if one of the values is missing because a codec raised.",
    )

    @property
    def type_name(self) -> str:
        return self.enum_type

    @property
    def member_name(self) -> str:
        return self.constant

    @property
    def sort_key(self) -> tuple[int, str, str]:
        return (CHECK_KIND_ORDER[self.kind], self.enum_type, self.constant)


class FieldNameMismatch(_Frozen):
    """A renamed field whose wire name is missing or different under one codec."""

    kind: Literal["field_name"] = "field_name"
    model_type: str
    field_name: str
    name_a: Optional[str] = None
    name_b: Optional[str] = None

    @property
    def type_name(self) -> str:
        return self.model_type

    @property
    def member_name(self) -> str:
        return self.field_name

    @property
    def sort_key(self) -> tuple[int, str, str]:
        return (CHECK_KIND_ORDER[self.kind], self.model_type, self.field_name)


DivergenceRecord = Union[EnumMismatch, FieldNameMismatch]


class PolymorphicFamily(_Frozen):
    """A base shape plus its variants keyed by discriminator value.

    Discriminator values are unique within a family and every member shares
    the same discriminator field name. Built at model-definition time by
    `wire.discriminated_union()`.
    """

    base: str
    discriminator_field: str
    variants: dict[str, str] = Field(
        default_factory=dict,
        description="Discriminator value -> qualified name of the variant model.",
    )

    def __hash__(self) -> int:
        return hash((self.base, self.discriminator_field, tuple(sorted(self.variants.items()))))

    def variant_for(self, discriminator_value: str) -> Optional[str]:
        return self.variants.get(discriminator_value)


class GateResult(_Frozen):
    """Pass/fail decision plus one human-readable line per divergence."""

    passed: bool
    summaries: tuple[str, ...] = ()
    records: tuple[Union[EnumMismatch, FieldNameMismatch], ...] = ()
    codec_a: str = "pydantic"
    codec_b: str = "orjson"

    @property
    def divergence_count(self) -> int:
        return len(self.records)

    @property
    def enum_mismatch_count(self) -> int:
        return sum(1 for record in self.records if isinstance(record, EnumMismatch))

    @property
    def field_mismatch_count(self) -> int:
        return sum(1 for record in self.records if isinstance(record, FieldNameMismatch))
