"""
extract.py - Wire metadata extraction for the conformance checker.

This module turns discovered types into the per-codec metadata the checker
compares:

    fields_of(model_type)    -> list[FieldDescriptor]
    constants_of(enum_type)  -> list[EnumConstant]

Pipeline role:
- It is the only module that calls into the codec adapters.
- Each codec is read independently. A codec that declares nothing yields None,
  which is distinct from a declared name equal to the field identifier.
- Adapter failures are captured on the record (value None plus error text);
  they never abort extraction.
"""

from __future__ import annotations

from typing import Optional

from adapters import CodecAdapter
from logging_config import get_logger
from models import EnumConstant, EnumType, FieldDescriptor, ModelType
from registry import is_enum_class, iter_annotation_types
from wire import qualified_name

logger = get_logger(__name__)


def _enum_of_field(model_type: ModelType, field_name: str) -> Optional[str]:
    field_info = model_type.model_class.model_fields[field_name]
    for referenced in iter_annotation_types(field_info.annotation):
        if is_enum_class(referenced):
            return qualified_name(referenced)
    return None


def _declared_name(codec: CodecAdapter, model_type: ModelType, field_name: str) -> Optional[str]:
    try:
        return codec.declared_name(model_type.model_class, field_name)
    except Exception as exc:
        # Unreadable metadata counts as undeclared; the field check reports it.
        logger.warning(
            "extract_field_warning | codec=%s | model=%s | field=%s | error_type=%s | error=%s",
            codec.name,
            model_type.qualified_name,
            field_name,
            type(exc).__name__,
            exc,
        )
        return None


def fields_of(
    model_type: ModelType,
    codec_a: CodecAdapter,
    codec_b: CodecAdapter,
) -> list[FieldDescriptor]:
    """Describe every field declared on the model type, in declaration order."""
    descriptors: list[FieldDescriptor] = []
    for field_name in model_type.field_names:
        enum_type = _enum_of_field(model_type, field_name)
        descriptors.append(
            FieldDescriptor(
                model_type=model_type.qualified_name,
                name=field_name,
                wire_name_a=_declared_name(codec_a, model_type, field_name),
                wire_name_b=_declared_name(codec_b, model_type, field_name),
                is_enum=enum_type is not None,
                enum_type=enum_type,
            )
        )

    logger.debug(
        "extract_fields | model=%s | fields=%s | renamed=%s",
        model_type.qualified_name,
        len(descriptors),
        sum(1 for descriptor in descriptors if descriptor.has_custom_mapping),
    )
    return descriptors


def _serialize(codec: CodecAdapter, member: object) -> tuple[Optional[str], Optional[str]]:
    """Return (wire text, error text) for one member under one codec."""
    try:
        return codec.serialize(member), None
    except Exception as exc:
        return None, f"{type(exc).__name__}: {exc}"


def constants_of(
    enum_type: EnumType,
    codec_a: CodecAdapter,
    codec_b: CodecAdapter,
) -> list[EnumConstant]:
    """Serialize every constant of the enum with both codecs, in definition order."""
    constants: list[EnumConstant] = []
    for member in enum_type.enum_class:
        value_a, error_a = _serialize(codec_a, member)
        value_b, error_b = _serialize(codec_b, member)
        if error_a or error_b:
            logger.warning(
                "extract_enum_warning | enum=%s | constant=%s | %s_error=%s | %s_error=%s",
                enum_type.qualified_name,
                member.name,
                codec_a.name,
                error_a,
                codec_b.name,
                error_b,
            )
        constants.append(
            EnumConstant(
                enum_type=enum_type.qualified_name,
                name=member.name,
                member=member,
                value_a=value_a,
                value_b=value_b,
                error_a=error_a,
                error_b=error_b,
            )
        )
    return constants
