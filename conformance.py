"""
conformance.py - Dual-codec serialization conformance checks.

Two independent checks run over the discovered model set:

1. Enum value check - every constant of every enum is serialized with both
   codecs and the two wire strings must be identical. A codec that produced
   nothing (declared no value, or raised) is compared as None.
2. Field-name check - every field that one codec renames away from its
   identifier must carry the same wire name under both codecs. Fields holding
   an enum are checked like any other field.

Outputs are ordered `DivergenceRecord` lists. Divergences are collected, never
raised, so one run reports all of them.
"""

from __future__ import annotations

import time
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Iterable, Optional, TypeVar, Union

from adapters import CodecAdapter, get_codec
from extract import constants_of, fields_of
from logging_config import get_logger
from models import (
    DivergenceRecord,
    EnumConstant,
    EnumMismatch,
    EnumType,
    FieldDescriptor,
    FieldNameMismatch,
    ModelType,
)
from registry import discover_enum_types, discover_model_types
from settings import DEFAULT_WORKERS, Settings, load_settings

logger = get_logger(__name__)

T = TypeVar("T")
R = TypeVar("R")


def _map_parallel(func: Callable[[T], list[R]], items: list[T], workers: int) -> list[R]:
    """Apply func to every item and flatten, preserving input order."""
    if workers <= 1 or len(items) <= 1:
        results = [func(item) for item in items]
    else:
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="conformance") as pool:
            results = list(pool.map(func, items))
    return [record for batch in results for record in batch]


def compare_constant(
    constant: EnumConstant,
    flag_both_undeclared: bool = True,
) -> Optional[EnumMismatch]:
    """Return an EnumMismatch when the two codecs disagree on one constant."""
    both_undeclared = constant.value_a is None and constant.value_b is None
    if both_undeclared and not flag_both_undeclared:
        return None
    if constant.value_a is not None and constant.value_a == constant.value_b:
        return None

    errors = [error for error in (constant.error_a, constant.error_b) if error]
    return EnumMismatch(
        enum_type=constant.enum_type,
        constant=constant.name,
        value_a=constant.value_a,
        value_b=constant.value_b,
        detail="; ".join(errors) if errors else None,
    )


def compare_field(descriptor: FieldDescriptor) -> Optional[FieldNameMismatch]:
    """Return a FieldNameMismatch when a renamed field is not declared identically."""
    if not descriptor.has_custom_mapping:
        return None
    if descriptor.wire_name_a is not None and descriptor.wire_name_a == descriptor.wire_name_b:
        return None
    return FieldNameMismatch(
        model_type=descriptor.model_type,
        field_name=descriptor.name,
        name_a=descriptor.wire_name_a,
        name_b=descriptor.wire_name_b,
    )


def check_enums(
    enum_types: Iterable[EnumType],
    codec_a: CodecAdapter,
    codec_b: CodecAdapter,
    workers: int = DEFAULT_WORKERS,
    flag_both_undeclared: bool = True,
) -> list[EnumMismatch]:
    """Compare every constant of every enum under both codecs."""
    ordered = sorted(enum_types, key=lambda item: item.qualified_name)

    def _check_one(enum_type: EnumType) -> list[EnumMismatch]:
        mismatches = []
        for constant in constants_of(enum_type, codec_a, codec_b):
            mismatch = compare_constant(constant, flag_both_undeclared=flag_both_undeclared)
            if mismatch is not None:
                mismatches.append(mismatch)
        return mismatches

    records = _map_parallel(_check_one, ordered, workers)
    logger.info(
        "conformance_enum_check | enums=%s | constants=%s | mismatches=%s",
        len(ordered),
        sum(len(enum_type.enum_class) for enum_type in ordered),
        len(records),
    )
    return order_records(records)


def check_field_names(
    model_types: Iterable[ModelType],
    codec_a: CodecAdapter,
    codec_b: CodecAdapter,
    workers: int = DEFAULT_WORKERS,
) -> list[FieldNameMismatch]:
    """Compare the declared wire names of every renamed, non-enum field."""
    ordered = sorted(model_types, key=lambda item: item.qualified_name)

    def _check_one(model_type: ModelType) -> list[FieldNameMismatch]:
        mismatches = []
        for descriptor in fields_of(model_type, codec_a, codec_b):
            mismatch = compare_field(descriptor)
            if mismatch is not None:
                mismatches.append(mismatch)
        return mismatches

    records = _map_parallel(_check_one, ordered, workers)
    logger.info(
        "conformance_field_check | models=%s | mismatches=%s",
        len(ordered),
        len(records),
    )
    return order_records(records)


def order_records(records: Iterable[DivergenceRecord]) -> list[DivergenceRecord]:
    """Deduplicate and sort by (check kind, type name, member name)."""
    unique = list(dict.fromkeys(records))
    return sorted(unique, key=lambda record: record.sort_key)


def check(
    model_types: Iterable[ModelType],
    enum_types: Iterable[EnumType],
    codec_a: CodecAdapter,
    codec_b: CodecAdapter,
    workers: int = DEFAULT_WORKERS,
    flag_both_undeclared: bool = True,
) -> list[DivergenceRecord]:
    """Run both checks and return one stable-ordered record list."""
    records: list[DivergenceRecord] = []
    records.extend(
        check_enums(
            enum_types,
            codec_a,
            codec_b,
            workers=workers,
            flag_both_undeclared=flag_both_undeclared,
        )
    )
    records.extend(check_field_names(model_types, codec_a, codec_b, workers=workers))
    return order_records(records)


def run_conformance(
    namespace: Optional[str] = None,
    codec_a: Union[CodecAdapter, str, None] = None,
    codec_b: Union[CodecAdapter, str, None] = None,
    settings: Optional[Settings] = None,
) -> list[DivergenceRecord]:
    """Discover the namespace, then check it. Discovery finishes before any check starts.

    Raises:
        DiscoveryError: when the namespace cannot be scanned.
    """
    settings = settings or load_settings()
    namespace = namespace or settings.namespace
    if codec_a is None or isinstance(codec_a, str):
        codec_a = get_codec(codec_a or settings.codec_a)
    if codec_b is None or isinstance(codec_b, str):
        codec_b = get_codec(codec_b or settings.codec_b)
    if codec_a.name == codec_b.name:
        logger.warning("conformance_warning | reason='same codec on both sides' | codec=%s", codec_a.name)

    run_start = time.time()
    logger.info(
        "conformance_start | namespace=%s | codec_a=%s | codec_b=%s | workers=%s",
        namespace,
        codec_a.name,
        codec_b.name,
        settings.workers,
    )

    model_types = discover_model_types(namespace)
    enum_types = discover_enum_types(model_types, namespace)

    records = check(
        model_types,
        enum_types,
        codec_a,
        codec_b,
        workers=settings.workers,
        flag_both_undeclared=settings.flag_both_undeclared,
    )
    logger.info(
        "conformance_complete | namespace=%s | models=%s | enums=%s | divergences=%s | duration_s=%.2f",
        namespace,
        len(model_types),
        len(enum_types),
        len(records),
        time.time() - run_start,
    )
    return records
