"""
test_conformance.py - Conformance checker tests

End-to-end checks for:
- check_enums (soundness, detection, undeclared values, adapter failures)
- check_field_names (exemption, detection, enum-typed fields included)
- check / run_conformance (ordering, dedup, idempotence, parallel merge)

Usage: python test_conformance.py
"""

from __future__ import annotations

import os
import sys
import textwrap
from enum import Enum
from typing import Annotated, Optional

# Ensure local imports resolve from project root.
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

import pytest
from pydantic import BaseModel, ConfigDict, Field

from adapters import OrjsonCodec, PydanticCodec
from conformance import (
    check,
    check_enums,
    check_field_names,
    compare_constant,
    compare_field,
    order_records,
    run_conformance,
)
from errors import DiscoveryError
from models import EnumConstant, EnumMismatch, FieldDescriptor, FieldNameMismatch
from registry import describe_enum, describe_model
from report import report
from settings import Settings
from wire import JsonKey

PYDANTIC = PydanticCodec()
ORJSON = OrjsonCodec()


class FundingSource(str, Enum):
    CREDIT = "credit"
    DEBIT = "debit"
    __json_values__ = {"DEBIT": "deb"}


class AgreedFundingSource(str, Enum):
    CREDIT = "credit"
    DEBIT = "debit"


class PaymentStatus(str, Enum):
    OPEN = "open"
    PAID = "paid"


class FundingDetails(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    funding_source: Optional[str] = Field(default=None, alias="fundingSource")
    currency: Annotated[Optional[str], JsonKey("currency")] = Field(default=None, alias="currency")
    reference: Optional[str] = None
    country: Optional[str] = Field(default=None, alias="country")
    payer_id: Annotated[Optional[str], JsonKey("payerId")] = Field(default=None, alias="payerID")
    order_id: Annotated[Optional[str], JsonKey("orderID")] = Field(default=None, alias="orderID")
    status: Optional[PaymentStatus] = Field(default=None, alias="paymentStatus")


class RenamedEnumFields(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    funding_source: Optional[AgreedFundingSource] = Field(default=None, alias="fundingSource")
    status: Annotated[Optional[PaymentStatus], JsonKey("paymentStatus")] = Field(default=None, alias="paymentStatus")


class RaisingCodec(OrjsonCodec):
    name = "raising"

    def serialize(self, value):
        raise RuntimeError("encoder unavailable")


def _enum_records(enum_class, codec_a=PYDANTIC, codec_b=ORJSON, **kwargs):
    return check_enums([describe_enum(enum_class)], codec_a, codec_b, **kwargs)


def test_enum_check_is_sound_when_codecs_agree():
    assert _enum_records(AgreedFundingSource) == []


def test_enum_check_detects_single_misconfigured_constant():
    records = _enum_records(FundingSource)
    assert len(records) == 1
    mismatch = records[0]
    assert isinstance(mismatch, EnumMismatch)
    assert mismatch.enum_type == f"{__name__}.FundingSource"
    assert mismatch.constant == "DEBIT"
    assert mismatch.value_a == '"debit"'
    assert mismatch.value_b == '"deb"'


def test_end_to_end_misconfigured_enum_fails_gate():
    records = check([], [describe_enum(FundingSource)], PYDANTIC, ORJSON)
    assert records == [
        EnumMismatch(
            enum_type=f"{__name__}.FundingSource",
            constant="DEBIT",
            value_a='"debit"',
            value_b='"deb"',
        )
    ]
    result = report(records)
    assert result.passed is False
    assert len(result.summaries) == 1
    assert "FundingSource.DEBIT" in result.summaries[0]


def test_end_to_end_clean_enum_passes_gate():
    records = check([], [describe_enum(AgreedFundingSource)], PYDANTIC, ORJSON)
    assert records == []
    result = report(records)
    assert result.passed is True
    assert result.summaries == ()


def test_adapter_failure_becomes_mismatch():
    records = _enum_records(AgreedFundingSource, codec_b=RaisingCodec())
    assert [record.constant for record in records] == ["CREDIT", "DEBIT"]
    assert all(record.value_b is None for record in records)
    assert all(record.value_a is not None for record in records)
    assert "encoder unavailable" in records[0].detail


def test_both_undeclared_is_reported_by_default():
    records = _enum_records(AgreedFundingSource, codec_a=RaisingCodec(), codec_b=RaisingCodec())
    assert len(records) == 2
    assert all(record.value_a is None and record.value_b is None for record in records)


def test_both_undeclared_can_be_allowed():
    records = _enum_records(
        AgreedFundingSource,
        codec_a=RaisingCodec(),
        codec_b=RaisingCodec(),
        flag_both_undeclared=False,
    )
    assert records == []


def test_compare_constant_equal_values():
    constant = EnumConstant(enum_type="x.E", name="A", member=None, value_a='"a"', value_b='"a"')
    assert compare_constant(constant) is None


def test_field_detection_reports_undeclared_codec_b():
    records = check_field_names([describe_model(FundingDetails)], PYDANTIC, ORJSON)
    by_field = {record.field_name: record for record in records}

    mismatch = by_field["funding_source"]
    assert isinstance(mismatch, FieldNameMismatch)
    assert mismatch.name_a == "fundingSource"
    assert mismatch.name_b is None


def test_field_detection_reports_different_names():
    records = check_field_names([describe_model(FundingDetails)], PYDANTIC, ORJSON)
    by_field = {record.field_name: record for record in records}
    assert by_field["payer_id"].name_a == "payerID"
    assert by_field["payer_id"].name_b == "payerId"


def test_field_exemptions():
    records = check_field_names([describe_model(FundingDetails)], PYDANTIC, ORJSON)
    flagged = {record.field_name for record in records}
    # Identifier equals the wire name, declared or not.
    assert "currency" not in flagged
    assert "country" not in flagged
    assert "reference" not in flagged
    # Renamed identically under both codecs.
    assert "order_id" not in flagged
    assert flagged == {"funding_source", "payer_id", "status"}


def test_enum_typed_renamed_field_is_name_checked():
    records = check_field_names([describe_model(RenamedEnumFields)], PYDANTIC, ORJSON)
    assert records == [
        FieldNameMismatch(
            model_type=f"{__name__}.RenamedEnumFields",
            field_name="funding_source",
            name_a="fundingSource",
            name_b=None,
        )
    ]


def test_compare_field_requires_both_names():
    descriptor = FieldDescriptor(model_type="x.M", name="shopper_ip", wire_name_a=None, wire_name_b="shopperIP")
    mismatch = compare_field(descriptor)
    assert mismatch is not None
    assert mismatch.name_a is None
    assert mismatch.name_b == "shopperIP"


def test_records_are_ordered_by_kind_type_and_member():
    records = check(
        [describe_model(FundingDetails)],
        [describe_enum(FundingSource), describe_enum(AgreedFundingSource)],
        PYDANTIC,
        ORJSON,
    )
    kinds = [record.kind for record in records]
    assert kinds == ["enum_value", "field_name", "field_name", "field_name"]
    assert [record.member_name for record in records[1:]] == ["funding_source", "payer_id", "status"]


def test_order_records_deduplicates():
    mismatch = FieldNameMismatch(model_type="x.M", field_name="f", name_a="fA", name_b=None)
    other = EnumMismatch(enum_type="x.E", constant="B", value_a='"b"', value_b='"bb"')
    assert order_records([mismatch, other, mismatch]) == [other, mismatch]


def test_check_is_idempotent():
    model_types = [describe_model(FundingDetails)]
    enum_types = [describe_enum(FundingSource), describe_enum(PaymentStatus)]

    first = check(model_types, enum_types, PYDANTIC, ORJSON)
    second = check(model_types, enum_types, PYDANTIC, ORJSON)
    assert first == second
    assert [record.model_dump_json() for record in first] == [record.model_dump_json() for record in second]


def test_parallel_and_sequential_runs_agree():
    model_types = [describe_model(FundingDetails)]
    enum_types = [describe_enum(FundingSource), describe_enum(PaymentStatus), describe_enum(AgreedFundingSource)]

    sequential = check(model_types, enum_types, PYDANTIC, ORJSON, workers=1)
    parallel = check(model_types, enum_types, PYDANTIC, ORJSON, workers=8)
    assert sequential == parallel


def test_run_conformance_on_checkout_is_clean():
    records = run_conformance("checkout", settings=Settings(workers=2))
    assert records == []


def test_run_conformance_accepts_codec_names():
    records = run_conformance("checkout", codec_a="orjson", codec_b="pydantic", settings=Settings())
    assert records == []


def test_run_conformance_fails_fast_on_missing_namespace():
    with pytest.raises(DiscoveryError):
        run_conformance("no_such_models_namespace", settings=Settings())


def test_run_conformance_checks_enums_no_field_refers_to(tmp_path, monkeypatch):
    package_dir = tmp_path / "unreferenced_enum_ns"
    package_dir.mkdir()
    (package_dir / "__init__.py").write_text("", encoding="utf-8")
    (package_dir / "ledger.py").write_text(
        textwrap.dedent(
            """
            from enum import Enum
            from pydantic import BaseModel

            class EntryStatus(str, Enum):
                OPEN = "open"
                CLOSED = "closed"
                __json_values__ = {"OPEN": "opn"}

            class Ledger(BaseModel):
                reference: str = ""
            """
        ),
        encoding="utf-8",
    )
    monkeypatch.syspath_prepend(str(tmp_path))

    records = run_conformance("unreferenced_enum_ns", settings=Settings())
    assert records == [
        EnumMismatch(
            enum_type="unreferenced_enum_ns.ledger.EntryStatus",
            constant="OPEN",
            value_a='"open"',
            value_b='"opn"',
        )
    ]


if __name__ == "__main__":
    raise SystemExit(pytest.main([__file__, "-q"]))
