"""
report.py - Gate decision and human-readable divergence listings.

This module converts an ordered list of `DivergenceRecord` objects into:
- a `GateResult` (pass/fail plus one summary line per record)
- terminal-friendly text output for CLI usage
- machine-friendly dictionary output for CI logs
- a pandas DataFrame for CSV export
"""

from __future__ import annotations

from typing import Iterable

import pandas as pd

from conformance import order_records
from errors import ConformanceError
from logging_config import get_logger
from models import DivergenceRecord, EnumMismatch, FieldNameMismatch, GateResult, display_value

logger = get_logger(__name__)

OUTPUT_WIDTH = 72
SEPARATOR = "=" * OUTPUT_WIDTH
MAX_LINES_DISPLAY = 200

RECORD_COLUMNS = ["kind", "type_name", "member", "value_a", "value_b", "detail"]


def summarize(record: DivergenceRecord, codec_a: str = "pydantic", codec_b: str = "orjson") -> str:
    """One line naming the offending type, the member and both divergent values."""
    if isinstance(record, EnumMismatch):
        line = (
            f"{record.enum_type}.{record.constant}: enum value differs - "
            f"{codec_a}={display_value(record.value_a)} {codec_b}={display_value(record.value_b)}"
        )
        if record.detail:
            line += f" ({record.detail})"
        return line
    if isinstance(record, FieldNameMismatch):
        return (
            f"{record.model_type}.{record.field_name}: field wire name differs - "
            f"{codec_a}={display_value(record.name_a)} {codec_b}={display_value(record.name_b)}"
        )
    raise TypeError(f"Unsupported divergence record: {type(record).__name__}")


def report(
    records: Iterable[DivergenceRecord],
    codec_a: str = "pydantic",
    codec_b: str = "orjson",
) -> GateResult:
    """Build the gate result. It passes iff there are no records.

    Records are deduplicated and ordered first, so there is exactly one summary
    line per record.
    """
    records = tuple(order_records(records))
    summaries = tuple(summarize(record, codec_a, codec_b) for record in records)
    result = GateResult(
        passed=not records,
        summaries=summaries,
        records=records,
        codec_a=codec_a,
        codec_b=codec_b,
    )
    if result.passed:
        logger.info("gate_result | status=pass | codec_a=%s | codec_b=%s", codec_a, codec_b)
    else:
        logger.error(
            "gate_result | status=fail | divergences=%s | enum_mismatches=%s | field_mismatches=%s",
            result.divergence_count,
            result.enum_mismatch_count,
            result.field_mismatch_count,
        )
        for summary in summaries:
            logger.error("gate_divergence | %s", summary)
    return result


def exit_code(result: GateResult) -> int:
    """Conventional test-runner exit code: 0 on pass, 1 on any divergence."""
    return 0 if result.passed else 1


def assert_conformant(result: GateResult) -> None:
    """Raise ConformanceError listing every divergence when the gate fails."""
    if not result.passed:
        raise ConformanceError(result.summaries)


def format_report(result: GateResult) -> str:
    """Format a GateResult into a clean, human-readable text block."""
    lines: list[str] = [""]
    lines.append(SEPARATOR)
    if result.passed:
        lines.append(f"  PASS - {result.codec_a} and {result.codec_b} serialize identically")
    else:
        lines.append(
            f"  FAIL - {result.divergence_count} divergence(s) between "
            f"{result.codec_a} and {result.codec_b}"
        )
    lines.append(SEPARATOR)

    if not result.passed:
        lines.append("")
        lines.append(f"  Enum value mismatches:  {result.enum_mismatch_count}")
        lines.append(f"  Field name mismatches:  {result.field_mismatch_count}")
        lines.append("")
        lines.append("  Divergences:")
        shown = result.summaries[:MAX_LINES_DISPLAY]
        for summary in shown:
            lines.append(f"    • {summary}")
        remaining = len(result.summaries) - len(shown)
        if remaining > 0:
            lines.append(f"    • ... and {remaining} more divergence(s)")

    lines.append("")
    lines.append(SEPARATOR)
    lines.append("")
    return "\n".join(lines)


def _record_row(record: DivergenceRecord) -> dict:
    if isinstance(record, EnumMismatch):
        return {
            "kind": record.kind,
            "type_name": record.enum_type,
            "member": record.constant,
            "value_a": record.value_a,
            "value_b": record.value_b,
            "detail": record.detail,
        }
    return {
        "kind": record.kind,
        "type_name": record.model_type,
        "member": record.field_name,
        "value_a": record.name_a,
        "value_b": record.name_b,
        "detail": None,
    }


def format_report_json(result: GateResult) -> dict:
    """Format a GateResult as a structured JSON-compatible dictionary."""
    return {
        "status": "pass" if result.passed else "fail",
        "codecs": {"a": result.codec_a, "b": result.codec_b},
        "counts": {
            "divergences": result.divergence_count,
            "enum_value": result.enum_mismatch_count,
            "field_name": result.field_mismatch_count,
        },
        "divergences": [_record_row(record) for record in result.records],
        "summaries": list(result.summaries),
    }


def records_frame(records: Iterable[DivergenceRecord]) -> pd.DataFrame:
    """Tabular view of the records, one row per divergence, in record order."""
    rows = [_record_row(record) for record in records]
    return pd.DataFrame(rows, columns=RECORD_COLUMNS)


def write_csv(result: GateResult, csv_path: str) -> None:
    """Write the divergence listing as CSV (header only when the gate passed)."""
    if not csv_path or not str(csv_path).strip():
        raise ValueError("csv_path cannot be empty")
    frame = records_frame(result.records)
    frame.to_csv(csv_path, index=False)
    logger.info("gate_csv_written | path=%s | rows=%s", csv_path, len(frame))
