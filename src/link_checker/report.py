"""Render the Markdown body of the link check report."""

from __future__ import annotations

from datetime import datetime, timezone
from email.utils import format_datetime
from typing import Iterable, Optional, Sequence

from .models import (
    AnchorRecord,
    ExternalRecord,
    InternalNotFoundRecord,
    InternalOkRecord,
    LinkRecord,
)


REPORT_TITLE = "## 🔍 Markdown Link Check Results"
REPORT_FOOTER = "*Generated by Link Checker* 🤖"


def partition_records(
    records: Iterable[LinkRecord],
) -> tuple[list[LinkRecord], list[LinkRecord]]:
    """Split into (valid, invalid), keeping production order."""
    valid: list[LinkRecord] = []
    invalid: list[LinkRecord] = []
    for record in records:
        (valid if record.valid else invalid).append(record)
    return valid, invalid


def group_by_file(records: Iterable[LinkRecord]) -> dict[str, list[LinkRecord]]:
    grouped: dict[str, list[LinkRecord]] = {}
    for record in records:
        grouped.setdefault(record.filename, []).append(record)
    return grouped


def format_timestamp(now: Optional[datetime] = None) -> str:
    """RFC 1123 in UTC, e.g. `Sun, 18 Oct 2026 08:00:00 GMT`."""
    now = now or datetime.now(timezone.utc)
    return format_datetime(now.astimezone(timezone.utc), usegmt=True)


def _broken_lines(record: LinkRecord) -> list[str]:
    lines = [f"- In `{record.filename}`:", f"  - {record.url}"]
    if isinstance(record, InternalNotFoundRecord):
        lines.append("  - Status: Internal link not found")
        if record.attempted_path:
            lines.append(f"  - Attempted path: {record.attempted_path}")
    else:
        lines.append(f"  - Status: {record.status}")
        if isinstance(record, ExternalRecord) and record.error:
            lines.append(f"  - Error: {record.error}")
    return lines


def _valid_line(record: LinkRecord) -> str:
    if isinstance(record, AnchorRecord):
        return f"- {record.url} (Anchor Link)"
    if isinstance(record, InternalOkRecord):
        return f"- {record.url} → {record.resolved_path}"
    return f"- {record.url}"


def render_report(records: Sequence[LinkRecord], now: Optional[datetime] = None) -> str:
    valid, invalid = partition_records(records)

    lines = [REPORT_TITLE, "", f"*Last checked: {format_timestamp(now)}*", ""]

    if invalid:
        lines += ["### ❌ Broken Links Found", ""]
        for record in invalid:
            lines += _broken_lines(record)

    if valid:
        lines += ["", "### ✅ Valid Links", ""]
        for filename, file_records in group_by_file(valid).items():
            lines.append(f"**In `{filename}`:**")
            lines += [_valid_line(r) for r in file_records]
            lines.append("")

    lines += ["", REPORT_FOOTER]
    return "\n".join(lines)
