from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, TYPE_CHECKING

from .path_utils import ensure_parent_exists

if TYPE_CHECKING:
    from .pipeline import CheckResult


@dataclass
class RunStats:
    files_scanned: int = 0
    files_failed: int = 0
    links_checked: int = 0
    links_broken: int = 0
    action: str = "skipped"

    @classmethod
    def from_result(cls, result: "CheckResult") -> "RunStats":
        return cls(
            files_scanned=len(result.files),
            files_failed=len(result.failed_files),
            links_checked=len(result.records),
            links_broken=len(result.invalid),
            action=result.action.value,
        )


def format_run_summary(
    *,
    stats: RunStats,
    repository: str,
    run_started_at: str,
    run_finished_at: Optional[str] = None,
) -> str:
    lines = [
        "# Link Check Summary",
        "",
        f"- Repository: {repository}",
        f"- Started (UTC): {run_started_at}",
    ]
    if run_finished_at:
        lines.append(f"- Finished (UTC): {run_finished_at}")
    lines += [
        f"- Files scanned: {stats.files_scanned}",
        f"- Files failed: {stats.files_failed}",
        f"- Links checked: {stats.links_checked}",
        f"- Broken links: {stats.links_broken}",
        f"- Tracking issue: {stats.action}",
        "",
    ]
    return "\n".join(lines)


def write_text_report(out_path: Path, text: str) -> None:
    ensure_parent_exists(out_path)
    out_path.write_text(text, encoding="utf-8")
