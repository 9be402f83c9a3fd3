from __future__ import annotations

import json
import logging
from collections import Counter
from dataclasses import asdict
from pathlib import Path
from typing import Sequence

from .absorb import AbsorptionResult
from .cleanup import CleanupResult


def summarize_cli(
    absorptions: Sequence[AbsorptionResult],
    cleanups: Sequence[CleanupResult] | None = None,
    *,
    dry_run: bool = False,
) -> str:
    title = "Absorb Summary (dry-run)" if dry_run else "Absorb Summary"
    lines = [title, "-" * len(title)]
    for result in absorptions:
        detail = f"- {result.name}: {result.status}"
        if result.message:
            detail += f" ({result.message})"
        lines.append(detail)

    if cleanups:
        lines.append("")
        lines.append("Cleanup")
        lines.append("-------")
        for cleanup in cleanups:
            removed = ", ".join(cleanup.removed) or "nothing"
            lines.append(f"- {cleanup.folder}: {cleanup.status} (removed: {removed})")

    stats = Counter(result.status for result in absorptions)
    failed = sum(count for status, count in stats.items() if status not in {"absorbed", "dry-run"})
    lines.append("")
    lines.append(
        f"{len(absorptions)} folder(s): "
        f"{stats.get('absorbed', 0) + stats.get('dry-run', 0)} ok, {failed} not absorbed"
    )
    return "\n".join(lines)


def write_json_report(
    report_path: Path,
    absorptions: Sequence[AbsorptionResult],
    cleanups: Sequence[CleanupResult] | None = None,
) -> None:
    payload = {
        "absorptions": [asdict(result) for result in absorptions],
        "cleanups": [asdict(cleanup) for cleanup in cleanups or []],
    }
    report_path.parent.mkdir(parents=True, exist_ok=True)
    report_path.write_text(json.dumps(payload, indent=2))
    logging.info("Wrote absorb report to %s", report_path)


def load_report(report_path: Path) -> tuple[list[AbsorptionResult], list[CleanupResult]]:
    if not report_path.exists():
        return [], []
    data = json.loads(report_path.read_text())
    absorptions = [AbsorptionResult(**entry) for entry in data.get("absorptions", [])]
    cleanups = [CleanupResult(**entry) for entry in data.get("cleanups", [])]
    return absorptions, cleanups
