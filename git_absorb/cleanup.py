from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Sequence

from .absorb import AbsorptionResult


@dataclass
class CleanupResult:
    folder: str
    status: str
    removed: List[str] = field(default_factory=list)
    message: str = ""


def clean_folders(
    results: Sequence[AbsorptionResult],
    *,
    dry_run: bool = False,
) -> List[CleanupResult]:
    cleaned: List[CleanupResult] = []
    for result in results:
        if result.status != "absorbed" and not (dry_run and result.status == "dry-run"):
            logging.info("Keeping %s; it was not absorbed (%s).", result.folder, result.status)
            cleaned.append(
                CleanupResult(folder=result.folder, status="kept", message=result.status)
            )
            continue
        cleaned.append(clean_folder(Path(result.folder), dry_run=dry_run))
    return cleaned


def clean_folder(folder: Path, *, dry_run: bool = False) -> CleanupResult:
    """Remove every subdirectory directly inside *folder*; plain files stay."""
    result = CleanupResult(folder=str(folder), status="cleaned")
    if not folder.is_dir():
        result.status = "missing"
        return result

    failures: List[str] = []
    for child in sorted(folder.iterdir()):
        if not child.is_dir() or child.is_symlink():
            continue
        if dry_run:
            logging.info("Dry run: would remove %s", child)
            result.removed.append(child.name)
            continue
        try:
            shutil.rmtree(child)
        except OSError as exc:
            logging.warning("Could not remove %s: %s", child, exc)
            failures.append(f"{child.name}: {exc}")
            continue
        result.removed.append(child.name)

    if dry_run:
        result.status = "dry-run"
        return result
    if failures:
        result.status = "partial"
        result.message = "; ".join(failures)
    logging.info("Cleaned %s: removed %d subdirectories", folder, len(result.removed))
    return result
