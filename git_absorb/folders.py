from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Sequence


class GitAbsorbError(Exception):
    """Base exception for errors that stop a git-absorb run."""


class UsageError(GitAbsorbError):
    """Raised when the command line cannot be turned into a run."""


@dataclass(frozen=True)
class SourceFolder:
    raw: str
    path: Path

    @property
    def name(self) -> str:
        return self.path.name

    @property
    def exists(self) -> bool:
        return self.path.is_dir()


@dataclass(frozen=True)
class RunOptions:
    clean: bool = False
    dry_run: bool = False
    branch: str | None = None
    fail_fast: bool = False
    report: Path | None = None
    verbose: bool = False


def resolve_folder(raw: str, cwd: Path) -> SourceFolder:
    candidate = Path(raw).expanduser()
    if not candidate.is_absolute():
        candidate = cwd / candidate
    return SourceFolder(raw=raw, path=candidate.resolve())


def resolve_folders(raw_args: Sequence[str], cwd: Path) -> List[SourceFolder]:
    if not raw_args:
        raise UsageError("no source folder provided")

    folders: List[SourceFolder] = []
    seen: dict[str, SourceFolder] = {}
    for raw in raw_args:
        folder = resolve_folder(raw, cwd)
        if not folder.name:
            raise UsageError(f"cannot absorb {raw!r}: path has no base name")
        previous = seen.get(folder.name)
        if previous is not None:
            raise UsageError(
                f"{previous.raw!r} and {raw!r} would both be absorbed into '{folder.name}/'"
            )
        seen[folder.name] = folder
        logging.debug("Resolved %s -> %s", raw, folder.path)
        folders.append(folder)
    return folders
