from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Sequence

from .folders import GitAbsorbError, RunOptions, SourceFolder
from .gitutils import (
    FALLBACK_BRANCH,
    abort_merge,
    commit,
    detect_default_branch,
    fetch_branch,
    has_head_commit,
    head_has_path,
    is_inside_work_tree,
    merge_in_progress,
    merge_ours_unrelated,
    read_tree_prefix,
    show_toplevel,
)

SUCCESS_STATUSES = frozenset({"absorbed", "dry-run"})


@dataclass
class AbsorptionResult:
    folder: str
    name: str
    status: str
    branch: str | None = None
    commit: str | None = None
    message: str = ""

    @property
    def succeeded(self) -> bool:
        return self.status in SUCCESS_STATUSES


def commit_message(name: str) -> str:
    return f"Absorbed {name}."


def ensure_target_repo(cwd: Path) -> Path:
    """Return the top level of the work tree containing *cwd*."""
    if not is_inside_work_tree(cwd):
        raise GitAbsorbError(f"not inside a git repository: {cwd}")
    repo = show_toplevel(cwd)
    if not has_head_commit(repo):
        raise GitAbsorbError(
            f"target repository at {repo} has no commits; create an initial commit first"
        )
    return repo


def absorb_folders(
    folders: Sequence[SourceFolder],
    cwd: Path,
    options: RunOptions,
) -> List[AbsorptionResult]:
    repo = ensure_target_repo(cwd)
    results: List[AbsorptionResult] = []
    stopped = False

    for folder in folders:
        if stopped:
            results.append(
                AbsorptionResult(
                    folder=str(folder.path),
                    name=folder.name,
                    status="not-run",
                    message="Skipped after an earlier failure (--fail-fast).",
                )
            )
            continue
        result = absorb_folder(folder, repo, options)
        results.append(result)
        if options.fail_fast and not result.succeeded:
            logging.warning("Stopping after %s failed to absorb.", folder.name)
            stopped = True
    return results


def absorb_folder(folder: SourceFolder, repo: Path, options: RunOptions) -> AbsorptionResult:
    name = folder.name
    result = AbsorptionResult(folder=str(folder.path), name=name, status="failed")

    if not folder.exists:
        logging.warning("Skipping %s: folder does not exist.", folder.path)
        result.status = "missing"
        result.message = "Folder does not exist."
        return result

    if head_has_path(repo, name) or (repo / name).exists():
        logging.error("Skipping %s: '%s/' already exists in the target repository.", folder.path, name)
        result.status = "conflict"
        result.message = f"'{name}/' already exists in the target repository."
        return result

    branch = options.branch or detect_default_branch(folder.path) or FALLBACK_BRANCH
    result.branch = branch

    if options.dry_run:
        logging.info(
            "Dry run: would absorb branch %s of %s into %s/", branch, folder.path, name
        )
        result.status = "dry-run"
        return result

    logging.info("Absorbing %s (%s) ...", name, branch)
    try:
        fetched = fetch_branch(repo, folder.path, branch)
    except RuntimeError as exc:
        logging.error("Fetch failed for %s: %s", name, exc)
        result.message = str(exc)
        return result

    try:
        merge_ours_unrelated(repo, fetched)
        read_tree_prefix(repo, fetched, name)
        result.commit = commit(repo, commit_message(name))
    except RuntimeError as exc:
        logging.error("Absorbing %s failed: %s", name, exc)
        result.message = str(exc)
        if merge_in_progress(repo) and not abort_merge(repo):
            logging.warning("Could not abort the merge of %s; check `git status`.", name)
        return result

    result.status = "absorbed"
    result.message = f"Merged {fetched[:12]} into {name}/"
    logging.info("Completed %s.", name)
    return result
