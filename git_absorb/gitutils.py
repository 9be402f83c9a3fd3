from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Sequence

FALLBACK_BRANCH = "master"


def run_git(repo: Path, args: Sequence[str]) -> subprocess.CompletedProcess:
    logging.debug("git -C %s %s", repo, " ".join(args))
    return subprocess.run(
        ["git", "-C", str(repo)] + list(args),
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        text=True,
    )


def _check(result: subprocess.CompletedProcess, args: Sequence[str]) -> str:
    if result.returncode != 0:
        detail = result.stderr.strip() or result.stdout.strip()
        raise RuntimeError(f"git {' '.join(args)} failed: {detail}")
    return result.stdout


def is_inside_work_tree(path: Path) -> bool:
    result = run_git(path, ["rev-parse", "--is-inside-work-tree"])
    return result.returncode == 0 and result.stdout.strip() == "true"


def show_toplevel(path: Path) -> Path:
    args = ["rev-parse", "--show-toplevel"]
    return Path(_check(run_git(path, args), args).strip())


def has_head_commit(repo: Path) -> bool:
    result = run_git(repo, ["rev-parse", "--verify", "--quiet", "HEAD^{commit}"])
    return result.returncode == 0


def git_rev_parse(repo: Path, ref: str = "HEAD") -> str:
    args = ["rev-parse", ref]
    return _check(run_git(repo, args), args).strip()


def head_has_path(repo: Path, path: str) -> bool:
    result = run_git(repo, ["cat-file", "-e", f"HEAD:{path}"])
    return result.returncode == 0


def detect_default_branch(source: Path) -> str | None:
    """Branch the source repository's HEAD points at, if it advertises one."""
    result = run_git(source, ["ls-remote", "--symref", str(source), "HEAD"])
    if result.returncode != 0:
        return None
    for line in result.stdout.splitlines():
        if not line.startswith("ref:"):
            continue
        target = line[len("ref:"):].split("\t", 1)[0].strip()
        if target.startswith("refs/heads/"):
            return target[len("refs/heads/"):]
    return None


def fetch_branch(repo: Path, source: Path, branch: str) -> str:
    args = ["fetch", "--no-tags", "--quiet", str(source), branch]
    _check(run_git(repo, args), args)
    return git_rev_parse(repo, "FETCH_HEAD")


def merge_ours_unrelated(repo: Path, ref: str) -> None:
    args = ["merge", "-s", "ours", "--no-commit", "--allow-unrelated-histories", ref]
    _check(run_git(repo, args), args)


def merge_in_progress(repo: Path) -> bool:
    result = run_git(repo, ["rev-parse", "--verify", "--quiet", "MERGE_HEAD"])
    return result.returncode == 0


def abort_merge(repo: Path) -> bool:
    result = run_git(repo, ["merge", "--abort"])
    return result.returncode == 0


def read_tree_prefix(repo: Path, ref: str, prefix: str) -> None:
    args = ["read-tree", f"--prefix={prefix}/", "-u", ref]
    _check(run_git(repo, args), args)


def commit(repo: Path, message: str) -> str:
    args = ["commit", "--quiet", "-m", message]
    _check(run_git(repo, args), args)
    return git_rev_parse(repo, "HEAD")
