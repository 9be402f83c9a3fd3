from __future__ import annotations

import logging
import shutil
from pathlib import Path

import pytest

from git_absorb.absorb import AbsorptionResult
from git_absorb.cleanup import clean_folder, clean_folders


def make_source(path: Path) -> Path:
    (path / ".git" / "objects").mkdir(parents=True)
    (path / "src" / "pkg").mkdir(parents=True)
    (path / "src" / "pkg" / "mod.py").write_text("x = 1\n")
    (path / "docs").mkdir()
    (path / "README.md").write_text("readme\n")
    (path / "notes.txt").write_text("notes\n")
    return path


def test_clean_folder_removes_subdirectories_only(tmp_path: Path) -> None:
    source = make_source(tmp_path / "classroom-a")

    result = clean_folder(source)

    assert result.status == "cleaned"
    assert sorted(result.removed) == [".git", "docs", "src"]
    assert [child for child in source.iterdir() if child.is_dir()] == []
    assert (source / "README.md").read_text() == "readme\n"
    assert (source / "notes.txt").exists()


def test_clean_folder_dry_run_keeps_everything(tmp_path: Path) -> None:
    source = make_source(tmp_path / "classroom-a")

    result = clean_folder(source, dry_run=True)

    assert result.status == "dry-run"
    assert sorted(result.removed) == [".git", "docs", "src"]
    assert (source / "src" / "pkg" / "mod.py").exists()


def test_clean_folder_missing_directory(tmp_path: Path) -> None:
    result = clean_folder(tmp_path / "gone")

    assert result.status == "missing"
    assert result.removed == []


def test_clean_folder_reports_failures(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
) -> None:
    source = make_source(tmp_path / "classroom-a")
    real_rmtree = shutil.rmtree

    def flaky_rmtree(path: Path, *args: object, **kwargs: object) -> None:
        if Path(path).name == "docs":
            raise PermissionError("denied")
        real_rmtree(path, *args, **kwargs)

    monkeypatch.setattr("git_absorb.cleanup.shutil.rmtree", flaky_rmtree)
    caplog.set_level(logging.WARNING)

    result = clean_folder(source)

    assert result.status == "partial"
    assert "docs" in result.message
    assert (source / "docs").exists()
    assert not (source / "src").exists()
    assert any("Could not remove" in record.message for record in caplog.records)


def test_clean_folders_skips_folders_that_were_not_absorbed(tmp_path: Path) -> None:
    absorbed = make_source(tmp_path / "absorbed")
    failed = make_source(tmp_path / "failed")
    results = [
        AbsorptionResult(folder=str(absorbed), name="absorbed", status="absorbed"),
        AbsorptionResult(folder=str(failed), name="failed", status="failed"),
    ]

    cleanups = clean_folders(results)

    assert [cleanup.status for cleanup in cleanups] == ["cleaned", "kept"]
    assert not (absorbed / "src").exists()
    assert (failed / "src").exists()
    assert (failed / ".git").exists()
