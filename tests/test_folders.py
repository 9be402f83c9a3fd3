from __future__ import annotations

from pathlib import Path

import pytest

from git_absorb.folders import UsageError, resolve_folder, resolve_folders


def test_relative_folder_is_joined_with_cwd(tmp_path: Path) -> None:
    folder = resolve_folder("classroom-a", tmp_path)

    assert folder.path == (tmp_path / "classroom-a").resolve()
    assert folder.name == "classroom-a"
    assert folder.raw == "classroom-a"


def test_absolute_folder_is_kept(tmp_path: Path) -> None:
    target = tmp_path / "elsewhere" / "repo"

    folder = resolve_folder(str(target), tmp_path / "cwd")

    assert folder.path == target.resolve()


def test_dot_segments_are_normalised(tmp_path: Path) -> None:
    (tmp_path / "work").mkdir()

    folder = resolve_folder("./work/../classroom-b/", tmp_path)

    assert folder.name == "classroom-b"


def test_existence_is_checked_lazily(tmp_path: Path) -> None:
    folder = resolve_folder("later", tmp_path)
    assert folder.exists is False

    (tmp_path / "later").mkdir()
    assert folder.exists is True


def test_resolve_folders_keeps_argument_order(tmp_path: Path) -> None:
    folders = resolve_folders(["b", "a", "c"], tmp_path)

    assert [folder.name for folder in folders] == ["b", "a", "c"]


def test_resolve_folders_requires_a_folder(tmp_path: Path) -> None:
    with pytest.raises(UsageError, match="no source folder provided"):
        resolve_folders([], tmp_path)


def test_resolve_folders_rejects_shared_base_name(tmp_path: Path) -> None:
    with pytest.raises(UsageError, match="'repo/'"):
        resolve_folders(["one/repo", "two/repo"], tmp_path)


def test_resolve_folders_rejects_filesystem_root(tmp_path: Path) -> None:
    with pytest.raises(UsageError, match="no base name"):
        resolve_folders(["/"], tmp_path)
