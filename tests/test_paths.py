# tests/test_paths.py
import os
from pathlib import Path

import pytest

from treecontext import NotADirectory, PathAccessError, PathNotFound, RootPathError, resolve_root


def test_resolves_to_absolute_directory(tmp_path: Path):
    (tmp_path / "sub").mkdir()

    root = resolve_root(tmp_path / "sub" / ".." / "sub")

    assert root == (tmp_path / "sub").resolve()
    assert root.is_absolute()


def test_default_is_current_directory(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.chdir(tmp_path)

    assert resolve_root() == tmp_path.resolve()


def test_missing_path(tmp_path: Path):
    with pytest.raises(PathNotFound) as excinfo:
        resolve_root(tmp_path / "nope")

    assert "nope" in str(excinfo.value)
    assert isinstance(excinfo.value, RootPathError)


@pytest.mark.skipif(os.name != "posix", reason="Removing the working directory is POSIX-only")
def test_missing_current_directory_message(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    gone = tmp_path / "gone"
    gone.mkdir()
    monkeypatch.chdir(gone)
    gone.rmdir()

    with pytest.raises(PathNotFound, match=r"Current directory '\.' not found"):
        resolve_root(".")


def test_file_is_not_a_directory(tmp_path: Path):
    f = tmp_path / "file.txt"
    f.write_text("x", encoding="utf-8")

    with pytest.raises(NotADirectory, match="is not a valid directory"):
        resolve_root(f)


@pytest.mark.skipif(os.name != "posix", reason="Symlink loops are POSIX-only here")
def test_symlink_loop_is_an_access_error(tmp_path: Path):
    loop = tmp_path / "loop"
    loop.symlink_to(loop)

    with pytest.raises(PathAccessError):
        resolve_root(loop)
