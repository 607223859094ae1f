# treecontext/paths.py

"""
Root directory resolution.
"""


from __future__ import annotations

import os
from pathlib import Path

from treecontext.errors import NotADirectory, PathAccessError, PathNotFound

DEFAULT_DIRECTORY = "."


def resolve_root(directory: str | Path = DEFAULT_DIRECTORY) -> Path:
    """
    Resolve a user-supplied directory into an absolute canonical path.

    Parameters
    ----------
    directory : str | pathlib.Path, default="."
        Directory to resolve. Symbolic links are resolved.

    Returns
    -------
    pathlib.Path
        The absolute, existing directory.

    Raises
    ------
    PathNotFound
        If ``directory`` does not exist.
    PathAccessError
        If resolution fails for any other reason (permissions, I/O).
    NotADirectory
        If ``directory`` exists but is not a directory.
    """

    raw = Path(directory)
    try:
        root = raw.resolve(strict=True)
    except FileNotFoundError as exc:
        if str(directory) == DEFAULT_DIRECTORY:
            raise PathNotFound(
                "Current directory '.' not found or inaccessible."
            ) from exc
        raise PathNotFound(f"Could not access directory '{raw}': {exc}") from exc
    except (OSError, RuntimeError) as exc:
        # RuntimeError is raised for symlink loops on older interpreters.
        raise PathAccessError(f"Could not access directory '{raw}': {exc}") from exc

    try:
        is_dir = root.is_dir()
    except OSError as exc:
        raise PathAccessError(f"Could not access directory '{raw}': {exc}") from exc
    if not is_dir:
        raise NotADirectory(f"'{root}' is not a valid directory.")
    return root


def display_name(text: str | Path) -> str:
    """
    Return ``text`` with undecodable filename bytes replaced by U+FFFD.

    Names that are not valid in the filesystem encoding come back from
    :mod:`os` with surrogate escapes, which cannot be written to a strict
    text stream.
    """

    return os.fsencode(text).decode("utf-8", errors="replace")
