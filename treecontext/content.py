# treecontext/content.py

"""
Filesystem content extraction.

This module reads the files found by the walker and pairs each readable one
with its text, producing a :class:`ProjectSnapshot` that both renderers
consume.

Reading is strict: a file is included only if its bytes decode as UTF-8 and
do not look binary. Failures are never fatal. Binary or non-UTF-8 files are
reported at INFO level, other read errors at WARNING level, and in both cases
the file keeps its place in the tree but contributes no content.
"""


from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from treecontext.paths import display_name
from treecontext.rules import ExcludeRules
from treecontext.walk import Entry, walk_entries

logger = logging.getLogger(__name__)

BINARY_SAMPLE_SIZE = 8192


@dataclass(frozen=True)
class LoadedFile:
    """A file path paired with its decoded text content."""

    path: Path
    content: str


@dataclass(frozen=True)
class ProjectSnapshot:
    """
    Everything gathered in a single traversal pass.

    Attributes
    ----------
    root : pathlib.Path
        The resolved root directory.
    entries : tuple[Entry, ...]
        Visited entries in walk order.
    files : tuple[LoadedFile, ...]
        Successfully loaded files, in walk order.
    """

    root: Path
    entries: tuple[Entry, ...]
    files: tuple[LoadedFile, ...]

    @property
    def root_name(self) -> str:
        return display_name(self.root.name)

    @property
    def root_path(self) -> str:
        return display_name(self.root)

    def relative_path(self, loaded: LoadedFile) -> str:
        """Return the POSIX path of ``loaded`` relative to the root."""
        try:
            rel = loaded.path.relative_to(self.root).as_posix()
        except ValueError:
            rel = loaded.path.as_posix()
        return display_name(rel)


def is_binary(data: bytes, *, sample_size: int = BINARY_SAMPLE_SIZE) -> bool:
    """
    Heuristically determine whether raw file bytes are binary.

    A NUL byte within the first ``sample_size`` bytes is treated as a
    binary indicator even though it is valid UTF-8.
    """

    return b"\x00" in data[:sample_size]


def load_text(path: Path, *, encoding: str = "utf-8") -> str | None:
    """
    Read a whole file as text.

    The bytes are decoded strictly and without newline translation, so the
    content is exactly what is on disk.

    Parameters
    ----------
    path : pathlib.Path
        File to read.
    encoding : str, default="utf-8"
        Text encoding used to decode the file.

    Returns
    -------
    str | None
        The decoded content, or ``None`` if the file is binary, not valid
        text, or unreadable. The reason is logged.
    """

    try:
        data = path.read_bytes()
    except OSError as exc:
        logger.warning("Could not read file '%s': %s (Skipping content)", path, exc)
        return None

    text: str | None = None
    if not is_binary(data):
        try:
            text = data.decode(encoding)
        except UnicodeDecodeError:
            pass
    if text is None:
        logger.info("Skipping binary or non-UTF8 file: '%s'", path)
    return text


def collect(
    root: Path,
    rules: ExcludeRules | None = None,
    *,
    respect_gitignore: bool = True,
    max_depth: int = 0,
    hidden: bool = False,
    follow_symlinks: bool = False,
) -> ProjectSnapshot:
    """
    Walk ``root`` and load the content of every non-directory entry.

    Parameters are forwarded to :func:`~treecontext.walk.walk_entries`.

    Returns
    -------
    ProjectSnapshot
        The entries and loaded files, both in walk order.
    """

    entries: list[Entry] = []
    files: list[LoadedFile] = []

    for entry in walk_entries(
        root,
        rules,
        respect_gitignore=respect_gitignore,
        max_depth=max_depth,
        hidden=hidden,
        follow_symlinks=follow_symlinks,
    ):
        entries.append(entry)
        if entry.is_dir:
            continue
        content = load_text(entry.path)
        if content is not None:
            files.append(LoadedFile(path=entry.path, content=content))

    logger.debug("Collected %d entries, %d readable files", len(entries), len(files))
    return ProjectSnapshot(root=root, entries=tuple(entries), files=tuple(files))
