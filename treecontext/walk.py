# treecontext/walk.py

"""
Directory traversal.

This module enumerates the filesystem objects under a root directory as a
flat, pre-order sequence of :class:`Entry` records. Each entry carries its
depth relative to the root, which is all the renderers need to rebuild the
nesting.

Traversal is deterministic (case-insensitive name order, exact name as a
tie-break) and relies on pruning: if a directory is excluded, its entire
subtree is skipped. Filtering combines, in order of precedence:

- the forced exclusion rules (:class:`~treecontext.rules.ExcludeRules`),
- the hidden-file filter,
- ``.gitignore`` files found along the way, when enabled.

The main entry point is :func:`walk_entries`.
"""


from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

from treecontext.paths import display_name
from treecontext.rules import ExcludeRules, GitignoreStack

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Entry:
    """
    One filesystem object visited during the walk.

    Attributes
    ----------
    name : str
        Base name of the object, with undecodable bytes replaced.
    path : pathlib.Path
        Absolute path of the object.
    is_dir : bool
        Whether the object is recorded as a directory. Symbolic links to
        directories only count as directories when links are followed.
    depth : int
        Depth relative to the root; the root's children are at depth 0.
    """

    name: str
    path: Path
    is_dir: bool
    depth: int


def is_dir(p: Path, *, follow_symlinks: bool = False) -> bool:
    """
    Safely determine whether a path should be treated as a directory.

    Returns ``False`` if the status cannot be determined, and for symbolic
    links unless ``follow_symlinks`` is set.
    """

    try:
        if p.is_symlink() and not follow_symlinks:
            return False
        return p.is_dir()
    except OSError:
        return False


def _sort_key(p: Path) -> tuple[str, str]:
    return (p.name.casefold(), p.name)


def iter_children(d: Path) -> list[Path]:
    """
    Return the immediate children of a directory in stable walk order.

    Raises
    ------
    OSError
        If the directory cannot be listed.
    """

    children = list(d.iterdir())
    children.sort(key=_sort_key)
    return children


def _is_hidden(p: Path) -> bool:
    return p.name.startswith(".")


def walk_entries(
    root: Path,
    rules: ExcludeRules | None = None,
    *,
    respect_gitignore: bool = True,
    max_depth: int = 0,
    hidden: bool = False,
    follow_symlinks: bool = False,
) -> Iterator[Entry]:
    """
    Recursively enumerate the entries under ``root`` in pre-order.

    The root itself is never yielded. A directory entry is always yielded
    before its children, so the sequence can be turned back into a tree with
    a stack of open depths.

    Parameters
    ----------
    root : pathlib.Path
        Absolute directory to walk, as returned by
        :func:`~treecontext.paths.resolve_root`.
    rules : ExcludeRules | None, optional
        Forced exclusion rules. Matching paths are skipped and, for
        directories, not descended into, regardless of ``.gitignore``.
    respect_gitignore : bool, default=True
        Whether ``.gitignore`` files found in the traversed tree are
        honored. No other ignore sources are ever consulted.
    max_depth : int, default=0
        If positive, only entries with depth ``< max_depth`` are yielded.
        ``0`` means unlimited.
    hidden : bool, default=False
        Whether entries whose name starts with ``.`` are included.
    follow_symlinks : bool, default=False
        Whether symbolic links to directories are descended into.

    Yields
    ------
    Entry
        The visited entries, in traversal order.

    Raises
    ------
    ValueError
        If ``max_depth`` is negative.
    """

    if max_depth < 0:
        raise ValueError(f"max_depth must be >= 0, got {max_depth}")

    ignores = GitignoreStack(root=root) if respect_gitignore else None

    def keep(p: Path, p_is_dir: bool, stack: GitignoreStack | None) -> bool:
        if rules and rules.is_excluded(p, is_dir=p_is_dir):
            return False
        if not hidden and _is_hidden(p):
            return False
        if stack is not None and stack.is_ignored(p, is_dir=p_is_dir):
            return False
        return True

    def rec(
        d: Path,
        depth: int,
        stack: GitignoreStack | None,
        ancestors: frozenset[str],
    ) -> Iterator[Entry]:
        if stack is not None:
            stack = stack.enter(d)
        try:
            children = iter_children(d)
        except OSError as exc:
            logger.warning("Error accessing entry '%s': %s", d, exc)
            return

        for child in children:
            child_is_dir = is_dir(child, follow_symlinks=follow_symlinks)
            if not keep(child, child_is_dir, stack):
                continue
            yield Entry(
                name=display_name(child.name),
                path=child,
                is_dir=child_is_dir,
                depth=depth,
            )

            if not child_is_dir:
                continue
            if max_depth and depth + 1 >= max_depth:
                continue
            real = os.path.realpath(child)
            if real in ancestors:
                logger.warning(
                    "Error accessing entry '%s': symbolic link loop detected", child
                )
                continue
            yield from rec(child, depth + 1, stack, ancestors | {real})

    yield from rec(root, 0, ignores, frozenset({os.path.realpath(root)}))
