# treecontext/rules.py

"""
Gitignore-style path rules.

This module compiles the two kinds of rules the walker consults:

- :class:`ExcludeRules`, built from user-supplied patterns by
  :func:`build_overrides`. A match always excludes the path, whatever any
  ``.gitignore`` file says.
- :class:`GitignoreStack`, the ``.gitignore`` files found on the current
  traversal path. Each file applies to its own directory's subtree, and the
  deepest matching rule decides.

Patterns use ``gitwildmatch`` syntax as implemented by :mod:`pathspec`.
Paths are always matched relative to the directory that owns the rules, in
POSIX form, with a trailing ``/`` for directories.
"""


from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Sequence

import pathspec
from pathspec.pattern import Pattern

from treecontext.errors import RuleSetError

logger = logging.getLogger(__name__)

GITIGNORE_FILENAME = ".gitignore"


def _compile_pattern(line: str) -> list[Pattern]:
    """
    Compile a single gitignore line into its active patterns.

    Blank lines and comments compile to no pattern and yield an empty list.

    Raises
    ------
    ValueError
        If the line is not a valid gitwildmatch pattern.
    """

    spec = pathspec.PathSpec.from_lines("gitwildmatch", [line])
    return [p for p in spec.patterns if p.include is not None]


def match_state(patterns: Iterable[Pattern], path: str) -> bool | None:
    """
    Evaluate ``path`` against ``patterns`` with gitignore precedence.

    The last matching pattern wins. Returns ``True`` if the path is ignored,
    ``False`` if a negated pattern re-included it, and ``None`` if no pattern
    matched at all.
    """

    state: bool | None = None
    for pattern in patterns:
        if pattern.include is None:
            continue
        if pattern.match_file(path) is not None:
            state = pattern.include
    return state


def relative_posix(path: Path, root: Path, *, is_dir: bool = False) -> str:
    """
    Return ``path`` relative to ``root`` as a POSIX string.

    Directories get a trailing slash so directory-only patterns match them.
    """

    rel = path.relative_to(root).as_posix()
    return rel + "/" if is_dir else rel


@dataclass(frozen=True)
class ExcludeRules:
    """
    Compiled set of forced exclusion patterns.

    Attributes
    ----------
    root : pathlib.Path
        Directory the patterns are anchored to.
    patterns : tuple[str, ...]
        The raw patterns that compiled successfully, in input order.
    spec : pathspec.PathSpec
        The compiled patterns.
    """

    root: Path
    patterns: tuple[str, ...] = ()
    spec: pathspec.PathSpec = field(default_factory=lambda: pathspec.PathSpec([]))

    def __bool__(self) -> bool:
        return bool(self.patterns)

    def is_excluded(self, path: Path, *, is_dir: bool = False) -> bool:
        """Return whether ``path`` (under ``root``) is excluded."""
        rel = relative_posix(path, self.root, is_dir=is_dir)
        return match_state(self.spec.patterns, rel) is True


def build_overrides(root: Path, patterns: Sequence[str] = ()) -> ExcludeRules:
    """
    Compile user-supplied exclusion patterns against ``root``.

    Each pattern is compiled independently. A pattern that fails to parse is
    reported as a warning and omitted; it neither aborts the build nor
    affects the other patterns.

    Parameters
    ----------
    root : pathlib.Path
        Absolute directory the patterns are relative to.
    patterns : Sequence[str]
        Raw gitignore-syntax patterns, in precedence order.

    Returns
    -------
    ExcludeRules
        The compiled rule set. It is empty (falsy) when no pattern survived.

    Raises
    ------
    RuleSetError
        If ``root`` is not absolute or the accepted patterns cannot be
        combined into a single rule set.
    """

    if not root.is_absolute():
        raise RuleSetError(
            f"Failed to build exclusion rules: root '{root}' is not absolute"
        )

    accepted: list[str] = []
    compiled: list[Pattern] = []
    for raw in patterns:
        try:
            rules = _compile_pattern(raw)
        except ValueError as exc:
            logger.warning("Invalid exclude pattern '%s': %s (Ignoring)", raw, exc)
            continue
        if not rules:
            logger.debug("Exclude pattern '%s' matches nothing (Ignoring)", raw)
            continue
        accepted.append(raw)
        compiled.extend(rules)

    try:
        spec = pathspec.PathSpec(compiled)
    except (TypeError, ValueError) as exc:
        raise RuleSetError(f"Failed to build exclusion rules: {exc}") from exc

    return ExcludeRules(root=root, patterns=tuple(accepted), spec=spec)


def read_gitignore(path: Path) -> list[Pattern]:
    """
    Load the patterns of one ``.gitignore`` file.

    An unreadable file is reported and treated as empty. Invalid lines are
    reported and dropped one by one.
    """

    try:
        text = path.read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        logger.warning("Could not read ignore file '%s': %s (Ignoring)", path, exc)
        return []

    patterns: list[Pattern] = []
    for lineno, line in enumerate(text.splitlines(), start=1):
        try:
            patterns.extend(_compile_pattern(line))
        except ValueError as exc:
            logger.warning(
                "Invalid pattern '%s' in '%s' line %d: %s (Ignoring)",
                line,
                path,
                lineno,
                exc,
            )
    return patterns


@dataclass(frozen=True)
class _IgnoreFrame:
    # POSIX prefix of the owning directory relative to the walk root,
    # "" for the root itself, otherwise ending with "/".
    prefix: str
    patterns: tuple[Pattern, ...]


@dataclass(frozen=True)
class GitignoreStack:
    """
    ``.gitignore`` rules in effect for one directory of the walk.

    The stack is immutable: :meth:`enter` returns a new stack for a child
    directory, so sibling subtrees never see each other's rules.
    """

    root: Path
    frames: tuple[_IgnoreFrame, ...] = ()

    def enter(self, directory: Path) -> GitignoreStack:
        """Return the stack for ``directory``, loading its ``.gitignore``."""
        candidate = directory / GITIGNORE_FILENAME
        try:
            present = candidate.is_file()
        except OSError:
            present = False
        if not present:
            return self

        patterns = read_gitignore(candidate)
        if not patterns:
            return self

        prefix = "" if directory == self.root else relative_posix(
            directory, self.root, is_dir=True
        )
        logger.debug("Loaded %d ignore rules from %s", len(patterns), candidate)
        return GitignoreStack(
            root=self.root,
            frames=self.frames + (_IgnoreFrame(prefix, tuple(patterns)),),
        )

    def is_ignored(self, path: Path, *, is_dir: bool = False) -> bool:
        """Return whether the deepest matching rule ignores ``path``."""
        rel = relative_posix(path, self.root, is_dir=is_dir)
        for frame in reversed(self.frames):
            if not rel.startswith(frame.prefix):
                continue
            state = match_state(frame.patterns, rel[len(frame.prefix):])
            if state is not None:
                return state
        return False
