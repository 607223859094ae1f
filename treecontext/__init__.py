"""
treecontext: directory tree and file contents for language model context.

This package walks a directory, applies gitignore-style exclusion rules and
renders the result as plain text or XML:

- :func:`resolve_root` canonicalizes the directory to process,
- :func:`build_overrides` compiles user exclusion patterns,
- :func:`walk_entries` and :func:`collect` gather entries and file contents,
- :func:`render_text` and :func:`render_xml` serialize a snapshot.

The API is based on ``pathlib.Path``. Functions return strings and data
objects; only the command-line front door writes to the standard streams.
"""

from __future__ import annotations

__version__ = "0.1.0"

from .errors import (
    NotADirectory,
    PathAccessError,
    PathNotFound,
    RootPathError,
    RuleSetError,
    TreeContextError,
)
from .paths import resolve_root
from .rules import ExcludeRules, build_overrides
from .walk import Entry, walk_entries
from .content import LoadedFile, ProjectSnapshot, collect, load_text
from .render_text import render_text
from .render_xml import render_xml

__all__ = [
    "Entry",
    "ExcludeRules",
    "LoadedFile",
    "NotADirectory",
    "PathAccessError",
    "PathNotFound",
    "ProjectSnapshot",
    "RootPathError",
    "RuleSetError",
    "TreeContextError",
    "build_overrides",
    "collect",
    "load_text",
    "render_text",
    "render_xml",
    "resolve_root",
    "walk_entries",
]
