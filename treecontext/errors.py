# treecontext/errors.py

"""
Exception hierarchy for treecontext.

Only fatal conditions are raised. Recoverable problems met while walking
(unreadable files, invalid exclude patterns, unlistable directories) are
logged and skipped instead.
"""


from __future__ import annotations


class TreeContextError(Exception):
    """Base class for every error raised by treecontext."""


class RootPathError(TreeContextError):
    """The root directory could not be resolved."""


class PathNotFound(RootPathError):
    """The root path does not exist."""


class PathAccessError(RootPathError):
    """The root path exists but could not be accessed."""


class NotADirectory(RootPathError):
    """The root path resolved to something other than a directory."""


class RuleSetError(TreeContextError):
    """The exclusion rule set could not be compiled."""
