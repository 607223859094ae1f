# treecontext/cli.py

"""
Command-line front door for treecontext.

Parses options, resolves the root, walks and loads the tree, then writes the
rendered document to standard output. Diagnostics go to standard error
through :mod:`logging` and never mix with the document.
"""


from __future__ import annotations

import logging
import sys
from typing import Sequence, TextIO

from treecontext.config import Settings
from treecontext.content import ProjectSnapshot, collect
from treecontext.errors import TreeContextError
from treecontext.paths import resolve_root
from treecontext.render_text import render_text
from treecontext.render_xml import render_xml
from treecontext.rules import build_overrides

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(levelname)s: %(message)s"
PACKAGE_LOGGER = "treecontext"

RENDERERS = {
    "text": render_text,
    "xml": render_xml,
}

_handler: logging.Handler | None = None


def configure_logging(level: int = logging.INFO, stream: TextIO | None = None) -> None:
    """
    Send the package's log records to ``stream`` (standard error by default).

    Calling it again replaces the previously installed handler.
    """

    global _handler

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    if _handler is not None:
        package_logger.removeHandler(_handler)

    _handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    _handler.setFormatter(logging.Formatter(LOG_FORMAT))
    package_logger.addHandler(_handler)
    package_logger.setLevel(level)


def build_snapshot(settings: Settings) -> ProjectSnapshot:
    """
    Resolve the root and gather entries and file contents.

    Raises
    ------
    TreeContextError
        On any fatal condition (bad root, broken rule set).
    """

    root = resolve_root(settings.directory)
    rules = build_overrides(root, settings.exclude)

    logger.info("Processing directory: %s", root)
    if settings.respect_gitignore:
        logger.info("Respecting .gitignore files.")
    if settings.exclude:
        logger.info("Applying exclude patterns: %s", list(settings.exclude))

    return collect(
        root,
        rules,
        respect_gitignore=settings.respect_gitignore,
        max_depth=settings.max_depth,
        hidden=settings.hidden,
        follow_symlinks=settings.follow_symlinks,
    )


def run(settings: Settings, out: TextIO | None = None) -> int:
    """Execute one run and return the process exit code."""
    try:
        snapshot = build_snapshot(settings)
    except TreeContextError as exc:
        logger.error("%s", exc)
        return 1

    document = RENDERERS[settings.output_format](snapshot)
    (out if out is not None else sys.stdout).write(document)
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """Parse ``argv`` and run; the return value is the exit code."""
    settings = Settings.from_args(argv)
    configure_logging(settings.log_level)
    return run(settings)


if __name__ == "__main__":
    sys.exit(main())
