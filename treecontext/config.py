# treecontext/config.py

"""
Command-line configuration.

:func:`build_parser` defines the command-line surface and
:meth:`Settings.from_args` turns an argument vector into an immutable
:class:`Settings` value. Nothing is read from or written to disk.
"""


from __future__ import annotations

import argparse
import logging
from dataclasses import dataclass
from typing import Literal, Sequence

from treecontext import __version__

OutputFormat = Literal["text", "xml"]
OUTPUT_FORMATS: tuple[OutputFormat, ...] = ("text", "xml")

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def _bool_value(value: str) -> bool:
    """argparse type for boolean option values."""
    lowered = value.strip().lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    raise argparse.ArgumentTypeError(f"invalid boolean value: {value!r}")


def _non_negative_int(value: str) -> int:
    """argparse type for non-negative integer values."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed < 0:
        raise argparse.ArgumentTypeError("value must be >= 0")
    return parsed


def build_parser() -> argparse.ArgumentParser:
    """Return the argument parser for the ``treecontext`` command."""
    parser = argparse.ArgumentParser(
        prog="treecontext",
        description=(
            "Generate a directory structure view and the concatenated contents "
            "of readable files, for use as language model context."
        ),
        epilog=(
            "Exclusion patterns use gitignore syntax and always win over "
            ".gitignore rules."
        ),
    )
    parser.add_argument(
        "-d",
        "--directory",
        metavar="DIRECTORY",
        default=".",
        help="Directory to process (default: current directory).",
    )
    parser.add_argument(
        "-f",
        "--format",
        dest="output_format",
        choices=OUTPUT_FORMATS,
        default="text",
        help="Output format (default: text).",
    )
    parser.add_argument(
        "-m",
        "--max-depth",
        metavar="DEPTH",
        type=_non_negative_int,
        default=0,
        help="Maximum depth to traverse; 0 means no limit (default: 0).",
    )
    parser.add_argument(
        "-x",
        "--exclude",
        metavar="PATTERN",
        nargs="*",
        action="extend",
        default=[],
        help="Gitignore-style patterns to exclude files and directories.",
    )
    parser.add_argument(
        "--respect-gitignore",
        metavar="BOOL",
        type=_bool_value,
        nargs="?",
        const=True,
        default=True,
        help="Respect .gitignore files found in the tree (default: true).",
    )
    parser.add_argument(
        "--hidden",
        action="store_true",
        help="Include hidden files and directories (names starting with '.').",
    )
    parser.add_argument(
        "--follow-symlinks",
        action="store_true",
        help="Descend into symbolic links to directories.",
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument(
        "-v",
        "--verbose",
        dest="log_level",
        action="store_const",
        const=logging.DEBUG,
        default=logging.INFO,
        help="Show debug diagnostics on standard error.",
    )
    verbosity.add_argument(
        "-q",
        "--quiet",
        dest="log_level",
        action="store_const",
        const=logging.WARNING,
        help="Only show warnings and errors on standard error.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


@dataclass(frozen=True)
class Settings:
    """Resolved command-line settings for one run."""

    directory: str = "."
    output_format: OutputFormat = "text"
    max_depth: int = 0
    exclude: tuple[str, ...] = ()
    respect_gitignore: bool = True
    hidden: bool = False
    follow_symlinks: bool = False
    log_level: int = logging.INFO

    @classmethod
    def from_namespace(cls, args: argparse.Namespace) -> Settings:
        return cls(
            directory=args.directory,
            output_format=args.output_format,
            max_depth=args.max_depth,
            exclude=tuple(args.exclude),
            respect_gitignore=args.respect_gitignore,
            hidden=args.hidden,
            follow_symlinks=args.follow_symlinks,
            log_level=args.log_level,
        )

    @classmethod
    def from_args(cls, argv: Sequence[str] | None = None) -> Settings:
        """
        Parse ``argv`` (``sys.argv[1:]`` when ``None``) into settings.

        Usage errors exit with status 2, as argparse does.
        """

        return cls.from_namespace(build_parser().parse_args(argv))
