# treecontext/render_text.py

"""
Plain-text rendering of a :class:`~treecontext.content.ProjectSnapshot`.

The output has two sections: an indented directory tree, then every loaded
file framed by separator lines and a ``File:`` header.
"""


from __future__ import annotations

from treecontext.content import ProjectSnapshot

TREE_HEADER = "--- Directory Tree ---"
CONTENTS_HEADER = "--- File Contents ---"
SEPARATOR = "=" * 40
NO_FILES_MESSAGE = "(No readable files found or all were excluded/ignored)"
INDENT = "  "


def render_tree_lines(snapshot: ProjectSnapshot) -> list[str]:
    """Return the tree section: root name, then one indented line per entry."""
    lines = [f"{snapshot.root_name}/"]
    for entry in snapshot.entries:
        suffix = "/" if entry.is_dir else ""
        lines.append(f"{INDENT * (entry.depth + 1)}{entry.name}{suffix}")
    return lines


def render_text(snapshot: ProjectSnapshot) -> str:
    """
    Render the tree and file contents as plain text.

    File contents are stripped of leading and trailing whitespace. Paths in
    ``File:`` headers are relative to the root, in POSIX form.

    Parameters
    ----------
    snapshot : ProjectSnapshot
        Entries and loaded files to render.

    Returns
    -------
    str
        The rendered document, ending with a newline.
    """

    lines = [TREE_HEADER, *render_tree_lines(snapshot), "", CONTENTS_HEADER]

    if not snapshot.files:
        lines.append(NO_FILES_MESSAGE)
    for loaded in snapshot.files:
        lines.extend(
            [
                SEPARATOR,
                f"File: {snapshot.relative_path(loaded)}",
                SEPARATOR,
                loaded.content.strip(),
                "",
            ]
        )

    return "\n".join(lines) + "\n"
