# treecontext/render_xml.py

"""
XML rendering of a :class:`~treecontext.content.ProjectSnapshot`.

The document has the shape::

    <projectContext rootPath="...">
        <tree>
            <dir name="root">
                <dir name="sub">
                    <file name="a.txt" />
                </dir>
            </dir>
        </tree>
        <fileContents>
            <file path="sub/a.txt">...</file>
        </fileContents>
    </projectContext>

The nested ``tree`` is rebuilt from the flat, depth-annotated entry
sequence with an explicit stack of open directory depths, driving an
:class:`xml.etree.ElementTree.TreeBuilder` directly.
"""


from __future__ import annotations

import re
import xml.etree.ElementTree as ET

from treecontext.content import ProjectSnapshot

NO_FILES_COMMENT = " No readable files found or all were excluded/ignored "
XML_INDENT = "    "

# Characters outside the XML 1.0 Char production.
_INVALID_XML_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\ufffe\uffff]")


def xml_safe(text: str) -> str:
    """Drop characters that cannot appear in an XML 1.0 document."""
    return _INVALID_XML_CHARS.sub("", text)


def _build_tree(builder: ET.TreeBuilder, snapshot: ProjectSnapshot) -> None:
    builder.start("tree", {})
    builder.start("dir", {"name": xml_safe(snapshot.root_name)})

    # Depths of the currently open <dir> elements; the root sits at 0 and
    # entries at depth + 1.
    stack = [0]
    for entry in snapshot.entries:
        xml_depth = entry.depth + 1
        while len(stack) > 1 and stack[-1] >= xml_depth:
            builder.end("dir")
            stack.pop()

        if entry.is_dir:
            builder.start("dir", {"name": xml_safe(entry.name)})
            stack.append(xml_depth)
        else:
            builder.start("file", {"name": xml_safe(entry.name)})
            builder.end("file")

    while len(stack) > 1:
        builder.end("dir")
        stack.pop()

    builder.end("dir")
    builder.end("tree")


def _build_contents(builder: ET.TreeBuilder, snapshot: ProjectSnapshot) -> None:
    builder.start("fileContents", {})
    if not snapshot.files:
        builder.comment(NO_FILES_COMMENT)
    for loaded in snapshot.files:
        builder.start("file", {"path": xml_safe(snapshot.relative_path(loaded))})
        builder.data(xml_safe(loaded.content))
        builder.end("file")
    builder.end("fileContents")


def build_document(snapshot: ProjectSnapshot) -> ET.Element:
    """Build the ``projectContext`` element for ``snapshot``."""
    builder = ET.TreeBuilder(insert_comments=True)
    builder.start("projectContext", {"rootPath": xml_safe(snapshot.root_path)})
    _build_tree(builder, snapshot)
    _build_contents(builder, snapshot)
    builder.end("projectContext")
    return builder.close()


def render_xml(snapshot: ProjectSnapshot) -> str:
    """
    Render the tree and file contents as an XML document.

    File contents are emitted as element text, escaped by ElementTree.
    Control characters that XML 1.0 cannot represent are dropped; the rest
    of the content is kept verbatim. No XML declaration is written.

    Parameters
    ----------
    snapshot : ProjectSnapshot
        Entries and loaded files to render.

    Returns
    -------
    str
        The serialized document, ending with a newline.
    """

    root = build_document(snapshot)
    ET.indent(root, space=XML_INDENT)
    return ET.tostring(root, encoding="unicode") + "\n"
