"""
Namespace-tolerant helpers over ElementTree.

WordprocessingML elements are namespace-qualified (``w:p`` becomes
``{http://schemas.openxmlformats.org/wordprocessingml/2006/main}p``). Every
query here matches on the local name only, so callers ask for ``"p"`` and
get paragraphs regardless of the prefix or namespace URI a producer used.

Word uses mc:AlternateContent to store the same content twice (mc:Choice and
mc:Fallback). Traversal skips mc:Fallback so text boxes and similar
constructs are not read twice.
"""

import logging
from typing import Collection, Iterator, Optional
from xml.etree import ElementTree as ET

from redline2text.exceptions import MarkupParseError

logger = logging.getLogger(__name__)

# Literal text runs: regular text and text inside deleted runs
TEXT_TAGS = frozenset({"t", "delText"})

SKIPPED_SUBTREES = frozenset({"Fallback"})


def local_name(tag: str) -> str:
    """Strip a ``{namespace}`` or ``prefix:`` qualifier from a tag or attribute name."""
    if not isinstance(tag, str):
        # comments and processing instructions carry callables as tags
        return ""
    tag = tag.rsplit("}", 1)[-1]
    return tag.rsplit(":", 1)[-1]


def parse_markup(text: str, *, file_name: str, member: str) -> ET.Element:
    """Parse one package part into an element tree root.

    Raises:
        MarkupParseError: The payload is not well-formed XML.
    """
    logger.debug(f"Parsing markup of {member}")
    try:
        return ET.fromstring(text)
    except ET.ParseError as exc:
        raise MarkupParseError(file_name, member, cause=exc) from exc


def _descendants(
    node: ET.Element, stop_at: Collection[str]
) -> Iterator[ET.Element]:
    for child in node:
        name = local_name(child.tag)
        if name in SKIPPED_SUBTREES or name in stop_at:
            continue
        yield child
        yield from _descendants(child, stop_at)


def iter_local(
    node: ET.Element, name: str, *, stop_at: Collection[str] = ()
) -> Iterator[ET.Element]:
    """
    Yield descendants of ``node`` with the given local name, in document order.

    Subtrees rooted at an element whose local name is in ``stop_at`` are
    neither yielded nor entered.
    """
    for elem in _descendants(node, stop_at):
        if local_name(elem.tag) == name:
            yield elem


def children_local(node: ET.Element, name: str) -> list[ET.Element]:
    """Direct children with the given local name."""
    return [child for child in node if local_name(child.tag) == name]


def find_child_local(node: ET.Element, name: str) -> Optional[ET.Element]:
    """First direct child with the given local name, or None."""
    for child in node:
        if local_name(child.tag) == name:
            return child
    return None


def get_attribute(node: ET.Element, name: str) -> Optional[str]:
    """Attribute value by local name, ignoring the attribute's namespace."""
    value = node.get(name)
    if value is not None:
        return value
    for key, value in node.attrib.items():
        if local_name(key) == name:
            return value
    return None


def text_content(node: ET.Element) -> str:
    """Concatenate all literal text nodes under ``node`` in document order."""
    parts = []
    for elem in _descendants(node, ()):
        if local_name(elem.tag) in TEXT_TAGS and elem.text:
            parts.append(elem.text)
    return "".join(parts)
