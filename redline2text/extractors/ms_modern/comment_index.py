"""
Comment table lookup for DOCX tracked-change extraction.

``word/comments.xml`` stores the full text of every comment once, keyed by
``w:id``; the body markup only carries ``w:commentReference`` anchors that
point into it.
"""

import logging
from typing import Optional
from xml.etree import ElementTree as ET

from redline2text.exceptions import MarkupParseError
from redline2text.extractors.data_types import CommentRecord
from redline2text.extractors.util.markup import (
    children_local,
    get_attribute,
    parse_markup,
    text_content,
)

logger = logging.getLogger(__name__)


def read_comment_records(root: Optional[ET.Element]) -> list[CommentRecord]:
    """All top-level comment entries that carry an id, in table order."""
    if root is None:
        return []
    records = []
    for comment in children_local(root, "comment"):
        comment_id = get_attribute(comment, "id")
        if comment_id is None:
            continue
        records.append(CommentRecord(id=comment_id, text=text_content(comment)))
    return records


def build_comment_index(root: Optional[ET.Element]) -> dict[str, str]:
    """Map comment id to comment text. Later duplicates win."""
    return {record.id: record.text for record in read_comment_records(root)}


def load_comment_index(
    comments_xml: Optional[str], *, file_name: str, member: str
) -> dict[str, str]:
    """
    Parse the optional comment table into an id -> text index.

    Comments are optional content: an absent or malformed table yields an
    empty index instead of failing the whole document.
    """
    if comments_xml is None:
        return {}
    try:
        root = parse_markup(comments_xml, file_name=file_name, member=member)
    except MarkupParseError as exc:
        logger.warning(f"Ignoring unreadable comment table in [{file_name}]: {exc}")
        return {}
    index = build_comment_index(root)
    logger.debug(f"Indexed {len(index)} comments")
    return index
