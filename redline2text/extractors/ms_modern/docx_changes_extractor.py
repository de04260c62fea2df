"""
DOCX Tracked Change Extractor
=============================

Extracts an ordered record of editorial changes (insertions, deletions and
comments) from Microsoft Word .docx files, together with a plain-text
reconstruction of the document body.

This module uses direct XML parsing of the docx ZIP archive structure,
without requiring the python-docx library.

File Format Background
----------------------
Revisions are recorded inline in ``word/document.xml``:

    w:ins                 inserted runs, with w:author / w:date attributes
    w:del                 deleted runs (text lives in w:delText), same attributes
    w:commentReference    anchor pointing to a comment by w:id

Comment bodies are stored once in ``word/comments.xml`` (w:comment, keyed by
w:id). Section structure comes from paragraph properties: a w:pStyle whose
value looks like a heading or title, or an explicit w:outlineLvl.

Extracted Content
-----------------
    - full_text: every paragraph's text, one line per paragraph. Text inside
      w:del is kept, so the reconstruction reads like the marked-up document
      a reviewer sees, deletions included.
    - items: TrackedItem records in document order. Within one paragraph
      insertions come first, then deletions, then comments.

Each item carries the paragraph's text as ``context`` and the nearest
preceding heading as ``section_context``.

Item Identifiers
----------------
Identifiers are stable across re-parses of the same bytes:

    - ins-<p>-<j> / del-<p>-<j>: zero-based paragraph position and the
      wrapper's ordinal within that paragraph. Revision wrappers carry no id
      of their own that survives editing.
    - com-<id>: the comment's own id from the comment table.

Heading Detection
-----------------
A paragraph sets the section context when its style value contains one of
the configured keywords (case-insensitive substring, default "heading" and
"title") or when it declares an outline level, provided its trimmed text is
non-empty and shorter than ``heading_max_length``. This is a heuristic:
localized or custom style ids without those substrings are not recognized
unless they also carry an outline level.

Known Limitations
-----------------
- Move revisions (w:moveFrom / w:moveTo) are not reported
- Nested revisions are not separated from their parent wrapper
- Comments whose reference has no entry in the comment table are dropped
- Headers, footers and footnotes are not scanned

Usage
-----
    >>> import io
    >>> from redline2text.extractors.ms_modern.docx_changes_extractor import read_docx_changes
    >>>
    >>> with open("contract.docx", "rb") as f:
    ...     for doc in read_docx_changes(io.BytesIO(f.read()), path="contract.docx"):
    ...         for item in doc.items:
    ...             print(item.paragraph_index, item.kind.value, item.text)
"""

import functools
import io
import itertools
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Generator, Optional
from xml.etree import ElementTree as ET

from redline2text.extractors.data_types import (
    ChangeType,
    TrackedChangesContent,
    TrackedChangesMetadata,
    TrackedItem,
)
from redline2text.extractors.ms_modern.comment_index import load_comment_index
from redline2text.extractors.util.markup import (
    find_child_local,
    get_attribute,
    iter_local,
    parse_markup,
    text_content,
)
from redline2text.extractors.util.package import (
    BODY_MEMBER,
    COMMENTS_MEMBER,
    load_package_parts,
)
from redline2text.extractors.util.zip_bomb import DEFAULT_ZIP_BOMB_LIMITS, ZipBombLimits

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChangeExtractionSettings:
    body_member: str = BODY_MEMBER
    comments_member: str = COMMENTS_MEMBER
    section_sentinel: str = "Start of Document"
    heading_style_keywords: tuple[str, ...] = ("heading", "title")
    # headings must be strictly shorter than this after trimming
    heading_max_length: int = 200
    unknown_author: str = "Unknown"
    comment_placeholder: str = "Text in vicinity of comment"


DEFAULT_SETTINGS = ChangeExtractionSettings()

# Wrappers are collected per paragraph without entering nested paragraphs
# (text boxes), which are walked as paragraphs of their own.
_PARAGRAPH_SCOPE = ("p",)

_REVISION_WRAPPERS = (
    ("ins", ChangeType.INSERTION),
    ("del", ChangeType.DELETION),
)

_ID_PREFIXES = {
    ChangeType.INSERTION: "ins",
    ChangeType.DELETION: "del",
    ChangeType.COMMENT: "com",
}


@dataclass(frozen=True)
class RawChange:
    """A change as found in the markup, before ids and defaults are applied."""

    kind: ChangeType
    # "<paragraph position>-<ordinal>" for revisions, the comment id for comments
    key: str
    text: str
    context: str
    section_context: str
    paragraph_index: int
    author: Optional[str] = None
    date: Optional[str] = None
    comment_content: Optional[str] = None


@dataclass(frozen=True)
class _WalkState:
    """
    Scan state after one paragraph.

    Only section_context and paragraph_index carry over to the next step;
    line and changes belong to the paragraph just visited.
    """

    section_context: str
    # 1-based index of the paragraph just visited, 0 before the first one
    paragraph_index: int = 0
    line: str = ""
    changes: tuple[RawChange, ...] = ()


########################
# Paragraph inspection #
########################


def is_section_heading(
    paragraph: ET.Element,
    paragraph_text: str,
    settings: ChangeExtractionSettings = DEFAULT_SETTINGS,
) -> bool:
    """True when the paragraph qualifies as a section heading."""
    ppr = find_child_local(paragraph, "pPr")
    if ppr is None:
        return False

    trimmed = paragraph_text.strip()
    if not trimmed or len(trimmed) >= settings.heading_max_length:
        return False

    style = find_child_local(ppr, "pStyle")
    if style is not None:
        style_value = (get_attribute(style, "val") or "").lower()
        if any(keyword in style_value for keyword in settings.heading_style_keywords):
            return True

    return find_child_local(ppr, "outlineLvl") is not None


def _revision_changes(
    paragraph: ET.Element,
    paragraph_text: str,
    section_context: str,
    paragraph_index: int,
) -> list[RawChange]:
    changes = []
    position = paragraph_index - 1
    for tag, kind in _REVISION_WRAPPERS:
        wrappers = iter_local(paragraph, tag, stop_at=_PARAGRAPH_SCOPE)
        for ordinal, wrapper in enumerate(wrappers):
            text = text_content(wrapper)
            if not text.strip():
                continue
            changes.append(
                RawChange(
                    kind=kind,
                    key=f"{position}-{ordinal}",
                    text=text,
                    context=paragraph_text,
                    section_context=section_context,
                    paragraph_index=paragraph_index,
                    author=get_attribute(wrapper, "author"),
                    date=get_attribute(wrapper, "date"),
                )
            )
    return changes


def _comment_changes(
    paragraph: ET.Element,
    paragraph_text: str,
    section_context: str,
    paragraph_index: int,
    comment_index: dict[str, str],
    settings: ChangeExtractionSettings,
) -> list[RawChange]:
    changes = []
    references = iter_local(paragraph, "commentReference", stop_at=_PARAGRAPH_SCOPE)
    for reference in references:
        comment_id = get_attribute(reference, "id")
        if comment_id is None or comment_id not in comment_index:
            logger.debug(f"Unresolved comment reference {comment_id!r}")
            continue
        changes.append(
            RawChange(
                kind=ChangeType.COMMENT,
                key=comment_id,
                text=settings.comment_placeholder,
                context=paragraph_text,
                section_context=section_context,
                paragraph_index=paragraph_index,
                comment_content=comment_index[comment_id],
            )
        )
    return changes


def _visit_paragraph(
    state: _WalkState,
    paragraph: ET.Element,
    *,
    comment_index: dict[str, str],
    settings: ChangeExtractionSettings,
) -> _WalkState:
    paragraph_text = text_content(paragraph)
    paragraph_index = state.paragraph_index + 1

    section_context = state.section_context
    if is_section_heading(paragraph, paragraph_text, settings):
        section_context = paragraph_text.strip()

    changes = _revision_changes(
        paragraph, paragraph_text, section_context, paragraph_index
    )
    changes += _comment_changes(
        paragraph,
        paragraph_text,
        section_context,
        paragraph_index,
        comment_index,
        settings,
    )

    return _WalkState(
        section_context=section_context,
        paragraph_index=paragraph_index,
        line=paragraph_text,
        changes=tuple(changes),
    )


def walk_paragraphs(
    body: ET.Element,
    comment_index: dict[str, str],
    settings: ChangeExtractionSettings = DEFAULT_SETTINGS,
) -> tuple[str, list[RawChange], int]:
    """
    Single forward pass over all paragraphs of the body markup.

    The pass is a scan: each step sees only the previous step's section
    context and index, and its own line and changes are collected as the
    scan proceeds, so the cost stays linear in the number of paragraphs.

    Returns:
        (full text, raw changes in document order, number of paragraphs)
    """
    visit = functools.partial(
        _visit_paragraph, comment_index=comment_index, settings=settings
    )
    steps = itertools.accumulate(
        iter_local(body, "p"),
        visit,
        initial=_WalkState(section_context=settings.section_sentinel),
    )
    next(steps)  # the initial state belongs to no paragraph

    lines: list[str] = []
    changes: list[RawChange] = []
    for step in steps:
        lines.append(step.line)
        changes.extend(step.changes)
    full_text = "".join(f"{line}\n" for line in lines)
    return full_text, changes, len(lines)


###################
# Item finalizing #
###################


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def normalize_item(
    change: RawChange, settings: ChangeExtractionSettings = DEFAULT_SETTINGS
) -> TrackedItem:
    """Assign the stable id and fill defaults for optional fields."""
    author = _clean(change.author)
    if author is None and change.kind is not ChangeType.COMMENT:
        author = settings.unknown_author
    return TrackedItem(
        id=f"{_ID_PREFIXES[change.kind]}-{change.key}",
        kind=change.kind,
        text=change.text,
        context=change.context,
        section_context=change.section_context,
        author=author,
        date=_clean(change.date),
        comment_content=change.comment_content,
        paragraph_index=change.paragraph_index,
    )


def extract_tracked_changes(
    body_xml: str,
    comments_xml: Optional[str] = None,
    *,
    file_name: str = "document.docx",
    settings: ChangeExtractionSettings = DEFAULT_SETTINGS,
) -> TrackedChangesContent:
    """
    Extract tracked changes from already unpacked package parts.

    Raises:
        MarkupParseError: The body markup is not well-formed. A malformed
            comment table is ignored instead.
    """
    body = parse_markup(body_xml, file_name=file_name, member=settings.body_member)
    comment_index = load_comment_index(
        comments_xml, file_name=file_name, member=settings.comments_member
    )

    full_text, changes, paragraph_count = walk_paragraphs(body, comment_index, settings)
    items = tuple(normalize_item(change, settings) for change in changes)

    metadata = TrackedChangesMetadata(
        paragraph_count=paragraph_count,
        comment_count=len(comment_index),
    )
    return TrackedChangesContent(full_text=full_text, items=items, metadata=metadata)


def read_docx_changes(
    file_like: io.BytesIO,
    path: str | None = None,
    *,
    settings: ChangeExtractionSettings = DEFAULT_SETTINGS,
    limits: ZipBombLimits = DEFAULT_ZIP_BOMB_LIMITS,
) -> Generator[TrackedChangesContent, Any, None]:
    """
    Extract the tracked changes and plain text of a DOCX file.

    Args:
        file_like: A BytesIO object containing the DOCX file data.
        path: Optional file path or display name. Used for error messages and
            to populate file metadata fields.
        settings: Extraction settings, see ChangeExtractionSettings.
        limits: Archive sanity limits applied while opening the package.

    Yields:
        TrackedChangesContent with full_text and the ordered items.

    Raises:
        ArchiveFormatError: The buffer is not a readable DOCX package.
        MissingMemberError: The package has no body markup part.
        MarkupParseError: The body markup is not well-formed XML.
    """
    file_name = Path(path).name if path else "document.docx"
    logger.debug(f"Extracting tracked changes from [{file_name}]")

    parts = load_package_parts(
        file_like,
        file_name,
        body_member=settings.body_member,
        comments_member=settings.comments_member,
        limits=limits,
    )
    content = extract_tracked_changes(
        parts.body_xml,
        parts.comments_xml,
        file_name=file_name,
        settings=settings,
    )
    content.metadata.populate_from_path(path)

    counts = {kind: 0 for kind in ChangeType}
    for item in content.items:
        counts[item.kind] += 1
    logger.info(
        f"Extracted [{file_name}]: {content.metadata.paragraph_count} paragraphs, "
        f"{counts[ChangeType.INSERTION]} insertions, "
        f"{counts[ChangeType.DELETION]} deletions, "
        f"{counts[ChangeType.COMMENT]} comments"
    )
    yield content
