"""
Modern Microsoft Word Extractor Package
=======================================

Tracked-change extraction for WordprocessingML packages (Word 2007 and
later: .docx, .docm, .dotx, .dotm). These formats use the Office Open XML
(OOXML) standard, which stores documents as ZIP archives containing XML
parts.

Parts Used
----------
    document.docx/
    ├── [Content_Types].xml
    └── word/
        ├── document.xml       # body: paragraphs, w:ins, w:del, w:commentReference (required)
        └── comments.xml       # comment table: w:comment keyed by w:id (optional)

All other parts (styles, media, headers, relationships) are ignored.

XML Namespaces
--------------
    - http://schemas.openxmlformats.org/wordprocessingml/2006/main (w:)
    - http://schemas.openxmlformats.org/markup-compatibility/2006 (mc:)

Elements are matched by local name, so documents written with unusual
prefixes or a strict-OOXML namespace URI are read the same way.

Usage Example
-------------
    >>> from redline2text.extractors.ms_modern import read_docx_changes
    >>> import io
    >>>
    >>> with open("contract_v2.docx", "rb") as f:
    ...     for doc in read_docx_changes(io.BytesIO(f.read()), path="contract_v2.docx"):
    ...         print(len(doc.items), "changes")

See Also
--------
- redline2text.extractors.data_types: TrackedItem and TrackedChangesContent
- ECMA-376 Part 1, 17.13 (annotations): https://www.ecma-international.org/publications-and-standards/standards/ecma-376/
"""

from redline2text.extractors.ms_modern.docx_changes_extractor import (
    DEFAULT_SETTINGS,
    ChangeExtractionSettings,
    extract_tracked_changes,
    read_docx_changes,
)

__all__ = [
    "DEFAULT_SETTINGS",
    "ChangeExtractionSettings",
    "extract_tracked_changes",
    "read_docx_changes",
]
