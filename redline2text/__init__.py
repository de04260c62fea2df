"""
redline2text: Tracked-change extraction for Word documents.

A Python library that reads a .docx package and returns the ordered list of
editorial changes it records (insertions, deletions, comments) together
with a plain-text reconstruction of the document body.
"""

import io
from pathlib import Path
from typing import Any, Generator

from redline2text.exceptions import (
    ArchiveFormatError,
    ExtractionError,
    ExtractionFileEncryptedError,
    ExtractionFileFormatNotSupportedError,
    ExtractionZipBombError,
    MarkupParseError,
    MissingMemberError,
)
from redline2text.extractors.data_types import (
    ChangeType,
    ExtractionInterface,
    TrackedChangesContent,
    TrackedItem,
)
from redline2text.router import get_extractor, is_supported_file

__version__ = "0.1.0"


def read_docx_changes(
    file_like: io.BytesIO, path: str | None = None
) -> Generator[TrackedChangesContent, Any, None]:
    """Extract tracked changes and full text from a DOCX file."""
    from redline2text.extractors.ms_modern.docx_changes_extractor import (
        read_docx_changes as _read_docx_changes,
    )

    return _read_docx_changes(file_like, path)


def read_file(
    path: str | Path,
) -> Generator[ExtractionInterface, Any, None]:
    """
    Read and extract tracked changes from a file.

    Detects the file type based on the extension and uses the appropriate
    extractor. The whole file is read into memory first; extraction itself
    touches neither the filesystem nor the network. The resolved path is
    used as display name and for the result metadata.

    Args:
        path: Path to the file to read.

    Yields:
        TrackedChangesContent for .docx, .docm, .dotx and .dotm files.

    Raises:
        ExtractionFileFormatNotSupportedError: If the file type is not supported.
        FileNotFoundError: If the file does not exist.
        ExtractionError: If the file is not a readable package.

    Example:
        >>> import redline2text
        >>> for result in redline2text.read_file("contract.docx"):
        ...     for item in result.items:
        ...         print(item.id, item.kind.value, item.text)
    """
    path = Path(path).resolve()
    extractor = get_extractor(str(path))
    with open(path, "rb") as f:
        yield from extractor(io.BytesIO(f.read()), str(path))


__all__ = [
    # Version
    "__version__",
    # Main functions
    "read_file",
    "read_docx_changes",
    "is_supported_file",
    "get_extractor",
    # Result types
    "ChangeType",
    "TrackedItem",
    "TrackedChangesContent",
    # Errors
    "ExtractionError",
    "ArchiveFormatError",
    "ExtractionZipBombError",
    "ExtractionFileEncryptedError",
    "MissingMemberError",
    "MarkupParseError",
    "ExtractionFileFormatNotSupportedError",
]
