import io
import logging
import mimetypes
import os
from typing import Any, Callable, Generator

from redline2text.exceptions import ExtractionFileFormatNotSupportedError
from redline2text.extractors.data_types import ExtractionInterface

logger = logging.getLogger(__name__)

mime_type_mapping = {
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": "docx",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.template": "dotx",
    "application/vnd.ms-word.document.macroEnabled.12": "docm",
    "application/vnd.ms-word.template.macroEnabled.12": "dotm",
}

# not every platform's mimetypes table knows the macro-enabled variants
_extension_mapping = {
    ".docx": "docx",
    ".dotx": "dotx",
    ".docm": "docm",
    ".dotm": "dotm",
}


def _get_extractor(
    file_type: str,
) -> Callable[[io.BytesIO, str | None], Generator[ExtractionInterface, Any, None]]:
    """Return the extractor function for a file type (lazy import)."""
    if file_type in ("docx", "docm", "dotx", "dotm"):
        from redline2text.extractors.ms_modern.docx_changes_extractor import (
            read_docx_changes,
        )

        return read_docx_changes
    raise ExtractionFileFormatNotSupportedError(
        file_type, f"No extractor for file type: {file_type}"
    )


def _detect_file_type(path: str) -> str | None:
    path = path.lower()
    mime_type, _ = mimetypes.guess_type(path)
    if mime_type is not None and mime_type in mime_type_mapping:
        logger.debug(f"Detected MIME type {mime_type} for file: {path}")
        return mime_type_mapping[mime_type]
    _, extension = os.path.splitext(path)
    return _extension_mapping.get(extension)


def is_supported_file(path: str) -> bool:
    """Checks if the path is a supported file"""
    return _detect_file_type(str(path)) is not None


def get_extractor(
    path: str,
) -> Callable[[io.BytesIO, str | None], Generator[ExtractionInterface, Any, None]]:
    """Analyses the path of a file and returns a suited extractor.
       The file MUST not exist (yet). The path or filename alone suffices to return an
       extractor.

    :returns a function of an extractor. All extractors take a file-like object as parameter
    :raises ExtractionFileFormatNotSupportedError: File is not covered by any extractor
    """
    file_type = _detect_file_type(str(path))
    if file_type is None:
        logger.debug(f"File [{path}] is not supported")
        raise ExtractionFileFormatNotSupportedError(str(path))
    logger.debug(f"Detected file type: {file_type} for file: {path}")
    return _get_extractor(file_type)
