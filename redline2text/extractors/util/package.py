"""
Container loading for WordprocessingML packages.

A .docx is a ZIP archive. Tracked-change extraction only needs two parts of
it: the body markup (required) and the comment table (optional). Both are
returned as decoded text; parsing happens later in the markup layer.
"""

import codecs
import io
import logging
import zipfile
import zlib
from dataclasses import dataclass
from typing import Optional

from charset_normalizer import from_bytes

from redline2text.exceptions import (
    ArchiveFormatError,
    ExtractionFileEncryptedError,
    MissingMemberError,
)
from redline2text.extractors.util.encryption import is_ooxml_encrypted
from redline2text.extractors.util.zip_bomb import (
    DEFAULT_ZIP_BOMB_LIMITS,
    ZipBombLimits,
    open_zipfile,
)

logger = logging.getLogger(__name__)

BODY_MEMBER = "word/document.xml"
COMMENTS_MEMBER = "word/comments.xml"

_BOMS = (
    (codecs.BOM_UTF8, "utf-8-sig"),
    (codecs.BOM_UTF16_LE, "utf-16"),
    (codecs.BOM_UTF16_BE, "utf-16"),
)


@dataclass(frozen=True)
class PackageParts:
    body_xml: str
    comments_xml: Optional[str] = None


def decode_member(payload: bytes) -> str:
    """Decode a part payload: BOM first, then UTF-8, then detected encoding."""
    for bom, encoding in _BOMS:
        if payload.startswith(bom):
            return payload.decode(encoding)
    try:
        return payload.decode("utf-8")
    except UnicodeDecodeError:
        best_match = from_bytes(payload).best()
        if best_match is None:
            logger.debug("Encoding detection failed, falling back to UTF-8")
            return payload.decode("utf-8", errors="replace")
        logger.debug(f"Detected member encoding: {best_match.encoding}")
        return str(best_match)


class DocxPackage:
    """Read-only view over the parts of an opened DOCX package."""

    def __init__(
        self,
        file_like: io.BytesIO,
        file_name: str,
        *,
        limits: ZipBombLimits = DEFAULT_ZIP_BOMB_LIMITS,
    ):
        self.file_name = file_name
        try:
            encrypted = is_ooxml_encrypted(file_like)
        except OSError as exc:
            # OLE signature with a damaged compound file body
            raise ArchiveFormatError(file_name, cause=exc) from exc
        if encrypted:
            raise ExtractionFileEncryptedError(file_name)
        try:
            self._zip = open_zipfile(file_like, limits=limits, source=file_name)
        except (
            zipfile.BadZipFile,
            zipfile.LargeZipFile,
            EOFError,
            OSError,
            ValueError,
        ) as exc:
            raise ArchiveFormatError(file_name, cause=exc) from exc
        self._namelist = set(self._zip.namelist())

    def __enter__(self) -> "DocxPackage":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    @property
    def namelist(self) -> set[str]:
        return self._namelist

    def exists(self, member: str) -> bool:
        return member in self._namelist

    def read_text(self, member: str) -> str:
        """Read and decode one member.

        Raises:
            MissingMemberError: The member is not in the package.
            ArchiveFormatError: The member's compressed data is corrupt.
        """
        if not self.exists(member):
            raise MissingMemberError(self.file_name, member)
        try:
            payload = self._zip.read(member)
        except (
            zipfile.BadZipFile,
            zlib.error,
            EOFError,
            NotImplementedError,
            ValueError,
        ) as exc:
            raise ArchiveFormatError(self.file_name, cause=exc) from exc
        return decode_member(payload)

    def close(self) -> None:
        self._zip.close()


def load_package_parts(
    file_like: io.BytesIO,
    file_name: str,
    *,
    body_member: str = BODY_MEMBER,
    comments_member: str = COMMENTS_MEMBER,
    limits: ZipBombLimits = DEFAULT_ZIP_BOMB_LIMITS,
) -> PackageParts:
    """
    Open the package and return the body markup and the optional comment table.

    Args:
        file_like: The complete package bytes.
        file_name: Display name used in error messages.

    Raises:
        ArchiveFormatError: Not a readable ZIP package, an encrypted one, a ZIP
            bomb, or the body part is corrupt. A corrupt comment table is
            dropped with a warning instead.
        MissingMemberError: The body markup part is absent.
    """
    logger.debug(f"Opening package [{file_name}]")
    with DocxPackage(file_like, file_name, limits=limits) as package:
        body_xml = package.read_text(body_member)
        comments_xml = None
        if package.exists(comments_member):
            try:
                comments_xml = package.read_text(comments_member)
            except ArchiveFormatError as exc:
                # the comment table is optional, a damaged one is dropped
                logger.warning(
                    f"Ignoring unreadable {comments_member} in [{file_name}]: "
                    f"{exc.__cause__!r}"
                )
        else:
            logger.debug(f"No {comments_member} in [{file_name}]")
    return PackageParts(body_xml=body_xml, comments_xml=comments_xml)
