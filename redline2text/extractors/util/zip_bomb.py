from __future__ import annotations

import io
import zipfile
from dataclasses import dataclass

from redline2text.exceptions import ExtractionZipBombError


@dataclass(frozen=True)
class ZipBombLimits:
    """
    Heuristics for rejecting probable ZIP bombs.

    A DOCX package holds a handful of XML parts plus media, so these limits
    sit far above any real document while still catching extreme bombs.
    """

    max_entries: int = 10_000
    max_total_uncompressed_bytes: int = 2 * 1024 * 1024 * 1024  # 2 GiB
    max_single_uncompressed_bytes: int = 512 * 1024 * 1024  # 512 MiB
    max_total_compression_ratio: float = 200.0
    max_entry_compression_ratio: float = 500.0


DEFAULT_ZIP_BOMB_LIMITS = ZipBombLimits()


def validate_zipfile(
    zf: zipfile.ZipFile,
    *,
    limits: ZipBombLimits = DEFAULT_ZIP_BOMB_LIMITS,
    source: str = "<memory>",
) -> None:
    """
    Validate a ZIP container against high-confidence ZIP-bomb indicators.

    Only the central directory is inspected; no member is decompressed.
    """
    infos = zf.infolist()

    if len(infos) > limits.max_entries:
        raise ExtractionZipBombError(
            source,
            f"ZIP container has too many entries ({len(infos)} > {limits.max_entries})",
        )

    total_uncompressed = 0
    total_compressed = 0

    for info in infos:
        if info.is_dir():
            continue

        file_size = info.file_size
        compressed_size = info.compress_size

        if file_size > limits.max_single_uncompressed_bytes:
            raise ExtractionZipBombError(
                source,
                f"ZIP entry {info.filename} too large "
                f"({file_size} bytes > {limits.max_single_uncompressed_bytes})",
            )

        if file_size > 0:
            if compressed_size <= 0:
                raise ExtractionZipBombError(
                    source,
                    f"ZIP entry {info.filename} has zero compressed size "
                    "but non-zero uncompressed size",
                )
            ratio = file_size / compressed_size
            if ratio > limits.max_entry_compression_ratio:
                raise ExtractionZipBombError(
                    source,
                    f"ZIP entry {info.filename} compression ratio too high "
                    f"({ratio:.1f} > {limits.max_entry_compression_ratio})",
                )

        total_uncompressed += file_size
        total_compressed += compressed_size

        if total_uncompressed > limits.max_total_uncompressed_bytes:
            raise ExtractionZipBombError(
                source,
                f"ZIP total uncompressed size too large "
                f"({total_uncompressed} bytes > {limits.max_total_uncompressed_bytes})",
            )

    if total_uncompressed > 0 and total_compressed > 0:
        total_ratio = total_uncompressed / total_compressed
        if total_ratio > limits.max_total_compression_ratio:
            raise ExtractionZipBombError(
                source,
                f"ZIP total compression ratio too high "
                f"({total_ratio:.1f} > {limits.max_total_compression_ratio})",
            )


def open_zipfile(
    file_like: io.BytesIO,
    *,
    limits: ZipBombLimits = DEFAULT_ZIP_BOMB_LIMITS,
    source: str = "<memory>",
) -> zipfile.ZipFile:
    """
    Open a ZIP file and validate it for ZIP-bomb indicators.

    Caller owns the returned ZipFile and must close it. zipfile errors for
    unreadable containers propagate unchanged.
    """
    file_like.seek(0)
    zf = zipfile.ZipFile(file_like, "r")
    try:
        validate_zipfile(zf, limits=limits, source=source)
    except Exception:
        zf.close()
        raise
    return zf
