"""
Track Solo - Archive Builder

Packs the serialized variants into a single in-memory ZIP archive.  Entries
are written in the order given; the returned manifest lists them in that same
order.
"""

from __future__ import annotations

import io
import zipfile
from typing import Iterable

from loguru import logger

from tracksolo.config import ARCHIVE_COMPRESSION_LEVEL
from tracksolo.errors import ArchiveError
from tracksolo.models import ArchiveResult, Variant


def _check_unique_names(variants: list[Variant]) -> None:
    seen: set[str] = set()
    for variant in variants:
        if variant.name in seen:
            raise ArchiveError(f"Duplicate archive entry name: {variant.name}")
        seen.add(variant.name)


def build_archive(variants: Iterable[Variant], base_name: str) -> ArchiveResult:
    """
    Write each variant as a deflated ZIP entry.

    Raises
    ------
    ArchiveError
        If two variants share a name, or the archive cannot be written.
    """
    variants = list(variants)
    _check_unique_names(variants)

    buffer = io.BytesIO()
    try:
        with zipfile.ZipFile(
            buffer,
            "w",
            compression=zipfile.ZIP_DEFLATED,
            compresslevel=ARCHIVE_COMPRESSION_LEVEL,
        ) as zf:
            for variant in variants:
                zf.writestr(variant.name, variant.data)
    except (zipfile.LargeZipFile, OSError, ValueError, MemoryError) as e:
        raise ArchiveError(f"Failed to write archive: {e}") from e

    archive_bytes = buffer.getvalue()
    logger.debug(
        "📦 Archive {}.zip: {} entries, {} bytes",
        base_name,
        len(variants),
        len(archive_bytes),
    )

    return ArchiveResult(
        archive_bytes=archive_bytes,
        entry_names=tuple(variant.name for variant in variants),
        base_name=base_name,
    )
