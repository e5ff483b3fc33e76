"""Archive opening with format fallback and page ordering."""

from __future__ import annotations

from typing import TYPE_CHECKING

from comicpdf.archives.rar_reader import RarArchiveReader
from comicpdf.archives.zip_reader import ZipArchiveReader
from comicpdf.exceptions import ArchiveDecodeError, ExtractionFailedError, NoImagesFoundError
from comicpdf.format_detection import detect_archive_format
from comicpdf.logging import get_logger
from comicpdf.processing.natural_sort import sort_page_entries
from comicpdf.typing.enums import ArchiveFormat
from comicpdf.typing.models import ArchiveUpload, PageEntry

if TYPE_CHECKING:
    from collections.abc import Callable

    from comicpdf.typing.protocol import ArchiveReader

logger = get_logger(__name__)

READERS: dict[ArchiveFormat, Callable[[bytes, str], ArchiveReader]] = {
    ArchiveFormat.RAR: RarArchiveReader,
    ArchiveFormat.ZIP: ZipArchiveReader,
}


def open_archive(upload: ArchiveUpload) -> ArchiveReader:
    """Open an archive with the detected reader, retrying once with the other one.

    Args:
        upload (ArchiveUpload): Archive bytes and filename.

    Raises:
        ExtractionFailedError: If both readers reject the buffer.

    Returns:
        ArchiveReader: Reader over the archive.
    """
    detected = detect_archive_format(upload.data, upload.filename)
    logger.debug(
        "Detected archive format",
        extra={"archive": upload.filename, "format": detected.to_str(), "size": upload.size},
    )

    try:
        return READERS[detected](upload.data, upload.filename)
    except ArchiveDecodeError as primary:
        fallback = detected.other
        logger.warning(
            "Archive decoding failed, retrying with fallback format",
            extra={
                "archive": upload.filename,
                "format": detected.to_str(),
                "fallback_format": fallback.to_str(),
                "error": str(primary),
            },
        )
        try:
            return READERS[fallback](upload.data, upload.filename)
        except ArchiveDecodeError as secondary:
            raise ExtractionFailedError(filename=upload.filename, message=primary.message) from secondary


def load_page_order(upload: ArchiveUpload) -> tuple[ArchiveReader, list[PageEntry]]:
    """Open an archive and return its image entries in natural order.

    Args:
        upload (ArchiveUpload): Archive bytes and filename.

    Raises:
        NoImagesFoundError: If the archive holds no recognized image entry.

    Returns:
        tuple[ArchiveReader, list[PageEntry]]: Reader and naturally sorted entries.
    """
    reader = open_archive(upload)
    entries = [
        PageEntry(name=name, archive=upload.filename, position=position)
        for position, name in enumerate(reader.list_entries())
    ]
    if not entries:
        raise NoImagesFoundError(filename=upload.filename)

    ordered = sort_page_entries(entries)
    logger.info(
        "Found images",
        extra={"archive": upload.filename, "format": reader.archive_format.to_str(), "pages": len(ordered)},
    )
    return reader, ordered
