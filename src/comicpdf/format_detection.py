"""Archive format sniffing."""

from __future__ import annotations

from pathlib import PurePath

from comicpdf.exceptions import UnknownFormatError
from comicpdf.typing.enums import ArchiveFormat

RAR_SIGNATURE = b"Rar!\x1a\x07\x00"
ZIP_SIGNATURE = b"PK\x03\x04"

ARCHIVE_EXTENSIONS: dict[str, ArchiveFormat] = {
    ".cbr": ArchiveFormat.RAR,
    ".cbz": ArchiveFormat.ZIP,
}


def is_rar_buffer(data: bytes) -> bool:
    """Return whether the buffer starts with the RAR 1.5-4.x signature."""
    return data[: len(RAR_SIGNATURE)] == RAR_SIGNATURE


def is_zip_buffer(data: bytes) -> bool:
    """Return whether the buffer starts with a ZIP local file header."""
    return data[: len(ZIP_SIGNATURE)] == ZIP_SIGNATURE


def sniff_archive_format(data: bytes) -> ArchiveFormat | None:
    """Classify a buffer by magic bytes only.

    Args:
        data (bytes): Archive bytes.

    Returns:
        ArchiveFormat | None: Detected format, or None when no signature matches.
    """
    if is_rar_buffer(data):
        return ArchiveFormat.RAR
    if is_zip_buffer(data):
        return ArchiveFormat.ZIP
    return None


def format_from_extension(filename: str) -> ArchiveFormat | None:
    """Map a `.cbr`/`.cbz` filename to its conventional format."""
    return ARCHIVE_EXTENSIONS.get(PurePath(filename).suffix.lower())


def detect_archive_format(data: bytes, filename: str) -> ArchiveFormat:
    """Detect the container format of a comic archive.

    Magic bytes win over the extension because uploaded names are often wrong.

    Args:
        data (bytes): Archive bytes.
        filename (str): Declared filename.

    Raises:
        UnknownFormatError: If neither signature nor extension resolve the format.

    Returns:
        ArchiveFormat: Detected format.
    """
    detected = sniff_archive_format(data) or format_from_extension(filename)
    if detected is None:
        raise UnknownFormatError(filename=filename)
    return detected
