from __future__ import annotations

import pytest

from comicpdf.exceptions import UnknownFormatError
from comicpdf.format_detection import (
    RAR_SIGNATURE,
    detect_archive_format,
    format_from_extension,
    sniff_archive_format,
)
from comicpdf.typing.enums import ArchiveFormat


def test_zip_signature_wins_over_cbr_extension(three_page_cbz: bytes) -> None:
    assert detect_archive_format(three_page_cbz, "mislabelled.cbr") == ArchiveFormat.ZIP


def test_rar_signature_wins_over_cbz_extension() -> None:
    data = RAR_SIGNATURE + b"\x00" * 32

    assert detect_archive_format(data, "mislabelled.cbz") == ArchiveFormat.RAR


@pytest.mark.parametrize(
    ("filename", "expected"),
    [
        ("issue.cbr", ArchiveFormat.RAR),
        ("ISSUE.CBZ", ArchiveFormat.ZIP),
    ],
)
def test_extension_used_when_no_signature_matches(filename: str, expected: ArchiveFormat) -> None:
    assert detect_archive_format(b"garbage bytes", filename) == expected


def test_unknown_buffer_and_extension_raises() -> None:
    with pytest.raises(UnknownFormatError, match="Cannot determine archive type"):
        detect_archive_format(b"garbage bytes", "issue.pdf")


def test_short_buffer_is_not_sniffed() -> None:
    assert sniff_archive_format(b"PK") is None
    assert format_from_extension("folder.cbz/file") is None
