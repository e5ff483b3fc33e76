from __future__ import annotations

import pytest

from comicpdf.archives.loader import load_page_order, open_archive
from comicpdf.archives.zip_reader import ZipArchiveReader
from comicpdf.exceptions import ArchiveDecodeError, ExtractionFailedError, NoImagesFoundError, UnknownFormatError
from comicpdf.typing.enums import ArchiveFormat
from comicpdf.typing.models import ArchiveUpload


def _failing_reader(data: bytes, filename: str) -> ZipArchiveReader:
    _ = (data, filename)
    raise ArchiveDecodeError(message="primary decoder refused the buffer")


def test_load_page_order_sorts_naturally(three_page_cbz: bytes) -> None:
    reader, entries = load_page_order(ArchiveUpload(filename="issue.cbz", data=three_page_cbz))

    assert reader.archive_format == ArchiveFormat.ZIP
    assert [entry.name for entry in entries] == ["page1.jpg", "page2.png", "page10.jpg"]
    assert [entry.position for entry in entries] == [2, 1, 0]
    assert {entry.archive for entry in entries} == {"issue.cbz"}


def test_open_archive_falls_back_to_other_format(mocker, three_page_cbz: bytes) -> None:
    mocker.patch.dict(
        "comicpdf.archives.loader.READERS",
        {ArchiveFormat.ZIP: _failing_reader, ArchiveFormat.RAR: ZipArchiveReader},
    )

    reader = open_archive(ArchiveUpload(filename="issue.cbz", data=three_page_cbz))

    assert len(reader.list_entries()) == 3


def test_open_archive_raises_when_both_decoders_fail() -> None:
    upload = ArchiveUpload(filename="broken.cbz", data=b"neither zip nor rar")

    with pytest.raises(ExtractionFailedError, match="Failed to extract archive broken.cbz") as exc_info:
        open_archive(upload)

    assert "ZIP" in exc_info.value.message
    assert isinstance(exc_info.value.__cause__, ArchiveDecodeError)


def test_open_archive_raises_on_unknown_format() -> None:
    with pytest.raises(UnknownFormatError):
        open_archive(ArchiveUpload(filename="notes.txt", data=b"hello"))


def test_load_page_order_rejects_archive_without_images(cbz_bytes) -> None:
    upload = ArchiveUpload(filename="empty.cbz", data=cbz_bytes({"readme.txt": b"hi"}))

    with pytest.raises(NoImagesFoundError, match="empty.cbz"):
        load_page_order(upload)


def test_open_archive_logs_detected_format_and_size(mocker, three_page_cbz: bytes) -> None:
    mock_logger = mocker.patch("comicpdf.archives.loader.logger")

    open_archive(ArchiveUpload(filename="issue.cbz", data=three_page_cbz))

    mock_logger.debug.assert_called_once_with(
        "Detected archive format",
        extra={"archive": "issue.cbz", "format": "zip", "size": len(three_page_cbz)},
    )
