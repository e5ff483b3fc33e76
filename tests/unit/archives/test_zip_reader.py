from __future__ import annotations

import pytest

from comicpdf.archives.zip_reader import ZipArchiveReader
from comicpdf.exceptions import ArchiveDecodeError
from comicpdf.typing.enums import ArchiveFormat


def test_list_entries_keeps_images_only(cbz_bytes, image_bytes) -> None:
    data = cbz_bytes(
        {
            "cover/": b"",
            "cover/01.JPG": image_bytes(),
            "ComicInfo.xml": b"<ComicInfo/>",
            "02.webp": b"webp",
            "03.gif": b"gif",
        },
    )

    reader = ZipArchiveReader(data, "issue.cbz")

    assert reader.archive_format == ArchiveFormat.ZIP
    assert reader.list_entries() == ["cover/01.JPG", "02.webp", "03.gif"]


def test_materialize_reads_requested_entries_only(cbz_bytes) -> None:
    reader = ZipArchiveReader(cbz_bytes({"a.jpg": b"a", "b.jpg": b"b"}), "issue.cbz")

    assert reader.materialize(["b.jpg", "b.jpg", "missing.jpg"]) == {"b.jpg": b"b"}


def test_invalid_buffer_raises_decode_error() -> None:
    with pytest.raises(ArchiveDecodeError, match="Failed to extract ZIP archive"):
        ZipArchiveReader(b"definitely not a zip", "issue.cbz")
