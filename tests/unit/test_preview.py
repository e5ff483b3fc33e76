from __future__ import annotations

import base64
from io import BytesIO

from PIL import Image

from comicpdf.preview import count_pages, preview_pages
from comicpdf.typing.models import ArchiveUpload


def test_count_pages(three_page_cbz: bytes) -> None:
    assert count_pages(ArchiveUpload(filename="issue.cbz", data=three_page_cbz)) == 3


def test_preview_pages_returns_jpeg_data_urls(three_page_cbz: bytes, settings) -> None:
    result = preview_pages(ArchiveUpload(filename="issue.cbz", data=three_page_cbz), settings=settings)

    assert result.total_pages == 3
    assert len(result.pages) == 3
    prefix = "data:image/jpeg;base64,"
    first = result.pages[0].image_data
    assert first.startswith(prefix)
    with Image.open(BytesIO(base64.b64decode(first.removeprefix(prefix)))) as thumbnail:
        assert thumbnail.format == "JPEG"
        assert thumbnail.width == settings.thumbnail_width
        # page1.jpg is 60x90
        assert thumbnail.height == 450


def test_preview_pages_respects_limit_and_skips_broken_images(cbz_bytes, image_bytes, settings) -> None:
    data = cbz_bytes({"1.jpg": image_bytes(), "2.jpg": b"broken", "3.jpg": image_bytes(), "4.jpg": image_bytes()})

    result = preview_pages(ArchiveUpload(filename="issue.cbz", data=data), limit=3, settings=settings)

    assert result.total_pages == 4
    assert len(result.pages) == 2


def test_preview_result_serializes_with_camel_case(three_page_cbz: bytes, settings) -> None:
    result = preview_pages(ArchiveUpload(filename="issue.cbz", data=three_page_cbz), limit=1, settings=settings)

    payload = result.model_dump(by_alias=True)

    assert payload["totalPages"] == 3
    assert list(payload["pages"][0]) == ["imageData"]
