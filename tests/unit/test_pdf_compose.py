from __future__ import annotations

import pytest

from comicpdf.pdf_compose import (
    A4_HEIGHT,
    A4_WIDTH,
    append_image_page,
    compute_placement,
    count_pdf_pages,
    document_to_bytes,
    new_document,
    prepare_page,
)
from comicpdf.typing.enums import BackgroundColor, ImageFormat
from comicpdf.typing.models import NormalizedImage


def test_wide_image_takes_full_width_and_is_centered_vertically() -> None:
    placement = compute_placement(1000, 500)

    assert placement.width == pytest.approx(595.28)
    assert placement.height == pytest.approx(297.64)
    assert placement.x == pytest.approx(0)
    assert placement.y == pytest.approx((A4_HEIGHT - 297.64) / 2)


def test_tall_image_takes_full_height_and_is_centered_horizontally() -> None:
    placement = compute_placement(500, 1000)

    assert placement.height == pytest.approx(841.89)
    assert placement.width == pytest.approx(420.945)
    assert placement.x == pytest.approx((A4_WIDTH - 420.945) / 2)
    assert placement.y == pytest.approx(0)


def test_prepare_page_drops_undecodable_bytes() -> None:
    assert prepare_page(b"broken", name="broken.jpg", quality=75) is None


def test_prepare_page_normalizes_by_extension(image_bytes) -> None:
    image = prepare_page(image_bytes((20, 10), image_format="PNG"), name="p.png", quality=75)

    assert image is not None
    assert image.image_format == ImageFormat.PNG
    assert (image.width, image.height) == (20, 10)


def test_append_image_page_renders_and_serializes(image_bytes) -> None:
    document = new_document()
    image = prepare_page(image_bytes((60, 90)), name="p.jpg", quality=75)
    assert image is not None

    assert append_image_page(document, image, name="p.jpg", background=BackgroundColor.BLACK)
    page = document[0]
    assert page.rect.width == pytest.approx(A4_WIDTH)
    assert page.rect.height == pytest.approx(A4_HEIGHT)

    data = document_to_bytes(document)
    document.close()
    assert count_pdf_pages(data) == 1


def test_append_image_page_drops_page_when_embedding_fails() -> None:
    document = new_document()
    bogus = NormalizedImage(data=b"not an image", image_format=ImageFormat.JPEG, width=10, height=10)

    assert append_image_page(document, bogus, name="bogus.jpg", background=BackgroundColor.WHITE) is False
    assert document.page_count == 0
    document.close()
