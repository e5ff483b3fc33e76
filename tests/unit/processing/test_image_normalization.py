from __future__ import annotations

from io import BytesIO

import pytest
from PIL import Image

from comicpdf.exceptions import ImageDecodeError
from comicpdf.processing.image_normalization import (
    _prepare_for_png,
    make_thumbnail,
    normalize_image,
    png_compression_level,
    resolve_image_format,
)
from comicpdf.typing.enums import ImageFormat


@pytest.mark.parametrize(("quality", "level"), [(75, 3), (100, 5), (1, 0), (19, 0), (40, 2)])
def test_png_compression_level(quality: int, level: int) -> None:
    assert png_compression_level(quality) == level


def test_resolve_image_format_uses_extension_by_default(image_bytes) -> None:
    png = image_bytes(image_format="PNG")

    assert resolve_image_format("page.PNG", b"") == ImageFormat.PNG
    assert resolve_image_format("page.jpg", png) == ImageFormat.JPEG


def test_resolve_image_format_sniffs_signature_when_asked(image_bytes) -> None:
    png = image_bytes(image_format="PNG")

    assert resolve_image_format("page.jpg", png, sniff_signature=True) == ImageFormat.PNG
    assert resolve_image_format("page.png", image_bytes(), sniff_signature=True) == ImageFormat.JPEG


def test_normalize_png_keeps_size_and_format(image_bytes) -> None:
    source = image_bytes((40, 70), image_format="PNG", mode="RGBA", color=(1, 2, 3, 128))

    image = normalize_image(source, ImageFormat.PNG, 75)

    assert (image.width, image.height) == (40, 70)
    assert image.data.startswith(b"\x89PNG")


def test_normalize_jpeg_flattens_alpha(image_bytes) -> None:
    image = normalize_image(image_bytes((30, 20), image_format="PNG", mode="RGBA"), ImageFormat.JPEG, 50)

    with Image.open(BytesIO(image.data)) as decoded:
        assert decoded.format == "JPEG"
        assert decoded.mode == "RGB"
    assert (image.width, image.height) == (30, 20)


def test_normalize_gif_uses_first_frame(image_bytes) -> None:
    image = normalize_image(image_bytes((16, 24), image_format="GIF", mode="P", color=3), ImageFormat.JPEG, 75)

    assert (image.width, image.height) == (16, 24)


def test_normalize_rejects_garbage() -> None:
    with pytest.raises(ImageDecodeError, match="broken.jpg"):
        normalize_image(b"not an image", ImageFormat.JPEG, 75, name="broken.jpg")


def test_make_thumbnail_keeps_aspect_ratio(image_bytes) -> None:
    thumbnail = make_thumbnail(image_bytes((600, 900)), width=300, quality=60)

    with Image.open(BytesIO(thumbnail)) as decoded:
        assert decoded.format == "JPEG"
        assert decoded.size == (300, 450)


def test_make_thumbnail_rejects_garbage() -> None:
    with pytest.raises(ImageDecodeError):
        make_thumbnail(b"nope", width=300, quality=60, name="nope.png")


def test_normalize_jpeg_is_progressive(image_bytes) -> None:
    image = normalize_image(image_bytes((32, 32)), ImageFormat.JPEG, 80)

    with Image.open(BytesIO(image.data)) as decoded:
        assert decoded.info.get("progressive") or decoded.info.get("progression")


@pytest.mark.parametrize(("quality", "level"), [(75, 3), (100, 5)])
def test_normalize_png_saves_with_mapped_compress_level(mocker, image_bytes, quality: int, level: int) -> None:
    source = image_bytes((12, 12), image_format="PNG")
    spy = mocker.spy(Image.Image, "save")

    normalize_image(source, ImageFormat.PNG, quality)

    png_calls = [call for call in spy.call_args_list if call.kwargs.get("format") == "PNG"]
    assert [call.kwargs["compress_level"] for call in png_calls] == [level]


def test_prepare_for_png_narrows_32_bit_integer_mode() -> None:
    prepared = _prepare_for_png(Image.new("I", (4, 4), 1000))

    assert prepared.mode == "I;16"
    assert prepared.getpixel((0, 0)) == 1000


def test_normalize_png_writes_32_bit_integer_source_as_16_bit() -> None:
    buffer = BytesIO()
    Image.new("I", (6, 4), 500).save(buffer, format="TIFF")

    image = normalize_image(buffer.getvalue(), ImageFormat.PNG, 75)

    with Image.open(BytesIO(image.data)) as decoded:
        assert decoded.format == "PNG"
        assert decoded.size == (6, 4)
