"""Re-encoding of page images into PDF-embeddable PNG or JPEG."""

from __future__ import annotations

from io import BytesIO
from pathlib import PurePosixPath

from PIL import Image, UnidentifiedImageError

from comicpdf.exceptions import ImageDecodeError
from comicpdf.typing.enums import ImageFormat
from comicpdf.typing.models import NormalizedImage

PNG_SIGNATURE_PREFIX = b"\x89P"

_PNG_MODES = frozenset({"1", "L", "LA", "P", "RGB", "RGBA", "I;16"})
_JPEG_MODES = frozenset({"L", "RGB", "CMYK"})


def png_compression_level(quality: int) -> int:
    """Map a 1..100 quality to a 0..5 zlib compression level."""
    return quality // 20


def resolve_image_format(name: str, data: bytes, *, sniff_signature: bool = False) -> ImageFormat:
    """Choose the canonical encoding for an entry.

    Args:
        name (str): Entry name.
        data (bytes): Raw entry bytes.
        sniff_signature (bool): Decide from the leading bytes instead of the extension.

    Returns:
        ImageFormat: PNG for PNG sources, JPEG for everything else.
    """
    if sniff_signature:
        is_png = data[:2] == PNG_SIGNATURE_PREFIX
    else:
        is_png = PurePosixPath(name.replace("\\", "/")).suffix.lower() == ".png"
    return ImageFormat.PNG if is_png else ImageFormat.JPEG


def _prepare_for_png(image: Image.Image) -> Image.Image:
    if image.mode in _PNG_MODES:
        return image
    if image.mode == "I":
        # 32-bit integer pixels are written as 16-bit grayscale.
        return image.convert("I;16")
    return image.convert("RGBA")


def _prepare_for_jpeg(image: Image.Image) -> Image.Image:
    if image.mode in _JPEG_MODES:
        return image
    if image.mode in {"RGBA", "LA", "PA"} or (image.mode == "P" and "transparency" in image.info):
        rgba = image.convert("RGBA")
        flattened = Image.new("RGB", rgba.size, (255, 255, 255))
        flattened.paste(rgba, mask=rgba.getchannel("A"))
        return flattened
    return image.convert("RGB")


def _encode(image: Image.Image, image_format: ImageFormat, quality: int) -> bytes:
    buffer = BytesIO()
    if image_format is ImageFormat.PNG:
        _prepare_for_png(image).save(buffer, format="PNG", compress_level=png_compression_level(quality))
    else:
        _prepare_for_jpeg(image).save(buffer, format="JPEG", quality=quality, progressive=True)
    return buffer.getvalue()


def normalize_image(
    data: bytes,
    image_format: ImageFormat,
    quality: int,
    *,
    name: str = "<image>",
) -> NormalizedImage:
    """Re-encode raw page bytes and read back their pixel size.

    Animated sources contribute their first frame.

    Args:
        data (bytes): Raw image bytes.
        image_format (ImageFormat): Target encoding.
        quality (int): Encoder quality, 1..100.
        name (str): Entry name, used in error messages.

    Raises:
        ImageDecodeError: If the bytes cannot be decoded or re-encoded.

    Returns:
        NormalizedImage: Encoded bytes with their true width and height.
    """
    try:
        with Image.open(BytesIO(data)) as source:
            source.seek(0)
            source.load()
            encoded = _encode(source, image_format, quality)
        with Image.open(BytesIO(encoded)) as reopened:
            width, height = reopened.size
    except (UnidentifiedImageError, OSError, ValueError, SyntaxError, Image.DecompressionBombError) as exc:
        raise ImageDecodeError(name=name, message=str(exc)) from exc

    return NormalizedImage(data=encoded, image_format=image_format, width=width, height=height)


def make_thumbnail(data: bytes, *, width: int, quality: int, name: str = "<image>") -> bytes:
    """Resize an image to a fixed width, keeping its aspect ratio, as JPEG.

    Args:
        data (bytes): Raw image bytes.
        width (int): Target width in pixels.
        quality (int): JPEG quality.
        name (str): Entry name, used in error messages.

    Raises:
        ImageDecodeError: If the bytes cannot be decoded.

    Returns:
        bytes: JPEG thumbnail.
    """
    try:
        with Image.open(BytesIO(data)) as source:
            source.seek(0)
            source.load()
            height = max(1, round(source.height * width / source.width)) if source.width else width
            resized = _prepare_for_jpeg(source).resize((width, height), Image.Resampling.LANCZOS)
        buffer = BytesIO()
        resized.save(buffer, format="JPEG", quality=quality)
    except (UnidentifiedImageError, OSError, ValueError, SyntaxError, Image.DecompressionBombError) as exc:
        raise ImageDecodeError(name=name, message=str(exc)) from exc
    return buffer.getvalue()
