"""PDF page composition helpers."""

from __future__ import annotations

import pymupdf

from comicpdf.exceptions import ImageDecodeError
from comicpdf.logging import get_logger
from comicpdf.processing.image_normalization import normalize_image, resolve_image_format
from comicpdf.typing.enums import BackgroundColor
from comicpdf.typing.models import NormalizedImage, Placement

logger = get_logger(__name__)

A4_WIDTH = 595.28
A4_HEIGHT = 841.89


def compute_placement(
    image_width: int,
    image_height: int,
    *,
    canvas_width: float = A4_WIDTH,
    canvas_height: float = A4_HEIGHT,
) -> Placement:
    """Fit an image inside the canvas, preserving aspect ratio, and center it.

    The image first takes the full canvas width; when that makes it taller than
    the canvas it takes the full canvas height instead.

    Args:
        image_width (int): Image width in pixels.
        image_height (int): Image height in pixels.
        canvas_width (float): Canvas width in points.
        canvas_height (float): Canvas height in points.

    Returns:
        Placement: Centered image rectangle in points.
    """
    final_width = canvas_width
    final_height = (canvas_width * image_height) / image_width if image_width > 0 else canvas_height

    if final_height > canvas_height:
        final_height = canvas_height
        final_width = (canvas_height * image_width) / image_height if image_height > 0 else canvas_width

    return Placement(
        x=(canvas_width - final_width) / 2,
        y=(canvas_height - final_height) / 2,
        width=final_width,
        height=final_height,
    )


def new_document() -> pymupdf.Document:
    """Create an empty in-memory PDF document."""
    return pymupdf.open()


def render_page(document: pymupdf.Document, image: NormalizedImage, background: BackgroundColor) -> None:
    """Append one A4 page holding a full-bleed background and the centered image.

    Args:
        document (pymupdf.Document): Target document.
        image (NormalizedImage): Re-encoded image with its pixel size.
        background (BackgroundColor): Page fill.
    """
    placement = compute_placement(image.width, image.height)
    page = document.new_page(width=A4_WIDTH, height=A4_HEIGHT)
    page.draw_rect(page.rect, color=None, fill=BackgroundColor.coerce(background).rgb, width=0)
    page.insert_image(
        pymupdf.Rect(
            placement.x,
            placement.y,
            placement.x + placement.width,
            placement.y + placement.height,
        ),
        stream=image.data,
        keep_proportion=False,
    )


def prepare_page(data: bytes, *, name: str, quality: int, sniff_signature: bool = False) -> NormalizedImage | None:
    """Normalize raw page bytes for embedding.

    Safe to call from worker threads: it touches no PDF document.

    Args:
        data (bytes): Raw image bytes.
        name (str): Entry name.
        quality (int): Encoder quality, 1..100.
        sniff_signature (bool): Pick PNG from the leading bytes instead of the extension.

    Returns:
        NormalizedImage | None: Normalized image, or None when the page is dropped.
    """
    try:
        return normalize_image(
            data,
            resolve_image_format(name, data, sniff_signature=sniff_signature),
            quality,
            name=name,
        )
    except ImageDecodeError as exc:
        logger.warning("Dropping page", extra={"entry": name, "error": str(exc)})
        return None


def append_image_page(
    document: pymupdf.Document,
    image: NormalizedImage,
    *,
    name: str,
    background: BackgroundColor,
) -> bool:
    """Render an already normalized image, dropping the page on embed failure.

    Args:
        document (pymupdf.Document): Target document.
        image (NormalizedImage): Re-encoded image.
        name (str): Entry name.
        background (BackgroundColor): Page fill.

    Returns:
        bool: True when the page was appended, False when it was dropped.
    """
    page_count = document.page_count
    try:
        render_page(document, image, background)
    except Exception as exc:  # noqa: BLE001 - depends on MuPDF internals
        if document.page_count > page_count:
            document.delete_page(-1)
        logger.warning("Dropping page", extra={"entry": name, "error": str(exc)})
        return False
    return True


def document_to_bytes(document: pymupdf.Document) -> bytes:
    """Serialize a document to compressed PDF bytes."""
    return document.tobytes(garbage=3, deflate=True)


def count_pdf_pages(data: bytes) -> int:
    """Return the number of pages of a PDF buffer."""
    with pymupdf.open(stream=data, filetype="pdf") as document:
        return document.page_count
