"""Read-only archive views: page count and thumbnails."""

from __future__ import annotations

import base64
from functools import partial
from typing import TYPE_CHECKING

from comicpdf.archives import load_page_order
from comicpdf.async_runner import map_in_threads
from comicpdf.exceptions import ImageDecodeError
from comicpdf.logging import get_logger, log_context
from comicpdf.processing.image_normalization import make_thumbnail
from comicpdf.settings import Settings, get_settings
from comicpdf.typing.enums import Workflow
from comicpdf.typing.models import PagePreview, PreviewResult

if TYPE_CHECKING:
    from comicpdf.typing.models import ArchiveUpload

logger = get_logger(__name__)

_DATA_URL_PREFIX = "data:image/jpeg;base64,"


def count_pages(upload: ArchiveUpload) -> int:
    """Return the number of image pages of an archive.

    Raises:
        UnknownFormatError: If the archive type cannot be determined.
        ExtractionFailedError: If the archive cannot be decoded.
        NoImagesFoundError: If the archive holds no image.
    """
    with log_context(workflow=Workflow.PAGE_COUNT.to_str(), archive=upload.filename):
        _, entries = load_page_order(upload)
        return len(entries)


def _thumbnail_or_none(data: bytes, *, name: str, width: int, quality: int) -> bytes | None:
    try:
        return make_thumbnail(data, width=width, quality=quality, name=name)
    except ImageDecodeError as exc:
        logger.warning("Skipping preview page", extra={"entry": name, "error": str(exc)})
        return None


def preview_pages(
    upload: ArchiveUpload,
    limit: int | None = None,
    *,
    settings: Settings | None = None,
) -> PreviewResult:
    """Build JPEG thumbnails of the first pages of an archive.

    Args:
        upload (ArchiveUpload): Source archive.
        limit (int | None): Maximum number of thumbnails; defaults to the configured limit.
        settings (Settings | None): Runtime settings.

    Returns:
        PreviewResult: Thumbnails as data URLs, with the archive's total page count.
    """
    config = settings or get_settings()
    max_pages = config.preview_limit if limit is None else max(limit, 0)

    with log_context(workflow=Workflow.PREVIEW.to_str(), archive=upload.filename):
        reader, entries = load_page_order(upload)
        shown = entries[:max_pages]
        extracted = reader.materialize(entry.name for entry in shown)

        names = [entry.name for entry in shown if entry.name in extracted]
        thumbnails = map_in_threads(
            [
                partial(
                    _thumbnail_or_none,
                    extracted[name],
                    name=name,
                    width=config.thumbnail_width,
                    quality=config.thumbnail_quality,
                )
                for name in names
            ],
            limit=config.max_workers,
        )
        pages = [
            PagePreview(image_data=_DATA_URL_PREFIX + base64.b64encode(thumbnail).decode("ascii"))
            for thumbnail in thumbnails
            if thumbnail is not None
        ]
        logger.info("Generated previews", extra={"pages": len(pages), "total_pages": len(entries)})
        return PreviewResult(pages=pages, total_pages=len(entries))
