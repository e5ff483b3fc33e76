"""Conversion orchestration."""

from __future__ import annotations

import zipfile
from functools import partial
from io import BytesIO
from pathlib import PurePath
from typing import TYPE_CHECKING

from comicpdf.archives import load_page_order
from comicpdf.async_runner import map_in_threads
from comicpdf.exceptions import AllConversionsFailedError, EmptyDocumentError, PackageError
from comicpdf.logging import get_logger, log_context
from comicpdf.options import coerce_quality, pdf_filename
from comicpdf.pdf_compose import append_image_page, document_to_bytes, new_document, prepare_page
from comicpdf.settings import Settings, get_settings
from comicpdf.typing.enums import BackgroundColor, Workflow
from comicpdf.typing.models import (
    ZIP_MEDIA_TYPE,
    ConversionOptions,
    ConversionOutput,
    ConversionResult,
    PageSelection,
    SelectedPage,
)

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    import pymupdf

    from comicpdf.typing.models import ArchiveUpload, EditorPage, PageEntry
    from comicpdf.typing.protocol import ArchiveReader

logger = get_logger(__name__)

# Normalized images kept in memory per worker before being written to the PDF.
_PAGES_PER_WORKER = 4


def _resolve_options(options: ConversionOptions | None, settings: Settings) -> ConversionOptions:
    """Return caller options, or settings-driven defaults."""
    if options is not None:
        return options
    return ConversionOptions(background_color=settings.default_background, quality=settings.default_quality)


def select_page_range(
    entries: Sequence[PageEntry],
    *,
    archive: str,
    page_start: int | None = None,
    page_end: int | None = None,
    background: BackgroundColor = BackgroundColor.WHITE,
) -> PageSelection:
    """Select a 1-based inclusive page range, clamped into the archive.

    Args:
        entries (Sequence[PageEntry]): Naturally sorted entries.
        archive (str): Archive filename.
        page_start (int | None): First page; defaults to 1.
        page_end (int | None): Last page; defaults to the last page.
        background (BackgroundColor): Background applied to every page.

    Returns:
        PageSelection: Pages in natural order.
    """
    total = len(entries)
    if total == 0:
        return PageSelection(archive=archive, total_pages=0, pages=[])

    end = page_end or total
    end = min(end, total)
    start = max(1, min(page_start or 1, total))
    end = max(start, min(end, total))

    pages = [
        SelectedPage(entry=entries[index], index=index, background_color=background)
        for index in range(start - 1, end)
    ]
    return PageSelection(archive=archive, total_pages=total, pages=pages)


def select_editor_pages(
    entries: Sequence[PageEntry],
    editor_pages: Sequence[EditorPage],
    *,
    archive: str,
) -> PageSelection:
    """Select included pages in editor order, each with its own background.

    Args:
        entries (Sequence[PageEntry]): Naturally sorted entries.
        editor_pages (Sequence[EditorPage]): Editor overrides, in output order.
        archive (str): Archive filename.

    Returns:
        PageSelection: Included pages in editor order.
    """
    pages: list[SelectedPage] = []
    for editor_page in editor_pages:
        if not editor_page.included:
            continue
        if not 0 <= editor_page.index < len(entries):
            logger.warning(
                "Skipping editor page outside the archive",
                extra={"archive": archive, "index": editor_page.index, "total_pages": len(entries)},
            )
            continue
        pages.append(
            SelectedPage(
                entry=entries[editor_page.index],
                index=editor_page.index,
                background_color=editor_page.background_color,
            ),
        )
    return PageSelection(archive=archive, total_pages=len(entries), pages=pages)


def render_selection(  # noqa: PLR0913
    document: pymupdf.Document,
    reader: ArchiveReader,
    selection: PageSelection,
    *,
    quality: int,
    sniff_signature: bool,
    settings: Settings,
) -> int:
    """Extract, normalize and append the selected pages to a document.

    Normalization runs in worker threads; pages are appended by the caller's
    thread in selection order.

    Args:
        document (pymupdf.Document): Target document.
        reader (ArchiveReader): Reader over the source archive.
        selection (PageSelection): Pages to render.
        quality (int): Encoder quality, 1..100.
        sniff_signature (bool): Pick PNG from the leading bytes instead of the extension.
        settings (Settings): Runtime settings.

    Returns:
        int: Number of pages appended.
    """
    extracted = reader.materialize(selection.names)
    present = [page for page in selection.pages if page.entry.name in extracted]
    if len(present) < len(selection.pages):
        logger.warning(
            "Some selected pages could not be extracted",
            extra={"archive": selection.archive, "missing": len(selection.pages) - len(present)},
        )
    logger.info("Extracted images", extra={"archive": selection.archive, "pages": len(present)})

    appended = 0
    chunk_size = settings.max_workers * _PAGES_PER_WORKER
    for offset in range(0, len(present), chunk_size):
        chunk = present[offset : offset + chunk_size]
        images = map_in_threads(
            [
                partial(
                    prepare_page,
                    extracted[page.entry.name],
                    name=page.entry.name,
                    quality=quality,
                    sniff_signature=sniff_signature,
                )
                for page in chunk
            ],
            limit=settings.max_workers,
        )
        for page, image in zip(chunk, images, strict=True):
            if image is None:
                continue
            if append_image_page(document, image, name=page.entry.name, background=page.background_color):
                appended += 1
                logger.debug(
                    "Added page",
                    extra={"page": appended, "entry": page.entry.name, "background": page.background_color.to_str()},
                )
    return appended


def _finish_document(document: pymupdf.Document, filename: str) -> ConversionResult:
    """Serialize a document, refusing to return an empty one."""
    page_count = document.page_count
    if page_count == 0:
        raise EmptyDocumentError(filename=filename)
    return ConversionResult(filename=filename, data=document_to_bytes(document), page_count=page_count)


def _convert_selection(  # noqa: PLR0913
    reader: ArchiveReader,
    selection: PageSelection,
    *,
    filename: str,
    quality: int,
    sniff_signature: bool,
    settings: Settings,
) -> ConversionResult:
    with new_document() as document:
        render_selection(
            document,
            reader,
            selection,
            quality=quality,
            sniff_signature=sniff_signature,
            settings=settings,
        )
        return _finish_document(document, filename)


def convert_single(
    upload: ArchiveUpload,
    options: ConversionOptions | None = None,
    *,
    settings: Settings | None = None,
) -> ConversionResult:
    """Convert one archive, optionally restricted to a page range.

    Args:
        upload (ArchiveUpload): Source archive.
        options (ConversionOptions | None): Background, quality and page range.
        settings (Settings | None): Runtime settings.

    Returns:
        ConversionResult: Rendered PDF.
    """
    config = settings or get_settings()
    resolved = _resolve_options(options, config)

    with log_context(workflow=Workflow.SINGLE.to_str(), archive=upload.filename):
        reader, entries = load_page_order(upload)
        selection = select_page_range(
            entries,
            archive=upload.filename,
            page_start=resolved.page_start,
            page_end=resolved.page_end,
            background=resolved.background_color,
        )
        logger.info(
            "Converting page range",
            extra={
                "first_page": selection.pages[0].index + 1,
                "last_page": selection.pages[-1].index + 1,
                "pages": len(selection.pages),
            },
        )
        result = _convert_selection(
            reader,
            selection,
            filename=pdf_filename(upload.filename),
            quality=resolved.quality,
            sniff_signature=False,
            settings=config,
        )
        logger.info("Conversion completed", extra={"output": result.filename, "pages": result.page_count})
        return result


def convert_each(
    uploads: Sequence[ArchiveUpload],
    options: ConversionOptions | None = None,
    *,
    settings: Settings | None = None,
) -> list[ConversionResult]:
    """Convert every archive independently, skipping the ones that fail.

    Args:
        uploads (Sequence[ArchiveUpload]): Source archives.
        options (ConversionOptions | None): Background and quality; page range is ignored.
        settings (Settings | None): Runtime settings.

    Raises:
        AllConversionsFailedError: If no archive could be converted.

    Returns:
        list[ConversionResult]: One PDF per converted archive, in input order.
    """
    config = settings or get_settings()
    resolved = _resolve_options(options, config)
    results: list[ConversionResult] = []

    logger.info("Starting batch conversion", extra={"files": len(uploads)})
    for position, upload in enumerate(uploads, start=1):
        with log_context(workflow=Workflow.BATCH.to_str(), archive=upload.filename):
            logger.info("Processing archive", extra={"position": position, "files": len(uploads)})
            try:
                reader, entries = load_page_order(upload)
                selection = select_page_range(
                    entries,
                    archive=upload.filename,
                    background=resolved.background_color,
                )
                result = _convert_selection(
                    reader,
                    selection,
                    filename=pdf_filename(upload.filename),
                    quality=resolved.quality,
                    sniff_signature=False,
                    settings=config,
                )
            except PackageError as exc:
                logger.error("Archive conversion failed", extra={"error": str(exc)})  # noqa: TRY400
                continue
            results.append(result)
            logger.info("Archive converted", extra={"output": result.filename, "pages": result.page_count})

    if not results:
        raise AllConversionsFailedError(attempted=len(uploads))
    return results


def _unique_member_names(results: Sequence[ConversionResult]) -> list[str]:
    seen: dict[str, int] = {}
    names: list[str] = []
    for result in results:
        count = seen.get(result.filename, 0) + 1
        seen[result.filename] = count
        if count == 1:
            names.append(result.filename)
            continue
        path = PurePath(result.filename)
        names.append(f"{path.stem}-{count}{path.suffix}")
    return names


def bundle_batch(results: Sequence[ConversionResult], *, settings: Settings | None = None) -> ConversionOutput:
    """Package batch results: one PDF as-is, several PDFs as one ZIP.

    Args:
        results (Sequence[ConversionResult]): Converted PDFs.
        settings (Settings | None): Runtime settings.

    Raises:
        AllConversionsFailedError: If `results` is empty.

    Returns:
        ConversionOutput: PDF or ZIP deliverable.
    """
    if not results:
        raise AllConversionsFailedError(attempted=0)
    if len(results) == 1:
        return ConversionOutput.from_result(results[0])

    config = settings or get_settings()
    buffer = BytesIO()
    with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED, compresslevel=9) as archive:
        for name, result in zip(_unique_member_names(results), results, strict=True):
            archive.writestr(name, result.data)
    logger.info("Batch PDFs packed in ZIP", extra={"files": len(results), "output": config.batch_archive_name})
    return ConversionOutput(filename=config.batch_archive_name, media_type=ZIP_MEDIA_TYPE, data=buffer.getvalue())


def convert_batch(
    uploads: Sequence[ArchiveUpload],
    options: ConversionOptions | None = None,
    *,
    settings: Settings | None = None,
) -> ConversionOutput:
    """Convert archives independently and bundle the successes.

    Args:
        uploads (Sequence[ArchiveUpload]): Source archives.
        options (ConversionOptions | None): Background and quality.
        settings (Settings | None): Runtime settings.

    Returns:
        ConversionOutput: A single PDF, or a ZIP when several archives converted.
    """
    config = settings or get_settings()
    return bundle_batch(convert_each(uploads, options, settings=config), settings=config)


def convert_combined(
    uploads: Sequence[ArchiveUpload],
    options: ConversionOptions | None = None,
    *,
    settings: Settings | None = None,
) -> ConversionResult:
    """Merge the pages of every archive into one PDF, in input order.

    Args:
        uploads (Sequence[ArchiveUpload]): Source archives.
        options (ConversionOptions | None): Background and quality; page range is ignored.
        settings (Settings | None): Runtime settings.

    Returns:
        ConversionResult: Combined PDF.
    """
    config = settings or get_settings()
    resolved = _resolve_options(options, config)

    logger.info("Starting combination", extra={"files": len(uploads)})
    with new_document() as document:
        for position, upload in enumerate(uploads, start=1):
            with log_context(workflow=Workflow.COMBINE.to_str(), archive=upload.filename):
                logger.info("Processing archive", extra={"position": position, "files": len(uploads)})
                try:
                    reader, entries = load_page_order(upload)
                except PackageError as exc:
                    logger.error("Archive skipped", extra={"error": str(exc)})  # noqa: TRY400
                    continue
                selection = select_page_range(
                    entries,
                    archive=upload.filename,
                    background=resolved.background_color,
                )
                added = render_selection(
                    document,
                    reader,
                    selection,
                    quality=resolved.quality,
                    sniff_signature=False,
                    settings=config,
                )
                logger.info("Added pages", extra={"pages": added})

        return _finish_document(document, config.combined_filename)


def convert_single_with_editor(
    upload: ArchiveUpload,
    editor_pages: Sequence[EditorPage],
    quality: object = None,
    *,
    settings: Settings | None = None,
) -> ConversionResult:
    """Convert the pages chosen in the editor, in editor order.

    Args:
        upload (ArchiveUpload): Source archive.
        editor_pages (Sequence[EditorPage]): Per-page inclusion and background.
        quality (object): Encoder quality; defaults when absent or non-numeric.
        settings (Settings | None): Runtime settings.

    Returns:
        ConversionResult: Rendered PDF.
    """
    config = settings or get_settings()
    resolved_quality = coerce_quality(quality, default=config.default_quality)

    with log_context(workflow=Workflow.SINGLE_EDITOR.to_str(), archive=upload.filename):
        reader, entries = load_page_order(upload)
        selection = select_editor_pages(entries, editor_pages, archive=upload.filename)
        logger.info(
            "Converting selected pages",
            extra={"pages": len(selection.pages), "total_pages": selection.total_pages},
        )
        result = _convert_selection(
            reader,
            selection,
            filename=pdf_filename(upload.filename),
            quality=resolved_quality,
            sniff_signature=True,
            settings=config,
        )
        logger.info("Editor conversion completed", extra={"output": result.filename, "pages": result.page_count})
        return result


def convert_combined_with_editor(
    uploads: Sequence[ArchiveUpload],
    editor_data: Mapping[str, Sequence[EditorPage]],
    quality: object = None,
    *,
    settings: Settings | None = None,
) -> ConversionResult:
    """Merge editor-selected pages of several archives into one PDF.

    Archives without an entry in `editor_data` are skipped, not defaulted to
    all pages.

    Args:
        uploads (Sequence[ArchiveUpload]): Source archives.
        editor_data (Mapping[str, Sequence[EditorPage]]): Editor overrides by archive filename.
        quality (object): Encoder quality; defaults when absent or non-numeric.
        settings (Settings | None): Runtime settings.

    Returns:
        ConversionResult: Combined PDF.
    """
    config = settings or get_settings()
    resolved_quality = coerce_quality(quality, default=config.default_quality)

    logger.info("Starting combination with editor settings", extra={"files": len(uploads)})
    with new_document() as document:
        for position, upload in enumerate(uploads, start=1):
            with log_context(workflow=Workflow.COMBINE_EDITOR.to_str(), archive=upload.filename):
                editor_pages = editor_data.get(upload.filename)
                if editor_pages is None:
                    logger.warning("No editor data for archive, skipping")
                    continue

                logger.info("Processing archive", extra={"position": position, "files": len(uploads)})
                try:
                    reader, entries = load_page_order(upload)
                except PackageError as exc:
                    logger.error("Archive skipped", extra={"error": str(exc)})  # noqa: TRY400
                    continue
                selection = select_editor_pages(entries, editor_pages, archive=upload.filename)
                added = render_selection(
                    document,
                    reader,
                    selection,
                    quality=resolved_quality,
                    sniff_signature=True,
                    settings=config,
                )
                logger.info("Added pages", extra={"pages": added, "total_pages": selection.total_pages})

        return _finish_document(document, config.combined_edited_filename)
