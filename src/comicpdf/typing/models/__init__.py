"""Core domain model exports."""

from comicpdf.typing.models.archive import ArchiveUpload, PageEntry
from comicpdf.typing.models.conversion import (
    PDF_MEDIA_TYPE,
    ZIP_MEDIA_TYPE,
    ConversionOptions,
    ConversionOutput,
    ConversionResult,
    ErrorPayload,
    NormalizedImage,
    PagePreview,
    Placement,
    PreviewResult,
)
from comicpdf.typing.models.page_selection import (
    EditorPage,
    PageSelection,
    SelectedPage,
    parse_combination_editor_data,
    parse_editor_pages,
)

__all__ = [
    "PDF_MEDIA_TYPE",
    "ZIP_MEDIA_TYPE",
    "ArchiveUpload",
    "ConversionOptions",
    "ConversionOutput",
    "ConversionResult",
    "EditorPage",
    "ErrorPayload",
    "NormalizedImage",
    "PageEntry",
    "PagePreview",
    "PageSelection",
    "Placement",
    "PreviewResult",
    "SelectedPage",
    "parse_combination_editor_data",
    "parse_editor_pages",
]
