"""Typing-centric domain modules."""

from comicpdf.typing.enums import ArchiveFormat, BackgroundColor, ImageFormat, Workflow
from comicpdf.typing.models import (
    ArchiveUpload,
    ConversionOptions,
    ConversionOutput,
    ConversionResult,
    EditorPage,
    ErrorPayload,
    NormalizedImage,
    PageEntry,
    PagePreview,
    PageSelection,
    Placement,
    PreviewResult,
    SelectedPage,
)
from comicpdf.typing.protocol import ArchiveReader

__all__ = [
    "ArchiveFormat",
    "ArchiveReader",
    "ArchiveUpload",
    "BackgroundColor",
    "ConversionOptions",
    "ConversionOutput",
    "ConversionResult",
    "EditorPage",
    "ErrorPayload",
    "ImageFormat",
    "NormalizedImage",
    "PageEntry",
    "PagePreview",
    "PageSelection",
    "Placement",
    "PreviewResult",
    "SelectedPage",
    "Workflow",
]
