"""Conversion options, intermediate images and deliverables."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from comicpdf.options import DEFAULT_QUALITY, coerce_page_number, coerce_quality
from comicpdf.typing.enums import BackgroundColor, ImageFormat

PDF_MEDIA_TYPE = "application/pdf"
ZIP_MEDIA_TYPE = "application/zip"


class ConversionOptions(BaseModel):
    """Archive-wide rendering options."""

    model_config = ConfigDict(extra="forbid")

    background_color: BackgroundColor = BackgroundColor.WHITE
    quality: int = Field(default=DEFAULT_QUALITY, ge=1, le=100)
    page_start: int | None = None
    page_end: int | None = None

    @field_validator("background_color", mode="before")
    @classmethod
    def _coerce_background(cls, value: object) -> BackgroundColor:
        """Map absent or unknown colors to white."""
        return BackgroundColor.coerce(value)

    @field_validator("quality", mode="before")
    @classmethod
    def _coerce_quality(cls, value: object) -> int:
        """Apply the default quality to missing or non-numeric input."""
        return coerce_quality(value)

    @field_validator("page_start", "page_end", mode="before")
    @classmethod
    def _coerce_page(cls, value: object) -> int | None:
        """Parse 1-based page bounds."""
        return coerce_page_number(value)


class NormalizedImage(BaseModel):
    """Re-encoded page image with its authoritative pixel size."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    data: bytes = Field(repr=False)
    image_format: ImageFormat
    width: int = Field(ge=0)
    height: int = Field(ge=0)


class Placement(BaseModel):
    """Image rectangle on the page canvas, in points."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    x: float
    y: float
    width: float
    height: float


class ConversionResult(BaseModel):
    """One rendered PDF."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    filename: str
    data: bytes = Field(repr=False)
    page_count: int = Field(ge=0)


class ConversionOutput(BaseModel):
    """Deliverable returned to the caller: one PDF or a ZIP of PDFs."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    filename: str
    media_type: str
    data: bytes = Field(repr=False)

    @classmethod
    def from_result(cls, result: ConversionResult) -> ConversionOutput:
        """Wrap a single PDF result."""
        return cls(filename=result.filename, media_type=PDF_MEDIA_TYPE, data=result.data)


class PagePreview(BaseModel):
    """Thumbnail for one page, as a data URL."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    image_data: str = Field(serialization_alias="imageData")


class PreviewResult(BaseModel):
    """Thumbnails for the editor plus the archive page count."""

    model_config = ConfigDict(extra="forbid")

    pages: list[PagePreview]
    total_pages: int = Field(ge=0, serialization_alias="totalPages")


class ErrorPayload(BaseModel):
    """Structured terminal failure."""

    model_config = ConfigDict(extra="forbid")

    error: str

    @classmethod
    def from_exception(cls, exc: BaseException, default: str = "Conversion failed") -> ErrorPayload:
        """Build the payload from an exception message."""
        return cls(error=str(exc) or default)
