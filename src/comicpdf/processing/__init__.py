"""Page ordering and image processing helpers."""

from comicpdf.processing.image_normalization import (
    make_thumbnail,
    normalize_image,
    png_compression_level,
    resolve_image_format,
)
from comicpdf.processing.natural_sort import compare_page_names, natural_sort, sort_page_entries

__all__ = [
    "compare_page_names",
    "make_thumbnail",
    "natural_sort",
    "normalize_image",
    "png_compression_level",
    "resolve_image_format",
    "sort_page_entries",
]
