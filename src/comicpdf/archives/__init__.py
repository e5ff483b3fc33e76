"""Comic archive readers."""

from comicpdf.archives.entries import IMAGE_EXTENSIONS, is_image_entry
from comicpdf.archives.loader import load_page_order, open_archive
from comicpdf.archives.rar_reader import RarArchiveReader
from comicpdf.archives.zip_reader import ZipArchiveReader
from comicpdf.typing.protocol import ArchiveReader

__all__ = [
    "IMAGE_EXTENSIONS",
    "ArchiveReader",
    "RarArchiveReader",
    "ZipArchiveReader",
    "is_image_entry",
    "load_page_order",
    "open_archive",
]
