"""comicpdf package."""

from comicpdf.async_runner import map_in_threads, run_async
from comicpdf.exceptions import (
    AllConversionsFailedError,
    AsyncExecutionError,
    DependencyError,
    EditorDataError,
    EmptyDocumentError,
    ExtractionFailedError,
    ImageDecodeError,
    NoImagesFoundError,
    PackageError,
    SettingsError,
    UnknownFormatError,
)
from comicpdf.logging import configure_logging, get_logger
from comicpdf.settings import Settings, get_settings

__version__ = "0.1.0"

# Initialize package logger at import time via `get_logger`.
logger = get_logger("comicpdf")

__all__ = [
    "AllConversionsFailedError",
    "AsyncExecutionError",
    "DependencyError",
    "EditorDataError",
    "EmptyDocumentError",
    "ExtractionFailedError",
    "ImageDecodeError",
    "NoImagesFoundError",
    "PackageError",
    "Settings",
    "SettingsError",
    "UnknownFormatError",
    "__version__",
    "configure_logging",
    "get_logger",
    "get_settings",
    "logger",
    "map_in_threads",
    "run_async",
]
