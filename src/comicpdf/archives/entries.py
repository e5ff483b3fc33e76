"""Entry filtering shared by archive readers."""

from __future__ import annotations

from pathlib import PurePosixPath

IMAGE_EXTENSIONS = frozenset({".jpg", ".jpeg", ".png", ".gif", ".webp"})


def is_image_entry(name: str) -> bool:
    """Return whether an entry name carries a recognized image extension."""
    return PurePosixPath(name.replace("\\", "/")).suffix.lower() in IMAGE_EXTENSIONS
