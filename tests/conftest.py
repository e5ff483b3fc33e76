"""Pytest marker auto-assignment by folder, and in-memory archive builders."""

from __future__ import annotations

import zipfile
from io import BytesIO
from pathlib import Path
from typing import TYPE_CHECKING

import pytest
from PIL import Image

from comicpdf import logger
from comicpdf.settings import Settings

if TYPE_CHECKING:
    from collections.abc import Callable

RED = (220, 20, 20)


def _mark_tests_by_directory(
    config: pytest.Config,
    items: list[pytest.Item],
    marker: str,
) -> None:
    """Mark collected tests located under tests/<marker>/."""
    target_dir = Path(config.rootpath) / "tests" / marker
    target_dir = target_dir.resolve()

    for item in items:
        try:
            path = Path(str(item.fspath)).resolve()
        except OSError:
            logger.warning(
                f"Could not resolve path for test item {item.name!s}; skipping {marker!s} marker assignment",
            )
            continue

        if path == target_dir or target_dir in path.parents:
            item.add_marker(getattr(pytest.mark, marker))


def pytest_collection_modifyitems(
    config: pytest.Config,
    items: list[pytest.Item],
) -> None:
    """Apply directory-based markers to test items."""
    _mark_tests_by_directory(config, items, "unit")
    _mark_tests_by_directory(config, items, "integration")
    _mark_tests_by_directory(config, items, "end2end")


def build_image(
    size: tuple[int, int] = (60, 90),
    *,
    image_format: str = "JPEG",
    mode: str = "RGB",
    color: object = RED,
) -> bytes:
    """Encode a solid image with Pillow."""
    buffer = BytesIO()
    Image.new(mode, size, color).save(buffer, format=image_format)
    return buffer.getvalue()


def build_cbz(entries: dict[str, bytes]) -> bytes:
    """Pack entries into an in-memory ZIP archive, in the given order."""
    buffer = BytesIO()
    with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as archive:
        for name, data in entries.items():
            archive.writestr(name, data)
    return buffer.getvalue()


@pytest.fixture
def image_bytes() -> Callable[..., bytes]:
    return build_image


@pytest.fixture
def cbz_bytes() -> Callable[[dict[str, bytes]], bytes]:
    return build_cbz


@pytest.fixture
def three_page_cbz() -> bytes:
    return build_cbz(
        {
            "page10.jpg": build_image((100, 50)),
            "page2.png": build_image((50, 100), image_format="PNG"),
            "page1.jpg": build_image((60, 90)),
            "notes.txt": b"not an image",
        },
    )


@pytest.fixture
def settings() -> Settings:
    return Settings(max_workers=2, log_json=False)
