"""ZIP (`.cbz`) archive reader."""

from __future__ import annotations

import zipfile
import zlib
from io import BytesIO
from typing import TYPE_CHECKING

from comicpdf.archives.entries import is_image_entry
from comicpdf.exceptions import ArchiveDecodeError
from comicpdf.logging import get_logger
from comicpdf.typing.enums import ArchiveFormat

if TYPE_CHECKING:
    from collections.abc import Iterable

logger = get_logger(__name__)


class ZipArchiveReader:
    """Read image entries from an in-memory ZIP archive."""

    archive_format = ArchiveFormat.ZIP

    def __init__(self, data: bytes, filename: str) -> None:
        """Parse the archive directory.

        Args:
            data (bytes): Archive bytes.
            filename (str): Declared archive filename, for logs and errors.

        Raises:
            ArchiveDecodeError: If the buffer is not a readable ZIP archive.
        """
        self.filename = filename
        try:
            self._archive = zipfile.ZipFile(BytesIO(data))
            self._infos = self._archive.infolist()
        except (zipfile.BadZipFile, zipfile.LargeZipFile, OSError, ValueError, EOFError) as exc:
            message = f"Failed to extract ZIP archive: {exc}"
            raise ArchiveDecodeError(message=message) from exc

    def list_entries(self) -> list[str]:
        """Return image entry names in archive order."""
        return [info.filename for info in self._infos if not info.is_dir() and is_image_entry(info.filename)]

    def materialize(self, names: Iterable[str]) -> dict[str, bytes]:
        """Decompress the requested entries only.

        Args:
            names (Iterable[str]): Entry names to read.

        Returns:
            dict[str, bytes]: Bytes per entry; unreadable entries are logged and omitted.
        """
        extracted: dict[str, bytes] = {}
        for name in dict.fromkeys(names):
            try:
                extracted[name] = self._archive.read(name)
            except (KeyError, zipfile.BadZipFile, zlib.error, OSError, RuntimeError, EOFError) as exc:
                logger.warning(
                    "Failed to read archive entry",
                    extra={"archive": self.filename, "entry": name, "error": str(exc)},
                )
        return extracted
