"""RAR (`.cbr`) archive reader."""

from __future__ import annotations

from io import BytesIO
from typing import TYPE_CHECKING

import rarfile

from comicpdf.archives.entries import is_image_entry
from comicpdf.exceptions import ArchiveDecodeError
from comicpdf.logging import get_logger
from comicpdf.typing.enums import ArchiveFormat

if TYPE_CHECKING:
    from collections.abc import Iterable

logger = get_logger(__name__)


class RarArchiveReader:
    """Read image entries from an in-memory RAR archive.

    Stored members are read directly from the buffer; compressed members are
    decoded by `rarfile` through whichever unrar-compatible tool is installed.
    """

    archive_format = ArchiveFormat.RAR

    def __init__(self, data: bytes, filename: str) -> None:
        """Parse the archive headers.

        Args:
            data (bytes): Archive bytes.
            filename (str): Declared archive filename, for logs and errors.

        Raises:
            ArchiveDecodeError: If the buffer is not a readable RAR archive.
        """
        self.filename = filename
        try:
            self._archive = rarfile.RarFile(BytesIO(data))
            self._infos = self._archive.infolist()
        except (rarfile.Error, OSError, ValueError, EOFError) as exc:
            message = f"Failed to extract RAR archive: {exc}"
            raise ArchiveDecodeError(message=message) from exc

    def list_entries(self) -> list[str]:
        """Return image entry names in archive order."""
        return [info.filename for info in self._infos if not info.is_dir() and is_image_entry(info.filename)]

    def materialize(self, names: Iterable[str]) -> dict[str, bytes]:
        """Decode the requested members only.

        Args:
            names (Iterable[str]): Member names to read.

        Returns:
            dict[str, bytes]: Bytes per member; unreadable members are logged and omitted.
        """
        extracted: dict[str, bytes] = {}
        for name in dict.fromkeys(names):
            try:
                extracted[name] = self._archive.read(name)
            except (rarfile.Error, KeyError, OSError, EOFError) as exc:
                logger.warning(
                    "Failed to read archive entry",
                    extra={"archive": self.filename, "entry": name, "error": str(exc)},
                )
        return extracted
