"""Runtime dependency checks for CLI commands."""

from __future__ import annotations

import importlib.util
import shutil

from comicpdf.exceptions import DependencyError

_RAR_TOOLS = ("unrar", "unar", "bsdtar", "7z")


def _is_module_available(module_name: str) -> bool:
    """Check whether a module can be imported.

    Args:
        module_name (str): Python module name.

    Returns:
        bool: True if import spec exists.
    """
    return importlib.util.find_spec(module_name) is not None


def _collect_missing_dependencies(modules_by_package: dict[str, str]) -> list[str]:
    """Collect missing packages for a module mapping.

    Args:
        modules_by_package (Mapping[str, str]): Mapping of package name -> import module.

    Returns:
        list[str]: Missing package names.
    """
    return [package for package, module in modules_by_package.items() if not _is_module_available(module)]


def ensure_package_dependencies() -> None:
    """Validate the libraries the conversion pipeline imports.

    Raises:
        DependencyError: If required runtime dependencies are missing.
    """
    missing = _collect_missing_dependencies(
        {
            "pymupdf": "pymupdf",
            "pillow": "PIL",
            "rarfile": "rarfile",
        },
    )
    if missing:
        raise DependencyError(missing_package=missing, message="conversion")


def has_rar_backend() -> bool:
    """Return whether an external tool able to decompress RAR members is on PATH."""
    return any(shutil.which(tool) for tool in _RAR_TOOLS)
