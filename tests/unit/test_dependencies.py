from __future__ import annotations

import pytest

from comicpdf.dependencies import ensure_package_dependencies, has_rar_backend
from comicpdf.exceptions import DependencyError


def test_ensure_package_dependencies_succeeds(monkeypatch) -> None:
    monkeypatch.setattr("comicpdf.dependencies._is_module_available", lambda module_name: True)
    ensure_package_dependencies()


def test_ensure_package_dependencies_raises(monkeypatch) -> None:
    monkeypatch.setattr("comicpdf.dependencies._is_module_available", lambda module_name: module_name != "rarfile")
    with pytest.raises(DependencyError, match="Missing runtime dependencies for 'conversion': rarfile"):
        ensure_package_dependencies()


def test_has_rar_backend_checks_path(monkeypatch) -> None:
    monkeypatch.setattr("comicpdf.dependencies.shutil.which", lambda tool: "/usr/bin/unar" if tool == "unar" else None)
    assert has_rar_backend() is True

    monkeypatch.setattr("comicpdf.dependencies.shutil.which", lambda tool: None)
    assert has_rar_backend() is False
