from __future__ import annotations

import pytest
import structlog

from comicpdf import logger as package_logger
from comicpdf.exceptions import NoImagesFoundError
from comicpdf.logging import configure_logging, get_logger, log_context
from comicpdf.settings import Settings


def test_stdlib_logger_is_configured(capsys) -> None:
    configure_logging(settings=Settings(log_json=False, log_level="INFO"), force=True)
    logger = get_logger("tests")
    logger.info("hello")

    captured = capsys.readouterr()
    assert "hello" in captured.err.lower()


def test_extra_payload_and_context_are_rendered(capsys) -> None:
    configure_logging(settings=Settings(log_json=True, log_level="INFO"), force=True)
    logger = get_logger("tests.context")

    with log_context(workflow="single", archive="issue.cbz"):
        logger.info("Found images", extra={"pages": 3})

    captured = capsys.readouterr()
    assert '"archive": "issue.cbz"' in captured.err
    assert '"pages": 3' in captured.err
    assert '"message": "Found images"' in captured.err


def test_log_context_restores_previous_values_after_errors() -> None:
    with pytest.raises(NoImagesFoundError), log_context(archive="issue.cbz"):
        raise NoImagesFoundError(filename="issue.cbz")

    assert "archive" not in structlog.contextvars.get_contextvars()


def test_package_logger_created_on_import() -> None:
    assert callable(getattr(package_logger, "info", None))
