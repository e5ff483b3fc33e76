"""CLI entry point for comicpdf."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from comicpdf import __version__, logger
from comicpdf.converter import (
    convert_batch,
    convert_combined,
    convert_combined_with_editor,
    convert_single,
    convert_single_with_editor,
)
from comicpdf.dependencies import ensure_package_dependencies, has_rar_backend
from comicpdf.exceptions import PackageError
from comicpdf.logging import configure_logging
from comicpdf.options import coerce_quality
from comicpdf.preview import count_pages, preview_pages
from comicpdf.settings import get_settings
from comicpdf.typing.models import (
    ArchiveUpload,
    ConversionOptions,
    ErrorPayload,
    parse_combination_editor_data,
    parse_editor_pages,
)

if TYPE_CHECKING:
    from comicpdf.settings import Settings


def _read_upload(path: Path) -> ArchiveUpload:
    """Load an archive from disk.

    Args:
        path (Path): Archive path.

    Returns:
        ArchiveUpload: Archive bytes keyed by the file's basename.
    """
    return ArchiveUpload(filename=path.name, data=path.read_bytes())


def _add_render_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--background", default=None, dest="background")
    parser.add_argument("--quality", default=None, dest="quality")


def build_parser() -> argparse.ArgumentParser:
    """Create the command-line parser.

    Returns:
        argparse.ArgumentParser: The configured argument parser.
    """
    parser = argparse.ArgumentParser(prog="comicpdf")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    subparsers = parser.add_subparsers(dest="command")

    convert_parser = subparsers.add_parser("convert", help="Convert one CBR/CBZ archive to PDF")
    convert_parser.add_argument("input_path", type=Path)
    convert_parser.add_argument("--output", type=Path, default=None, dest="output_path")
    _add_render_arguments(convert_parser)
    convert_parser.add_argument("--page-start", default=None, dest="page_start")
    convert_parser.add_argument("--page-end", default=None, dest="page_end")
    convert_parser.add_argument("--editor-data", type=Path, default=None, dest="editor_data")

    batch_parser = subparsers.add_parser("batch", help="Convert several archives to one PDF each")
    batch_parser.add_argument("input_paths", type=Path, nargs="+")
    batch_parser.add_argument("--output-dir", type=Path, default=Path(), dest="output_dir")
    _add_render_arguments(batch_parser)

    combine_parser = subparsers.add_parser("combine", help="Merge several archives into one PDF")
    combine_parser.add_argument("input_paths", type=Path, nargs="+")
    combine_parser.add_argument("--output", type=Path, default=None, dest="output_path")
    _add_render_arguments(combine_parser)
    combine_parser.add_argument("--editor-data", type=Path, default=None, dest="editor_data")

    pages_parser = subparsers.add_parser("pages", help="Print the page count of an archive")
    pages_parser.add_argument("input_path", type=Path)

    preview_parser = subparsers.add_parser("preview", help="Write page thumbnails as JSON")
    preview_parser.add_argument("input_path", type=Path)
    preview_parser.add_argument("--output", type=Path, default=None, dest="output_path")
    preview_parser.add_argument("--limit", type=int, default=None, dest="limit")

    return parser


def _build_options(args: argparse.Namespace, settings: Settings) -> ConversionOptions:
    """Build conversion options from CLI arguments.

    Args:
        args (argparse.Namespace): Parsed CLI args.
        settings (Settings): Runtime settings providing defaults.

    Returns:
        ConversionOptions: Options object.
    """
    return ConversionOptions(
        background_color=args.background if args.background is not None else settings.default_background,
        quality=coerce_quality(args.quality, default=settings.default_quality),
        page_start=getattr(args, "page_start", None),
        page_end=getattr(args, "page_end", None),
    )


def _write_output(data: bytes, output_path: Path) -> Path:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_bytes(data)
    logger.info("Output written", extra={"output_path": str(output_path)})
    return output_path


def _run_convert(args: argparse.Namespace, settings: Settings) -> None:
    upload = _read_upload(args.input_path)
    if args.editor_data is not None:
        editor_pages = parse_editor_pages(args.editor_data.read_bytes())
        result = convert_single_with_editor(upload, editor_pages, args.quality, settings=settings)
    else:
        result = convert_single(upload, _build_options(args, settings), settings=settings)
    _write_output(result.data, args.output_path or args.input_path.parent / result.filename)


def _run_batch(args: argparse.Namespace, settings: Settings) -> None:
    uploads = [_read_upload(path) for path in args.input_paths]
    output = convert_batch(uploads, _build_options(args, settings), settings=settings)
    _write_output(output.data, args.output_dir / output.filename)


def _run_combine(args: argparse.Namespace, settings: Settings) -> None:
    uploads = [_read_upload(path) for path in args.input_paths]
    if args.editor_data is not None:
        editor_data = parse_combination_editor_data(args.editor_data.read_bytes())
        result = convert_combined_with_editor(uploads, editor_data, args.quality, settings=settings)
    else:
        result = convert_combined(uploads, _build_options(args, settings), settings=settings)
    _write_output(result.data, args.output_path or Path(result.filename))


def _run_pages(args: argparse.Namespace, settings: Settings) -> None:  # noqa: ARG001
    total = count_pages(_read_upload(args.input_path))
    _print_json({"totalPages": total})


def _run_preview(args: argparse.Namespace, settings: Settings) -> None:
    result = preview_pages(_read_upload(args.input_path), args.limit, settings=settings)
    payload = result.model_dump_json(by_alias=True)
    if args.output_path is None:
        sys.stdout.write(payload + "\n")
        return
    _write_output(payload.encode("utf-8"), args.output_path)


def _print_json(payload: dict[str, object]) -> None:
    sys.stdout.write(json.dumps(payload) + "\n")


_COMMANDS = {
    "convert": _run_convert,
    "batch": _run_batch,
    "combine": _run_combine,
    "pages": _run_pages,
    "preview": _run_preview,
}


def main(argv: list[str] | None = None) -> int:
    """Run the CLI.

    Args:
        argv (list[str] | None): Arguments; defaults to `sys.argv[1:]`.

    Returns:
        int: Exit code (0 for success, 1 for error).
    """
    settings = get_settings()
    configure_logging(settings=settings)

    parser = build_parser()
    args = parser.parse_args(argv)

    command = _COMMANDS.get(args.command)
    if command is None:
        parser.print_help()
        return 0

    try:
        ensure_package_dependencies()
        if not has_rar_backend():
            logger.warning("No RAR extraction tool found on PATH; CBR archives may fail to convert")
        command(args, settings)
    except PackageError as exc:
        logger.exception("Command failed", extra={"command": args.command})
        _print_json(ErrorPayload.from_exception(exc).model_dump())
        return 1
    except KeyboardInterrupt:
        logger.info("Command aborted by user")
        return 130
    except Exception as exc:
        logger.exception("Unexpected error", extra={"command": args.command})
        _print_json(ErrorPayload.from_exception(exc).model_dump())
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
