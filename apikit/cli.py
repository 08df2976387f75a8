"""Command-line entry point.

Usage::

    apikit [--format {auto,text,json}] [--writer NAME] [-v]
           INPUT OUTPUT [INPUT OUTPUT ...]

    python -m apikit raylib_api.json src/ffi.rs rlgl_api.json src/rlgl.rs

Each INPUT description is parsed and rendered completely in memory before
OUTPUT is written in one piece, so a failing pair never creates its output
file. Outputs written by earlier pairs of a failed run are left in place;
the caller must discard them when the exit status is non-zero.

``--link-name``, ``--link-kind`` and ``--epilogue`` are options of the rust
writer, not of the translation: they only change the ``#[link]`` attribute
and append lines after the generated declarations. Their defaults
(``raylib``, ``static``, no epilogue) give the plain generated module.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

from apikit.backends import parse_file
from apikit.errors import ApiDescriptionError
from apikit.writers import DEFAULT_WRITER, get_writer, list_writers

logger = logging.getLogger(__name__)

LOG_LEVEL_ENV = "APIKIT_LOG_LEVEL"


def _log_level(verbosity: int) -> int:
    """Pick the root log level from ``-v`` flags or ``APIKIT_LOG_LEVEL``."""
    if verbosity >= 2:
        return logging.DEBUG
    if verbosity == 1:
        return logging.INFO
    env_level = os.environ.get(LOG_LEVEL_ENV)
    if env_level:
        level = logging.getLevelName(env_level.strip().upper())
        if isinstance(level, int):
            return level
        logging.getLogger(__name__).warning("%s=%r is not a valid log level, ignoring", LOG_LEVEL_ENV, env_level)
    return logging.WARNING


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="apikit",
        description="Compile API descriptions into FFI declarations.",
    )
    parser.add_argument(
        "paths",
        nargs="+",
        metavar="INPUT OUTPUT",
        help="Description file and the file to generate from it; repeat for more pairs",
    )
    parser.add_argument(
        "--format",
        choices=["auto", "text", "json"],
        default="auto",
        help="Description format (default: auto, json for .json files and text otherwise)",
    )
    parser.add_argument(
        "--writer",
        default=DEFAULT_WRITER,
        help=f"Output writer (default: {DEFAULT_WRITER})",
    )
    parser.add_argument("--link-name", default="raylib", help="Library name for the rust writer's #[link]")
    parser.add_argument("--link-kind", default="static", help="Link kind for the rust writer's #[link]")
    parser.add_argument(
        "--epilogue",
        action="append",
        default=[],
        metavar="LINE",
        help="Line appended to the rust writer's output (repeatable)",
    )
    parser.add_argument("-v", "--verbose", action="count", default=0, help="Increase log verbosity")
    return parser


def compile_file(input_path: Path, output_path: Path, fmt: str, writer_options: dict[str, object], writer: str) -> None:
    """Parse one description and write the generated output."""
    api = parse_file(input_path, None if fmt == "auto" else fmt)
    rendered = get_writer(writer, **writer_options).write(api)
    output_path.write_text(rendered, encoding="utf-8")
    logger.info("Wrote %s", output_path)


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(level=_log_level(args.verbose), format="%(levelname)s: %(name)s: %(message)s")

    if len(args.paths) % 2:
        parser.error("expected INPUT OUTPUT pairs, got an odd number of paths")
    if args.writer not in list_writers():
        parser.error(f"unknown writer {args.writer!r} (choose from {', '.join(list_writers())})")

    writer_options: dict[str, object] = {}
    if args.writer == "rust":
        writer_options = {
            "link_name": args.link_name,
            "link_kind": args.link_kind,
            "epilogue": args.epilogue,
        }

    pairs = zip(args.paths[::2], args.paths[1::2])
    for input_name, output_name in pairs:
        try:
            compile_file(Path(input_name), Path(output_name), args.format, writer_options, args.writer)
        except (ApiDescriptionError, OSError) as e:
            print(f"ERROR: {input_name}: {e}", file=sys.stderr)
            return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
