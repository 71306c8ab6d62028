"""
Command-line interface: assemble photographs into a PDF.

Usage:
    docscan scan.pdf page1.jpg page2.jpg
    docscan scan.pdf --from-dir captures/ --page-size letter --title "Receipts"
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from docscan_toolkit import __version__
from docscan_toolkit.assembler import (
    AssemblyConfig,
    PlacementPolicy,
    assemble,
    output_path_lock,
)
from docscan_toolkit.capture import ImageStore
from docscan_toolkit.core.errors import AssemblyError, EmptyInput
from docscan_toolkit.core.models import PageSize

logger = logging.getLogger("docscan")

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_EMPTY = 2

CAPTURE_SUFFIXES = (".jpg", ".jpeg")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="docscan",
        description="Assemble captured photographs into a multi-page PDF, one page per image.",
    )
    parser.add_argument("output", type=Path, help="Path of the PDF to write (replaced if it exists)")
    parser.add_argument("images", nargs="*", type=Path, help="Image files in page order")
    parser.add_argument(
        "--from-dir",
        type=Path,
        help="Also add *.jpg/*.jpeg files from this directory, sorted by name",
    )
    parser.add_argument(
        "--page-size",
        type=PageSize.parse,
        default=PageSize.parse("a4"),
        help="Page size: a4, letter or WIDTHxHEIGHT in points (default: a4)",
    )
    parser.add_argument(
        "--origin",
        action="store_true",
        help="Place images at the page origin instead of centering them",
    )
    parser.add_argument("--max-scale", type=float, help="Do not upscale images beyond this factor")
    parser.add_argument("--title", help="Document title metadata")
    parser.add_argument("--author", help="Document author metadata")
    parser.add_argument(
        "--no-wait",
        action="store_true",
        help="Fail instead of waiting when another assembly holds the output path",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def collect_images(paths: Sequence[Path], from_dir: Optional[Path]) -> ImageStore:
    """Append command-line images (then directory images) to a new store."""
    store = ImageStore()
    for path in paths:
        store.add_file(path)
    
    if from_dir is not None:
        found: List[Path] = sorted(
            p for p in from_dir.iterdir()
            if p.is_file() and p.suffix.lower() in CAPTURE_SUFFIXES
        )
        logger.debug(f"Found {len(found)} images in {from_dir}")
        for path in found:
            store.add_file(path)
    return store


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )
    
    try:
        config = AssemblyConfig(
            page_size=args.page_size,
            placement_policy=PlacementPolicy.ORIGIN if args.origin else PlacementPolicy.CENTER,
            max_scale=args.max_scale,
            title=args.title,
            author=args.author,
        )
    except ValueError as e:
        parser.error(str(e))
    
    try:
        if args.from_dir is not None and not args.from_dir.is_dir():
            parser.error(f"--from-dir is not a directory: {args.from_dir}")
        store = collect_images(args.images, args.from_dir)
        images = store.snapshot()
        if not images:
            # Checked before locking so nothing is written beside the output
            raise EmptyInput()
        
        with output_path_lock(args.output, wait=not args.no_wait):
            result = assemble(images, args.output, config=config)
    except EmptyInput as e:
        print(f"docscan: {e}", file=sys.stderr)
        return EXIT_EMPTY
    except AssemblyError as e:
        print(f"docscan: {e}", file=sys.stderr)
        return EXIT_FAILED
    
    for warning in result.warnings:
        print(f"warning: {warning}", file=sys.stderr)
    print(f"PDF created: {result.output_path} ({result.page_count} pages)")
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
