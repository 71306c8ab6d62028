"""
Module: assembler.controller

Purpose:
    Orchestrate document assembly.
    Validate → (Read → Probe → Compose → Write) per image → Finalize

    Fail-fast: the first error aborts the whole assembly, the partially
    written file is discarded, and the error propagates to the caller.
    Invocations against the same output path must be serialized by the
    caller (see assembler.output.locking).

Key Functions:
    - assemble(): Main entry point

Key Classes:
    - AssemblyResult: Outcome of a successful assembly

Dependencies:
    - assembler.images: Byte reading and header probing
    - assembler.layout: Page composition
    - assembler.output: PDF writer

Used By:
    - assembler.runner: Background execution
    - cli: Command-line interface
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from docscan_toolkit.core.errors import AssemblyCancelled, AssemblyError, EmptyInput
from docscan_toolkit.core.models import CapturedImage, Document, Page, PageSize, Placement

from .config import AssemblyConfig
from .images import probe_image, read_image_bytes
from .layout import compose_page
from .output import DocumentWriter

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]


@dataclass(frozen=True)
class AssemblyResult:
    """
    Outcome of a successful assembly (immutable).
    
    Attributes:
        output_path: Path of the written document
        page_count: Number of pages written
        placements: Placement of each page, in page order
        elapsed_seconds: Wall-clock duration of the assembly
        warnings: Non-fatal anomalies noticed during assembly
        
    Example:
        >>> result = assemble(images, Path("scan.pdf"))
        >>> print(f"Wrote {result.page_count} pages to {result.output_path}")
    """
    output_path: Path
    page_count: int
    placements: tuple[Placement, ...]
    elapsed_seconds: float
    warnings: tuple[str, ...] = ()


def assemble(
    images: Sequence[CapturedImage],
    output_path: Path,
    page_size: Optional[PageSize] = None,
    *,
    config: Optional[AssemblyConfig] = None,
    cancel_event: Optional[threading.Event] = None,
    progress: Optional[ProgressCallback] = None,
) -> AssemblyResult:
    """
    Assemble images into a multi-page PDF, one page per image.
    
    Pipeline:
    1. Reject empty input (no filesystem access)
    2. Open the writer on a temporary file beside output_path
    3. For each image in order: read bytes, probe header, compose, add page
    4. Finalize: write trailer and move the file onto output_path
    
    Args:
        images: Ordered images, typically an ImageStore snapshot
        output_path: Destination file (replaced entirely on success)
        page_size: Page size override (defaults to config.page_size)
        config: Assembly configuration
        cancel_event: Set by the caller to stop between images
        progress: Called with (pages_done, total) after each page
        
    Returns:
        AssemblyResult describing the written document
        
    Raises:
        EmptyInput: If images is empty
        ImageReadError: If an image source cannot be read
        ImageDecodeError: If an image is corrupt or unsupported
        InvalidImageDimensions: If a composed size is not positive
        WriteError: If the output cannot be written
        AssemblyCancelled: If cancel_event was set
    """
    config = config or AssemblyConfig()
    page_size = page_size or config.page_size
    output_path = Path(output_path)
    
    # Snapshot so later mutation by the caller cannot affect this run
    images = tuple(images)
    if not images:
        raise EmptyInput()
    
    total = len(images)
    warnings: List[str] = []
    pages: List[Page] = []
    start_time = time.perf_counter()
    
    logger.info(f"Assembling {total} images into {output_path}")
    
    try:
        with DocumentWriter.open(output_path, title=config.title, author=config.author) as writer:
            for image in images:
                _check_cancelled(cancel_event, len(pages), total)
                
                data = read_image_bytes(image)
                info = probe_image(data, image.identifier)
                if (info.width, info.height) != (image.width, image.height):
                    message = (
                        f"{image.identifier}: declared size {image.width}x{image.height} "
                        f"differs from encoded size {info.width}x{info.height}; using encoded size"
                    )
                    logger.warning(message)
                    warnings.append(message)
                
                placement = compose_page(
                    info.width,
                    info.height,
                    page_size,
                    policy=config.placement_policy,
                    max_scale=config.max_scale,
                )
                writer.add_page(data, placement, page_size, identifier=image.identifier)
                pages.append(Page(image=image, placement=placement, page_size=page_size))
                
                if progress is not None:
                    progress(len(pages), total)
            
            _check_cancelled(cancel_event, len(pages), total)
            writer.finalize()
    except AssemblyError as e:
        logger.error(f"Assembly of {output_path} failed after {len(pages)}/{total} pages: {e}")
        raise
    
    document = Document(pages=tuple(pages), output_path=output_path)
    elapsed = time.perf_counter() - start_time
    logger.info(f"Assembled {document.page_count} pages in {elapsed:.2f}s")
    
    return AssemblyResult(
        output_path=document.output_path,
        page_count=document.page_count,
        placements=document.placements,
        elapsed_seconds=elapsed,
        warnings=tuple(warnings),
    )


def _check_cancelled(
    cancel_event: Optional[threading.Event],
    pages_written: int,
    total: int,
) -> None:
    if cancel_event is not None and cancel_event.is_set():
        logger.info(f"Cancellation requested after {pages_written}/{total} pages")
        raise AssemblyCancelled(pages_written, total)
