"""
Module: core.errors

Purpose:
    Exception taxonomy for document assembly. Every failure the pipeline
    can report derives from AssemblyError so callers can catch one type.

Key Classes:
    - AssemblyError: Base class
    - EmptyInput: No images supplied
    - ImageReadError: Encoded bytes could not be read
    - ImageDecodeError: Corrupt/unsupported encoding or bad header size
    - InvalidImageDimensions: Width or height is not positive
    - WriteError: Output file could not be written
    - AssemblyCancelled: Caller requested early termination

Used By:
    - core.models: Dimension invariants
    - assembler.*: Raised at each pipeline stage
    - cli: Mapped to exit codes
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional


class AssemblyError(Exception):
    """Base class for document assembly failures."""
    pass


class EmptyInput(AssemblyError):
    """No images were supplied to the pipeline."""

    def __init__(self, message: str = "No images supplied to assemble") -> None:
        super().__init__(message)


class ImageReadError(AssemblyError):
    """Image source is unreadable."""

    def __init__(self, identifier: str, reason: str) -> None:
        super().__init__(f"Cannot read image {identifier!r}: {reason}")
        self.identifier = identifier


class ImageDecodeError(AssemblyError):
    """Image bytes are corrupt, unsupported, or report a non-positive size."""

    def __init__(self, identifier: str, reason: str) -> None:
        super().__init__(f"Cannot decode image {identifier!r}: {reason}")
        self.identifier = identifier


class InvalidImageDimensions(AssemblyError, ValueError):
    """Width or height is zero or negative."""

    def __init__(self, width: float, height: float) -> None:
        super().__init__(f"Image dimensions must be positive: {width}x{height}")
        self.width = width
        self.height = height


class WriteError(AssemblyError):
    """I/O failure while creating, writing or finalizing the output file."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Cannot write document {path}: {reason}")
        self.path = path


class AssemblyCancelled(AssemblyError):
    """Assembly stopped at the caller's request."""

    def __init__(self, pages_written: int, total: Optional[int] = None) -> None:
        detail = f"{pages_written}/{total}" if total is not None else str(pages_written)
        super().__init__(f"Assembly cancelled after {detail} pages")
        self.pages_written = pages_written
