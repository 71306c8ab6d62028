"""
Module: assembler

Purpose:
    Photograph-to-PDF assembly pipeline. Fits each captured image onto a
    fixed-size page and writes one page per image, atomically.

Key Functions:
    - assemble(): Main entry point
    - compose_page(): Scale-to-fit placement for one image

Key Classes:
    - AssemblyConfig: Configuration for assembly
    - AssemblyResult: Successful assembly outcome
    - AssemblyRunner / AssemblyJob: Background execution with cancellation
    - DocumentWriter: Atomic PDF writer

Dependencies:
    - PIL: Header probing
    - reportlab: PDF generation
    - portalocker: Per-path locking helper

Used By:
    - docscan_toolkit.cli
"""

from .config import AssemblyConfig
from .layout import PlacementPolicy, compose_page
from .output import DocumentWriter, output_path_lock
from .controller import AssemblyResult, assemble
from .runner import AssemblyJob, AssemblyRunner

__all__ = [
    # Config
    "AssemblyConfig",
    "PlacementPolicy",
    # Layout
    "compose_page",
    # Output
    "DocumentWriter",
    "output_path_lock",
    # Controller
    "assemble",
    "AssemblyResult",
    # Runner
    "AssemblyJob",
    "AssemblyRunner",
]
