"""
Module: assembler.output

Purpose:
    PDF serialization and output-path coordination.

Key Classes:
    - DocumentWriter: Atomic page-by-page PDF writer (reportlab)

Key Functions:
    - output_path_lock(): Serialize assemblies targeting one path

Dependencies:
    - reportlab: PDF generation
    - portalocker: Cross-process file locking
"""

from .writer import DocumentWriter
from .locking import output_path_lock

__all__ = [
    "DocumentWriter",
    "output_path_lock",
]
