"""
Core Models Package

Immutable, validated data models for document assembly.

| Model | Role |
|-------|------|
| `CapturedImage` | One photograph: encoded bytes (or file) + intrinsic size |
| `PageSize` | Fixed page dimensions in points |
| `Placement` | Computed scale and offset of an image on a page |
| `Page` | An image bound to its placement |
| `Document` | Ordered pages plus the output path |
"""

from .geometry import A4, LETTER, PageSize, Placement
from .images import CapturedImage
from .document import Document, Page

__all__ = [
    "A4",
    "LETTER",
    "PageSize",
    "Placement",
    "CapturedImage",
    "Document",
    "Page",
]
