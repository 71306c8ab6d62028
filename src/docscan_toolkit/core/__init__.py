"""
Document Scan Core Package

Shared data models and the error taxonomy used by every other subpackage.

**DESIGN NOTES:**

1. **Immutable Data Models**
   - All records are frozen dataclasses; a captured image never changes
     after the capture collaborator hands it over.

2. **Computed Geometry (Never Supplied)**
   - `Placement.scale` is always produced by the composer from the image
     and page dimensions.

3. **Plain Records, No Library Objects**
   - Models carry no reportlab or Pillow objects, so composition and
     serialization can be tested in isolation.
"""

from .errors import (
    AssemblyError,
    AssemblyCancelled,
    EmptyInput,
    ImageDecodeError,
    ImageReadError,
    InvalidImageDimensions,
    WriteError,
)
from .models import A4, CapturedImage, Document, Page, PageSize, Placement

__all__ = [
    # Models
    "A4",
    "CapturedImage",
    "Document",
    "Page",
    "PageSize",
    "Placement",
    # Errors
    "AssemblyError",
    "AssemblyCancelled",
    "EmptyInput",
    "ImageDecodeError",
    "ImageReadError",
    "InvalidImageDimensions",
    "WriteError",
]
