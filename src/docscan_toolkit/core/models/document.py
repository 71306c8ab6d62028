"""
Module: document

Purpose:
    Page and Document records describing an assembled document.

Key Classes:
    - Page: One CapturedImage bound to a Placement within a PageSize
    - Document: Ordered pages plus the output path

Used By:
    - assembler.controller: Builds the Document during assembly
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .geometry import PageSize, Placement
from .images import CapturedImage


@dataclass(frozen=True, slots=True)
class Page:
    """
    A single document page.
    
    Attributes:
        image: Image shown on the page
        placement: Where and how large the image is drawn
        page_size: Media box of the page
    """
    
    image: CapturedImage
    placement: Placement
    page_size: PageSize


@dataclass(frozen=True)
class Document:
    """
    An assembled document (immutable).
    
    Attributes:
        pages: Pages in capture order
        output_path: File the document is written to
    
    Example:
        >>> doc = Document(pages=(p1, p2), output_path=Path("scan.pdf"))
        >>> doc.page_count
        2
    """
    
    pages: tuple[Page, ...]
    output_path: Path
    
    @property
    def page_count(self) -> int:
        """Number of pages in the document."""
        return len(self.pages)
    
    @property
    def placements(self) -> tuple[Placement, ...]:
        """Placements of every page in order."""
        return tuple(page.placement for page in self.pages)
