"""
Module: geometry

Purpose:
    Page dimensions and image placement records. All lengths are PDF
    points (1/72 inch); the PDF origin is the bottom-left page corner.

Key Classes:
    - PageSize: Fixed page width/height
    - Placement: Scale factor and offset of an image on a page

Used By:
    - assembler.layout.composer: Produces Placements
    - assembler.output.writer: Consumes Placements
"""

from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class PageSize:
    """
    Page dimensions in points.
    
    Attributes:
        width: Page width (points)
        height: Page height (points)
    
    Example:
        >>> PageSize(595, 842).as_tuple()
        (595, 842)
    """
    
    width: float
    height: float
    
    def __post_init__(self) -> None:
        """Validate dimensions on construction."""
        if not self.width > 0:
            raise ValueError(f"page width must be positive: {self.width}")
        if not self.height > 0:
            raise ValueError(f"page height must be positive: {self.height}")
    
    def as_tuple(self) -> tuple[float, float]:
        """Return (width, height) for reportlab's pagesize arguments."""
        return (self.width, self.height)
    
    @classmethod
    def parse(cls, text: str) -> "PageSize":
        """
        Parse a page size name or a ``WIDTHxHEIGHT`` string.
        
        Example:
            >>> PageSize.parse("a4")
            PageSize(width=595, height=842)
            >>> PageSize.parse("612x792")
            PageSize(width=612.0, height=792.0)
        """
        named = NAMED_PAGE_SIZES.get(text.strip().lower())
        if named is not None:
            return named
        
        parts = text.lower().split("x")
        if len(parts) != 2:
            raise ValueError(f"page size must be a name or WIDTHxHEIGHT: {text!r}")
        try:
            return cls(float(parts[0]), float(parts[1]))
        except ValueError as e:
            raise ValueError(f"invalid page size {text!r}: {e}") from e


# Integer A4 in points, the process-wide default page size
A4 = PageSize(595, 842)
LETTER = PageSize(612, 792)

NAMED_PAGE_SIZES = {
    "a4": A4,
    "letter": LETTER,
}


@dataclass(frozen=True, slots=True)
class Placement:
    """
    Position of a scaled image on a page (immutable).
    
    Scale is always computed by the composer; it is never supplied by
    callers. The offset locates the bottom-left corner of the scaled
    image relative to the page origin.
    
    Attributes:
        scale: Uniform scale factor applied to intrinsic pixel size
        x: Horizontal offset (points)
        y: Vertical offset (points)
        width: Placed width (points) = image width * scale
        height: Placed height (points) = image height * scale
    
    Invariants:
        - scale is positive and finite
    
    Example:
        >>> p = Placement(scale=0.5, x=10, y=20, width=100, height=50)
        >>> p.matrix
        (0.5, 0.0, 0.0, 0.5, 10, 20)
    """
    
    scale: float
    x: float
    y: float
    width: float
    height: float
    
    def __post_init__(self) -> None:
        if not (self.scale > 0 and math.isfinite(self.scale)):
            raise ValueError(f"scale must be positive and finite: {self.scale}")
    
    @property
    def matrix(self) -> tuple[float, float, float, float, float, float]:
        """Affine matrix (a, b, c, d, e, f) for the PDF ``cm`` operator."""
        return (self.scale, 0.0, 0.0, self.scale, self.x, self.y)
    
    @property
    def aspect_ratio(self) -> float:
        """Placed width divided by placed height."""
        return self.width / self.height
