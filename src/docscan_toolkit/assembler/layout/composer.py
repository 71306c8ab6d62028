"""
Module: assembler.layout.composer

Purpose:
    Fit an image of a given intrinsic size onto a page of fixed size,
    preserving aspect ratio. Pure functions, no I/O.

Key Functions:
    - compose_page(): Scale-to-fit placement for one image

Key Classes:
    - PlacementPolicy: CENTER (default) or ORIGIN

Used By:
    - assembler.controller: One call per page
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Optional

from docscan_toolkit.core.errors import InvalidImageDimensions
from docscan_toolkit.core.models import A4, PageSize, Placement

logger = logging.getLogger(__name__)


class PlacementPolicy(str, Enum):
    """Where the scaled image is positioned on the page."""
    
    CENTER = "center"  # Equal margins on both sides of the unfilled axis
    ORIGIN = "origin"  # Bottom-left corner at the page origin


def fit_scale(
    width: float,
    height: float,
    page_size: PageSize = A4,
    *,
    max_scale: Optional[float] = None,
) -> float:
    """
    Largest uniform scale at which the image fits the page.
    
    Args:
        width: Intrinsic image width (pixels)
        height: Intrinsic image height (pixels)
        page_size: Target page
        max_scale: Optional upper bound on the scale (None = no clamp)
        
    Returns:
        min(page.width / width, page.height / height), clamped by max_scale
        
    Raises:
        InvalidImageDimensions: If width or height is not positive
        
    Example:
        >>> fit_scale(800, 600, PageSize(595, 842))
        0.74375
    """
    if width <= 0 or height <= 0:
        raise InvalidImageDimensions(width, height)
    
    scale = min(page_size.width / width, page_size.height / height)
    if max_scale is not None and scale > max_scale:
        logger.debug(f"Clamping scale {scale:.4f} to {max_scale}")
        scale = max_scale
    return scale


def compose_page(
    width: float,
    height: float,
    page_size: PageSize = A4,
    *,
    policy: PlacementPolicy = PlacementPolicy.CENTER,
    max_scale: Optional[float] = None,
) -> Placement:
    """
    Compute where and how large an image is drawn on a page.
    
    Scaling may exceed 1 (small images are upscaled) unless max_scale
    is given.
    
    Args:
        width: Intrinsic image width (pixels)
        height: Intrinsic image height (pixels)
        page_size: Target page
        policy: CENTER or ORIGIN placement
        max_scale: Optional upper bound on the scale
        
    Returns:
        Placement with scale, offset and placed size
        
    Raises:
        InvalidImageDimensions: If width or height is not positive
        
    Example:
        >>> p = compose_page(2000, 2000, PageSize(595, 842))
        >>> round(p.scale, 4), round(p.y, 2)
        (0.2975, 123.5)
    """
    scale = fit_scale(width, height, page_size, max_scale=max_scale)
    placed_width = width * scale
    placed_height = height * scale
    
    if policy is PlacementPolicy.CENTER:
        x = (page_size.width - placed_width) / 2
        y = (page_size.height - placed_height) / 2
    else:
        x = 0.0
        y = 0.0
    
    return Placement(
        scale=scale,
        x=x,
        y=y,
        width=placed_width,
        height=placed_height,
    )
