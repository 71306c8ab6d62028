"""
Module: assembler.config

Purpose:
    Configuration dataclass for the assembly pipeline. Immutable
    configuration with validation on construction.

Key Classes:
    - AssemblyConfig: Page size, placement policy and document metadata

Used By:
    - assembler.controller: assemble()
    - cli: Built from command-line flags
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

from docscan_toolkit.core.models import A4, PageSize

from .layout.composer import PlacementPolicy


@dataclass(frozen=True)
class AssemblyConfig:
    """
    Configuration for assembling a document (immutable).
    
    Attributes:
        page_size: Media box of every page (default A4, 595x842 pt)
        placement_policy: CENTER (default) or ORIGIN
        max_scale: Optional clamp on upscaling (None = no clamp)
        title: Optional document title metadata
        author: Optional document author metadata
    
    Example:
        >>> config = AssemblyConfig(page_size=PageSize(612, 792), title="Receipts")
    """
    
    page_size: PageSize = A4
    placement_policy: PlacementPolicy = PlacementPolicy.CENTER
    max_scale: Optional[float] = None
    
    # Metadata
    title: Optional[str] = None
    author: Optional[str] = None
    
    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if self.max_scale is not None and not (self.max_scale > 0 and math.isfinite(self.max_scale)):
            raise ValueError(f"max_scale must be positive and finite: {self.max_scale}")
        if not isinstance(self.placement_policy, PlacementPolicy):
            raise ValueError(f"unknown placement policy: {self.placement_policy!r}")
