"""
Module: assembler.layout

Purpose:
    Page geometry: fit one image onto a fixed-size page.

Key Functions:
    - compose_page(): Compute the Placement for an image

Key Classes:
    - PlacementPolicy: Where the scaled image sits on the page
"""

from .composer import PlacementPolicy, compose_page

__all__ = [
    "PlacementPolicy",
    "compose_page",
]
