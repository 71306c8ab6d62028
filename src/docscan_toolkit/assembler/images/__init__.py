"""
Module: assembler.images

Purpose:
    Read encoded image bytes and probe their headers.

Key Functions:
    - read_image_bytes(): Load bytes for a CapturedImage
    - probe_image(): Format and intrinsic size from the header

Key Classes:
    - ImageInfo: Result of probing
"""

from .decoder import ImageInfo, probe_image, read_image_bytes

__all__ = [
    "ImageInfo",
    "probe_image",
    "read_image_bytes",
]
