"""
Module: assembler.images.decoder

Purpose:
    Obtain an image's encoded bytes and decode just enough of the header
    to learn its format and intrinsic pixel size. Pixel data is never
    decoded here; the writer embeds the original encoding.

Key Functions:
    - read_image_bytes(): Bytes for a CapturedImage (ImageReadError)
    - probe_image(): Header information (ImageDecodeError)

Dependencies:
    - PIL.Image: Lazy header parsing

Used By:
    - assembler.controller: Per-image read + probe steps
"""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from PIL import Image, UnidentifiedImageError

from docscan_toolkit.core.errors import ImageDecodeError
from docscan_toolkit.core.models import CapturedImage

logger = logging.getLogger(__name__)

# Encodings the writer embeds without re-encoding
PASSTHROUGH_FORMATS = frozenset({"JPEG"})


@dataclass(frozen=True)
class ImageInfo:
    """
    Header information for an encoded image.
    
    Attributes:
        format: Pillow format name, e.g. "JPEG"
        width: Intrinsic width in pixels
        height: Intrinsic height in pixels
    """
    format: str
    width: int
    height: int


def read_image_bytes(image: CapturedImage) -> bytes:
    """
    Read the encoded bytes of a captured image.
    
    Raises:
        ImageReadError: If the backing source cannot be read
    """
    data = image.open_bytes()
    logger.debug(f"Read {len(data)} bytes for {image.identifier}")
    return data


def probe_image(data: bytes, identifier: str) -> ImageInfo:
    """
    Decode the image header to obtain format and size.
    
    Args:
        data: Encoded image bytes
        identifier: Image identifier for error messages
        
    Returns:
        ImageInfo for the image
        
    Raises:
        ImageDecodeError: If the bytes are empty, unrecognised, not JPEG,
            beyond Pillow's pixel limit, or report a non-positive size
            
    Example:
        >>> probe_image(jpeg_bytes, "scan-1")
        ImageInfo(format='JPEG', width=800, height=600)
    """
    if not data:
        raise ImageDecodeError(identifier, "no image data")
    
    try:
        with Image.open(io.BytesIO(data)) as img:
            fmt = img.format
            width, height = img.size
    except UnidentifiedImageError as e:
        raise ImageDecodeError(identifier, "unrecognised image data") from e
    except Image.DecompressionBombError as e:
        raise ImageDecodeError(identifier, str(e)) from e
    except (OSError, SyntaxError, ValueError) as e:
        # Pillow raises SyntaxError/ValueError for some malformed headers
        raise ImageDecodeError(identifier, str(e)) from e
    
    if fmt not in PASSTHROUGH_FORMATS:
        raise ImageDecodeError(
            identifier,
            f"unsupported encoding {fmt}; expected one of {sorted(PASSTHROUGH_FORMATS)}",
        )
    if width <= 0 or height <= 0:
        raise ImageDecodeError(identifier, f"header reports size {width}x{height}")
    
    return ImageInfo(format=fmt, width=width, height=height)
