"""
Module: images

Purpose:
    Provides the CapturedImage dataclass - one photograph produced by the
    capture collaborator, with its encoded bytes (held in memory or on
    disk), intrinsic pixel size and capture sequence number.

Key Functions:
    - CapturedImage.from_file(path, sequence): Build from an image file
    - CapturedImage.open_bytes(): Read the encoded bytes

Dependencies:
    - PIL.Image: Header probing in from_file()

Used By:
    - capture.store.ImageStore
    - assembler.controller
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from PIL import Image, UnidentifiedImageError

from docscan_toolkit.core.errors import (
    ImageDecodeError,
    ImageReadError,
    InvalidImageDimensions,
)


@dataclass(frozen=True, slots=True)
class CapturedImage:
    """
    A captured photograph (immutable).
    
    Attributes:
        identifier: Stable identifier (file stem, capture id, ...)
        sequence: Capture sequence number; pages are ordered by it
        width: Intrinsic width in pixels
        height: Intrinsic height in pixels
        data: Encoded image bytes, or None when backed by ``path``
        path: File holding the encoded bytes, or None when ``data`` is set
    
    Invariants:
        - width > 0 and height > 0
        - exactly one of data / path is set
    
    Example:
        >>> img = CapturedImage("scan-1", 1, 800, 600, data=jpeg_bytes)
        >>> img.aspect_ratio
        1.3333333333333333
    """
    
    identifier: str
    sequence: int
    width: int
    height: int
    data: Optional[bytes] = field(default=None, repr=False)
    path: Optional[Path] = None
    
    def __post_init__(self) -> None:
        """Validate dimensions and byte source on construction."""
        if self.width <= 0 or self.height <= 0:
            raise InvalidImageDimensions(self.width, self.height)
        if (self.data is None) == (self.path is None):
            raise ValueError(
                f"CapturedImage {self.identifier!r} needs exactly one of data or path"
            )
    
    @property
    def aspect_ratio(self) -> float:
        """Intrinsic width divided by intrinsic height."""
        return self.width / self.height
    
    def open_bytes(self) -> bytes:
        """
        Return the encoded image bytes.
        
        Raises:
            ImageReadError: If the backing file cannot be read
        """
        if self.data is not None:
            return self.data
        try:
            return Path(self.path).read_bytes()
        except OSError as e:
            raise ImageReadError(self.identifier, str(e)) from e
    
    @classmethod
    def from_file(
        cls,
        path: Path,
        sequence: int,
        *,
        identifier: Optional[str] = None,
    ) -> "CapturedImage":
        """
        Create a file-backed CapturedImage, probing the header for its size.
        
        Only the header is read; pixel data stays on disk until assembly.
        
        Args:
            path: Image file
            sequence: Capture sequence number
            identifier: Optional identifier (defaults to the file stem)
            
        Raises:
            ImageReadError: If the file cannot be opened
            ImageDecodeError: If the header is not a recognised image or
                exceeds Pillow's pixel limit
        """
        path = Path(path)
        identifier = identifier or path.stem
        try:
            with Image.open(path) as img:
                width, height = img.size
        except UnidentifiedImageError as e:
            raise ImageDecodeError(identifier, str(e)) from e
        except Image.DecompressionBombError as e:
            raise ImageDecodeError(identifier, str(e)) from e
        except OSError as e:
            raise ImageReadError(identifier, str(e)) from e
        
        if width <= 0 or height <= 0:
            raise ImageDecodeError(identifier, f"header reports size {width}x{height}")
        
        return cls(identifier, sequence, width, height, path=path)
