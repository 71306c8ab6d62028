"""
Module: capture.store

Purpose:
    Ordered collection of captured images. The capture collaborator
    appends from its own thread while an assembly iterates over an
    earlier snapshot; snapshots are immutable tuples, so images appended
    later never leak into an in-flight document.

Key Classes:
    - ImageStore: Thread-safe append-only store

Dependencies:
    - threading (std): Lock around the backing list
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import List

from docscan_toolkit.core.models import CapturedImage

logger = logging.getLogger(__name__)


class ImageStore:
    """
    Append-only ordered store of CapturedImages.
    
    Usage:
        store = ImageStore()
        store.append(image)          # capture thread
        images = store.snapshot()    # assembly thread
        assemble(images, output_path)
    """
    
    def __init__(self) -> None:
        self._images: List[CapturedImage] = []
        self._lock = threading.Lock()
    
    def append(self, image: CapturedImage) -> None:
        """Add an image to the end of the collection."""
        with self._lock:
            self._images.append(image)
            count = len(self._images)
        logger.debug(f"Stored image {image.identifier} (seq {image.sequence}), {count} total")
    
    def add_file(self, path: Path) -> CapturedImage:
        """
        Probe an image file and append it with the next sequence number.
        
        Args:
            path: Encoded image file
            
        Returns:
            The appended CapturedImage
            
        Raises:
            ImageReadError / ImageDecodeError: If the file cannot be probed
        """
        with self._lock:
            sequence = self._next_sequence_locked()
            image = CapturedImage.from_file(path, sequence)
            self._images.append(image)
        logger.debug(f"Stored image file {path} as seq {sequence}")
        return image
    
    def snapshot(self) -> tuple[CapturedImage, ...]:
        """
        Return an immutable copy of the collection ordered by capture sequence.
        
        The sort is stable, so images sharing a sequence number keep their
        append order.
        """
        with self._lock:
            images = list(self._images)
        return tuple(sorted(images, key=lambda img: img.sequence))
    
    @property
    def next_sequence(self) -> int:
        """Sequence number the next captured image should carry."""
        with self._lock:
            return self._next_sequence_locked()
    
    def _next_sequence_locked(self) -> int:
        if not self._images:
            return 1
        return max(img.sequence for img in self._images) + 1
    
    def __len__(self) -> int:
        with self._lock:
            return len(self._images)
