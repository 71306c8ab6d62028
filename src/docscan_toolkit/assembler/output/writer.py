"""
Module: assembler.output.writer

Purpose:
    Serialize an ordered sequence of (image bytes, placement) pairs into a
    PDF file using ReportLab. Each page's media box equals the page size
    and the image is drawn under a ``cm`` matrix carrying scale and offset.

    The PDF is written to a hidden temporary file next to the target and
    moved into place with os.replace() only when finalize() succeeds, so
    the target path never holds a partially written document.

Key Classes:
    - DocumentWriter: open() → add_page()* → finalize() (or abort())
    - EncodedJPEG: ImageReader that passes JPEG bytes through undecoded

Dependencies:
    - reportlab: PDF generation (JPEG data embedded as DCTDecode, unchanged)

Used By:
    - assembler.controller: Pipeline orchestration
"""

from __future__ import annotations

import hashlib
import io
import logging
import os
import struct
import tempfile
from pathlib import Path
from typing import BinaryIO, Optional

from reportlab.lib.utils import ImageReader
from reportlab.pdfbase.pdfdoc import PDFError
from reportlab.pdfbase.pdfutils import readJPEGInfo
from reportlab.pdfgen import canvas

from docscan_toolkit.core.errors import ImageDecodeError, WriteError
from docscan_toolkit.core.models import A4, PageSize, Placement

logger = logging.getLogger(__name__)

CREATOR = "docscan-toolkit"


class EncodedJPEG(ImageReader):
    """
    ImageReader over encoded JPEG bytes that are embedded as-is.
    
    The canvas names image XObjects after ``getRGBData()``; here that is a
    digest of the encoded bytes and the header size, so the pixels are
    never decoded and two different captures never share an XObject.
    Identical bytes still share one.
    
    Raises:
        ValueError: If the JPEG header cannot be parsed
    """
    
    def __init__(self, data: bytes, identifier: str = "image") -> None:
        # The base initializer opens the image with Pillow; not needed here
        self.fileName = identifier
        self._ident = identifier
        self._image = None
        self._transparent = None
        self._dataA = None
        self.fp = io.BytesIO(data)
        try:
            width, height, _components, _dpi = readJPEGInfo(self.fp)
        except (struct.error, PDFError) as e:
            raise ValueError(f"unreadable JPEG header: {e}") from e
        finally:
            self.fp.seek(0)
        self._width, self._height = width, height
        digest = hashlib.sha256(data).hexdigest()
        self._data = f"{digest}:{width}x{height}".encode("ascii")
    
    def jpeg_fh(self) -> BinaryIO:
        self.fp.seek(0)
        return self.fp
    
    def getSize(self) -> tuple[int, int]:
        return self._width, self._height
    
    def getRGBData(self) -> bytes:
        return self._data


class DocumentWriter:
    """
    Page-by-page PDF writer with all-or-nothing output.
    
    Usage:
        with DocumentWriter.open(path) as writer:
            for data, placement in pages:
                writer.add_page(data, placement, A4)
            writer.finalize()
    
    Leaving the ``with`` block without finalize() (including through an
    exception) discards the temporary file.
    """
    
    def __init__(
        self,
        output_path: Path,
        *,
        title: Optional[str] = None,
        author: Optional[str] = None,
    ) -> None:
        self.output_path = Path(output_path)
        self.title = title
        self.author = author
        self._temp_path: Optional[Path] = None
        self._handle: Optional[BinaryIO] = None
        self._canvas: Optional[canvas.Canvas] = None
        self._page_count = 0
        self._finalized = False
    
    @classmethod
    def open(
        cls,
        output_path: Path,
        *,
        title: Optional[str] = None,
        author: Optional[str] = None,
    ) -> "DocumentWriter":
        """
        Acquire the output stream for a new document.
        
        Creates the destination directory if needed and a temporary file
        inside it, which proves the location is writable before any page
        work starts.
        
        Raises:
            WriteError: If the directory or temporary file cannot be created
        """
        writer = cls(output_path, title=title, author=author)
        writer._acquire()
        return writer
    
    def _acquire(self) -> None:
        if self._canvas is not None or self._finalized:
            raise RuntimeError("DocumentWriter is already open")
        
        try:
            self.output_path.parent.mkdir(parents=True, exist_ok=True)
            self._handle = tempfile.NamedTemporaryFile(
                mode="wb",
                prefix=f".{self.output_path.name}.",
                suffix=".part",
                dir=self.output_path.parent,
                delete=False,
            )
        except OSError as e:
            raise WriteError(self.output_path, str(e)) from e
        self._temp_path = Path(self._handle.name)
        
        # The canvas buffers the document in memory and writes to the
        # handle on save(); it does not close handles it did not open.
        self._canvas = canvas.Canvas(self._handle, pagesize=A4.as_tuple())
        self._canvas.setCreator(CREATOR)
        if self.title:
            self._canvas.setTitle(self.title)
        if self.author:
            self._canvas.setAuthor(self.author)
        
        logger.debug(f"Opened {self._temp_path.name} for {self.output_path}")
    
    @property
    def page_count(self) -> int:
        """Pages added so far."""
        return self._page_count
    
    @property
    def is_open(self) -> bool:
        """True between open() and finalize()/abort()."""
        return self._canvas is not None
    
    def add_page(
        self,
        image_bytes: bytes,
        placement: Placement,
        page_size: PageSize = A4,
        *,
        identifier: str = "image",
    ) -> None:
        """
        Append one page showing the image at the given placement.
        
        The image is drawn at its intrinsic pixel size inside a graphics
        state transformed by ``placement.matrix``, so the content stream
        reads ``s 0 0 s x y cm`` followed by the image XObject.
        
        Args:
            image_bytes: Encoded image (embedded without re-encoding)
            placement: Scale and offset from the composer
            page_size: Media box of the new page
            identifier: Image identifier for error messages
            
        Raises:
            ImageDecodeError: If reportlab cannot read the image data
        """
        c = self._require_open()
        
        intrinsic_width = placement.width / placement.scale
        intrinsic_height = placement.height / placement.scale
        
        try:
            reader = EncodedJPEG(image_bytes, identifier)
            c.setPageSize(page_size.as_tuple())
            c.saveState()
            c.transform(*placement.matrix)
            c.drawImage(reader, 0, 0, width=intrinsic_width, height=intrinsic_height)
            c.restoreState()
            c.showPage()
        except (OSError, ValueError, SyntaxError) as e:
            raise ImageDecodeError(identifier, str(e)) from e
        
        self._page_count += 1
        logger.debug(
            f"Page {self._page_count}: {identifier} scale={placement.scale:.4f} "
            f"at ({placement.x:.1f}, {placement.y:.1f})"
        )
    
    def finalize(self) -> Path:
        """
        Write the trailing PDF structures and move the file into place.
        
        Returns:
            The output path
            
        Raises:
            WriteError: If the document has no pages or cannot be written
        """
        c = self._require_open()
        if self._page_count == 0:
            self.abort()
            raise WriteError(self.output_path, "document has no pages")
        
        try:
            c.save()
            self._handle.flush()
            os.fsync(self._handle.fileno())
            self._handle.close()
            self._handle = None
            os.replace(self._temp_path, self.output_path)
        except OSError as e:
            self.abort()
            raise WriteError(self.output_path, str(e)) from e
        
        self._canvas = None
        self._temp_path = None
        self._finalized = True
        logger.info(f"Wrote {self._page_count} pages to {self.output_path}")
        return self.output_path
    
    def abort(self) -> None:
        """Release the stream and delete any partially written bytes."""
        self._canvas = None
        if self._handle is not None:
            try:
                self._handle.close()
            except OSError as e:
                logger.warning(f"Failed to close {self._temp_path}: {e}")
            self._handle = None
        if self._temp_path is not None:
            try:
                self._temp_path.unlink(missing_ok=True)
            except OSError as e:
                logger.error(f"Failed to remove partial document {self._temp_path}: {e}")
            else:
                logger.debug(f"Discarded partial document {self._temp_path.name}")
            self._temp_path = None
    
    def _require_open(self) -> canvas.Canvas:
        if self._canvas is None:
            raise RuntimeError("DocumentWriter is not open")
        return self._canvas
    
    def __enter__(self) -> "DocumentWriter":
        return self
    
    def __exit__(self, *args) -> None:
        if not self._finalized:
            self.abort()
