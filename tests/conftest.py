import io
import pytest
import struct
import sys
from pathlib import Path
from PIL import Image

# Add src to sys.path so we can import docscan_toolkit
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())

from docscan_toolkit.core.models import CapturedImage


def encode_image(width: int, height: int, fmt: str = "JPEG", color: str = "white") -> bytes:
    """Encode a solid-colour image of the given size."""
    buf = io.BytesIO()
    Image.new("RGB", (width, height), color=color).save(buf, format=fmt)
    return buf.getvalue()


def with_header_size(data: bytes, width: int, height: int) -> bytes:
    """Rewrite the size in a baseline JPEG's SOF0 segment, leaving the scan data alone."""
    start = data.index(b"\xff\xc0")
    patched = bytearray(data)
    patched[start + 5:start + 9] = struct.pack(">HH", height, width)
    return bytes(patched)


# Common test fixtures
@pytest.fixture
def jpeg_bytes():
    """Factory for encoded JPEG bytes."""
    return encode_image


@pytest.fixture
def oversized_jpeg():
    """JPEG whose header claims 16320x12240 (about 200 MP), past Pillow's bomb limit."""
    return with_header_size(encode_image(16, 12), 16320, 12240)


@pytest.fixture
def make_captured():
    """Factory for in-memory CapturedImages backed by JPEG bytes."""
    def _make(sequence: int, width: int, height: int, color: str = "white") -> CapturedImage:
        return CapturedImage(
            identifier=f"img-{sequence}",
            sequence=sequence,
            width=width,
            height=height,
            data=encode_image(width, height, color=color),
        )
    return _make


@pytest.fixture
def sample_jpeg(tmp_path: Path):
    """Write a simple JPEG to disk."""
    img_path = tmp_path / "sample.jpg"
    img_path.write_bytes(encode_image(200, 100))
    return img_path


@pytest.fixture
def page_images():
    """Return the image XObjects drawn on a pypdf page."""
    def _images(page):
        xobjects = page["/Resources"]["/XObject"]
        return [
            xobjects[name]
            for name in xobjects
            if xobjects[name].get("/Subtype") == "/Image"
        ]
    return _images


def leftover_parts(directory: Path) -> list[Path]:
    """Temporary ``.part`` files left in a directory."""
    return sorted(directory.glob(".*.part"))


@pytest.fixture
def find_parts():
    return leftover_parts
