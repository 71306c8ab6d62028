"""
Tests for assembler.controller.assemble().

Test Coverage:
- Page count and order preservation
- Empty input
- Fail-fast on unreadable / undecodable images
- Atomic replacement of a previous document
- Cancellation and progress reporting
"""

import threading
import pytest

from pypdf import PdfReader

from docscan_toolkit.assembler import AssemblyConfig, PlacementPolicy, assemble
from docscan_toolkit.core.errors import (
    AssemblyCancelled,
    EmptyInput,
    ImageDecodeError,
    ImageReadError,
    WriteError,
)
from docscan_toolkit.core.models import A4, CapturedImage, PageSize


@pytest.fixture
def reference_images(make_captured):
    """Three images of distinct sizes in capture order."""
    return (
        make_captured(1, 800, 600),
        make_captured(2, 1200, 1600),
        make_captured(3, 2000, 2000),
    )


class TestAssemble:
    """Tests for successful assembly."""

    def test_assemble_when_three_images_then_three_pages(self, tmp_path, reference_images):
        # Arrange
        output = tmp_path / "scan.pdf"

        # Act
        result = assemble(reference_images, output)

        # Assert
        assert result.output_path == output
        assert result.page_count == 3
        assert len(PdfReader(output).pages) == 3
        assert result.warnings == ()

    def test_assemble_when_reference_sizes_then_expected_scales(self, tmp_path, reference_images):
        result = assemble(reference_images, tmp_path / "scan.pdf", A4)

        scales = [p.scale for p in result.placements]
        assert scales == pytest.approx([0.7438, 0.4958, 0.2975], abs=5e-5)

    def test_assemble_when_images_then_order_preserved(self, tmp_path, reference_images, page_images):
        """Page i embeds input image i."""
        output = tmp_path / "scan.pdf"

        assemble(reference_images, output)

        reader = PdfReader(output)
        sizes = [
            (int(img["/Width"]), int(img["/Height"]))
            for page in reader.pages
            for img in page_images(page)
        ]
        assert sizes == [(800, 600), (1200, 1600), (2000, 2000)]

    def test_assemble_when_images_then_aspect_ratio_preserved(self, tmp_path, reference_images):
        result = assemble(reference_images, tmp_path / "scan.pdf")

        for image, placement in zip(reference_images, result.placements):
            assert placement.aspect_ratio == pytest.approx(image.aspect_ratio, rel=1e-9)

    def test_assemble_when_config_page_size_then_used(self, tmp_path, make_captured):
        output = tmp_path / "scan.pdf"
        config = AssemblyConfig(page_size=PageSize(612, 792), placement_policy=PlacementPolicy.ORIGIN)

        result = assemble([make_captured(1, 100, 50)], output, config=config)

        box = PdfReader(output).pages[0].mediabox
        assert (float(box.width), float(box.height)) == (612.0, 792.0)
        assert (result.placements[0].x, result.placements[0].y) == (0.0, 0.0)

    def test_assemble_when_max_scale_then_not_upscaled(self, tmp_path, make_captured):
        config = AssemblyConfig(max_scale=1.0)

        result = assemble([make_captured(1, 100, 50)], tmp_path / "scan.pdf", config=config)

        assert result.placements[0].scale == 1.0

    def test_assemble_when_declared_size_differs_then_encoded_size_wins(self, tmp_path, jpeg_bytes):
        """Header dimensions take precedence and a warning is recorded."""
        image = CapturedImage("odd", 1, 100, 100, data=jpeg_bytes(80, 60))

        result = assemble([image], tmp_path / "scan.pdf")

        assert result.placements[0].aspect_ratio == pytest.approx(80 / 60)
        assert len(result.warnings) == 1
        assert "odd" in result.warnings[0]

    def test_assemble_when_rerun_then_previous_document_replaced(self, tmp_path, reference_images, make_captured):
        """A second run at the same path fully replaces the first."""
        output = tmp_path / "scan.pdf"
        assemble(reference_images, output)

        assemble([make_captured(9, 40, 40)], output)

        assert len(PdfReader(output).pages) == 1

    def test_assemble_when_progress_then_called_per_page(self, tmp_path, reference_images):
        calls = []

        assemble(reference_images, tmp_path / "scan.pdf", progress=lambda done, total: calls.append((done, total)))

        assert calls == [(1, 3), (2, 3), (3, 3)]


class TestAssembleFailures:
    """Tests for failure handling and cleanup."""

    def test_assemble_when_empty_then_raises_and_touches_nothing(self, tmp_path):
        """Empty input performs no filesystem writes."""
        output = tmp_path / "sub" / "scan.pdf"

        with pytest.raises(EmptyInput):
            assemble([], output)

        assert not output.parent.exists()

    def test_assemble_when_corrupt_image_then_fails_fast(self, tmp_path, make_captured, find_parts):
        """No page after the failing image is written and no file is left."""
        # Arrange
        output = tmp_path / "scan.pdf"
        bad = CapturedImage("broken", 2, 10, 10, data=b"definitely not a jpeg")
        images = [make_captured(1, 10, 10), bad, make_captured(3, 10, 10)]
        calls = []

        # Act
        with pytest.raises(ImageDecodeError, match="broken"):
            assemble(images, output, progress=lambda done, total: calls.append(done))

        # Assert
        assert calls == [1]
        assert not output.exists()
        assert find_parts(tmp_path) == []

    def test_assemble_when_unreadable_then_raises_read_error(self, tmp_path, make_captured, find_parts):
        output = tmp_path / "scan.pdf"
        missing = CapturedImage("missing", 2, 10, 10, path=tmp_path / "missing.jpg")

        with pytest.raises(ImageReadError):
            assemble([make_captured(1, 10, 10), missing], output)

        assert not output.exists()
        assert find_parts(tmp_path) == []

    def test_assemble_when_unsupported_encoding_then_raises_decode_error(self, tmp_path, jpeg_bytes):
        image = CapturedImage("png", 1, 10, 10, data=jpeg_bytes(10, 10, fmt="PNG"))

        with pytest.raises(ImageDecodeError, match="unsupported encoding"):
            assemble([image], tmp_path / "scan.pdf")

    def test_assemble_when_beyond_pixel_limit_then_raises_decode_error(self, tmp_path, oversized_jpeg, find_parts):
        output = tmp_path / "scan.pdf"
        image = CapturedImage("big", 1, 16320, 12240, data=oversized_jpeg)

        with pytest.raises(ImageDecodeError, match="big"):
            assemble([image], output)

        assert not output.exists()
        assert find_parts(tmp_path) == []

    def test_assemble_when_failure_then_previous_document_untouched(self, tmp_path, reference_images):
        """A failed run never replaces an existing valid document."""
        output = tmp_path / "scan.pdf"
        assemble(reference_images, output)
        before = output.read_bytes()

        with pytest.raises(ImageDecodeError):
            assemble([CapturedImage("bad", 1, 5, 5, data=b"xx")], output)

        assert output.read_bytes() == before

    def test_assemble_when_output_unwritable_then_raises_write_error(self, tmp_path, make_captured):
        blocker = tmp_path / "blocker"
        blocker.write_text("x")

        with pytest.raises(WriteError):
            assemble([make_captured(1, 10, 10)], blocker / "scan.pdf")

    def test_assemble_when_cancelled_mid_run_then_raises_and_cleans_up(self, tmp_path, reference_images, find_parts):
        output = tmp_path / "scan.pdf"
        cancel = threading.Event()

        def progress(done, total):
            if done == 1:
                cancel.set()

        with pytest.raises(AssemblyCancelled) as exc_info:
            assemble(reference_images, output, cancel_event=cancel, progress=progress)

        assert exc_info.value.pages_written == 1
        assert not output.exists()
        assert find_parts(tmp_path) == []

    def test_assemble_when_cancelled_after_last_page_then_not_finalized(self, tmp_path, make_captured):
        output = tmp_path / "scan.pdf"
        cancel = threading.Event()

        with pytest.raises(AssemblyCancelled):
            assemble([make_captured(1, 10, 10)], output, cancel_event=cancel, progress=lambda d, t: cancel.set())

        assert not output.exists()
