"""
Tests for the docscan command-line interface.
"""

import pytest
from unittest.mock import patch

from pypdf import PdfReader

from docscan_toolkit.cli import EXIT_EMPTY, EXIT_FAILED, EXIT_OK, main
from docscan_toolkit.core.errors import WriteError


@pytest.fixture
def jpeg_files(tmp_path, jpeg_bytes):
    """Two JPEG files named like timestamped captures."""
    captures = tmp_path / "captures"
    captures.mkdir()
    paths = []
    for stamp, size in (("1700000000001", (640, 480)), ("1700000000002", (480, 640))):
        path = captures / f"{stamp}.jpg"
        path.write_bytes(jpeg_bytes(*size))
        paths.append(path)
    return paths


class TestMain:
    """Tests for main()."""

    def test_main_when_images_then_writes_pdf(self, tmp_path, jpeg_files, capsys):
        # Arrange
        output = tmp_path / "document.pdf"

        # Act
        code = main([str(output), *(str(p) for p in jpeg_files)])

        # Assert
        assert code == EXIT_OK
        assert len(PdfReader(output).pages) == 2
        assert "PDF created" in capsys.readouterr().out

    def test_main_when_from_dir_then_sorted_by_name(self, tmp_path, jpeg_files, page_images):
        output = tmp_path / "document.pdf"

        code = main([str(output), "--from-dir", str(jpeg_files[0].parent)])

        assert code == EXIT_OK
        reader = PdfReader(output)
        widths = [int(page_images(page)[0]["/Width"]) for page in reader.pages]
        assert widths == [640, 480]

    def test_main_when_no_images_then_exit_empty_and_no_files(self, tmp_path, capsys):
        output = tmp_path / "document.pdf"

        code = main([str(output)])

        assert code == EXIT_EMPTY
        assert list(tmp_path.iterdir()) == []
        assert "No images" in capsys.readouterr().err

    def test_main_when_bad_image_then_exit_failed(self, tmp_path, capsys):
        bad = tmp_path / "bad.jpg"
        bad.write_text("not an image")
        output = tmp_path / "document.pdf"

        code = main([str(output), str(bad)])

        assert code == EXIT_FAILED
        assert not output.exists()
        assert "bad" in capsys.readouterr().err

    def test_main_when_letter_page_size_then_media_box_letter(self, tmp_path, jpeg_files):
        output = tmp_path / "document.pdf"

        main([str(output), str(jpeg_files[0]), "--page-size", "letter", "--title", "Receipts"])

        reader = PdfReader(output)
        box = reader.pages[0].mediabox
        assert (float(box.width), float(box.height)) == (612.0, 792.0)
        assert reader.metadata.title == "Receipts"

    def test_main_when_invalid_max_scale_then_usage_error(self, tmp_path, jpeg_files):
        with pytest.raises(SystemExit) as exc_info:
            main([str(tmp_path / "d.pdf"), str(jpeg_files[0]), "--max-scale", "0"])
        assert exc_info.value.code == 2

    def test_main_when_output_parent_is_file_then_exit_failed(self, tmp_path, sample_jpeg, capsys):
        blocker = tmp_path / "blocker"
        blocker.write_text("x")

        code = main([str(blocker / "out.pdf"), str(sample_jpeg)])

        assert code == EXIT_FAILED
        assert "docscan: Cannot write" in capsys.readouterr().err
        assert blocker.read_text() == "x"

    def test_main_when_done_then_only_document_left_beside_inputs(self, tmp_path, sample_jpeg):
        output = tmp_path / "out.pdf"

        code = main([str(output), str(sample_jpeg)])

        assert code == EXIT_OK
        assert sorted(p.name for p in tmp_path.iterdir()) == ["out.pdf", "sample.jpg"]

    def test_main_when_assembly_fails_then_no_files_left_beside_inputs(self, tmp_path, sample_jpeg):
        output = tmp_path / "out.pdf"
        failure = WriteError(output, "disk full")

        with patch("docscan_toolkit.cli.assemble", side_effect=failure):
            code = main([str(output), str(sample_jpeg)])

        assert code == EXIT_FAILED
        assert sorted(p.name for p in tmp_path.iterdir()) == ["sample.jpg"]

    def test_main_when_version_flag_then_prints_version(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])

        assert exc_info.value.code == 0
        assert capsys.readouterr().out.startswith("docscan ")
