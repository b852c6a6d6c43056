"""Unit tests for PDF loading and rendering with PyMuPDF."""
import sys
from pathlib import Path

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))

import fitz
import pytest
from models.document import PageText, RenderedPage
from models.selection import SelectionRect
from services.coordinate_mapper import run_box
from services.document_loader import DocumentLoader
from services.selection_extractor import SelectionExtractor


@pytest.fixture
def pdf_path(tmp_path):
    """Two-page PDF with one line of text per page."""
    doc = fitz.open()
    first = doc.new_page(width=600, height=800)
    first.insert_text((72, 100), "Hello world", fontsize=12)
    second = doc.new_page(width=600, height=800)
    second.insert_text((72, 200), "Second page", fontsize=12)
    path = tmp_path / "sample.pdf"
    doc.save(str(path))
    doc.close()
    return path


@pytest.fixture
def document(pdf_path):
    document = DocumentLoader().open(str(pdf_path))
    yield document
    document.close()


class TestDocumentLoader:
    """Test suite for DocumentLoader and PdfDocument."""

    def test_open_reports_pages(self, document):
        assert document.filename == "sample.pdf"
        assert document.total_pages == 2

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            DocumentLoader().open(str(tmp_path / "missing.pdf"))

    def test_open_bytes(self, pdf_path):
        document = DocumentLoader().open_bytes(pdf_path.read_bytes(), "upload.pdf")
        assert document.filename == "upload.pdf"
        assert document.total_pages == 2
        document.close()

    def test_page_and_full_text(self, document):
        assert document.page_text(1) == "Hello world"
        assert document.page_text(2) == "Second page"
        assert document.full_text() == "Hello world Second page"

    def test_runs_use_baseline_transform(self, document):
        rendered = document.render(1, 1.0)

        [run] = rendered.runs
        assert run.text == "Hello world"
        assert run.height == pytest.approx(12)
        assert run.transform[4] == pytest.approx(72, abs=0.5)
        assert run.transform[5] == pytest.approx(700, abs=0.5)
        assert run.width > 0

        box = run_box(run, rendered.viewport)
        assert box.left == pytest.approx(72, abs=0.5)
        assert box.bottom == pytest.approx(100, abs=0.5)

    def test_render_produces_png(self, document):
        rendered = document.render(2, 2.0)

        assert rendered.page_number == 2
        assert rendered.bitmap.startswith(b"\x89PNG")
        assert rendered.viewport.scale == 2.0
        assert rendered.viewport.width == pytest.approx(1200)
        assert rendered.viewport.height == pytest.approx(1600)
        assert rendered.viewport.transform == (2.0, 0.0, 0.0, -2.0, 0.0, pytest.approx(1600))

    @pytest.mark.parametrize("page_number", [0, 3])
    def test_page_out_of_range(self, document, page_number):
        with pytest.raises(ValueError, match="out of range"):
            document.render(page_number, 1.0)

    def test_non_positive_scale(self, document):
        with pytest.raises(ValueError, match="scale must be positive"):
            document.render(1, 0)

    def test_selection_over_rendered_page(self, document):
        rendered = document.render(1, 1.5)
        page_text = PageText(runs=tuple(rendered.runs), viewport=rendered.viewport)

        # baseline at 100pt -> 150px; run height stays 12
        selection = SelectionRect(x=100, y=130, width=200, height=30)
        assert SelectionExtractor().extract(selection, page_text) == "Hello world"
        assert SelectionExtractor().extract(SelectionRect(x=100, y=300, width=200, height=30), page_text) == ""

    def test_rendered_page_requires_viewport(self):
        with pytest.raises(TypeError):
            RenderedPage(page_number=1, bitmap=b"")
