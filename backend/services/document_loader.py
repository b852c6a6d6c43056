"""Document loading and page rendering backed by PyMuPDF."""
import logging
import os
from typing import List
import fitz  # PyMuPDF

from models.document import RenderedPage, TextRun, Viewport

logger = logging.getLogger(__name__)


class PdfDocument:
    """An opened PDF that can render pages and report positioned text runs."""

    def __init__(self, pdf_document: "fitz.Document", filename: str):
        self._pdf = pdf_document
        self.filename = filename

    @property
    def total_pages(self) -> int:
        return self._pdf.page_count

    def _page(self, page_number: int) -> "fitz.Page":
        if page_number < 1 or page_number > self.total_pages:
            raise ValueError(
                f"Page {page_number} out of range (document has {self.total_pages} pages)"
            )
        return self._pdf[page_number - 1]  # 1-indexed

    @staticmethod
    def viewport_for(page: "fitz.Page", scale: float) -> Viewport:
        """Viewport flipping bottom-up page space into top-down pixels at `scale`."""
        page_height = page.rect.height
        return Viewport(
            scale=scale,
            width=page.rect.width * scale,
            height=page_height * scale,
            transform=(scale, 0.0, 0.0, -scale, 0.0, page_height * scale)
        )

    @staticmethod
    def extract_runs(page: "fitz.Page") -> List[TextRun]:
        """
        Positioned text runs for a page, one per PyMuPDF span.

        PyMuPDF reports span origins top-down; runs carry a bottom-up
        page-space transform so they match the viewport convention.
        """
        page_height = page.rect.height
        runs = []
        for block in page.get_text("dict")["blocks"]:
            if "lines" not in block:
                continue

            for line in block["lines"]:
                for span in line["spans"]:
                    text = span["text"]
                    if not text.strip():
                        continue
                    size = float(span["size"])
                    origin_x, origin_y = span["origin"]
                    x0, _, x1, _ = span["bbox"]
                    runs.append(TextRun(
                        text=text,
                        transform=(size, 0.0, 0.0, size, origin_x, page_height - origin_y),
                        width=x1 - x0,
                        height=size
                    ))
        return runs

    def render(self, page_number: int, scale: float) -> RenderedPage:
        """
        Render a page to PNG and collect its text runs.

        Args:
            page_number: 1-indexed page number
            scale: Render scale (1.0 = 72 dpi)

        Returns:
            RenderedPage with bitmap, runs and viewport

        Raises:
            ValueError: If the page number is out of range or scale is not positive
        """
        if scale <= 0:
            raise ValueError("Render scale must be positive")

        page = self._page(page_number)
        pixmap = page.get_pixmap(matrix=fitz.Matrix(scale, scale))
        runs = self.extract_runs(page)

        logger.debug(f"Rendered {self.filename} page {page_number} at {scale}x: {len(runs)} runs")
        return RenderedPage(
            page_number=page_number,
            bitmap=pixmap.tobytes("png"),
            runs=runs,
            viewport=self.viewport_for(page, scale)
        )

    def page_text(self, page_number: int) -> str:
        """Run texts of a page joined by single spaces."""
        return " ".join(run.text for run in self.extract_runs(self._page(page_number)))

    def full_text(self) -> str:
        """Text of all pages in page order, joined by single spaces."""
        return " ".join(self.page_text(n) for n in range(1, self.total_pages + 1))

    def close(self) -> None:
        self._pdf.close()


class DocumentLoader:
    """Opens PDF files for rendering."""

    def open(self, filepath: str) -> PdfDocument:
        """
        Open a PDF file.

        Args:
            filepath: Path to the PDF file

        Returns:
            PdfDocument ready for rendering

        Raises:
            FileNotFoundError: If the file does not exist
        """
        if not os.path.exists(filepath):
            logger.error(f"Document not found: {filepath}")
            raise FileNotFoundError(f"Document not found: {filepath}")

        try:
            pdf_document = fitz.open(filepath)
        except Exception as e:
            logger.error(f"Failed to open PDF {filepath}: {str(e)}")
            raise

        filename = os.path.basename(filepath)
        logger.info(f"Loaded {filename}: {pdf_document.page_count} pages")
        return PdfDocument(pdf_document, filename)

    def open_bytes(self, data: bytes, filename: str = "document.pdf") -> PdfDocument:
        """Open a PDF from raw bytes (e.g. an upload)."""
        pdf_document = fitz.open(stream=data, filetype="pdf")
        logger.info(f"Loaded {filename} from memory: {pdf_document.page_count} pages")
        return PdfDocument(pdf_document, filename)
