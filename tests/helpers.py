"""Builders shared by the test suite."""
from typing import List, Optional

from models.document import PageText, RenderedPage, TextRun, Viewport

PAGE_HEIGHT = 800.0


def make_viewport(scale: float = 1.0, page_height: float = PAGE_HEIGHT) -> Viewport:
    return Viewport(
        scale=scale,
        width=600.0 * scale,
        height=page_height * scale,
        transform=(scale, 0.0, 0.0, -scale, 0.0, page_height * scale)
    )


def make_run(text: str, x: float, top: float, width: float, height: float,
             page_height: float = PAGE_HEIGHT) -> TextRun:
    """A run whose box at scale 1.0 is exactly (x, top, width, height)."""
    baseline = top + height
    return TextRun(
        text=text,
        transform=(height, 0.0, 0.0, height, x, page_height - baseline),
        width=width,
        height=height
    )


def make_page(runs: List[TextRun], scale: float = 1.0) -> PageText:
    return PageText(runs=tuple(runs), viewport=make_viewport(scale))


class FakeDocument:
    """Stands in for PdfDocument with canned runs per page."""

    def __init__(self, pages: List[List[TextRun]], filename: str = "fake.pdf"):
        self.pages = pages
        self.filename = filename
        self.render_calls: List[int] = []
        self.closed = False

    @property
    def total_pages(self) -> int:
        return len(self.pages)

    def render(self, page_number: int, scale: float) -> RenderedPage:
        if page_number < 1 or page_number > self.total_pages:
            raise ValueError(f"Page {page_number} out of range")
        self.render_calls.append(page_number)
        return RenderedPage(
            page_number=page_number,
            bitmap=b"",
            runs=list(self.pages[page_number - 1]),
            viewport=make_viewport(scale)
        )

    def page_text(self, page_number: int) -> str:
        return " ".join(run.text for run in self.pages[page_number - 1])

    def full_text(self) -> str:
        return " ".join(self.page_text(n) for n in range(1, self.total_pages + 1))

    def close(self) -> None:
        self.closed = True


def fake_embedder(vectors: Optional[dict] = None, default=(1.0, 0.0)):
    """Mock embedding model returning vectors from a lookup table."""
    from unittest.mock import Mock

    vectors = vectors or {}
    model = Mock()
    model.embed_text.side_effect = lambda text: list(vectors.get(text, default))
    return model
