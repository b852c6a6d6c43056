"""Document and page rendering data models."""
from dataclasses import dataclass, field
from typing import List, Tuple

# a, b, c, d, e, f of an affine transform
Transform = Tuple[float, float, float, float, float, float]


@dataclass(frozen=True)
class TextRun:
    """One positioned fragment of text reported for a rendered page."""
    text: str
    transform: Transform  # page space, origin at the baseline (bottom-up)
    width: float  # unscaled page units
    height: float  # font height; 0 when unknown


@dataclass(frozen=True)
class Viewport:
    """Mapping from page space to the rendered bitmap at a given scale."""
    scale: float
    width: float
    height: float
    transform: Transform


@dataclass(frozen=True)
class PageText:
    """Cached text runs for one page together with the viewport they were rendered at."""
    runs: Tuple[TextRun, ...]
    viewport: Viewport

    @property
    def text(self) -> str:
        return " ".join(run.text for run in self.runs)


@dataclass
class RenderedPage:
    """Output of a single page render."""
    page_number: int
    bitmap: bytes  # PNG encoded
    viewport: Viewport
    runs: List[TextRun] = field(default_factory=list)
