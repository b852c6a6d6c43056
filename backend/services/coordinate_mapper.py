"""Map text runs from page space into the top-down pixel space of a rendered page."""
from typing import Sequence

from config import FALLBACK_RUN_HEIGHT
from models.document import TextRun, Transform, Viewport
from services.geometry import Rect


def multiply_transforms(m1: Sequence[float], m2: Sequence[float]) -> Transform:
    """Compose two affine transforms; the result applies m2 first, then m1."""
    return (
        m1[0] * m2[0] + m1[2] * m2[1],
        m1[1] * m2[0] + m1[3] * m2[1],
        m1[0] * m2[2] + m1[2] * m2[3],
        m1[1] * m2[2] + m1[3] * m2[3],
        m1[0] * m2[4] + m1[2] * m2[5] + m1[4],
        m1[1] * m2[4] + m1[3] * m2[5] + m1[5],
    )


def run_height(run: TextRun, fallback_height: float = FALLBACK_RUN_HEIGHT) -> float:
    """Height reported by the run, or the fallback when it reports none."""
    return run.height or fallback_height


def run_box(
    run: TextRun,
    viewport: Viewport,
    fallback_height: float = FALLBACK_RUN_HEIGHT
) -> Rect:
    """
    Bounding box of a run in canvas pixels.

    Run origins sit on the text baseline, so the top edge is the mapped
    baseline minus the run height. Width is scaled by the viewport; height
    comes straight from the run metrics.
    """
    combined = multiply_transforms(viewport.transform, run.transform)
    height = run_height(run, fallback_height)
    return Rect(
        x=combined[4],
        y=combined[5] - height,
        width=run.width * viewport.scale,
        height=height,
    )
