"""Selection extractor: turn a rectangle over a page into ordered, heading-filtered text."""
import logging
from typing import List, Optional

from config import (
    COVERAGE_THRESHOLD,
    HEADING_SIZE_RATIO,
    HEADING_MAJORITY_RATIO,
    SMALL_SELECTION_MAX_RUNS,
    FALLBACK_RUN_HEIGHT,
)
from models.document import PageText
from models.selection import SelectionRect, ScoredTextItem
from services.coordinate_mapper import run_box, run_height
from services.geometry import coverage_ratio

logger = logging.getLogger(__name__)


class SelectionExtractor:
    """Collect the text runs covered by a selection rectangle."""

    def __init__(
        self,
        coverage_threshold: float = COVERAGE_THRESHOLD,
        heading_size_ratio: float = HEADING_SIZE_RATIO,
        heading_majority_ratio: float = HEADING_MAJORITY_RATIO,
        small_selection_max_runs: int = SMALL_SELECTION_MAX_RUNS,
        fallback_height: float = FALLBACK_RUN_HEIGHT
    ):
        """
        Initialize the extractor.

        Args:
            coverage_threshold: Minimum fraction of a run's box that must lie inside the selection
            heading_size_ratio: Runs larger than average font size * ratio are heading candidates
            heading_majority_ratio: Headings are kept when their share of the runs exceeds this
            small_selection_max_runs: Selections with this many runs or fewer keep everything
            fallback_height: Height used for runs that report none
        """
        self.coverage_threshold = coverage_threshold
        self.heading_size_ratio = heading_size_ratio
        self.heading_majority_ratio = heading_majority_ratio
        self.small_selection_max_runs = small_selection_max_runs
        self.fallback_height = fallback_height

    def extract(self, selection: Optional[SelectionRect], page_text: Optional[PageText]) -> str:
        """
        Extract the text beneath a selection.

        Args:
            selection: Rectangle in canvas pixels at the page's viewport scale
            page_text: Cached runs for the displayed page, None if not rendered yet

        Returns:
            Covered run texts joined by single spaces; "" when nothing is covered
        """
        if selection is None or page_text is None:
            return ""
        if selection.width <= 0 or selection.height <= 0:
            return ""

        items = self.select_items(selection, page_text)
        if not items:
            logger.debug("Selection covers no text runs")
            return ""

        kept = self.suppress_headings(items)
        text = " ".join(item.text for item in kept).strip()
        logger.debug(f"Extracted {len(kept)}/{len(items)} runs ({len(text)} chars)")
        return text

    def select_items(self, selection: SelectionRect, page_text: PageText) -> List[ScoredTextItem]:
        """Runs covered at or above the threshold, ordered top to bottom."""
        items = []
        for run in page_text.runs:
            box = run_box(run, page_text.viewport, self.fallback_height)
            if box.width <= 0 or box.height <= 0:
                continue
            if coverage_ratio(selection, box) >= self.coverage_threshold:
                items.append(ScoredTextItem(
                    text=run.text,
                    font_size=run_height(run, self.fallback_height),
                    vertical_position=box.y
                ))

        # sorted() is stable, so runs on the same line keep their encounter order
        return sorted(items, key=lambda item: item.vertical_position)

    def suppress_headings(self, items: List[ScoredTextItem]) -> List[ScoredTextItem]:
        """
        Drop oversized runs that look like stray page titles.

        Headings survive when they make up most of the selection, or when the
        selection is so small the user evidently meant to grab the heading.
        """
        total = len(items)
        if total == 0:
            return []

        avg_font_size = sum(item.font_size for item in items) / total
        limit = avg_font_size * self.heading_size_ratio
        heading_count = sum(1 for item in items if item.font_size > limit)

        if total <= self.small_selection_max_runs:
            return list(items)
        if heading_count / total > self.heading_majority_ratio:
            return list(items)

        return [item for item in items if item.font_size <= limit]
