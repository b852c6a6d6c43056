"""Unit tests for SelectionExtractor."""
import sys
from pathlib import Path

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))

import pytest
from models.selection import SelectionRect, ScoredTextItem
from services.selection_extractor import SelectionExtractor
from helpers import make_run, make_page


class TestSelectionExtractor:
    """Test suite for SelectionExtractor."""

    @pytest.fixture
    def extractor(self):
        return SelectionExtractor()

    @pytest.fixture
    def three_words(self):
        # encounter order differs from reading order on purpose
        return make_page([
            make_run("gamma", x=100, top=140, width=50, height=10),
            make_run("alpha", x=100, top=100, width=50, height=10),
            make_run("beta", x=100, top=120, width=50, height=10),
        ])

    def test_exact_bounding_selection_orders_top_to_bottom(self, extractor, three_words):
        selection = SelectionRect(x=100, y=100, width=50, height=50)
        assert extractor.extract(selection, three_words) == "alpha beta gamma"

    def test_zero_area_selection_is_empty(self, extractor, three_words):
        assert extractor.extract(SelectionRect(x=110, y=105, width=0, height=20), three_words) == ""
        assert extractor.extract(SelectionRect(x=110, y=105, width=20, height=0), three_words) == ""

    def test_uncached_page_is_empty(self, extractor):
        assert extractor.extract(SelectionRect(x=0, y=0, width=100, height=100), None) == ""

    def test_no_selection_is_empty(self, extractor, three_words):
        assert extractor.extract(None, three_words) == ""

    def test_selection_away_from_text_is_empty(self, extractor, three_words):
        assert extractor.extract(SelectionRect(x=400, y=400, width=50, height=50), three_words) == ""

    def test_coverage_threshold(self, extractor):
        page = make_page([make_run("word", x=0, top=0, width=100, height=10)])
        # 30% of the run's width is inside the selection
        assert extractor.extract(SelectionRect(x=70, y=0, width=100, height=10), page) == "word"
        # 20% is not enough
        assert extractor.extract(SelectionRect(x=80, y=0, width=100, height=10), page) == ""

    def test_threshold_is_configurable(self):
        page = make_page([make_run("word", x=0, top=0, width=100, height=10)])
        strict = SelectionExtractor(coverage_threshold=0.9)
        assert strict.extract(SelectionRect(x=50, y=0, width=100, height=10), page) == ""

    def test_degenerate_runs_are_skipped(self, extractor):
        page = make_page([
            make_run("", x=10, top=10, width=0, height=10),
            make_run("kept", x=10, top=30, width=20, height=10),
        ])
        assert extractor.extract(SelectionRect(x=0, y=0, width=100, height=100), page) == "kept"

    def test_same_line_keeps_encounter_order(self, extractor):
        page = make_page([
            make_run("left", x=10, top=50, width=30, height=10),
            make_run("right", x=50, top=50, width=30, height=10),
        ])
        assert extractor.extract(SelectionRect(x=0, y=40, width=100, height=30), page) == "left right"

    def test_oversized_heading_dropped_from_larger_selection(self, extractor):
        page = make_page([
            make_run("Chapter", x=10, top=10, width=80, height=20),
            make_run("one", x=10, top=40, width=30, height=10),
            make_run("two", x=10, top=55, width=30, height=10),
            make_run("three", x=10, top=70, width=30, height=10),
            make_run("four", x=10, top=85, width=30, height=10),
        ])
        result = extractor.extract(SelectionRect(x=0, y=0, width=200, height=200), page)
        assert result == "one two three four"

    def test_small_selection_keeps_heading(self, extractor):
        page = make_page([
            make_run("Title", x=10, top=10, width=80, height=40),
            make_run("body", x=10, top=60, width=30, height=10),
            make_run("text", x=10, top=75, width=30, height=10),
        ])
        result = extractor.extract(SelectionRect(x=0, y=0, width=200, height=200), page)
        assert result == "Title body text"


class TestHeadingSuppression:
    """Test suite for the heading heuristic on its own."""

    @pytest.fixture
    def extractor(self):
        return SelectionExtractor()

    def _items(self, sizes):
        return [
            ScoredTextItem(text=f"w{i}", font_size=size, vertical_position=float(i))
            for i, size in enumerate(sizes)
        ]

    def test_single_heading_among_body_text_removed(self, extractor):
        kept = extractor.suppress_headings(self._items([10, 10, 10, 10, 20]))
        assert [item.font_size for item in kept] == [10, 10, 10, 10]

    def test_three_or_fewer_runs_keep_everything(self, extractor):
        items = self._items([10, 10, 40])
        assert extractor.suppress_headings(items) == items

    def test_heading_majority_keeps_everything(self, extractor):
        items = self._items([10, 10, 10, 10, 10, 10, 40, 40, 40, 40, 40, 40, 40])
        # average 26.15, limit 39.2: seven of thirteen are headings
        assert extractor.suppress_headings(items) == items

    def test_empty(self, extractor):
        assert extractor.suppress_headings([]) == []
