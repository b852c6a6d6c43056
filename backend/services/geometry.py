"""Axis-aligned rectangle intersection and coverage."""
from dataclasses import dataclass
from typing import Any, Mapping, Union


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle in a top-down pixel space."""
    x: float
    y: float
    width: float
    height: float

    @property
    def left(self) -> float:
        return self.x

    @property
    def top(self) -> float:
        return self.y

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def area(self) -> float:
        return self.width * self.height

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "Rect":
        """Build a Rect from a dict using either x/y or left/top keys."""
        x = data["x"] if "x" in data else data["left"]
        y = data["y"] if "y" in data else data["top"]
        return cls(x=x, y=y, width=data["width"], height=data["height"])


RectLike = Union[Rect, Mapping[str, Any], Any]


def _as_rect(value: RectLike) -> Rect:
    if isinstance(value, Rect):
        return value
    if isinstance(value, Mapping):
        return Rect.from_mapping(value)
    # Any object exposing x, y, width, height (SelectionRect, etc.)
    return Rect(x=value.x, y=value.y, width=value.width, height=value.height)


def overlap_area(a: RectLike, b: RectLike) -> float:
    """
    Area of the intersection of two rectangles.

    Returns 0 for disjoint rectangles and for degenerate (zero-area) ones.
    """
    a, b = _as_rect(a), _as_rect(b)
    x_overlap = max(0.0, min(a.right, b.right) - max(a.left, b.left))
    y_overlap = max(0.0, min(a.bottom, b.bottom) - max(a.top, b.top))
    return x_overlap * y_overlap


def coverage_ratio(selection: RectLike, box: RectLike) -> float:
    """Fraction of `box` that lies inside `selection`; 0.0 when `box` has no area."""
    box = _as_rect(box)
    if box.width <= 0 or box.height <= 0:
        return 0.0
    return overlap_area(selection, box) / box.area
