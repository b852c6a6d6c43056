"""Selection data models."""
from dataclasses import dataclass
from enum import Enum


class SelectionState(str, Enum):
    """Lifecycle of a rectangular selection."""
    IDLE = "idle"
    DRAGGING = "dragging"
    FINALIZED = "finalized"
    CLEARED = "cleared"


@dataclass(frozen=True)
class SelectionRect:
    """Selection rectangle in canvas pixel space of the current page."""
    x: float
    y: float
    width: float
    height: float

    @property
    def area(self) -> float:
        return self.width * self.height


@dataclass(frozen=True)
class ScoredTextItem:
    """A run that survived coverage filtering, ready for ordering and heading checks."""
    text: str
    font_size: float
    vertical_position: float
