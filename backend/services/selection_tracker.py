"""Pointer-driven state machine for the rectangular selection."""
import logging
from typing import Optional, Tuple

from models.selection import SelectionRect, SelectionState

logger = logging.getLogger(__name__)


class SelectionTracker:
    """Tracks one selection through IDLE -> DRAGGING -> FINALIZED -> CLEARED."""

    def __init__(self):
        self.state = SelectionState.IDLE
        self.rect: Optional[SelectionRect] = None
        self._origin: Optional[Tuple[float, float]] = None

    def pointer_down(self, x: float, y: float) -> None:
        """Start a new drag, discarding any previous selection."""
        self._origin = (x, y)
        self.rect = SelectionRect(x=x, y=y, width=0, height=0)
        self.state = SelectionState.DRAGGING

    def pointer_move(self, x: float, y: float) -> Optional[SelectionRect]:
        """Stretch the rectangle from the drag origin; ignored unless dragging."""
        if self.state != SelectionState.DRAGGING:
            return self.rect
        origin_x, origin_y = self._origin
        self.rect = SelectionRect(
            x=min(origin_x, x),
            y=min(origin_y, y),
            width=abs(x - origin_x),
            height=abs(y - origin_y)
        )
        return self.rect

    def pointer_up(self) -> Optional[SelectionRect]:
        """Finalize the drag and return the selection, or None if no drag was active."""
        if self.state != SelectionState.DRAGGING:
            return None
        self.state = SelectionState.FINALIZED
        self._origin = None
        logger.debug(f"Selection finalized: {self.rect}")
        return self.rect

    def clear(self) -> None:
        self.rect = None
        self._origin = None
        self.state = SelectionState.CLEARED

    def page_changed(self) -> None:
        # a rectangle drawn on another page means nothing here
        if self.state != SelectionState.IDLE:
            self.clear()

    @property
    def finalized(self) -> Optional[SelectionRect]:
        return self.rect if self.state == SelectionState.FINALIZED else None
