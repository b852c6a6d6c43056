"""Single-slot holder for the in-flight page render."""
import asyncio
import logging
from typing import Any, Coroutine, Optional

logger = logging.getLogger(__name__)


class RenderSlot:
    """
    Owns at most one render task.

    Starting a render cancels whatever render is still running, so two
    renders never race to draw the same page surface.
    """

    def __init__(self):
        self._task: Optional[asyncio.Task] = None

    @property
    def current(self) -> Optional[asyncio.Task]:
        return self._task

    def cancel_and_replace(self, coro: Coroutine[Any, Any, Any]) -> asyncio.Task:
        """Cancel the running render (if any) and schedule `coro` in its place."""
        self.cancel()
        self._task = asyncio.ensure_future(coro)
        self._task.add_done_callback(self._release)
        return self._task

    def cancel(self) -> None:
        if self._task is not None and not self._task.done():
            logger.debug("Cancelling in-flight render")
            self._task.cancel()
        self._task = None

    def _release(self, task: asyncio.Task) -> None:
        if self._task is task:
            self._task = None
