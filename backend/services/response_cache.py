"""Time-bounded cache for answers."""
import hashlib
import logging
import time
from typing import Any, Callable, Dict, Hashable, Optional, Tuple

from config import CACHE_TTL_SECONDS

logger = logging.getLogger(__name__)


def hash_key(context: str, question: str) -> str:
    """Cache key for the HTTP variant: digest of `context|question`."""
    return hashlib.sha256(f"{context}|{question}".encode("utf-8")).hexdigest()


class ResponseCache:
    """In-memory cache whose entries expire `ttl_seconds` after being stored."""

    def __init__(
        self,
        ttl_seconds: float = CACHE_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic
    ):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: Dict[Hashable, Tuple[float, Any]] = {}

    def get(self, key: Hashable) -> Optional[Any]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        expires_at, value = entry
        if self._clock() >= expires_at:
            del self._entries[key]
            return None
        logger.debug("Cache hit")
        return value

    def set(self, key: Hashable, value: Any) -> None:
        self._entries[key] = (self._clock() + self.ttl_seconds, value)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
