"""Word-aligned chunking and semantic index construction."""
import asyncio
import logging
from typing import Callable, List, Optional

import numpy as np

from config import CHUNK_SIZE
from models.chunk import Chunk
from services.embedding_model import EmbeddingModel

logger = logging.getLogger(__name__)


def chunk_text(text: str, size: int = CHUNK_SIZE) -> List[str]:
    """
    Split text into word-aligned chunks.

    Words accumulate into the running chunk until its space-joined length
    reaches `size`; the remainder is flushed as a final, possibly short chunk.

    Args:
        text: Full document text
        size: Target chunk length in characters

    Returns:
        List of chunk strings, empty for blank input
    """
    if size <= 0:
        raise ValueError("Chunk size must be positive")

    chunks = []
    current: List[str] = []
    length = 0  # len(" ".join(current))

    for word in text.split():
        length += len(word) + (1 if current else 0)
        current.append(word)
        if length >= size:
            chunks.append(" ".join(current))
            current = []
            length = 0

    if current:
        chunks.append(" ".join(current))

    return chunks


class ChunkingEngine:
    """Builds the in-memory semantic index for one document."""

    def __init__(self, chunk_size: int = CHUNK_SIZE):
        """
        Initialize ChunkingEngine.

        Args:
            chunk_size: Target chunk size in characters
        """
        self.chunk_size = chunk_size

    async def build_index(
        self,
        text: str,
        embedding_model: Optional[EmbeddingModel],
        is_current: Optional[Callable[[], bool]] = None
    ) -> List[Chunk]:
        """
        Chunk the document text and embed every chunk in document order.

        Chunks are embedded one at a time in a worker thread, so the event
        loop keeps answering questions (without supplements) meanwhile.

        Args:
            text: Concatenated text of all pages
            embedding_model: Embedding client, None when unavailable
            is_current: Returns False once the document has been replaced

        Returns:
            The full ordered index, or [] if embedding is unavailable, fails,
            or the document was replaced mid-build
        """
        if embedding_model is None:
            logger.info("No embedding model available; skipping index build")
            return []

        pieces = chunk_text(text, self.chunk_size)
        logger.info(f"Building index over {len(pieces)} chunks")

        chunks = []
        for index, piece in enumerate(pieces):
            if is_current is not None and not is_current():
                logger.info("Document changed during index build; discarding partial index")
                return []
            try:
                embedding = await asyncio.to_thread(embedding_model.embed_text, piece)
            except (RuntimeError, ValueError) as e:
                logger.warning(f"Embedding failed for chunk {index}; index disabled: {e}")
                return []
            chunks.append(Chunk(text=piece, embedding=np.asarray(embedding, dtype=float), index=index))

        if is_current is not None and not is_current():
            logger.info("Document changed during index build; discarding partial index")
            return []

        logger.info(f"Built index with {len(chunks)} chunks")
        return chunks
