"""In-memory vector store for one document's chunks."""
import logging
from typing import List, Sequence, Union

import numpy as np

from models.chunk import Chunk, ScoredChunk

logger = logging.getLogger(__name__)

Vector = Union[Sequence[float], np.ndarray]


def cosine_similarity(u: Vector, v: Vector) -> float:
    """Cosine similarity of two vectors; 0.0 when either has zero magnitude."""
    a = np.asarray(u, dtype=float)
    b = np.asarray(v, dtype=float)
    norm_a = np.linalg.norm(a)
    norm_b = np.linalg.norm(b)
    if norm_a == 0 or norm_b == 0:
        return 0.0
    return float(np.dot(a, b) / (norm_a * norm_b))


class VectorStore:
    """Ordered chunk list with a flat cosine-similarity scan."""

    def __init__(self):
        self._chunks: List[Chunk] = []

    def replace(self, chunks: List[Chunk]) -> None:
        """Swap in a complete index. The previous one is discarded, never merged."""
        self._chunks = list(chunks)
        logger.info(f"Vector store now holds {len(self._chunks)} chunks")

    def clear(self) -> None:
        self._chunks = []

    def count(self) -> int:
        return len(self._chunks)

    @property
    def chunks(self) -> List[Chunk]:
        return list(self._chunks)

    def score(self, query_embedding: Vector) -> List[ScoredChunk]:
        """
        Score every chunk against a query vector.

        Args:
            query_embedding: Vector of the same dimensionality as the chunks

        Returns:
            ScoredChunk per chunk, in document order (not sorted)

        Raises:
            ValueError: If query_embedding is empty
        """
        if query_embedding is None or len(query_embedding) == 0:
            raise ValueError("Query embedding cannot be empty")

        return [
            ScoredChunk(chunk=chunk, relevance_score=cosine_similarity(query_embedding, chunk.embedding))
            for chunk in self._chunks
        ]
