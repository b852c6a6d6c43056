"""Chunk data models."""
from dataclasses import dataclass
import numpy as np


@dataclass
class Chunk:
    """Represents a word-aligned slice of document text and its embedding."""
    text: str
    embedding: np.ndarray
    index: int = 0  # position in document order


@dataclass
class ScoredChunk:
    """Chunk with relevance score from retrieval."""
    chunk: Chunk
    relevance_score: float

    @property
    def text(self) -> str:
        return self.chunk.text
