"""Unit tests for the in-memory VectorStore."""
import sys
from pathlib import Path

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))

import math
import numpy as np
import pytest
from models.chunk import Chunk
from services.vector_store import VectorStore, cosine_similarity


def make_chunk(text, vector, index=0):
    return Chunk(text=text, embedding=np.asarray(vector, dtype=float), index=index)


class TestCosineSimilarity:
    """Test suite for cosine_similarity."""

    def test_self_similarity_is_one(self):
        v = [0.3, -1.2, 4.5, 0.01]
        assert cosine_similarity(v, v) == pytest.approx(1.0)

    def test_zero_vector_is_zero_not_nan(self):
        result = cosine_similarity([0.0, 0.0, 0.0], [1.0, 2.0, 3.0])
        assert result == 0.0
        assert not math.isnan(result)
        assert cosine_similarity([1.0, 2.0], [0.0, 0.0]) == 0.0

    def test_orthogonal_and_opposite(self):
        assert cosine_similarity([1, 0], [0, 1]) == pytest.approx(0.0)
        assert cosine_similarity([1, 0], [-1, 0]) == pytest.approx(-1.0)

    def test_accepts_numpy_arrays(self):
        assert cosine_similarity(np.array([1.0, 1.0]), np.array([2.0, 2.0])) == pytest.approx(1.0)


class TestVectorStore:
    """Test suite for VectorStore."""

    @pytest.fixture
    def store(self):
        store = VectorStore()
        store.replace([
            make_chunk("first", [1, 0], 0),
            make_chunk("second", [0, 1], 1),
            make_chunk("third", [1, 1], 2),
        ])
        return store

    def test_empty_store(self):
        store = VectorStore()
        assert store.count() == 0
        assert store.score([1.0, 0.0]) == []

    def test_score_keeps_document_order(self, store):
        scored = store.score([1.0, 0.0])
        assert [s.text for s in scored] == ["first", "second", "third"]
        assert scored[0].relevance_score == pytest.approx(1.0)
        assert scored[1].relevance_score == pytest.approx(0.0)
        assert scored[2].relevance_score == pytest.approx(1 / math.sqrt(2))

    def test_empty_query_rejected(self, store):
        with pytest.raises(ValueError, match="Query embedding cannot be empty"):
            store.score([])

    def test_replace_discards_previous_index(self, store):
        store.replace([make_chunk("only", [1, 0])])
        assert store.count() == 1
        assert [c.text for c in store.chunks] == ["only"]

    def test_clear(self, store):
        store.clear()
        assert store.count() == 0
