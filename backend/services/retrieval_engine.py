"""Hybrid retrieval: merge question and selection similarity into one ranking."""
import logging
from typing import Dict, List, Optional

from config import SUPPLEMENT_TOP_K, SELECTION_BOOST
from models.chunk import ScoredChunk
from services.vector_store import VectorStore
from services.embedding_model import EmbeddingModel

logger = logging.getLogger(__name__)


class RetrievalEngine:
    """Pick supplementary chunks for a question, favouring chunks near the selection."""

    def __init__(
        self,
        vector_store: VectorStore,
        embedding_model: Optional[EmbeddingModel],
        top_k: int = SUPPLEMENT_TOP_K,
        selection_boost: float = SELECTION_BOOST
    ):
        """
        Initialize the retrieval engine.

        Args:
            vector_store: Index of the loaded document
            embedding_model: Embedding client, None while unavailable
            top_k: Maximum number of supplementary chunks to return
            selection_boost: Multiplier applied to selection similarity before merging
        """
        self.vector_store = vector_store
        self.embedding_model = embedding_model
        self.top_k = top_k
        self.selection_boost = selection_boost
        logger.info("Initialized RetrievalEngine")

    def rank(self, question: str, primary_excerpt: str = "") -> List[ScoredChunk]:
        """
        Rank every indexed chunk for a question.

        1. Score chunks by cosine similarity to the question
        2. Seed a best-score map keyed by chunk text with those scores
        3. With an excerpt, score chunks against it too and keep
           max(question score, excerpt score * boost)
        4. Sort descending; ties keep document order

        Returns:
            All chunks with merged scores, best first; [] when the index or
            the embedding model is unavailable
        """
        if not question or not question.strip():
            logger.warning("Empty question provided, returning empty results")
            return []

        if self.embedding_model is None or self.vector_store.count() == 0:
            logger.debug("No semantic index available; no supplementary context")
            return []

        excerpt = (primary_excerpt or "").strip()

        try:
            question_vec = self.embedding_model.embed_text(question)
            combined: Dict[str, ScoredChunk] = {}
            for scored in self.vector_store.score(question_vec):
                combined[scored.text] = scored

            if excerpt:
                excerpt_vec = self.embedding_model.embed_text(excerpt)
                for scored in self.vector_store.score(excerpt_vec):
                    boosted = scored.relevance_score * self.selection_boost
                    current = combined.get(scored.text)
                    if current is None or boosted > current.relevance_score:
                        combined[scored.text] = ScoredChunk(chunk=scored.chunk, relevance_score=boosted)
        except (RuntimeError, ValueError) as e:
            logger.warning(f"Embedding unavailable during retrieval, continuing without context: {e}")
            return []

        # dict keeps first-seen (document) order and sorted() is stable
        ranked = sorted(combined.values(), key=lambda s: s.relevance_score, reverse=True)
        logger.debug(f"Ranked {len(ranked)} chunks (selection={'yes' if excerpt else 'no'})")
        return ranked

    def retrieve(self, question: str, primary_excerpt: str = "") -> List[str]:
        """
        Supplementary chunk texts for a question.

        Args:
            question: User question
            primary_excerpt: Text of the current selection, "" when none

        Returns:
            Up to top_k chunk texts, never the excerpt itself
        """
        excerpt = (primary_excerpt or "").strip()
        supplements = []
        for scored in self.rank(question, excerpt):
            if len(supplements) >= self.top_k:
                break
            if excerpt and scored.text == excerpt:
                continue
            supplements.append(scored.text)

        logger.info(f"Retrieved {len(supplements)} supplementary chunks")
        return supplements
