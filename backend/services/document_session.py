"""Per-document session state: page text cache, semantic index, selection and answers."""
import asyncio
import logging
from typing import Dict, List, Optional

from config import DEFAULT_RENDER_SCALE
from models.document import PageText, RenderedPage
from models.selection import SelectionRect
from services.answer_service import Answer, AnswerService, validate_question
from services.chunking_engine import ChunkingEngine
from services.document_loader import PdfDocument
from services.embedding_model import EmbeddingModel
from services.render_slot import RenderSlot
from services.retrieval_engine import RetrievalEngine
from services.selection_extractor import SelectionExtractor
from services.selection_tracker import SelectionTracker
from services.vector_store import VectorStore

logger = logging.getLogger(__name__)

SNIPPET_CONTEXT_CHARS = 50


class DocumentSession:
    """
    Everything derived from the currently loaded document.

    Loading a new document replaces the page cache and the index wholesale;
    a generation counter lets stale renders and index builds notice they have
    been superseded and drop their results.
    """

    def __init__(
        self,
        answer_service: AnswerService,
        embedding_model: Optional[EmbeddingModel] = None,
        extractor: Optional[SelectionExtractor] = None,
        chunking_engine: Optional[ChunkingEngine] = None
    ):
        self.answer_service = answer_service
        self.embedding_model = embedding_model
        self.extractor = extractor or SelectionExtractor()
        self.chunking_engine = chunking_engine or ChunkingEngine()
        self.vector_store = VectorStore()
        self.retrieval_engine = RetrievalEngine(self.vector_store, embedding_model)
        self.render_slot = RenderSlot()
        self.selection = SelectionTracker()

        self.document: Optional[PdfDocument] = None
        self.page_texts: Dict[int, PageText] = {}
        self.current_page = 1
        self.scale = DEFAULT_RENDER_SCALE
        self.excerpt = ""
        self.last_answer: Optional[Answer] = None

        self._generation = 0
        self._index_task: Optional[asyncio.Task] = None
        self._submission = 0
        self._render_request = 0

    @property
    def index_ready(self) -> bool:
        return self._index_task is not None and self._index_task.done()

    def load(self, document: PdfDocument) -> Optional[asyncio.Task]:
        """
        Make `document` the current one and start building its index.

        Must be called from a running event loop when an embedding model is set.

        Returns:
            The index build task, or None when there is nothing to build
        """
        self._generation += 1
        self._render_request += 1
        self.render_slot.cancel()
        if self._index_task is not None and not self._index_task.done():
            self._index_task.cancel()
        if self.document is not None and self.document is not document:
            self.document.close()

        self.document = document
        self.page_texts = {}
        self.vector_store.clear()
        self.current_page = 1
        self.selection.clear()
        self.excerpt = ""
        self.last_answer = None
        logger.info(f"Session loaded {document.filename} ({document.total_pages} pages)")

        if self.embedding_model is None:
            self._index_task = None
            return None
        self._index_task = asyncio.ensure_future(self._build_index(self._generation))
        return self._index_task

    async def _build_index(self, generation: int) -> None:
        text = self.document.full_text()
        chunks = await self.chunking_engine.build_index(
            text,
            self.embedding_model,
            is_current=lambda: generation == self._generation
        )
        if generation == self._generation:
            self.vector_store.replace(chunks)

    async def render_page(self, page_number: int, scale: Optional[float] = None) -> Optional[RenderedPage]:
        """
        Render a page, cancelling any render still in flight.

        Returns:
            The rendered page, or None if it was superseded before finishing

        Raises:
            RuntimeError: If no document is loaded
            ValueError: If the page number is out of range
        """
        if self.document is None:
            raise RuntimeError("No document loaded")

        scale = scale or self.scale
        if page_number != self.current_page:
            self.selection.page_changed()
            self.excerpt = ""
        self.current_page = page_number
        self.scale = scale

        self._render_request += 1
        request = self._render_request
        task = self.render_slot.cancel_and_replace(
            self._render(page_number, scale, self._generation)
        )
        try:
            return await task
        except asyncio.CancelledError:
            if request != self._render_request:
                logger.debug(f"Render of page {page_number} superseded")
                return None
            raise

    async def _render(self, page_number: int, scale: float, generation: int) -> Optional[RenderedPage]:
        await asyncio.sleep(0)  # a newer request may cancel us before any work
        rendered = self.document.render(page_number, scale)
        await asyncio.sleep(0)
        if generation != self._generation:
            return None
        # replaced on each completed render so the viewport matches the canvas
        self.page_texts[page_number] = PageText(runs=tuple(rendered.runs), viewport=rendered.viewport)
        return rendered

    def extract_selection(self, rect: Optional[SelectionRect] = None) -> str:
        """
        Extract text under `rect` (or the finalized tracker selection) on the current page.

        An uncached page yields "" rather than waiting for its render.
        """
        rect = rect or self.selection.finalized
        self.excerpt = self.extractor.extract(rect, self.page_texts.get(self.current_page))
        return self.excerpt

    def clear_selection(self) -> None:
        self.selection.clear()
        self.excerpt = ""

    async def ask(self, question: str) -> Answer:
        """
        Answer a question about the current excerpt and the rest of the document.

        Only the most recent submission updates `last_answer`.

        Raises:
            QuestionValidationError: For empty or oversized input, before any embedding call
        """
        validate_question(question, self.excerpt)

        self._submission += 1
        submission = self._submission

        supplementary = await asyncio.to_thread(self.retrieval_engine.retrieve, question, self.excerpt)
        answer = await self.answer_service.ask(question, self.excerpt, supplementary)

        if submission == self._submission:
            self.last_answer = answer
        else:
            logger.info("Discarding answer from an overlapping submission")
        return answer

    def search(self, query: str) -> List[Dict[str, object]]:
        """Case-insensitive keyword search over every page, one snippet per page."""
        needle = (query or "").strip().lower()
        if not needle or self.document is None:
            return []

        results = []
        for page_number in range(1, self.document.total_pages + 1):
            cached = self.page_texts.get(page_number)
            full_text = cached.text if cached else self.document.page_text(page_number)
            index = full_text.lower().find(needle)
            if index < 0:
                continue
            start = max(0, index - SNIPPET_CONTEXT_CHARS)
            end = min(len(full_text), index + len(needle) + SNIPPET_CONTEXT_CHARS)
            results.append({"page": page_number, "text": full_text[start:end]})

        logger.debug(f"Search for {query!r} matched {len(results)} pages")
        return results
