"""Services for HighlightQA."""
from .geometry import Rect, overlap_area, coverage_ratio
from .coordinate_mapper import multiply_transforms, run_box
from .selection_extractor import SelectionExtractor
from .selection_tracker import SelectionTracker
from .document_loader import DocumentLoader, PdfDocument
from .render_slot import RenderSlot
from .chunking_engine import ChunkingEngine, chunk_text
from .embedding_model import EmbeddingModel, create_embedding_model
from .vector_store import VectorStore, cosine_similarity
from .retrieval_engine import RetrievalEngine
from .prompt_builder import build_grounded_prompt, build_excerpt_prompt
from .llm_client import LLMClient, LLMResponse, LLMError, LLMClientError, Provider
from .local_responder import LocalResponder
from .response_cache import ResponseCache, hash_key
from .answer_service import AnswerService, Answer, QuestionValidationError, validate_question
from .document_session import DocumentSession

__all__ = [
    'Rect', 'overlap_area', 'coverage_ratio', 'multiply_transforms', 'run_box',
    'SelectionExtractor', 'SelectionTracker', 'DocumentLoader', 'PdfDocument', 'RenderSlot',
    'ChunkingEngine', 'chunk_text', 'EmbeddingModel', 'create_embedding_model',
    'VectorStore', 'cosine_similarity', 'RetrievalEngine',
    'build_grounded_prompt', 'build_excerpt_prompt',
    'LLMClient', 'LLMResponse', 'LLMError', 'LLMClientError', 'Provider',
    'LocalResponder', 'ResponseCache', 'hash_key',
    'AnswerService', 'Answer', 'QuestionValidationError', 'validate_question',
    'DocumentSession',
]
