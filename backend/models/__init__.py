"""Data models for HighlightQA."""
from .document import TextRun, Viewport, PageText, RenderedPage
from .selection import SelectionRect, SelectionState, ScoredTextItem
from .chunk import Chunk, ScoredChunk
from .api import (
    AskRequest,
    AskResponse,
    HealthResponse,
    LoadDocumentRequest,
    LoadDocumentResponse,
    SelectionRequest,
    SelectionResponse,
    QuestionRequest,
    QuestionResponse,
    SearchResult,
)

__all__ = [
    "TextRun",
    "Viewport",
    "PageText",
    "RenderedPage",
    "SelectionRect",
    "SelectionState",
    "ScoredTextItem",
    "Chunk",
    "ScoredChunk",
    "AskRequest",
    "AskResponse",
    "HealthResponse",
    "LoadDocumentRequest",
    "LoadDocumentResponse",
    "SelectionRequest",
    "SelectionResponse",
    "QuestionRequest",
    "QuestionResponse",
    "SearchResult",
]
