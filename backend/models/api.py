"""API request and response models."""
from typing import Dict, List, Optional
from pydantic import BaseModel, Field


class AskRequest(BaseModel):
    """Body of POST /api/ask. Length limits are enforced by the endpoint so they map to 400."""
    context: Optional[str] = None
    question: Optional[str] = None
    model: Optional[str] = None


class AskResponse(BaseModel):
    """Answer returned by an answering provider."""
    answer: str
    source: str


class HealthResponse(BaseModel):
    """Which answering providers are configured."""
    status: str
    timestamp: str
    models: Dict[str, bool]


class LoadDocumentRequest(BaseModel):
    """Body of POST /api/document."""
    path: str


class LoadDocumentResponse(BaseModel):
    """Summary of a freshly loaded document."""
    filename: str
    total_pages: int


class SelectionRequest(BaseModel):
    """Rectangle drawn over a page, in canvas pixels at `scale`."""
    page: int = Field(..., ge=1)
    x: float
    y: float
    width: float = Field(..., ge=0)
    height: float = Field(..., ge=0)
    scale: Optional[float] = Field(None, gt=0)


class SelectionResponse(BaseModel):
    """Text extracted under a selection."""
    page: int
    text: str


class QuestionRequest(BaseModel):
    """Body of POST /api/question."""
    question: str


class QuestionResponse(BaseModel):
    """Grounded answer for the current session."""
    answer: Optional[str] = None
    source: Optional[str] = None
    prompt: str = ""
    cached: bool = False
    error: Optional[str] = None
    supplementary: List[str] = Field(default_factory=list)


class SearchResult(BaseModel):
    """Keyword hit on a page."""
    page: int
    text: str
