"""Main entry point for the HighlightQA API."""
import asyncio
import logging
from datetime import datetime, timezone
from typing import List
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from config import PORT, CORS_ORIGINS, DEFAULT_PROVIDER, LOG_LEVEL, LOG_FORMAT
from logger import setup_logging
from models.api import (
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
from models.selection import SelectionRect
from services.answer_service import AnswerService, QuestionValidationError, validate_question
from services.document_loader import DocumentLoader
from services.document_session import DocumentSession
from services.embedding_model import create_embedding_model
from services.llm_client import LLMClient, LLMClientError, Provider
from services.local_responder import LocalResponder
from services.prompt_builder import build_excerpt_prompt
from services.response_cache import ResponseCache, hash_key

# Initialize logging
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="HighlightQA",
    description="Ask questions about a highlighted region of a PDF page",
    version="1.0.0"
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Initialize services (will be done on startup)
llm_client: LLMClient = None
local_responder: LocalResponder = None
response_cache: ResponseCache = None
document_loader: DocumentLoader = None
session: DocumentSession = None
embedding_warmup: asyncio.Task = None


@app.on_event("startup")
async def startup_event():
    """Initialize services on startup."""
    global llm_client, local_responder, response_cache, document_loader, session, embedding_warmup

    setup_logging(LOG_LEVEL, LOG_FORMAT)
    logger.info("Initializing HighlightQA services...")

    try:
        llm_client = LLMClient()
        local_responder = LocalResponder()
        response_cache = ResponseCache()
        document_loader = DocumentLoader()

        answer_service = AnswerService(
            llm_client=llm_client,
            local_responder=local_responder,
            provider=DEFAULT_PROVIDER
        )
        embedding_model = create_embedding_model()
        session = DocumentSession(answer_service, embedding_model=embedding_model)
        if embedding_model is not None:
            # wake the hosted model in the background; indexing works without it
            embedding_warmup = asyncio.ensure_future(asyncio.to_thread(embedding_model.warmup))

        providers = llm_client.configured_providers()
        logger.info(
            "Available models: %s, fallback=%s",
            ", ".join(f"{p.value}={ok}" for p, ok in providers.items()),
            not any(providers.values())
        )
        logger.info("All services initialized successfully")
    except Exception as e:
        logger.error(f"Failed to initialize services: {e}", exc_info=True)
        raise


@app.post("/api/ask", response_model=AskResponse)
async def ask_endpoint(request: AskRequest) -> AskResponse:
    """
    Answer a question about an excerpt.

    Uses the requested provider when configured, otherwise the first
    configured one, otherwise the local demo responder. Identical
    context/question pairs are served from a 24 hour cache.
    """
    if not request.context or not request.question:
        raise HTTPException(status_code=400, detail="Both context and question are required")

    try:
        validate_question(request.question, request.context, require_context=True)
    except QuestionValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    cache_key = hash_key(request.context, request.question)
    cached = response_cache.get(cache_key)
    if cached is not None:
        logger.info("Cache hit for question")
        return cached

    try:
        provider = llm_client.resolve_provider(request.model)
        if provider == Provider.LOCAL:
            llm_response = local_responder.respond_to_excerpt(request.context, request.question)
        else:
            prompt = build_excerpt_prompt(request.context, request.question)
            llm_response = await asyncio.to_thread(llm_client.generate, provider, prompt)
    except LLMClientError as e:
        logger.error(f"LLM client error: {e.error.message}")
        raise HTTPException(status_code=e.status_code, detail=e.error.message)
    except Exception as e:
        logger.error(f"Unexpected error in /api/ask: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal server error. Please try again.")

    response = AskResponse(answer=llm_response.text, source=llm_response.source)
    response_cache.set(cache_key, response)
    logger.info(f"Generated response using {response.source}")
    return response


@app.get("/api/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """Report which answering providers are configured."""
    providers = llm_client.configured_providers()
    return HealthResponse(
        status="ok",
        timestamp=datetime.now(timezone.utc).isoformat(),
        models={
            **{provider.value: ok for provider, ok in providers.items()},
            "fallback": not any(providers.values()),
        }
    )


@app.post("/api/document", response_model=LoadDocumentResponse)
async def load_document(request: LoadDocumentRequest) -> LoadDocumentResponse:
    """Load a PDF into the session and start indexing it."""
    try:
        document = document_loader.open(request.path)
    except FileNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        logger.error(f"Failed to load document {request.path}: {e}", exc_info=True)
        raise HTTPException(status_code=400, detail="Could not open document")

    session.load(document)
    return LoadDocumentResponse(filename=document.filename, total_pages=document.total_pages)


@app.post("/api/selection", response_model=SelectionResponse)
async def select_region(request: SelectionRequest) -> SelectionResponse:
    """Render the page if needed and return the text under the rectangle."""
    if session.document is None:
        raise HTTPException(status_code=409, detail="No document loaded")

    scale = request.scale or session.scale
    needs_render = (
        request.page != session.current_page
        or scale != session.scale
        or request.page not in session.page_texts
    )
    if needs_render:
        try:
            await session.render_page(request.page, scale)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))

    rect = SelectionRect(x=request.x, y=request.y, width=request.width, height=request.height)
    text = session.extract_selection(rect)
    return SelectionResponse(page=request.page, text=text)


@app.post("/api/question", response_model=QuestionResponse)
async def question_endpoint(request: QuestionRequest) -> QuestionResponse:
    """Answer a question grounded in the current selection and related passages."""
    try:
        answer = await session.ask(request.question)
    except QuestionValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return QuestionResponse(
        answer=answer.answer,
        source=answer.source,
        prompt=answer.prompt,
        cached=answer.cached,
        error=answer.error,
        supplementary=answer.supplementary or []
    )


@app.get("/api/search", response_model=List[SearchResult])
async def search(q: str = "") -> List[SearchResult]:
    """Keyword search across the loaded document."""
    return [SearchResult(**hit) for hit in session.search(q)]


if __name__ == "__main__":
    import uvicorn
    logger.info(f"Starting HighlightQA API on port {PORT}")
    uvicorn.run(app, host="0.0.0.0", port=PORT)
