"""Grounding policy: build the prompt, consult the cache, and pick who answers."""
import asyncio
import logging
from dataclasses import dataclass
from typing import List, Optional

from config import (
    CACHE_TTL_SECONDS,
    DOWNGRADE_DELAY_SECONDS,
    MAX_CONTEXT_CHARS,
    MAX_QUESTION_CHARS,
)
from services.llm_client import LLMClient, LLMClientError, Provider
from services.local_responder import LocalResponder
from services.prompt_builder import build_grounded_prompt
from services.response_cache import ResponseCache

logger = logging.getLogger(__name__)


class QuestionValidationError(ValueError):
    """Input rejected before anything is sent to an answering provider."""


@dataclass
class Answer:
    """Outcome of one question."""
    answer: Optional[str]
    source: Optional[str]
    prompt: str
    cached: bool = False
    error: Optional[str] = None
    supplementary: Optional[List[str]] = None


def validate_question(
    question: Optional[str],
    context: Optional[str] = None,
    require_context: bool = False
) -> None:
    """
    Reject empty or oversized input with a user-facing message.

    Raises:
        QuestionValidationError: If the question or context is unusable
    """
    if require_context and (not context or not context.strip()):
        raise QuestionValidationError("Please select some text from the PDF first")
    if not question or not question.strip():
        raise QuestionValidationError("Please enter a question")
    if context and len(context) > MAX_CONTEXT_CHARS:
        raise QuestionValidationError(
            f"Context text is too long (max {MAX_CONTEXT_CHARS:,} characters)"
        )
    if len(question) > MAX_QUESTION_CHARS:
        raise QuestionValidationError(
            f"Question is too long (max {MAX_QUESTION_CHARS:,} characters)"
        )


class AnswerService:
    """Answers grounded questions with the active provider, falling back to the local stand-in."""

    def __init__(
        self,
        llm_client: Optional[LLMClient] = None,
        local_responder: Optional[LocalResponder] = None,
        cache: Optional[ResponseCache] = None,
        provider: Optional[str] = None,
        downgrade_delay: float = DOWNGRADE_DELAY_SECONDS
    ):
        """
        Initialize the answer service.

        Args:
            llm_client: Remote provider client; None means local answers only
            local_responder: Stand-in used without credentials
            cache: Response cache keyed by (excerpt, question)
            provider: Preferred provider name
            downgrade_delay: Seconds before switching to the stand-in after an upstream error
        """
        self.llm_client = llm_client
        self.local_responder = local_responder or LocalResponder()
        self.cache = cache if cache is not None else ResponseCache(CACHE_TTL_SECONDS)
        self.downgrade_delay = downgrade_delay
        self.provider = llm_client.resolve_provider(provider) if llm_client else Provider.LOCAL
        logger.info(f"AnswerService using provider: {self.provider.value}")

    async def ask(
        self,
        question: str,
        primary_excerpt: str = "",
        supplementary: Optional[List[str]] = None
    ) -> Answer:
        """
        Answer a question grounded in the excerpt and supplementary context.

        Raises:
            QuestionValidationError: For empty or oversized input
        """
        excerpt = (primary_excerpt or "").strip()
        validate_question(question, excerpt)

        prompt = build_grounded_prompt(question, excerpt, supplementary)
        cache_key = (excerpt, question)

        cached = self.cache.get(cache_key)
        if cached is not None:
            logger.info("Returning cached answer")
            return Answer(
                answer=cached.answer,
                source=cached.source,
                prompt=prompt,
                cached=True,
                supplementary=supplementary
            )

        if self.provider == Provider.LOCAL:
            response = self.local_responder.respond_grounded(excerpt, supplementary)
        else:
            try:
                response = await asyncio.to_thread(self.llm_client.generate, self.provider, prompt)
            except LLMClientError as e:
                logger.error(f"Upstream error from {self.provider.value}: {e.error.message}")
                self._schedule_downgrade()
                return Answer(
                    answer=None,
                    source=None,
                    prompt=prompt,
                    error=f"{e.error.message} Switching to demo mode...",
                    supplementary=supplementary
                )

        answer = Answer(
            answer=response.text,
            source=response.source,
            prompt=prompt,
            supplementary=supplementary
        )
        self.cache.set(cache_key, answer)
        return answer

    def _schedule_downgrade(self) -> None:
        loop = asyncio.get_running_loop()
        loop.call_later(self.downgrade_delay, self.downgrade)

    def downgrade(self) -> None:
        if self.provider != Provider.LOCAL:
            logger.warning(f"Downgrading from {self.provider.value} to local demo responses")
            self.provider = Provider.LOCAL
