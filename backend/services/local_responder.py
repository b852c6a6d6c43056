"""Deterministic stand-in used when no answering provider is configured."""
import logging
from typing import List, Optional

from services.llm_client import LLMResponse
from services.prompt_builder import DOCUMENT_REFUSAL

logger = logging.getLogger(__name__)

DEMO_SOURCE = "Demo Mode"
LOCAL_MODEL = "local"


def _preview(text: str, limit: int) -> str:
    return text[:limit] + ("..." if len(text) > limit else "")


class LocalResponder:
    """Produces clearly labelled previews of the grounding text instead of real answers."""

    preview_chars = 120

    def respond_grounded(self, primary_excerpt: str, supplementary: Optional[List[str]] = None) -> LLMResponse:
        """Preview of whatever grounding is available, or the refusal sentence."""
        excerpt = (primary_excerpt or "").strip()
        supplementary_text = "\n\n".join(supplementary or [])

        if excerpt:
            related = " plus related context" if supplementary_text else ""
            text = f"Based on your highlighted excerpt{related}: {excerpt[:self.preview_chars]}..."
        elif supplementary_text:
            text = f"Based on relevant parts of the document: {supplementary_text[:self.preview_chars]}..."
        else:
            text = DOCUMENT_REFUSAL

        return self._response(text)

    def respond_to_excerpt(self, context: str, question: str) -> LLMResponse:
        """Templated reply chosen by the question's wording."""
        question_lower = question.lower()
        context_lower = context.lower()
        preview = _preview(context, self.preview_chars)

        if "what" in question_lower:
            if any(term in context_lower for term in ("definition", "means", " is ")):
                text = (
                    "Based on the selected text, this appears to define or describe a concept. "
                    f'From "{preview}", I can identify the main topic being discussed.'
                )
            else:
                text = (
                    f'The selected text discusses: "{preview}". This appears to explain the nature '
                    "or details of the subject mentioned in your question."
                )
        elif "how" in question_lower:
            text = (
                f'The excerpt describes a process or method. From the selected text: "{preview}", '
                "I can identify procedural elements, but a full AI model would provide a more "
                "comprehensive analysis."
            )
        elif "why" in question_lower:
            text = (
                "The reasoning appears to be contained within the selected text. Based on "
                f'"{preview}", there are underlying factors mentioned. Configure an API key for '
                "a detailed analysis."
            )
        elif any(word in question_lower for word in ("who", "when", "where")):
            text = (
                f'From "{preview}", I can identify references to people, places or times that '
                "relate to your question. Configure an API key for precise extraction."
            )
        elif any(word in question_lower for word in ("compare", "difference", "similar")):
            text = (
                f'The excerpt provides information for comparison. From "{preview}", I can '
                "identify elements that can be contrasted as requested."
            )
        else:
            text = (
                f'I can see the selected text contains: "{preview}" - demo mode provides basic '
                "responses. Add a GROQ_API_KEY or GEMINI_API_KEY to the .env file for real answers."
            )

        return self._response(text)

    @staticmethod
    def _response(text: str) -> LLMResponse:
        logger.debug("Generated demo-mode response")
        return LLMResponse(
            text=text,
            source=DEMO_SOURCE,
            latency_ms=0,
            model_used=LOCAL_MODEL
        )
