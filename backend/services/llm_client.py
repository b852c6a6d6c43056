"""LLM client dispatching prompts to the configured answering provider."""
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Optional
import httpx
from groq import Groq
from groq import RateLimitError, AuthenticationError, APIError, APITimeoutError
import logging

from config import (
    GROQ_API_KEY,
    GEMINI_API_KEY,
    OPENAI_API_KEY,
    ANTHROPIC_API_KEY,
    GROQ_MODEL,
    GEMINI_MODEL,
    OPENAI_MODEL,
    ANTHROPIC_MODEL,
    LLM_MAX_TOKENS,
    LLM_TIMEOUT,
)

logger = logging.getLogger(__name__)

GEMINI_API_URL = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"
OPENAI_API_URL = "https://api.openai.com/v1/chat/completions"
ANTHROPIC_API_URL = "https://api.anthropic.com/v1/messages"
ANTHROPIC_VERSION = "2023-06-01"
SYSTEM_PROMPT = (
    "You are a helpful assistant that answers questions based strictly on provided "
    "text excerpts. Be concise and accurate."
)
NO_RESPONSE = "No response from model."


class Provider(str, Enum):
    """Answering backends. LOCAL is the offline stand-in."""
    LOCAL = "local"
    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    GROQ = "groq"
    GEMINI = "gemini"


@dataclass
class LLMResponse:
    """Response from an answering provider."""
    text: str
    source: str
    latency_ms: int
    model_used: str
    tokens_input: int = 0
    tokens_output: int = 0


@dataclass
class LLMError:
    """Structured error response from LLM operations."""
    code: str
    message: str
    details: Dict[str, Any]


ERROR_STATUS_CODES = {
    "RATE_LIMIT_ERROR": 429,
    "AUTHENTICATION_ERROR": 401,
    "TIMEOUT_ERROR": 500,
    "API_ERROR": 500,
    "UNKNOWN_ERROR": 500,
}


class LLMClientError(Exception):
    """Custom exception for LLM client errors with structured error information."""

    def __init__(self, error: LLMError):
        self.error = error
        super().__init__(error.message)

    @property
    def status_code(self) -> int:
        return ERROR_STATUS_CODES.get(self.error.code, 500)


class LLMClient:
    """Sends prompts to exactly one remote provider per call."""

    def __init__(
        self,
        groq_api_key: Optional[str] = GROQ_API_KEY,
        gemini_api_key: Optional[str] = GEMINI_API_KEY,
        openai_api_key: Optional[str] = OPENAI_API_KEY,
        anthropic_api_key: Optional[str] = ANTHROPIC_API_KEY,
        groq_model: str = GROQ_MODEL,
        gemini_model: str = GEMINI_MODEL,
        openai_model: str = OPENAI_MODEL,
        anthropic_model: str = ANTHROPIC_MODEL,
        timeout: float = LLM_TIMEOUT
    ):
        """
        Initialize the client. Providers without a key are simply unavailable.

        Args:
            groq_api_key: Groq API key
            gemini_api_key: Google Gemini API key
            openai_api_key: OpenAI API key
            anthropic_api_key: Anthropic API key
            groq_model: Groq chat model name
            gemini_model: Gemini model name
            openai_model: OpenAI chat model name
            anthropic_model: Anthropic model name
            timeout: Request timeout in seconds
        """
        self.groq_model = groq_model
        self.gemini_model = gemini_model
        self.openai_model = openai_model
        self.anthropic_model = anthropic_model
        self.gemini_api_key = gemini_api_key
        self.openai_api_key = openai_api_key
        self.anthropic_api_key = anthropic_api_key
        self.timeout = timeout
        self.groq = Groq(api_key=groq_api_key, timeout=timeout) if groq_api_key else None

        # provider -> request/response strategy
        self._strategies: Dict[Provider, Callable[[str, int], LLMResponse]] = {
            Provider.OPENAI: self._generate_openai,
            Provider.ANTHROPIC: self._generate_anthropic,
            Provider.GROQ: self._generate_groq,
            Provider.GEMINI: self._generate_gemini,
        }

        configured = [p.value for p, ok in self.configured_providers().items() if ok]
        logger.info(f"LLMClient initialized (providers: {', '.join(configured) or 'none'})")

    def configured_providers(self) -> Dict[Provider, bool]:
        """Availability per remote provider, in fallback order."""
        return {
            Provider.OPENAI: bool(self.openai_api_key),
            Provider.ANTHROPIC: bool(self.anthropic_api_key),
            Provider.GROQ: self.groq is not None,
            Provider.GEMINI: bool(self.gemini_api_key),
        }

    def is_configured(self, provider: Provider) -> bool:
        return self.configured_providers().get(provider, False)

    def resolve_provider(self, preferred: Optional[str] = None) -> Provider:
        """
        Pick the provider for a request.

        The preferred provider wins when it is configured; otherwise the first
        configured provider; otherwise the local stand-in.
        """
        if preferred:
            try:
                candidate = Provider(preferred.lower())
            except ValueError:
                logger.warning(f"Unknown provider requested: {preferred}")
            else:
                if candidate == Provider.LOCAL or self.is_configured(candidate):
                    return candidate

        for provider, ok in self.configured_providers().items():
            if ok:
                return provider
        return Provider.LOCAL

    def generate(
        self,
        provider: Provider,
        prompt: str,
        max_tokens: int = LLM_MAX_TOKENS
    ) -> LLMResponse:
        """
        Generate an answer with the given provider.

        Blocking; async callers run it in a worker thread.

        Raises:
            ValueError: If the provider is LOCAL or not configured
            LLMClientError: Structured error with code, message, and details
        """
        strategy = self._strategies.get(provider)
        if strategy is None or not self.is_configured(provider):
            raise ValueError(f"Provider not configured: {provider.value}")

        logger.debug(f"Generating response with provider: {provider.value}")
        return strategy(prompt, max_tokens)

    def _generate_groq(self, prompt: str, max_tokens: int) -> LLMResponse:
        start_time = time.time()
        model = self.groq_model

        try:
            response = self.groq.chat.completions.create(
                model=model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": prompt}
                ],
                max_tokens=max_tokens,
                temperature=0
            )
        except RateLimitError as e:
            raise self._error(
                "RATE_LIMIT_ERROR", "Rate limit exceeded. Please try again in a few moments.",
                model, start_time, e, retry_after=60
            )
        except AuthenticationError as e:
            raise self._error(
                "AUTHENTICATION_ERROR", "Authentication failed. Please check your API key.",
                model, start_time, e
            )
        except APITimeoutError as e:
            raise self._error("TIMEOUT_ERROR", "Request timed out. Please try again.", model, start_time, e)
        except APIError as e:
            raise self._error("API_ERROR", f"Groq API error: {str(e)}", model, start_time, e)

        latency_ms = int((time.time() - start_time) * 1000)
        text = (response.choices[0].message.content or "").strip() or NO_RESPONSE
        usage = response.usage
        tokens_input = getattr(usage, "prompt_tokens", 0) or 0
        tokens_output = getattr(usage, "completion_tokens", 0) or 0

        logger.info(
            f"Generated response: provider=groq, model={model}, "
            f"input_tokens={tokens_input}, output_tokens={tokens_output}, latency={latency_ms}ms"
        )
        return LLMResponse(
            text=text,
            source=f"Groq ({model})",
            latency_ms=latency_ms,
            model_used=model,
            tokens_input=tokens_input,
            tokens_output=tokens_output
        )

    def _generate_gemini(self, prompt: str, max_tokens: int) -> LLMResponse:
        start_time = time.time()
        model = self.gemini_model
        data = self._post_json(
            "Gemini",
            GEMINI_API_URL.format(model=model),
            model,
            start_time,
            params={"key": self.gemini_api_key},
            json={
                "contents": [{"parts": [{"text": prompt}]}],
                "generationConfig": {"maxOutputTokens": max_tokens, "temperature": 0},
            }
        )

        try:
            text = data["candidates"][0]["content"]["parts"][0]["text"].strip()
        except (KeyError, IndexError, TypeError):
            text = ""
        usage = data.get("usageMetadata", {})

        return self._response(
            "Gemini", model, start_time, text,
            usage.get("promptTokenCount", 0), usage.get("candidatesTokenCount", 0)
        )

    def _generate_openai(self, prompt: str, max_tokens: int) -> LLMResponse:
        start_time = time.time()
        model = self.openai_model
        data = self._post_json(
            "OpenAI",
            OPENAI_API_URL,
            model,
            start_time,
            headers={"Authorization": f"Bearer {self.openai_api_key}"},
            json={
                "model": model,
                "messages": [
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": prompt}
                ],
                "max_tokens": max_tokens,
                "temperature": 0,
            }
        )

        try:
            text = (data["choices"][0]["message"]["content"] or "").strip()
        except (KeyError, IndexError, TypeError):
            text = ""
        usage = data.get("usage", {})

        return self._response(
            "OpenAI", model, start_time, text,
            usage.get("prompt_tokens", 0), usage.get("completion_tokens", 0)
        )

    def _generate_anthropic(self, prompt: str, max_tokens: int) -> LLMResponse:
        start_time = time.time()
        model = self.anthropic_model
        data = self._post_json(
            "Anthropic",
            ANTHROPIC_API_URL,
            model,
            start_time,
            headers={
                "x-api-key": self.anthropic_api_key,
                "anthropic-version": ANTHROPIC_VERSION,
            },
            json={
                "model": model,
                "system": SYSTEM_PROMPT,
                "messages": [{"role": "user", "content": prompt}],
                "max_tokens": max_tokens,
                "temperature": 0,
            }
        )

        # content is a list of blocks; only text blocks carry the answer
        text = "".join(
            block.get("text", "") for block in data.get("content") or []
            if block.get("type") == "text"
        ).strip()
        usage = data.get("usage", {})

        return self._response(
            "Anthropic", model, start_time, text,
            usage.get("input_tokens", 0), usage.get("output_tokens", 0)
        )

    def _post_json(
        self,
        label: str,
        url: str,
        model: str,
        start_time: float,
        **request: Any
    ) -> Dict[str, Any]:
        """POST to a REST provider and map transport and status failures to LLMClientError."""
        try:
            with httpx.Client(timeout=self.timeout) as client:
                response = client.post(url, **request)
        except httpx.TimeoutException as e:
            raise self._error("TIMEOUT_ERROR", "Request timed out. Please try again.", model, start_time, e)
        except httpx.RequestError as e:
            raise self._error("API_ERROR", f"Network error: {str(e)}", model, start_time, e)

        if response.status_code == 429:
            raise self._error(
                "RATE_LIMIT_ERROR", "Rate limit or quota exceeded. Please try again later.",
                model, start_time, response.text, retry_after=60
            )
        if response.status_code in (401, 403):
            raise self._error(
                "AUTHENTICATION_ERROR", "Authentication failed. Please check your API key.",
                model, start_time, response.text
            )
        if response.status_code != 200:
            raise self._error(
                "API_ERROR", f"{label} API error: status {response.status_code}",
                model, start_time, response.text
            )
        return response.json()

    @staticmethod
    def _response(
        label: str,
        model: str,
        start_time: float,
        text: str,
        tokens_input: int,
        tokens_output: int
    ) -> LLMResponse:
        latency_ms = int((time.time() - start_time) * 1000)
        logger.info(
            f"Generated response: provider={label.lower()}, model={model}, "
            f"input_tokens={tokens_input}, output_tokens={tokens_output}, latency={latency_ms}ms"
        )
        return LLMResponse(
            text=text or NO_RESPONSE,
            source=f"{label} ({model})",
            latency_ms=latency_ms,
            model_used=model,
            tokens_input=tokens_input,
            tokens_output=tokens_output
        )

    @staticmethod
    def _error(
        code: str,
        message: str,
        model: str,
        start_time: float,
        original: Any,
        **extra: Any
    ) -> LLMClientError:
        latency_ms = int((time.time() - start_time) * 1000)
        error = LLMError(
            code=code,
            message=message,
            details={
                "model": model,
                "latency_ms": latency_ms,
                "original_error": str(original),
                **extra
            }
        )
        logger.error(
            f"{code}: model={model}, latency={latency_ms}ms, error={original}",
            extra={"error_code": error.code, "error_details": error.details}
        )
        return LLMClientError(error)
