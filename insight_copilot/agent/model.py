"""Gemini model wrapper and the completion client the router talks to."""
from __future__ import annotations
import logging
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Protocol

try:
    import google.generativeai as genai
except ImportError:  # pragma: no cover
    genai = None  # type: ignore

if TYPE_CHECKING:
    from insight_copilot.config import Settings

__all__ = [
    "CompletionClient",
    "CompletionError",
    "Contents",
    "GeminiCompletionClient",
    "configure",
    "get_model",
    "single_turn",
]

logger = logging.getLogger(__name__)

# [{"role": "user", "parts": [{"text": "..."}]}, ...]
Contents = List[Dict[str, Any]]


class CompletionError(RuntimeError):
    """The completion service could not produce a text reply."""


class CompletionClient(Protocol):
    async def generate(self, contents: Contents) -> str:
        ...


def single_turn(prompt: str) -> Contents:
    return [{"role": "user", "parts": [{"text": prompt}]}]


def configure(api_key: str) -> None:
    if genai is None:
        raise CompletionError("google-generativeai package not installed")
    genai.configure(api_key=api_key)


def get_model(name: str = "gemini-1.5-flash") -> Any:
    if genai is None:
        raise CompletionError("Gemini SDK unavailable")
    return genai.GenerativeModel(name)


class GeminiCompletionClient:
    """Async text completion over google-generativeai.

    Timeouts are enforced here through the SDK's request options; callers
    only see a str or an exception.
    """

    def __init__(
        self,
        model: Any,
        temperature: float = 0.4,
        max_output_tokens: int = 2048,
        timeout: Optional[float] = 60.0,
    ) -> None:
        self._model = model
        self._generation_config = {
            "temperature": temperature,
            "top_p": 1,
            "max_output_tokens": max_output_tokens,
        }
        self._request_options = {"timeout": timeout} if timeout else None

    @classmethod
    def from_settings(cls, settings: "Settings") -> "GeminiCompletionClient":
        if not settings.api_key:
            raise CompletionError("Set GEMINI_API_KEY before chatting.")
        configure(settings.api_key)
        return cls(
            get_model(settings.model_name),
            temperature=settings.temperature,
            max_output_tokens=settings.max_output_tokens,
            timeout=settings.request_timeout,
        )

    async def generate(self, contents: Contents) -> str:
        kwargs: Dict[str, Any] = {"generation_config": self._generation_config}
        if self._request_options:
            kwargs["request_options"] = self._request_options
        response = await self._model.generate_content_async(contents, **kwargs)
        try:
            text = response.text
        except ValueError as exc:
            # Raised by the SDK when the candidate was blocked or empty
            raise CompletionError(f"Model returned no text: {exc}") from exc
        if not text or not text.strip():
            raise CompletionError("Model returned an empty reply")
        logger.debug("Completion returned %d chars", len(text))
        return text
