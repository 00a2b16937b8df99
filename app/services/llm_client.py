import logging
from abc import ABC, abstractmethod
from typing import List, Optional

import httpx

from app.core.config import settings
from app.services.errors import ErrorKind, GenerationError
from app.services.history import Turn

logger = logging.getLogger(__name__)


class ChatBackend(ABC):
    """Generation capability the orchestrator delegates each attempt to."""

    @abstractmethod
    async def generate(self, model: str, turns: List[Turn], prompt: str) -> str:
        """Send the prompt after the prior turns and return the model's text."""


class GeminiClient(ChatBackend):
    def __init__(
        self,
        api_key: str,
        base_url: str = "https://generativelanguage.googleapis.com/v1beta",
        max_output_tokens: Optional[int] = None,
        connect_timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.max_output_tokens = max_output_tokens
        self.connect_timeout = connect_timeout
        self._transport = transport

    def build_payload(self, turns: List[Turn], prompt: str) -> dict:
        contents = [{"role": t.role, "parts": [{"text": t.content}]} for t in turns]
        contents.append({"role": "user", "parts": [{"text": prompt}]})

        payload = {"contents": contents}
        if self.max_output_tokens:
            payload["generationConfig"] = {"maxOutputTokens": self.max_output_tokens}
        return payload

    async def generate(self, model: str, turns: List[Turn], prompt: str) -> str:
        # Google AI Studio API (Gemini)
        url = f"{self.base_url}/models/{model}:generateContent"
        headers = {"Content-Type": "application/json"}
        payload = self.build_payload(turns, prompt)

        # Overall attempt deadline is enforced by the orchestrator
        timeout = httpx.Timeout(None, connect=self.connect_timeout)
        logger.debug("POST %s with %d prior turns", url, len(turns))
        try:
            async with httpx.AsyncClient(timeout=timeout, transport=self._transport) as client:
                response = await client.post(url, params={"key": self.api_key}, headers=headers, json=payload)
        except httpx.HTTPError as e:
            raise GenerationError(
                f"Request to Google failed: {e!r}", kind=ErrorKind.NON_RECOVERABLE, model=model
            ) from e

        if response.status_code != 200:
            raise GenerationError(
                f"HTTP {response.status_code} from Google: {response.text}",
                status_code=response.status_code,
                model=model,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise GenerationError(f"Invalid JSON from Google: {e}", model=model) from e
        return extract_text(data, model)


def extract_text(data: dict, model: str) -> str:
    if not isinstance(data, dict):
        raise GenerationError(f"Unexpected response body from Google: {type(data).__name__}", model=model)
    candidates = data.get("candidates") or []
    if not candidates:
        reason = (data.get("promptFeedback") or {}).get("blockReason", "no candidates")
        raise GenerationError(f"Gemini returned no response ({reason})", model=model)

    candidate = candidates[0]
    parts = (candidate.get("content") or {}).get("parts") or []
    text = "".join(part["text"] for part in parts if "text" in part)
    if not text:
        reason = candidate.get("finishReason", "empty content")
        raise GenerationError(f"Gemini returned no text ({reason})", model=model)
    return text


def build_client() -> GeminiClient:
    return GeminiClient(
        api_key=settings.GOOGLE_API_KEY,
        base_url=settings.GEMINI_API_BASE,
        max_output_tokens=settings.MAX_OUTPUT_TOKENS,
        connect_timeout=settings.CONNECT_TIMEOUT_SECONDS,
    )
