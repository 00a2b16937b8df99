import asyncio
import logging
from typing import List, Optional, Sequence

from app.core.config import settings
from app.services.errors import (
    AllModelsUnavailableError,
    ErrorKind,
    GenerationError,
    InvalidConversationError,
    classify_error,
)
from app.services.history import Message, Turn, normalize_history
from app.services.llm_client import ChatBackend, build_client

logger = logging.getLogger(__name__)

class Orchestrator:
    def __init__(self, backend: ChatBackend, models: Sequence[str], attempt_timeout: Optional[float] = None):
        if not models:
            raise ValueError("Fallback model list must not be empty")
        self.backend = backend
        self.models = list(models)
        self.attempt_timeout = attempt_timeout

    async def respond(self, messages: Sequence[Message]) -> str:
        """
        Answers the last message using the rest as conversation history.

        Models are tried in priority order. A rate-limited model hands over to the
        next one; any other failure is raised as-is.
        """
        if not messages:
            raise InvalidConversationError("Conversation has no messages")
        new_prompt = messages[-1]
        if new_prompt.role != "user" or not new_prompt.content:
            raise InvalidConversationError("Last message must be a non-empty user message")

        history = normalize_history(messages[:-1])
        last_error = None

        for model in self.models:
            logger.info("Attempting model %s", model)
            try:
                text = await self._attempt(model, history, new_prompt.content)
            except Exception as e:
                if classify_error(e) is ErrorKind.RATE_LIMITED:
                    logger.warning("Rate limit hit for %s, trying next model", model)
                    last_error = e
                    continue
                logger.error("Non-recoverable error from %s: %s", model, e)
                raise

            logger.info("Success with model %s", model)
            return text

        logger.error("All %d models failed, last error: %s", len(self.models), last_error)
        raise AllModelsUnavailableError(last_error) from last_error

    async def _attempt(self, model: str, history: List[Turn], prompt: str) -> str:
        coro = self.backend.generate(model, history, prompt)
        if not self.attempt_timeout or self.attempt_timeout <= 0:
            return await coro
        try:
            return await asyncio.wait_for(coro, self.attempt_timeout)
        except asyncio.TimeoutError as e:
            raise GenerationError(
                f"Model {model} timed out after {self.attempt_timeout}s",
                kind=ErrorKind.NON_RECOVERABLE,
                model=model,
            ) from e

def build_orchestrator() -> Orchestrator:
    return Orchestrator(build_client(), settings.FALLBACK_MODELS, settings.ATTEMPT_TIMEOUT_SECONDS)

orchestrator = build_orchestrator()
