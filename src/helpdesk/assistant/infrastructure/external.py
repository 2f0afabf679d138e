"""
Assistant External Service Adapters
===================================

Concrete LLM clients implementing the assistant's ILLMClient port.
"""

import json
import time
from typing import List, Optional

from openai import AsyncOpenAI

from helpdesk.assistant.application import ILLMClient, ChatCompletionResult
from helpdesk.config import Settings
from helpdesk.core import CollaboratorException, ConfigurationException
from helpdesk.shared.infrastructure.logging import get_logger

logger = get_logger(__name__)


class OpenAILLMClient(ILLMClient):
    """
    OpenAI client implementation (works with any OpenAI-compatible API).

    Provides async wrapper around OpenAI SDK operations.
    """

    def __init__(
        self,
        api_key: Optional[str],
        model: str,
        base_url: Optional[str] = None
    ):
        if not api_key:
            raise ConfigurationException("OpenAI API key not configured")

        self._client = AsyncOpenAI(api_key=api_key, base_url=base_url)
        self._model = model

    async def chat_completion(
        self,
        messages: List[dict],
        temperature: float = 0.3,
        max_tokens: int = 500,
        operation: str = "chat_completion"
    ) -> ChatCompletionResult:
        """
        Generate chat completion.

        Raises:
            CollaboratorException: If completion fails
        """
        start_time = time.perf_counter()

        try:
            response = await self._client.chat.completions.create(
                model=self._model,
                messages=messages,
                temperature=temperature,
                max_tokens=max_tokens
            )
        except Exception as e:
            raise CollaboratorException(f"Chat completion failed: {e}") from e

        latency_ms = int((time.perf_counter() - start_time) * 1000)
        usage = response.usage

        return ChatCompletionResult(
            content=response.choices[0].message.content or "",
            model=self._model,
            prompt_tokens=usage.prompt_tokens if usage else 0,
            completion_tokens=usage.completion_tokens if usage else 0,
            latency_ms=latency_ms
        )


class MockLLMClient(ILLMClient):
    """
    Mock LLM client for local runs and tests.

    Returns predictable responses without calling external APIs.
    """

    async def chat_completion(
        self,
        messages: List[dict],
        temperature: float = 0.3,
        max_tokens: int = 500,
        operation: str = "chat_completion"
    ) -> ChatCompletionResult:
        if operation == "classification":
            content = "```json\n" + json.dumps({
                "category": "Software",
                "priority": "HIGH",
                "reason": "Mock: classified without calling a model."
            }, indent=2) + "\n```"
        elif operation == "summary":
            content = "Mock summary: the client reported an issue that is being worked on."
        elif operation == "reply_suggestion":
            content = "Thanks for the details. We are looking into it and will update you shortly."
        else:
            content = "This is a mock LLM response for testing purposes."

        return ChatCompletionResult(
            content=content,
            model="mock-model",
            prompt_tokens=100,
            completion_tokens=len(content.split()),
            latency_ms=1
        )


def build_llm_client(settings: Settings) -> Optional[ILLMClient]:
    """
    Pick the LLM adapter for the current settings.

    Returns None when no backend is configured; the assistant then serves
    fallbacks only.
    """
    if settings.mock_llm:
        return MockLLMClient()
    if not settings.openai_api_key:
        logger.warning("Assistant backend not configured - fallbacks only")
        return None
    return OpenAILLMClient(
        api_key=settings.openai_api_key,
        model=settings.llm_model,
        base_url=settings.openai_base_url,
    )
