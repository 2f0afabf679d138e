"""
Assistant Application Services
==============================

Single boundary for every remote assistant capability.

Each public method catches all collaborator failures (errors, timeouts,
unparsable replies) and returns the documented default, so nothing from
the remote service ever reaches the ticket lifecycle or the monitor.
"""

import asyncio
import json
import time
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from helpdesk.assistant.domain import (
    ClassificationResult,
    ClassificationPromptBuilder,
    SummaryPromptBuilder,
    ReplyPromptBuilder,
    SUMMARY_FALLBACK,
    SUMMARY_EMPTY,
    REPLY_FALLBACK,
)
from helpdesk.config import TicketPriority, DEFAULT_CATEGORY, DEFAULT_PRIORITY
from helpdesk.core import CollaboratorException
from helpdesk.shared.infrastructure.logging import get_logger
from helpdesk.tickets.domain import Ticket, Comment

logger = get_logger(__name__)


class ChatCompletionResult:
    """Result of a chat completion."""

    def __init__(
        self,
        content: str,
        model: str,
        prompt_tokens: int = 0,
        completion_tokens: int = 0,
        latency_ms: int = 0
    ):
        self.content = content
        self.model = model
        self.prompt_tokens = prompt_tokens
        self.completion_tokens = completion_tokens
        self.total_tokens = prompt_tokens + completion_tokens
        self.latency_ms = latency_ms


# ========== Port ==========

class ILLMClient(ABC):
    """
    Interface for LLM operations.

    Following Interface Segregation Principle - only the call the assistant
    needs is defined.
    """

    @abstractmethod
    async def chat_completion(
        self,
        messages: List[dict],
        temperature: float = 0.3,
        max_tokens: int = 500,
        operation: str = "chat_completion"
    ) -> ChatCompletionResult:
        """Generate chat completion."""


# ========== Application Services ==========

class AssistantService:
    """
    Best-effort ticket classification, summaries and reply suggestions.

    An assistant without an LLM client is valid: every call then returns
    its fallback.
    """

    def __init__(
        self,
        llm_client: Optional[ILLMClient],
        timeout_seconds: float = 15.0,
        temperature: float = 0.3,
        max_tokens: int = 500
    ):
        self._llm = llm_client
        self._timeout = timeout_seconds
        self._temperature = temperature
        self._max_tokens = max_tokens

    @property
    def is_available(self) -> bool:
        return self._llm is not None

    async def classify(
        self,
        title: str,
        description: str,
        attachments: Optional[Sequence[str]] = None
    ) -> ClassificationResult:
        """
        Suggest a category and priority for a draft ticket.

        Args:
            title: Ticket title
            description: Ticket description
            attachments: Optional image references (data URLs, URLs or base64)

        Returns:
            ClassificationResult; category "Other" and priority MEDIUM on failure
        """
        messages = ClassificationPromptBuilder.build_messages(title, description, attachments)
        try:
            response = await self._complete(messages, "classification")
            return _parse_classification(response.content)
        except CollaboratorException as e:
            logger.warning("Classification unavailable, using defaults", extra={"error": str(e)})
            return ClassificationResult.fallback(str(e))

    async def summarize(self, ticket: Ticket, comments: Sequence[Comment]) -> str:
        """Summarize a ticket and its conversation. Never stored."""
        messages = SummaryPromptBuilder.build_messages(ticket, comments)
        try:
            response = await self._complete(messages, "summary")
        except CollaboratorException as e:
            logger.warning(
                "Summary unavailable",
                extra={"ticket_id": ticket.id, "error": str(e)}
            )
            return SUMMARY_FALLBACK
        return (response.content or "").strip() or SUMMARY_EMPTY

    async def suggest_reply(self, ticket: Ticket, comments: Sequence[Comment]) -> str:
        """Suggest a reply to the client's latest message. Never stored."""
        messages = ReplyPromptBuilder.build_messages(ticket, comments)
        try:
            response = await self._complete(messages, "reply_suggestion")
        except CollaboratorException as e:
            logger.warning(
                "Reply suggestion unavailable",
                extra={"ticket_id": ticket.id, "error": str(e)}
            )
            return REPLY_FALLBACK
        return (response.content or "").strip() or REPLY_FALLBACK

    async def _complete(self, messages: List[dict], operation: str) -> ChatCompletionResult:
        """Call the LLM, normalising every failure into CollaboratorException."""
        if self._llm is None:
            raise CollaboratorException("LLM client not configured")

        start_time = time.perf_counter()
        try:
            response = await asyncio.wait_for(
                self._llm.chat_completion(
                    messages=messages,
                    temperature=self._temperature,
                    max_tokens=self._max_tokens,
                    operation=operation
                ),
                timeout=self._timeout
            )
        except asyncio.TimeoutError:
            raise CollaboratorException(
                f"{operation} timed out after {self._timeout}s"
            ) from None
        except CollaboratorException:
            raise
        except Exception as e:
            raise CollaboratorException(f"{operation} failed: {e}") from e

        logger.debug(
            "Assistant call completed",
            extra={
                "operation": operation,
                "latency_ms": int((time.perf_counter() - start_time) * 1000)
            }
        )
        return response


def _parse_classification(content: Optional[str]) -> ClassificationResult:
    if not content:
        raise CollaboratorException("Empty classification response")

    content_text = content.strip()
    # Try to extract JSON from a fenced block
    if "```json" in content_text:
        content_text = content_text.split("```json")[1].split("```")[0].strip()
    elif "```" in content_text:
        content_text = content_text.split("```")[1].split("```")[0].strip()

    try:
        data = json.loads(content_text)
    except json.JSONDecodeError as e:
        raise CollaboratorException(f"Failed to parse classification response: {e}") from e
    if not isinstance(data, dict):
        raise CollaboratorException("Classification response is not a JSON object")

    category = str(data.get("category") or "").strip() or DEFAULT_CATEGORY
    try:
        priority = TicketPriority(str(data.get("priority", "")).strip().upper())
    except ValueError:
        priority = DEFAULT_PRIORITY

    return ClassificationResult(
        category=category,
        priority=priority,
        reasoning=str(data.get("reason") or data.get("reasoning") or ""),
    )
