"""
Assistant Domain Entities
=========================

Results of the best-effort assistant calls and the prompts that produce them.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional, Sequence

from helpdesk.config import (
    TicketPriority, TICKET_CATEGORIES, DEFAULT_CATEGORY, DEFAULT_PRIORITY
)
from helpdesk.tickets.domain import Ticket, Comment

SUMMARY_FALLBACK = "Could not generate summary at this time."
SUMMARY_EMPTY = "Summary not available."
REPLY_FALLBACK = "I recommend looking into the reported issue further before responding."


@dataclass
class ClassificationResult:
    """
    Suggested category and priority for a draft ticket.

    ``is_fallback`` is set when the assistant could not be reached and the
    defaults were used instead.
    """
    category: str
    priority: TicketPriority
    reasoning: str = ""
    is_fallback: bool = False
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def fallback(cls, reason: str = "") -> "ClassificationResult":
        return cls(
            category=DEFAULT_CATEGORY,
            priority=DEFAULT_PRIORITY,
            reasoning=reason,
            is_fallback=True,
        )


class ClassificationPromptBuilder:
    """
    Builds prompts for ticket classification.

    Following DRY principle - all prompt logic in one place.
    """

    SYSTEM_PROMPT = f"""You are a helpdesk ticket classification system.

Classify the ticket into one of these categories:
{", ".join(TICKET_CATEGORIES)}.

Also recommend a priority: LOW, MEDIUM, HIGH, URGENT.
If images are attached, use them to confirm the category
(e.g. a photo of a broken screen is Hardware).

Respond ONLY in JSON format:
{{
    "category": "category",
    "priority": "PRIORITY",
    "reason": "brief explanation"
}}"""

    @classmethod
    def build_prompt(cls, title: str, description: str) -> str:
        """Build classification prompt from ticket content."""
        return f"""Title: {title}

Description:
{description}

Classify this ticket (respond with JSON only):"""

    @classmethod
    def build_messages(
        cls,
        title: str,
        description: str,
        attachments: Optional[Sequence[str]] = None
    ) -> List[dict]:
        text = cls.build_prompt(title, description)
        if not attachments:
            user_content = text
        else:
            user_content = [{"type": "text", "text": text}]
            for ref in attachments:
                user_content.append({"type": "image_url", "image_url": {"url": _image_url(ref)}})

        return [
            {"role": "system", "content": cls.SYSTEM_PROMPT},
            {"role": "user", "content": user_content},
        ]


class SummaryPromptBuilder:
    """Prompt for summarizing a ticket and its conversation."""

    @classmethod
    def build_messages(cls, ticket: Ticket, comments: Sequence[Comment]) -> List[dict]:
        conversation = "\n".join(f"{c.author_id}: {c.content}" for c in comments)
        prompt = f"""Summarize the following helpdesk ticket and its conversation history.
Provide a concise summary of the issue, current status, and next steps.

Ticket Title: {ticket.title}
Description: {ticket.description}
Status: {ticket.status.value}
Conversation:
{conversation or "(no messages yet)"}"""
        return [{"role": "user", "content": prompt}]


class ReplyPromptBuilder:
    """Prompt for suggesting a staff reply to the client's latest message."""

    @classmethod
    def build_messages(cls, ticket: Ticket, comments: Sequence[Comment]) -> List[dict]:
        last_client_message = next(
            (c.content for c in reversed(comments) if c.author_id == ticket.creator_id),
            "No client messages yet."
        )
        prompt = f"""As a helpdesk professional (PIC), suggest a helpful and polite response to the following ticket.

Ticket: {ticket.title}
Context: {ticket.description}
Last client message: {last_client_message}

Provide exactly one suggested response."""
        return [{"role": "user", "content": prompt}]


def _image_url(ref: str) -> str:
    if ref.startswith(("data:", "http://", "https://")):
        return ref
    # Bare base64 payloads are sent as JPEG
    return f"data:image/jpeg;base64,{ref}"
