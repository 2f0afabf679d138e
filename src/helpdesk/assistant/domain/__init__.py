"""
Assistant Domain Layer
======================

Contains:
- Entities: ClassificationResult
- Prompt builders for classification, summaries and reply suggestions
- Fallback texts returned when the assistant is unavailable
"""

from helpdesk.assistant.domain.entities import (
    ClassificationResult,
    ClassificationPromptBuilder,
    SummaryPromptBuilder,
    ReplyPromptBuilder,
    SUMMARY_FALLBACK,
    SUMMARY_EMPTY,
    REPLY_FALLBACK,
)

__all__ = [
    "ClassificationResult",
    "ClassificationPromptBuilder",
    "SummaryPromptBuilder",
    "ReplyPromptBuilder",
    "SUMMARY_FALLBACK",
    "SUMMARY_EMPTY",
    "REPLY_FALLBACK",
]
