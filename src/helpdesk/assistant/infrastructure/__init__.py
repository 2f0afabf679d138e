"""
Assistant Infrastructure Layer
==============================

Contains:
- External: OpenAI-compatible and mock LLM adapters
"""

from helpdesk.assistant.infrastructure.external import (
    OpenAILLMClient,
    MockLLMClient,
    build_llm_client,
)

__all__ = ["OpenAILLMClient", "MockLLMClient", "build_llm_client"]
