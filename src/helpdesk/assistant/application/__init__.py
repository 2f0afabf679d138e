"""
Assistant Application Layer
===========================

Contains:
- Services: AssistantService (fallback boundary)
- Port: ILLMClient and ChatCompletionResult
"""

from helpdesk.assistant.application.services import (
    AssistantService,
    ILLMClient,
    ChatCompletionResult,
)

__all__ = ["AssistantService", "ILLMClient", "ChatCompletionResult"]
