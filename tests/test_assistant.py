# tests/test_assistant.py

import asyncio

import pytest

from helpdesk.assistant.application import AssistantService, ILLMClient, ChatCompletionResult
from helpdesk.assistant.domain import (
    ClassificationPromptBuilder,
    ReplyPromptBuilder,
    SUMMARY_FALLBACK,
    SUMMARY_EMPTY,
    REPLY_FALLBACK,
)
from helpdesk.assistant.infrastructure import MockLLMClient, OpenAILLMClient, build_llm_client
from helpdesk.config import Settings, TicketPriority
from helpdesk.core import ConfigurationException
from helpdesk.tickets.domain import Comment

from conftest import NOW, make_ticket


class StaticLLMClient(ILLMClient):
    """Returns a fixed reply and records the operations it saw."""

    def __init__(self, content):
        self.content = content
        self.operations = []

    async def chat_completion(self, messages, temperature=0.3, max_tokens=500,
                              operation="chat_completion"):
        self.operations.append(operation)
        return ChatCompletionResult(content=self.content, model="static")


class FailingLLMClient(ILLMClient):
    async def chat_completion(self, messages, temperature=0.3, max_tokens=500,
                              operation="chat_completion"):
        raise ConnectionError("service unreachable")


class SlowLLMClient(ILLMClient):
    async def chat_completion(self, messages, temperature=0.3, max_tokens=500,
                              operation="chat_completion"):
        await asyncio.sleep(5)
        return ChatCompletionResult(content="{}", model="slow")


def _conversation():
    ticket = make_ticket("T-1", creator_id="u3")
    comments = [
        Comment(id="c1", ticket_id="T-1", author_id="u3", content="It crashes on save", created_at=NOW),
        Comment(id="c2", ticket_id="T-1", author_id="u2", content="Which version?", created_at=NOW),
        Comment(id="c3", ticket_id="T-1", author_id="u3", content="Version 4.2", created_at=NOW),
    ]
    return ticket, comments


@pytest.mark.asyncio
async def test_classify_parses_fenced_json():
    client = StaticLLMClient('```json\n{"category": "Hardware", "priority": "urgent", "reason": "fire"}\n```')
    service = AssistantService(client)

    result = await service.classify("Smoke from PC", "It smells burnt")

    assert result.category == "Hardware"
    assert result.priority == TicketPriority.URGENT
    assert result.reasoning == "fire"
    assert result.is_fallback is False
    assert client.operations == ["classification"]


@pytest.mark.asyncio
async def test_classify_invalid_priority_becomes_medium():
    service = AssistantService(StaticLLMClient('{"category": "Bug", "priority": "SEVERE"}'))

    result = await service.classify("t", "d")

    assert result.category == "Bug"
    assert result.priority == TicketPriority.MEDIUM


@pytest.mark.asyncio
@pytest.mark.parametrize("client", [
    StaticLLMClient("not json at all"),
    StaticLLMClient('["a", "list"]'),
    StaticLLMClient(""),
    FailingLLMClient(),
    None,
])
async def test_classify_falls_back(client):
    result = await AssistantService(client).classify("t", "d")

    assert result.category == "Other"
    assert result.priority == TicketPriority.MEDIUM
    assert result.is_fallback is True


@pytest.mark.asyncio
async def test_classify_times_out():
    service = AssistantService(SlowLLMClient(), timeout_seconds=0.05)

    result = await service.classify("t", "d")

    assert result.is_fallback is True
    assert "timed out" in result.reasoning


@pytest.mark.asyncio
async def test_summarize():
    ticket, comments = _conversation()

    assert await AssistantService(StaticLLMClient("  Crash on save.  ")).summarize(ticket, comments) == "Crash on save."
    assert await AssistantService(StaticLLMClient("")).summarize(ticket, comments) == SUMMARY_EMPTY
    assert await AssistantService(FailingLLMClient()).summarize(ticket, comments) == SUMMARY_FALLBACK
    assert await AssistantService(None).summarize(ticket, comments) == SUMMARY_FALLBACK


@pytest.mark.asyncio
async def test_suggest_reply():
    ticket, comments = _conversation()

    assert await AssistantService(StaticLLMClient("Try 4.3")).suggest_reply(ticket, comments) == "Try 4.3"
    assert await AssistantService(FailingLLMClient()).suggest_reply(ticket, comments) == REPLY_FALLBACK
    assert await AssistantService(SlowLLMClient(), timeout_seconds=0.05).suggest_reply(ticket, comments) == REPLY_FALLBACK


@pytest.mark.asyncio
async def test_mock_client_round_trip():
    service = AssistantService(MockLLMClient())
    ticket, comments = _conversation()

    result = await service.classify("Login fails", "App crashes")

    assert result.category == "Software"
    assert result.priority == TicketPriority.HIGH
    assert (await service.summarize(ticket, comments)).startswith("Mock summary")


def test_reply_prompt_uses_last_client_message():
    ticket, comments = _conversation()

    prompt = ReplyPromptBuilder.build_messages(ticket, comments)[0]["content"]

    assert "Last client message: Version 4.2" in prompt


def test_classification_prompt_with_images():
    messages = ClassificationPromptBuilder.build_messages("t", "d", ["aGVsbG8=", "https://x/y.png"])

    parts = messages[1]["content"]
    assert parts[0]["type"] == "text"
    assert parts[1]["image_url"]["url"] == "data:image/jpeg;base64,aGVsbG8="
    assert parts[2]["image_url"]["url"] == "https://x/y.png"


def test_build_llm_client_selection():
    assert isinstance(build_llm_client(Settings(mock_llm=True)), MockLLMClient)
    assert build_llm_client(Settings(mock_llm=False, openai_api_key=None)) is None
    assert isinstance(
        build_llm_client(Settings(mock_llm=False, openai_api_key="sk-test")),
        OpenAILLMClient
    )


def test_openai_client_requires_key():
    with pytest.raises(ConfigurationException):
        OpenAILLMClient(api_key=None, model="gpt-4o-mini")
