from unittest.mock import patch

import pytest
from langchain_core.language_models import FakeListChatModel

from aave_agents.config import Settings
from aave_agents.llm import (
    TEXT_LARGE,
    TEXT_SMALL,
    LLMFactory,
    LLMInvalidModelError,
    detect_provider,
    tier_for_action,
)
from aave_agents.memory import ConversationMemory, prepare_context, render_transcript
from aave_agents.models.chat_message import ChatMessage
from aave_agents.runtime import AgentRuntime, _content_text


@pytest.mark.parametrize(
    "model, provider",
    [
        ("gemini-2.5-flash", "google"),
        ("gpt-4o-mini", "openai"),
        ("o3-mini", "openai"),
        ("claude-sonnet-4-20250514", "anthropic"),
    ],
)
def test_detect_provider(model, provider):
    assert detect_provider(model) == provider


def test_unknown_model_is_rejected():
    with pytest.raises(LLMInvalidModelError) as exc_info:
        LLMFactory.create("llama-3")
    assert "gemini-2.5-flash" in str(exc_info.value)


def test_flash_loans_use_the_large_tier():
    assert tier_for_action("AAVE_FLASH_LOAN") == TEXT_LARGE
    assert tier_for_action("AAVE_SUPPLY") == TEXT_SMALL
    assert tier_for_action("SOMETHING_ELSE") == TEXT_SMALL


def test_runtime_creates_models_lazily_per_tier():
    fake = FakeListChatModel(responses=["ok"])
    runtime = AgentRuntime(settings=Settings(large_model="gpt-4o"))
    with patch("aave_agents.runtime.LLMFactory.create", return_value=fake) as create:
        assert runtime.get_model(TEXT_LARGE) is fake
        assert runtime.get_model(TEXT_LARGE) is fake
    create.assert_called_once_with("gpt-4o")


@pytest.mark.asyncio
async def test_use_model_returns_text():
    runtime = AgentRuntime(models={TEXT_SMALL: FakeListChatModel(responses=["hello"])})
    assert await runtime.use_model(TEXT_SMALL, "say hello") == "hello"


def test_content_text_joins_parts():
    assert _content_text([{"type": "text", "text": "a"}, "b", {"type": "image"}]) == "ab"


def test_memory_window_and_transcript():
    memory = ConversationMemory()
    for i in range(12):
        memory.add(ChatMessage(content=f"msg {i}", conversation_id="c"))

    recent = memory.recent("c", 3)
    assert [m.content for m in recent] == ["msg 9", "msg 10", "msg 11"]
    assert render_transcript(recent[:1]) == "user: msg 9"
    assert len(prepare_context(memory.get("c"))) == 8

    memory.clear("c")
    assert memory.get("c") == []
