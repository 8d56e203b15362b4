"""
Conversation windowing keeps extraction prompts bounded.

Only the last *max_recent* messages of a conversation are rendered into
the prompt; older turns are dropped.
"""

from __future__ import annotations

import logging
from collections import defaultdict, deque
from typing import Deque, Dict, List

from aave_agents.models.chat_message import ChatMessage

logger = logging.getLogger(__name__)

DEFAULT_MAX_RECENT = 8
# Per-conversation storage cap, independent of the prompt window
MAX_STORED_MESSAGES = 100


def prepare_context(messages: List[ChatMessage], *, max_recent: int = DEFAULT_MAX_RECENT) -> List[ChatMessage]:
    """Return the bounded window of *messages* used for prompting."""
    if len(messages) <= max_recent:
        return list(messages)
    return list(messages[-max_recent:])


def render_transcript(messages: List[ChatMessage], max_chars: int = 500) -> str:
    lines: list[str] = []
    for msg in messages:
        content = (msg.content or "").strip()[:max_chars]
        lines.append(f"{msg.role.value}: {content}")
    return "\n".join(lines)


class ConversationMemory:
    """In-process message history keyed by conversation id."""

    def __init__(self, max_stored: int = MAX_STORED_MESSAGES):
        self._messages: Dict[str, Deque[ChatMessage]] = defaultdict(lambda: deque(maxlen=max_stored))

    def add(self, message: ChatMessage) -> None:
        self._messages[message.conversation_id].append(message)

    def get(self, conversation_id: str) -> List[ChatMessage]:
        return list(self._messages.get(conversation_id, ()))

    def recent(self, conversation_id: str, max_recent: int = DEFAULT_MAX_RECENT) -> List[ChatMessage]:
        return prepare_context(self.get(conversation_id), max_recent=max_recent)

    def clear(self, conversation_id: str) -> None:
        self._messages.pop(conversation_id, None)
        logger.debug("Cleared conversation %s", conversation_id)
