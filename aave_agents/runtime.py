"""Runtime handed to every action: settings, services, models and memory."""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import HumanMessage

from aave_agents.config import Settings
from aave_agents.llm import LLMFactory, LLMProviderError, TEXT_LARGE, TEXT_SMALL
from aave_agents.memory import ConversationMemory, render_transcript
from aave_agents.models.chat_message import ChatMessage

logger = logging.getLogger(__name__)


def _content_text(response: Any) -> str:
    content = getattr(response, "content", response)
    if isinstance(content, str):
        return content
    # Gemini / Anthropic may return a list of content parts
    if isinstance(content, list):
        parts = []
        for part in content:
            if isinstance(part, str):
                parts.append(part)
            elif isinstance(part, dict) and part.get("type") == "text":
                parts.append(part.get("text", ""))
        return "".join(parts)
    return str(content or "")


class AgentRuntime:
    def __init__(
        self,
        settings: Optional[Settings] = None,
        models: Optional[Dict[str, BaseChatModel]] = None,
        memory: Optional[ConversationMemory] = None,
    ):
        self.settings = settings or Settings()
        self.memory = memory or ConversationMemory()
        self.providers: List[Any] = []
        self._models: Dict[str, BaseChatModel] = dict(models or {})
        self._services: Dict[str, Any] = {}

    # ---------- Services ----------

    def register_service(self, name: str, service: Any) -> None:
        self._services[name] = service
        logger.debug("Registered service %s (%s)", name, type(service).__name__)

    def get_service(self, name: str) -> Optional[Any]:
        return self._services.get(name)

    def has_service(self, name: str) -> bool:
        return name in self._services

    def register_provider(self, provider: Any) -> None:
        self.providers.append(provider)

    # ---------- Models ----------

    def get_model(self, tier: str) -> BaseChatModel:
        if tier not in self._models:
            model_name = self.settings.large_model if tier == TEXT_LARGE else self.settings.small_model
            self._models[tier] = LLMFactory.create(model_name)
        return self._models[tier]

    async def use_model(self, tier: str, prompt: str) -> str:
        """Run *prompt* on the model for *tier* and return its text."""
        llm = self.get_model(tier or TEXT_SMALL)
        try:
            response = await llm.ainvoke([HumanMessage(content=prompt)])
        except Exception as e:
            raise LLMProviderError(f"Model call failed: {e}", model=getattr(llm, "model", None)) from e
        return _content_text(response)

    # ---------- Memory ----------

    def remember(self, message: ChatMessage) -> None:
        self.memory.add(message)

    def recent_messages(self, conversation_id: str) -> List[ChatMessage]:
        return self.memory.recent(conversation_id, self.settings.max_context_messages)

    async def compose_state(self, message: ChatMessage) -> Dict[str, Any]:
        """Collect the values extraction templates interpolate."""
        recent = self.recent_messages(message.conversation_id)
        if not recent or recent[-1] is not message:
            recent = [*recent, message]

        provider_texts = []
        for provider in self.providers:
            result = await provider.get(self, message)
            if result.text:
                provider_texts.append(result.text)

        return {
            "recentMessages": render_transcript(recent),
            "providers": "\n\n".join(provider_texts),
            "message": message.content,
        }
