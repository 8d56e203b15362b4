from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict

from pydantic import BaseModel, Field

from aave_agents.models.chat_message import ChatMessage


class ProviderResult(BaseModel):
    text: str = ""
    data: Dict[str, Any] = Field(default_factory=dict)


class Provider(ABC):
    """Supplies context text that extraction prompts interpolate as ``{{providers}}``."""

    name: str = ""
    description: str = ""

    @abstractmethod
    async def get(self, runtime: Any, message: ChatMessage) -> ProviderResult:
        ...
