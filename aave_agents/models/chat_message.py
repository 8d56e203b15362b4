from typing import Any, Dict, List, Optional
from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class MessageRole(str, Enum):
    """Enum for message roles"""
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


class ChatMessage(BaseModel):
    """A single chat turn routed to the actions"""

    role: MessageRole = Field(default=MessageRole.USER, description="Role of the message sender")
    content: str = Field(..., description="Message text")

    user_id: str = Field(default="anonymous", description="User identifier")
    conversation_id: str = Field(default="default", description="Conversation identifier")

    metadata: Dict[str, Any] = Field(default_factory=dict, description="Additional metadata")
    timestamp: datetime = Field(default_factory=_utcnow, description="Message timestamp")

    def to_context(self) -> Dict[str, Any]:
        return {"role": self.role.value, "content": self.content}


class ActionResult(BaseModel):
    """Outcome of one action handler run, also passed to the callback"""

    action: str = Field(..., description="Name of the action that produced this result")
    success: bool = Field(..., description="Whether the operation completed")
    text: str = Field(..., description="User-facing response text")
    data: Dict[str, Any] = Field(default_factory=dict, description="Structured operation data")
    error: Optional[str] = Field(None, description="Error message if the operation failed")
    suggestions: List[str] = Field(default_factory=list, description="Follow-up hints on failure")
    timestamp: datetime = Field(default_factory=_utcnow, description="Result timestamp")
