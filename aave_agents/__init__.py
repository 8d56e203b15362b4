"""
Conversational Aave V3 actions.

A message is routed to an action by keyword, the action asks a chat model
for structured parameters, calls the Aave and wallet services and answers
with a formatted summary.
"""

__version__ = "0.1.0"

from aave_agents.config import AaveConfig, Settings
from aave_agents.models.chat_message import ActionResult, ChatMessage
from aave_agents.plugin import Plugin, build_plugin
from aave_agents.runtime import AgentRuntime

__all__ = [
    "AaveConfig",
    "ActionResult",
    "AgentRuntime",
    "ChatMessage",
    "Plugin",
    "Settings",
    "build_plugin",
]
