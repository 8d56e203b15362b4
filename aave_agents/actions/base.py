from __future__ import annotations

import inspect
import logging
from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, ClassVar, Dict, List, Optional, Tuple, Type, Union

import structlog
from pydantic import BaseModel

from aave_agents.actions.extraction import compose_prompt, parse_model_output, validate_params
from aave_agents.actions.suggestions import suggestions_for
from aave_agents.errors import AaveError, ServiceUnavailableError
from aave_agents.llm import tier_for_action
from aave_agents.models.chat_message import ActionResult, ChatMessage
from aave_agents.routing import Route
from aave_agents.runtime import AgentRuntime
from aave_agents.services.base import AAVE_SERVICE, WALLET_SERVICE, AaveService, WalletService

Callback = Callable[[ActionResult], Union[None, Awaitable[None]]]


class BaseAction(ABC):
    """
    One conversational Aave operation.

    ``handler`` runs: compose state -> extract params with the model ->
    ``execute`` against the services -> build the response. Every failure is
    turned into an ``ActionResult`` with ``success=False`` and reported
    through the callback; nothing escapes the handler.
    """

    name: ClassVar[str] = ""
    similes: ClassVar[List[str]] = []
    description: ClassVar[str] = ""
    # (user message, assistant reply)
    examples: ClassVar[List[Tuple[str, str]]] = []
    route: ClassVar[Route]
    template: ClassVar[str]
    params_model: ClassVar[Type[BaseModel]]
    invalid_params_message: ClassVar[str]

    def __init__(self):
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    async def validate(self, runtime: AgentRuntime, message: ChatMessage) -> bool:
        """Cheap relevance check: services registered and keywords present."""
        if not (runtime.has_service(AAVE_SERVICE) and runtime.has_service(WALLET_SERVICE)):
            self.logger.debug("%s unavailable: Aave services are not registered", self.name)
            return False
        return self.route.matches(message.content)

    async def handler(
        self,
        runtime: AgentRuntime,
        message: ChatMessage,
        state: Optional[Dict[str, Any]] = None,
        options: Optional[Dict[str, Any]] = None,
        callback: Optional[Callback] = None,
    ) -> ActionResult:
        self.logger.info("Handling %s for conversation %s", self.name, message.conversation_id)
        # JSON log records emitted while handling carry these fields
        with structlog.contextvars.bound_contextvars(action=self.name, conversation_id=message.conversation_id):
            try:
                aave, wallet = self.services(runtime)
                if state is None:
                    state = await runtime.compose_state(message)
                params = await self.extract_params(runtime, state, options)
                result = await self.execute(runtime, params, aave, wallet)
            except AaveError as e:
                self.logger.info("%s rejected: %s", self.name, e.message)
                result = self.failure(e)
            except Exception as e:
                self.logger.exception("%s failed", self.name)
                result = self.failure(e)

        try:
            await _notify(callback, result)
        except Exception:
            self.logger.exception("%s callback failed", self.name)
        return result

    def services(self, runtime: AgentRuntime) -> Tuple[AaveService, WalletService]:
        aave = runtime.get_service(AAVE_SERVICE)
        wallet = runtime.get_service(WALLET_SERVICE)
        if aave is None or wallet is None:
            raise ServiceUnavailableError("Aave services are not initialized", self.name)
        return aave, wallet

    async def extract_params(
        self,
        runtime: AgentRuntime,
        state: Dict[str, Any],
        options: Optional[Dict[str, Any]] = None,
    ) -> BaseModel:
        """Ask the model for parameters; ``options["params"]`` skips the model call."""
        preset = (options or {}).get("params")
        if preset is not None:
            raw = dict(preset)
        else:
            prompt = compose_prompt(self.template, state)
            output = await runtime.use_model(tier_for_action(self.name), prompt)
            raw = parse_model_output(output)
        self.logger.debug("%s raw parameters: %s", self.name, raw)
        return validate_params(self.params_model, raw, self.invalid_params_message, self.name)

    @abstractmethod
    async def execute(
        self,
        runtime: AgentRuntime,
        params: Any,
        aave: AaveService,
        wallet: WalletService,
    ) -> ActionResult:
        """Run the operation for validated *params*."""

    # ---------- Results ----------

    def success(self, text: str, data: Optional[Dict[str, Any]] = None) -> ActionResult:
        return ActionResult(action=self.name, success=True, text=text, data=data or {})

    def failure(self, error: BaseException) -> ActionResult:
        if isinstance(error, AaveError):
            message = error.message
        else:
            message = f"Failed to process {self.name} request: {error}"
        suggestions = suggestions_for(self.name, message)
        lines = [f"❌ {message}"]
        if suggestions:
            lines.append("")
            lines.append("Suggestions:")
            lines.extend(f"- {hint}" for hint in suggestions)
        return ActionResult(
            action=self.name,
            success=False,
            text="\n".join(lines),
            error=message,
            suggestions=suggestions,
        )


async def _notify(callback: Optional[Callback], result: ActionResult) -> None:
    if callback is None:
        return
    outcome = callback(result)
    if inspect.isawaitable(outcome):
        await outcome
