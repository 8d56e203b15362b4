"""
Plugin wiring: actions, providers and services installed into a runtime.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence

from aave_agents.actions import DEFAULT_ACTIONS, BaseAction
from aave_agents.actions.base import Callback
from aave_agents.config import Settings
from aave_agents.models.chat_message import ActionResult, ChatMessage, MessageRole
from aave_agents.providers import HealthFactorProvider, MarketDataProvider, PositionContextProvider, Provider
from aave_agents.runtime import AgentRuntime
from aave_agents.services.base import AAVE_SERVICE, WALLET_SERVICE
from aave_agents.services.simulated import SimulatedAaveService, SimulatedWalletService
from aave_agents.services.web3_aave import Web3AaveService
from aave_agents.services.web3_wallet import Web3WalletService

logger = logging.getLogger(__name__)


class Plugin:
    def __init__(
        self,
        name: str,
        description: str,
        actions: Sequence[BaseAction],
        providers: Sequence[Provider] = (),
        services: Optional[Dict[str, Any]] = None,
    ):
        self.name = name
        self.description = description
        self.actions: List[BaseAction] = list(actions)
        self.providers: List[Provider] = list(providers)
        self.services: Dict[str, Any] = dict(services or {})

    def install(self, runtime: AgentRuntime) -> None:
        for service_name, service in self.services.items():
            runtime.register_service(service_name, service)
        for provider in self.providers:
            runtime.register_provider(provider)
        logger.info(
            "Installed plugin %s: %d actions, %d providers, services %s",
            self.name,
            len(self.actions),
            len(self.providers),
            sorted(self.services),
        )

    def get_action(self, name: str) -> Optional[BaseAction]:
        for action in self.actions:
            if action.name == name or name in action.similes:
                return action
        return None

    async def find_actions(self, runtime: AgentRuntime, message: ChatMessage) -> List[BaseAction]:
        """Actions whose ``validate`` accepts *message*, in registration order."""
        return [action for action in self.actions if await action.validate(runtime, message)]

    async def dispatch(
        self,
        runtime: AgentRuntime,
        message: ChatMessage,
        callback: Optional[Callback] = None,
    ) -> Optional[ActionResult]:
        """Run the first matching action; ``None`` when nothing matches."""
        runtime.remember(message)
        matches = await self.find_actions(runtime, message)
        if not matches:
            logger.debug("No action matched: %s", message.content[:80])
            return None

        action = matches[0]
        if len(matches) > 1:
            logger.debug("Routing to %s (also matched %s)", action.name, [a.name for a in matches[1:]])
        result = await action.handler(runtime, message, callback=callback)

        runtime.remember(
            ChatMessage(
                role=MessageRole.ASSISTANT,
                content=result.text,
                user_id=message.user_id,
                conversation_id=message.conversation_id,
                metadata={"action": result.action, "success": result.success},
            )
        )
        return result


def build_services(settings: Settings) -> Dict[str, Any]:
    """Web3 services when a key and RPC are configured, the simulation otherwise."""
    if settings.can_sign and not settings.aave_simulation:
        wallet = Web3WalletService(settings)
        logger.info("Using on-chain Aave services on %s for %s", settings.aave_network, wallet.account.address)
        return {WALLET_SERVICE: wallet, AAVE_SERVICE: Web3AaveService(wallet)}

    if not settings.aave_simulation:
        logger.warning("BASE_RPC_URL or WALLET_PRIVATE_KEY missing, falling back to simulated Aave services")
    wallet = SimulatedWalletService(address=settings.wallet_address)
    return {WALLET_SERVICE: wallet, AAVE_SERVICE: SimulatedAaveService(wallet)}


def build_plugin(settings: Settings) -> Plugin:
    return Plugin(
        name="aave",
        description="Supply, withdraw, borrow, repay and manage risk on Aave V3",
        actions=[action_cls() for action_cls in DEFAULT_ACTIONS],
        providers=[PositionContextProvider(), HealthFactorProvider(), MarketDataProvider()],
        services=build_services(settings),
    )
