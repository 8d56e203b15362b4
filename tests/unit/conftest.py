from decimal import Decimal

import pytest
from langchain_core.language_models import FakeListChatModel

from aave_agents.config import Settings
from aave_agents.llm import TEXT_LARGE, TEXT_SMALL
from aave_agents.runtime import AgentRuntime
from aave_agents.services import AAVE_SERVICE, WALLET_SERVICE, SimulatedAaveService, SimulatedWalletService


@pytest.fixture
def settings():
    return Settings(aave_simulation=True)


@pytest.fixture
def wallet():
    return SimulatedWalletService()


@pytest.fixture
def aave(wallet):
    return SimulatedAaveService(wallet)


@pytest.fixture
def make_runtime(settings, wallet, aave):
    """Runtime with the simulated services and canned model replies."""

    def _make(*responses, large=None, runtime_settings=None):
        small_replies = list(responses) or ["{}"]
        models = {
            TEXT_SMALL: FakeListChatModel(responses=small_replies),
            TEXT_LARGE: FakeListChatModel(responses=list(large or small_replies)),
        }
        runtime = AgentRuntime(settings=runtime_settings or settings, models=models)
        runtime.register_service(AAVE_SERVICE, aave)
        runtime.register_service(WALLET_SERVICE, wallet)
        return runtime

    return _make


@pytest.fixture
def supplied(aave, wallet):
    """Returns a coroutine function that supplies *amount* of *asset* as collateral."""

    async def _supply(asset="USDC", amount="1000"):
        return await aave.supply(asset, Decimal(amount), wallet.address)

    return _supply
