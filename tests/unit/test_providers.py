from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from aave_agents.config import Settings
from aave_agents.models.aave import InterestRateMode
from aave_agents.models.chat_message import ChatMessage
from aave_agents.providers import (
    HealthFactorProvider,
    MarketDataProvider,
    PositionContextProvider,
    liquidation_distance,
)
from aave_agents.runtime import AgentRuntime

MESSAGE = ChatMessage(content="how is my position?")


@pytest.mark.asyncio
async def test_position_context_without_services():
    runtime = AgentRuntime(settings=Settings(aave_simulation=True))
    result = await PositionContextProvider().get(runtime, MESSAGE)
    assert result.text == "Aave position data is not available."


@pytest.mark.asyncio
async def test_position_context_statuses(make_runtime, supplied, aave, wallet):
    runtime = make_runtime()
    provider = PositionContextProvider()

    result = await provider.get(runtime, MESSAGE)
    assert result.data["status"] == "No Position"

    await supplied("USDC", "1000")
    result = await provider.get(runtime, MESSAGE)
    assert result.data["status"] == "Lending Only"
    assert "1000 USDC (APY 4.20%, collateral)" in result.text
    assert "Total collateral: $1,000.00" in result.text

    await aave.borrow("USDC", Decimal("500"), InterestRateMode.VARIABLE, wallet.address)
    result = await provider.get(runtime, MESSAGE)
    assert result.data["status"] == "Active Lending & Borrowing"
    assert "500 USDC (variable, APR 5.60%)" in result.text
    assert "Current LTV: 50.00%" in result.text


def test_liquidation_distance():
    assert liquidation_distance(Decimal("2")) == Decimal("50")
    assert liquidation_distance(Decimal("1")) == Decimal("0")
    assert liquidation_distance(Decimal("0.8")) == Decimal("0")


@pytest.mark.asyncio
async def test_health_factor_without_debt(make_runtime, supplied):
    await supplied("USDC", "1000")
    result = await HealthFactorProvider().get(make_runtime(), MESSAGE)
    assert "no outstanding debt" in result.text


@pytest.mark.asyncio
async def test_health_factor_recommendations_below_alert(make_runtime, supplied, aave, wallet):
    await supplied("USDC", "1000")
    await aave.borrow("USDC", Decimal("600"), InterestRateMode.VARIABLE, wallet.address)

    result = await HealthFactorProvider().get(make_runtime(), MESSAGE)

    assert result.data["status"] == "RISKY"
    assert "Health factor: 1.30 (🟠 RISKY)" in result.text
    assert "Consider repaying part of your debt" in result.data["recommendations"]


@pytest.mark.asyncio
async def test_health_factor_healthy_position_has_no_recommendations(make_runtime, supplied, aave, wallet):
    await supplied("USDC", "1000")
    await aave.borrow("USDC", Decimal("200"), InterestRateMode.VARIABLE, wallet.address)

    result = await HealthFactorProvider().get(make_runtime(), MESSAGE)

    assert result.data["status"] == "VERY_SAFE"
    assert result.data["recommendations"] == []


@pytest.mark.asyncio
async def test_providers_feed_compose_state(make_runtime, supplied):
    await supplied("USDC", "1000")
    runtime = make_runtime()
    runtime.register_provider(PositionContextProvider())

    state = await runtime.compose_state(MESSAGE)

    assert "Lending Only" in state["providers"]
    assert state["recentMessages"].endswith("user: how is my position?")


@pytest.mark.asyncio
async def test_providers_fall_back_when_reads_fail(make_runtime, aave, monkeypatch):
    monkeypatch.setattr(aave, "get_user_position", AsyncMock(side_effect=ConnectionError("RPC read timed out")))
    monkeypatch.setattr(aave, "get_user_account_data", AsyncMock(side_effect=ConnectionError("RPC read timed out")))
    monkeypatch.setattr(aave, "get_market_data", AsyncMock(side_effect=TimeoutError()))
    runtime = make_runtime()

    assert (await PositionContextProvider().get(runtime, MESSAGE)).text == "Aave position data is not available."
    assert (await HealthFactorProvider().get(runtime, MESSAGE)).text == ""
    assert (await MarketDataProvider().get(runtime, MESSAGE)).text == "Aave market data is not available."


@pytest.mark.asyncio
async def test_market_data_summary(make_runtime):
    result = await MarketDataProvider().get(make_runtime(), MESSAGE)

    assert result.text.startswith("Aave V3 market (base)\nAverage supply APY: 2.45%")
    assert "- USDC: supply 4.20%, borrow 5.60%, utilization 84.5%, liquidity 48.0M USDC" in result.text
    assert "High yield: USDC 4.20%, DAI 3.90%, USDBC 3.80%" in result.text
    assert "Low borrow cost: WSTETH 0.90%, CBETH 1.20%, WETH 2.80%" in result.text
    assert "⚠️ High utilization: USDC 84.5%" in result.text
    assert [r["asset"] for r in result.data["reserves"]][:2] == ["USDC", "DAI"]


@pytest.mark.asyncio
async def test_market_data_includes_own_positions(make_runtime, supplied, aave):
    await supplied("USDC", "1000")

    usdc = next(r for r in await aave.get_market_data() if r.asset == "USDC")

    assert usdc.total_supplied == Decimal("310001000")
    assert usdc.stable_borrow_apy == Decimal("7.1")
    weth = next(r for r in await aave.get_market_data() if r.asset == "WETH")
    assert weth.stable_borrow_apy == Decimal("0")
