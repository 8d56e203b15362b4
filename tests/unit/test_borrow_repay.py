import json
from decimal import Decimal

import pytest

from aave_agents.actions import BorrowAction, RepayAction
from aave_agents.models.aave import InterestRateMode
from aave_agents.models.chat_message import ChatMessage


def borrow_reply(asset="USDC", amount="500", mode="variable"):
    return "```json\n" + json.dumps({"asset": asset, "amount": amount, "interestRateMode": mode}) + "\n```"


def repay_reply(asset="USDC", amount="100", mode="variable"):
    return f"<response><asset>{asset}</asset><amount>{amount}</amount><rateMode>{mode}</rateMode></response>"


@pytest.mark.asyncio
async def test_borrow_success(make_runtime, supplied, aave, wallet):
    await supplied("USDC", "1000")
    runtime = make_runtime(borrow_reply(amount="500"))

    result = await BorrowAction().handler(runtime, ChatMessage(content="Borrow 500 USDC from Aave"))

    assert result.success
    assert "Borrowed 500 USDC at variable rate" in result.text
    assert "Borrow APR: 5.60%" in result.text
    assert "1.56" in result.text
    assert "⚠️" not in result.text
    assert aave.borrows["USDC"] == Decimal("500")
    assert result.data["interest_rate_mode"] == InterestRateMode.VARIABLE


@pytest.mark.asyncio
async def test_borrow_warns_when_health_factor_drops_below_warning(make_runtime, supplied):
    await supplied("USDC", "1000")
    runtime = make_runtime(borrow_reply(amount="600"))

    result = await BorrowAction().handler(runtime, ChatMessage(content="Borrow 600 USDC"))

    assert result.success
    assert "1.30" in result.text
    assert "⚠️ Health factor is below 1.5" in result.text


@pytest.mark.asyncio
async def test_borrow_without_collateral(make_runtime):
    runtime = make_runtime(borrow_reply(amount="10"))

    result = await BorrowAction().handler(runtime, ChatMessage(content="Borrow 10 USDC"))

    assert not result.success
    assert result.error == "No borrowing capacity. Supply collateral first."
    assert "You need to supply assets as collateral first" in result.suggestions


@pytest.mark.asyncio
async def test_borrow_rejected_below_minimum_health_factor(make_runtime, supplied, aave, wallet):
    await supplied("USDC", "1000")
    await aave.borrow("USDC", Decimal("700"), InterestRateMode.VARIABLE, wallet.address)
    runtime = make_runtime(borrow_reply(amount="10"))

    result = await BorrowAction().handler(runtime, ChatMessage(content="Borrow 10 more USDC"))

    assert not result.success
    assert result.error == "Health factor 1.11 is too low. Supply more collateral before borrowing."
    assert "Supply more collateral to improve your health factor" in result.suggestions


@pytest.mark.asyncio
async def test_borrow_stable_rate_not_enabled(make_runtime, supplied):
    await supplied("USDC", "1000")
    runtime = make_runtime(borrow_reply(asset="WETH", amount="0.01", mode="stable"))

    result = await BorrowAction().handler(runtime, ChatMessage(content="Borrow 0.01 WETH at stable rate"))

    assert not result.success
    assert "Stable rate borrowing is not enabled" in result.error
    assert "Try using variable rate instead" in result.suggestions


@pytest.mark.asyncio
async def test_repay_partial(make_runtime, supplied, aave, wallet):
    await supplied("USDC", "1000")
    await aave.borrow("USDC", Decimal("300"), InterestRateMode.VARIABLE, wallet.address)
    runtime = make_runtime(repay_reply(amount="100"))

    result = await RepayAction().handler(runtime, ChatMessage(content="Repay 100 USDC"))

    assert result.success
    assert "Repaid 100 USDC" in result.text
    assert "Remaining debt: 200 USDC" in result.text
    assert result.data["fully_repaid"] is False


@pytest.mark.asyncio
async def test_repay_max_clears_debt(make_runtime, supplied, aave, wallet):
    await supplied("USDC", "1000")
    await aave.borrow("USDC", Decimal("300"), InterestRateMode.VARIABLE, wallet.address)
    runtime = make_runtime(repay_reply(amount="max"))

    result = await RepayAction().handler(runtime, ChatMessage(content="Pay off all my USDC debt"))

    assert result.success
    assert "Repaid the full USDC debt" in result.text
    assert "fully repaid" in result.text
    assert result.data["remaining_debt"] == "0"
    assert aave.borrows["USDC"] == 0


@pytest.mark.asyncio
async def test_repay_uses_the_debt_rate_mode(make_runtime, supplied, aave, wallet, monkeypatch):
    await supplied("USDC", "1000")
    await aave.borrow("USDC", Decimal("100"), InterestRateMode.STABLE, wallet.address)
    calls = []
    original = aave.repay

    async def spy(asset, amount, mode, on_behalf_of):
        calls.append(mode)
        return await original(asset, amount, mode, on_behalf_of)

    monkeypatch.setattr(aave, "repay", spy)
    runtime = make_runtime(repay_reply(amount="50", mode="variable"))

    result = await RepayAction().handler(runtime, ChatMessage(content="Repay 50 USDC"))

    assert result.success
    assert calls == [InterestRateMode.STABLE]


@pytest.mark.asyncio
async def test_repay_without_debt(make_runtime):
    runtime = make_runtime(repay_reply(asset="DAI"))

    result = await RepayAction().handler(runtime, ChatMessage(content="Repay 100 DAI"))

    assert not result.success
    assert result.error == "No active DAI borrow position found"
    assert "You can only repay assets you have borrowed" in result.suggestions


@pytest.mark.asyncio
async def test_repay_insufficient_wallet_balance(make_runtime, supplied, aave, wallet):
    await supplied("USDC", "1000")
    await aave.borrow("USDC", Decimal("300"), InterestRateMode.VARIABLE, wallet.address)
    wallet.balances["USDC"] = Decimal("10")
    runtime = make_runtime(repay_reply(amount="max"))

    result = await RepayAction().handler(runtime, ChatMessage(content="repay all USDC"))

    assert not result.success
    assert result.error == "Insufficient USDC balance to repay. You have 10, need 300."
    assert aave.borrows["USDC"] == Decimal("300")
