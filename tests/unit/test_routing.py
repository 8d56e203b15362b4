import pytest

from aave_agents.actions import (
    BorrowAction,
    CollateralAction,
    EModeAction,
    FlashLoanAction,
    RateSwitchAction,
    RepayAction,
    SupplyAction,
    WithdrawAction,
)
from aave_agents.config import Settings
from aave_agents.models.chat_message import ChatMessage
from aave_agents.plugin import build_plugin
from aave_agents.runtime import AgentRuntime


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "action_cls, text",
    [
        (SupplyAction, "Supply 100 USDC to Aave"),
        (SupplyAction, "I want to deposit 1 WETH"),
        (SupplyAction, "lend 500 DAI please"),
        (WithdrawAction, "Withdraw 50 USDC from Aave"),
        (WithdrawAction, "take out all my WETH"),
        (BorrowAction, "Borrow 500 USDC"),
        (BorrowAction, "I'd like to take out a loan of 100 DAI"),
        (RepayAction, "Repay 200 USDC"),
        (RepayAction, "pay back my DAI loan"),
        (RepayAction, "close my USDC debt"),
        (EModeAction, "Enable eMode for stablecoins"),
        (EModeAction, "turn off efficiency mode"),
        (EModeAction, "set e-mode category 2"),
        (RateSwitchAction, "Switch my USDC debt to a stable rate"),
        (RateSwitchAction, "what rate mode am I on? change it"),
        (CollateralAction, "Enable WETH as collateral"),
        (CollateralAction, "stop using my USDC as collateral"),
        (FlashLoanAction, "Flash loan 1000 USDC"),
        (FlashLoanAction, "run a flashloan of 5 WETH"),
    ],
)
async def test_validate_matches_keywords(make_runtime, action_cls, text):
    runtime = make_runtime()
    assert await action_cls().validate(runtime, ChatMessage(content=text))


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "action_cls, text",
    [
        (SupplyAction, "What's the weather like?"),
        (SupplyAction, "supplyside economics"),
        (WithdrawAction, "Supply 100 USDC"),
        (BorrowAction, "Repay 100 USDC"),
        (CollateralAction, "Enable eMode"),
        (FlashLoanAction, "Borrow 100 USDC"),
        (EModeAction, "Supply 100 USDC"),
    ],
)
async def test_validate_rejects_unrelated_text(make_runtime, action_cls, text):
    runtime = make_runtime()
    assert not await action_cls().validate(runtime, ChatMessage(content=text))


@pytest.mark.asyncio
async def test_validate_requires_services():
    runtime = AgentRuntime(settings=Settings(aave_simulation=True))
    assert not await SupplyAction().validate(runtime, ChatMessage(content="Supply 100 USDC to Aave"))


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "text, expected",
    [
        ("Repay my USDC borrow", "AAVE_REPAY"),
        ("Take a flash loan of 1000 USDC", "AAVE_FLASH_LOAN"),
        ("Switch my borrow to variable rate", "AAVE_RATE_SWITCH"),
        ("Disable USDC as collateral", "AAVE_COLLATERAL"),
        ("Stop using my supplied WETH as collateral", "AAVE_COLLATERAL"),
        ("Supply 100 USDC", "AAVE_SUPPLY"),
        ("Supply 100 USDC and use it as collateral", "AAVE_SUPPLY"),
        ("Deposit 500 DAI to Aave and enable it as collateral", "AAVE_SUPPLY"),
    ],
)
async def test_first_matching_action_wins(text, expected):
    settings = Settings(aave_simulation=True)
    plugin = build_plugin(settings)
    runtime = AgentRuntime(settings=settings)
    plugin.install(runtime)

    matches = await plugin.find_actions(runtime, ChatMessage(content=text))
    assert matches
    assert matches[0].name == expected
