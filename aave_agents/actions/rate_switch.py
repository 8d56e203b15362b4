from __future__ import annotations

from aave_agents.actions.base import BaseAction
from aave_agents.actions.formatting import format_amount, format_percent
from aave_agents.actions.prompts import RATE_SWITCH_TEMPLATE
from aave_agents.errors import AaveError, AaveErrorCode
from aave_agents.models.aave import InterestRateMode
from aave_agents.models.chat_message import ActionResult
from aave_agents.models.params import RateSwitchParams
from aave_agents.routing import RATE_SWITCH_ROUTE


class RateSwitchAction(BaseAction):
    name = "AAVE_RATE_SWITCH"
    similes = ["SWITCH_RATE_MODE", "CHANGE_INTEREST_RATE", "AAVE_SWAP_RATE"]
    description = "Switch an Aave V3 borrow between stable and variable rate"
    examples = [
        ("Switch my USDC debt to a stable rate", "✅ Switched USDC debt from variable to stable rate"),
        ("Change my DAI borrow to variable interest", "✅ Switched DAI debt from stable to variable rate"),
    ]
    route = RATE_SWITCH_ROUTE
    template = RATE_SWITCH_TEMPLATE
    params_model = RateSwitchParams
    invalid_params_message = (
        "Unable to process rate switch request. Please specify the borrowed asset "
        "and the target rate mode (stable or variable)."
    )

    async def execute(self, runtime, params: RateSwitchParams, aave, wallet) -> ActionResult:
        address = await wallet.get_address()
        position = await aave.get_user_position(address)

        borrow = position.find_borrow(params.asset)
        if borrow is None:
            raise AaveError(
                f"No active {params.asset} borrow position found",
                AaveErrorCode.NO_POSITION,
                "rate switch",
            )
        if borrow.interest_rate_mode == params.target_rate_mode:
            raise AaveError(
                f"Your {params.asset} debt is already using {params.target_rate_mode.label} rate",
                AaveErrorCode.ALREADY_SET,
                "rate switch",
            )

        result = await aave.swap_borrow_rate_mode(params.asset, params.target_rate_mode)
        self.logger.info(
            "Switched %s debt to %s rate for %s", params.asset, result.new_rate_mode.label, address
        )

        lines = [
            f"✅ Switched {params.asset} debt from {result.previous_rate_mode.label} "
            f"to {result.new_rate_mode.label} rate",
            f"- Previous rate: {format_percent(result.previous_rate)}",
            f"- New rate: {format_percent(result.new_rate)}",
        ]
        savings = result.projected_savings
        if savings > 0:
            lines.append(f"- 💰 Projected annual savings: {format_amount(savings)} {params.asset}")
        elif savings < 0:
            lines.append(f"- 📈 Projected additional annual cost: {format_amount(-savings)} {params.asset}")
        lines.append(f"- Transaction: {result.transaction_hash}")
        lines.append("")
        if result.new_rate_mode == InterestRateMode.STABLE:
            lines.append("💡 Stable rates are predictable but the protocol can rebalance them when markets shift.")
        else:
            lines.append("💡 Variable rates follow pool utilization and can rise quickly in busy markets.")
        return self.success("\n".join(lines), result.model_dump(mode="json"))
