from __future__ import annotations

from aave_agents.actions.base import BaseAction
from aave_agents.actions.formatting import describe_health_factor, format_amount, format_health_factor, format_percent
from aave_agents.actions.prompts import WITHDRAW_TEMPLATE
from aave_agents.config import AaveConfig
from aave_agents.errors import AaveError, AaveErrorCode
from aave_agents.models.chat_message import ActionResult
from aave_agents.models.params import WithdrawParams
from aave_agents.routing import WITHDRAW_ROUTE


class WithdrawAction(BaseAction):
    name = "AAVE_WITHDRAW"
    similes = ["WITHDRAW_FROM_AAVE", "REMOVE_SUPPLY", "AAVE_REDEEM"]
    description = "Withdraw supplied assets from Aave V3"
    examples = [
        ("Withdraw 50 USDC from Aave", "✅ Withdrew 50 USDC from Aave V3"),
        ("Withdraw all my WETH", "✅ Withdrew all WETH from Aave V3"),
    ]
    route = WITHDRAW_ROUTE
    template = WITHDRAW_TEMPLATE
    params_model = WithdrawParams
    invalid_params_message = "Unable to process withdraw request. Please specify the asset and amount to withdraw."

    async def execute(self, runtime, params: WithdrawParams, aave, wallet) -> ActionResult:
        address = await wallet.get_address()
        position = await aave.get_user_position(address)

        supply = position.find_supply(params.asset)
        if supply is None:
            raise AaveError(
                f"No active {params.asset} supply position found",
                AaveErrorCode.NO_POSITION,
                "withdraw",
            )
        if position.has_debt and position.health_factor < AaveConfig.HEALTH_FACTOR_WARNING:
            raise AaveError(
                f"Health factor {format_health_factor(position.health_factor)} is too low for withdrawal. "
                "Repay debt first.",
                AaveErrorCode.HEALTH_FACTOR_TOO_LOW,
                "withdraw",
            )
        if not params.is_max and params.amount > supply.balance:
            raise AaveError(
                f"Insufficient supplied balance. You have {format_amount(supply.balance)} {params.asset} "
                f"supplied, tried to withdraw {format_amount(params.amount)}.",
                AaveErrorCode.INSUFFICIENT_BALANCE,
                "withdraw",
            )

        result = await aave.withdraw(params.asset, params.amount, address)
        fully_withdrawn = result.remaining_supply <= 0
        self.logger.info("Withdrew %s %s for %s", result.amount, params.asset, address)

        amount_text = "all" if params.is_max else format_amount(result.amount)
        lines = [
            f"✅ Withdrew {amount_text} {params.asset} from Aave V3",
            f"- Amount received: {format_amount(result.amount)} {params.asset}",
            f"- Remaining supply: {format_amount(result.remaining_supply)} {params.asset}",
        ]
        if fully_withdrawn:
            lines.append("- Position fully withdrawn")
        else:
            lines.append(f"- Supply APY: {format_percent(supply.apy)}")
        lines.append(f"- Health factor: {describe_health_factor(result.health_factor)}")
        lines.append(f"- Transaction: {result.transaction_hash}")
        if position.has_debt and result.health_factor < AaveConfig.HEALTH_FACTOR_WARNING:
            lines.append("")
            lines.append("⚠️ Health factor is below 1.5. Consider repaying debt to reduce liquidation risk.")

        data = result.model_dump(mode="json")
        data["fully_withdrawn"] = fully_withdrawn
        return self.success("\n".join(lines), data)
