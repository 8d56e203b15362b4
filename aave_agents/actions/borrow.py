from __future__ import annotations

from aave_agents.actions.base import BaseAction
from aave_agents.actions.formatting import describe_health_factor, format_amount, format_health_factor, format_percent
from aave_agents.actions.prompts import BORROW_TEMPLATE
from aave_agents.config import AaveConfig
from aave_agents.errors import AaveError, AaveErrorCode
from aave_agents.models.chat_message import ActionResult
from aave_agents.models.params import BorrowParams
from aave_agents.routing import BORROW_ROUTE


class BorrowAction(BaseAction):
    name = "AAVE_BORROW"
    similes = ["BORROW_FROM_AAVE", "AAVE_LOAN", "TAKE_LOAN"]
    description = "Borrow assets from Aave V3 against supplied collateral"
    examples = [
        ("Borrow 500 USDC from Aave", "✅ Borrowed 500 USDC at variable rate"),
        ("I want to borrow 100 DAI at a stable rate", "✅ Borrowed 100 DAI at stable rate"),
    ]
    route = BORROW_ROUTE
    template = BORROW_TEMPLATE
    params_model = BorrowParams
    invalid_params_message = "Unable to process borrow request. Please specify the asset and amount to borrow."

    async def execute(self, runtime, params: BorrowParams, aave, wallet) -> ActionResult:
        address = await wallet.get_address()
        account = await aave.get_user_account_data(address)

        if account.health_factor < AaveConfig.MIN_BORROW_HEALTH_FACTOR:
            raise AaveError(
                f"Health factor {format_health_factor(account.health_factor)} is too low. "
                "Supply more collateral before borrowing.",
                AaveErrorCode.HEALTH_FACTOR_TOO_LOW,
                "borrow",
            )
        if account.available_borrows <= 0:
            raise AaveError(
                "No borrowing capacity. Supply collateral first.",
                AaveErrorCode.INSUFFICIENT_COLLATERAL,
                "borrow",
            )

        result = await aave.borrow(params.asset, params.amount, params.interest_rate_mode, address)
        mode = result.interest_rate_mode.label
        self.logger.info("Borrowed %s %s (%s) for %s", result.amount, params.asset, mode, address)

        lines = [
            f"✅ Borrowed {format_amount(result.amount)} {params.asset} at {mode} rate",
            f"- Borrow APR: {format_percent(result.rate)}",
            f"- Health factor: {describe_health_factor(result.health_factor)}",
            f"- Transaction: {result.transaction_hash}",
        ]
        if result.health_factor < AaveConfig.HEALTH_FACTOR_WARNING:
            lines.append("")
            lines.append(
                "⚠️ Health factor is below 1.5. Monitor your position closely "
                "and consider adding collateral."
            )
        return self.success("\n".join(lines), result.model_dump(mode="json"))
