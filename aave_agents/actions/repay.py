from __future__ import annotations

from typing import Optional

from aave_agents.actions.base import BaseAction
from aave_agents.actions.formatting import describe_health_factor, format_amount
from aave_agents.actions.prompts import REPAY_TEMPLATE
from aave_agents.errors import AaveError, AaveErrorCode
from aave_agents.models.aave import AssetPosition, UserPosition
from aave_agents.models.chat_message import ActionResult
from aave_agents.models.params import RepayParams
from aave_agents.routing import REPAY_ROUTE


def _matching_borrow(position: UserPosition, params: RepayParams) -> Optional[AssetPosition]:
    """Borrow of the requested asset, preferring the requested rate mode."""
    fallback = None
    for borrow in position.borrows:
        if borrow.asset != params.asset or borrow.balance <= 0:
            continue
        if borrow.interest_rate_mode in (None, params.interest_rate_mode):
            return borrow
        fallback = fallback or borrow
    return fallback


class RepayAction(BaseAction):
    name = "AAVE_REPAY"
    similes = ["REPAY_AAVE", "PAY_BACK_LOAN", "CLOSE_DEBT"]
    description = "Repay borrowed assets on Aave V3"
    examples = [
        ("Repay 200 USDC on Aave", "✅ Repaid 200 USDC"),
        ("Pay off all my DAI debt", "✅ Repaid the full DAI debt"),
    ]
    route = REPAY_ROUTE
    template = REPAY_TEMPLATE
    params_model = RepayParams
    invalid_params_message = "Unable to process repay request. Please specify the asset and amount to repay."

    async def execute(self, runtime, params: RepayParams, aave, wallet) -> ActionResult:
        address = await wallet.get_address()
        position = await aave.get_user_position(address)

        borrow = _matching_borrow(position, params)
        if borrow is None:
            raise AaveError(
                f"No active {params.asset} borrow position found",
                AaveErrorCode.NO_POSITION,
                "repay",
            )

        mode = borrow.interest_rate_mode or params.interest_rate_mode
        if mode != params.interest_rate_mode:
            self.logger.info("Repaying %s debt with its %s rate mode", params.asset, mode.label)

        needed = borrow.balance if params.is_max else min(params.amount, borrow.balance)
        balance = await wallet.get_balance(params.asset)
        if balance < needed:
            raise AaveError(
                f"Insufficient {params.asset} balance to repay. You have {format_amount(balance)}, "
                f"need {format_amount(needed)}.",
                AaveErrorCode.INSUFFICIENT_BALANCE,
                "repay",
            )

        result = await aave.repay(params.asset, params.amount, mode, address)
        fully_repaid = result.remaining_debt <= 0
        self.logger.info("Repaid %s %s for %s", result.amount, params.asset, address)

        if params.is_max:
            headline = f"✅ Repaid the full {params.asset} debt ({format_amount(result.amount)} {params.asset})"
        else:
            headline = f"✅ Repaid {format_amount(result.amount)} {params.asset}"
        lines = [
            headline,
            f"- Remaining debt: {format_amount(result.remaining_debt)} {params.asset}",
        ]
        if fully_repaid:
            lines.append(f"- 🎉 {params.asset} debt fully repaid")
        lines.append(f"- Health factor: {describe_health_factor(result.health_factor)}")
        lines.append(f"- Transaction: {result.transaction_hash}")

        data = result.model_dump(mode="json")
        data["fully_repaid"] = fully_repaid
        return self.success("\n".join(lines), data)
