from __future__ import annotations

from aave_agents.actions.base import BaseAction
from aave_agents.actions.formatting import format_amount, format_percent
from aave_agents.actions.prompts import SUPPLY_TEMPLATE
from aave_agents.errors import AaveError, AaveErrorCode
from aave_agents.models.chat_message import ActionResult
from aave_agents.models.params import SupplyParams
from aave_agents.routing import SUPPLY_ROUTE


class SupplyAction(BaseAction):
    name = "AAVE_SUPPLY"
    similes = ["SUPPLY_TO_AAVE", "LEND_ON_AAVE", "DEPOSIT_TO_AAVE", "AAVE_LEND"]
    description = "Supply assets to Aave V3 to earn interest"
    examples = [
        ("Supply 100 USDC to Aave", "✅ Supplied 100 USDC to Aave V3"),
        ("I want to lend 0.5 WETH without using it as collateral", "✅ Supplied 0.5 WETH to Aave V3"),
    ]
    route = SUPPLY_ROUTE
    template = SUPPLY_TEMPLATE
    params_model = SupplyParams
    invalid_params_message = "Unable to process supply request. Please specify the asset and amount to supply."

    async def execute(self, runtime, params: SupplyParams, aave, wallet) -> ActionResult:
        address = await wallet.get_address()
        balance = await wallet.get_balance(params.asset)
        if balance < params.amount:
            raise AaveError(
                f"Insufficient {params.asset} balance. You have {format_amount(balance)}, "
                f"tried to supply {format_amount(params.amount)}.",
                AaveErrorCode.INSUFFICIENT_BALANCE,
                "supply",
            )

        result = await aave.supply(params.asset, params.amount, address)
        collateral_enabled = result.collateral_enabled
        if not params.enable_collateral and collateral_enabled:
            await aave.set_collateral(params.asset, False)
            collateral_enabled = False

        self.logger.info("Supplied %s %s for %s", params.amount, params.asset, address)
        lines = [
            f"✅ Supplied {format_amount(result.amount)} {params.asset} to Aave V3",
            f"- aToken balance: {format_amount(result.a_token_balance)} a{params.asset}",
            f"- Supply APY: {format_percent(result.apy)}",
            f"- Collateral: {'enabled' if collateral_enabled else 'disabled'}",
            f"- Transaction: {result.transaction_hash}",
        ]
        data = result.model_dump(mode="json")
        data["collateral_enabled"] = collateral_enabled
        return self.success("\n".join(lines), data)
