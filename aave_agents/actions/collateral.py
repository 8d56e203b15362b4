from __future__ import annotations

from aave_agents.actions.base import BaseAction
from aave_agents.actions.formatting import format_health_factor, format_usd
from aave_agents.actions.prompts import COLLATERAL_TEMPLATE
from aave_agents.config import AaveConfig
from aave_agents.errors import AaveError, AaveErrorCode
from aave_agents.models.chat_message import ActionResult
from aave_agents.models.params import CollateralParams
from aave_agents.routing import COLLATERAL_ROUTE


class CollateralAction(BaseAction):
    name = "AAVE_COLLATERAL"
    similes = ["SET_COLLATERAL", "TOGGLE_COLLATERAL", "USE_AS_COLLATERAL"]
    description = "Enable or disable a supplied asset as collateral on Aave V3"
    examples = [
        ("Enable WETH as collateral", "✅ WETH enabled as collateral"),
        ("Stop using my USDC as collateral", "✅ USDC disabled as collateral"),
    ]
    route = COLLATERAL_ROUTE
    template = COLLATERAL_TEMPLATE
    params_model = CollateralParams
    invalid_params_message = (
        "Unable to process collateral request. Please specify the asset and "
        "whether to enable or disable it as collateral."
    )

    async def execute(self, runtime, params: CollateralParams, aave, wallet) -> ActionResult:
        address = await wallet.get_address()
        position = await aave.get_user_position(address)
        state = "enabled" if params.enable else "disabled"

        supply = position.find_supply(params.asset)
        if supply is None:
            raise AaveError(
                f"No active {params.asset} supply position found",
                AaveErrorCode.NO_POSITION,
                "collateral",
            )
        if supply.is_collateral == params.enable:
            raise AaveError(
                f"{params.asset} is already {state} as collateral",
                AaveErrorCode.ALREADY_SET,
                "collateral",
            )
        if (
            not params.enable
            and position.has_debt
            and position.health_factor < AaveConfig.MIN_COLLATERAL_DISABLE_HEALTH_FACTOR
        ):
            raise AaveError(
                f"Cannot disable {params.asset} as collateral. Health factor "
                f"{format_health_factor(position.health_factor)} is below "
                f"{AaveConfig.MIN_COLLATERAL_DISABLE_HEALTH_FACTOR} with outstanding debt.",
                AaveErrorCode.HEALTH_FACTOR_TOO_LOW,
                "collateral",
            )

        result = await aave.set_collateral(params.asset, params.enable)
        self.logger.info("%s collateral %s for %s", params.asset, state, address)

        change = result.available_borrows_after - result.available_borrows_before
        sign = "+" if change >= 0 else "-"
        lines = [
            f"✅ {params.asset} {state} as collateral",
            f"- Health factor: {format_health_factor(result.health_factor_before)} → "
            f"{format_health_factor(result.health_factor_after)}",
            f"- Available to borrow: {sign}{format_usd(abs(change))} "
            f"(now {format_usd(result.available_borrows_after)})",
            f"- Transaction: {result.transaction_hash}",
        ]
        if position.has_debt and result.health_factor_after < AaveConfig.HEALTH_FACTOR_WARNING:
            lines.append("")
            lines.append("⚠️ Health factor is below 1.5. Consider supplying more collateral or repaying debt.")
        return self.success("\n".join(lines), result.model_dump(mode="json"))
