from __future__ import annotations

from aave_agents.actions.base import BaseAction
from aave_agents.actions.formatting import describe_health_factor, format_percent
from aave_agents.actions.prompts import EMODE_TEMPLATE
from aave_agents.config import AaveConfig
from aave_agents.errors import AaveError, AaveErrorCode
from aave_agents.models.chat_message import ActionResult
from aave_agents.models.params import EModeParams
from aave_agents.routing import EMODE_ROUTE

RECOMMENDATIONS = {
    0: "Your assets now use their standard risk parameters.",
    1: (
        "Stablecoin eMode lets you borrow stablecoins against stablecoin collateral at up to 97% LTV. "
        "The liquidation threshold is tight, so keep your health factor above 1.5."
    ),
    2: (
        "ETH-correlated eMode raises borrowing power for WETH, wstETH and cbETH positions. "
        "Watch your health factor if a staking derivative depegs."
    ),
}


def _signed_percent(value) -> str:
    return f"+{format_percent(value)}" if value > 0 else format_percent(value)


class EModeAction(BaseAction):
    name = "AAVE_EMODE"
    similes = ["AAVE_EFFICIENCY_MODE", "SET_EMODE", "TOGGLE_EMODE"]
    description = "Enable or disable Aave V3 efficiency mode"
    examples = [
        ("Enable eMode for stablecoins", "✅ Efficiency mode enabled: Stablecoins (category 1)"),
        ("Turn off efficiency mode", "✅ Efficiency mode disabled"),
    ]
    route = EMODE_ROUTE
    template = EMODE_TEMPLATE
    params_model = EModeParams
    invalid_params_message = (
        "Unable to process eMode request. Please specify the category "
        "(1 for stablecoins, 2 for ETH correlated) or ask to disable it."
    )

    async def execute(self, runtime, params: EModeParams, aave, wallet) -> ActionResult:
        address = await wallet.get_address()
        position = await aave.get_user_position(address)
        category_id = params.category_id

        if position.emode_category == category_id:
            state = "disabled" if category_id == 0 else f"set to category {category_id}"
            raise AaveError(f"Efficiency mode is already {state}", AaveErrorCode.ALREADY_SET, "eMode")

        category = AaveConfig.get_emode_category(category_id)
        if category_id:
            incompatible = [
                asset for asset in position.assets()
                if AaveConfig.canonical_symbol(asset) not in category["assets"]
            ]
            if incompatible:
                raise AaveError(
                    f"Cannot enable eMode category {category_id}. Incompatible assets: {', '.join(incompatible)}",
                    AaveErrorCode.INCOMPATIBLE_ASSETS,
                    "eMode",
                )

        result = await aave.set_user_emode(category_id)
        self.logger.info("Set eMode category %s for %s", category_id, address)

        if result.enabled:
            headline = f"✅ Efficiency mode enabled: {category['label']} (category {category_id})"
        else:
            headline = "✅ Efficiency mode disabled"
        lines = [
            headline,
            f"- LTV change: {_signed_percent(result.ltv_improvement)}",
            f"- Liquidation threshold change: {_signed_percent(result.liquidation_threshold_improvement)}",
            f"- Health factor: {describe_health_factor(result.health_factor)}",
            f"- Transaction: {result.transaction_hash}",
            "",
            f"💡 {RECOMMENDATIONS.get(category_id, '')}",
        ]
        data = result.model_dump(mode="json")
        data["label"] = category["label"]
        return self.success("\n".join(lines), data)
