from __future__ import annotations

import logging
from decimal import Decimal
from typing import List

from aave_agents.actions.formatting import format_compact, format_percent
from aave_agents.models.aave import ReserveMarketData
from aave_agents.models.chat_message import ChatMessage
from aave_agents.providers.base import Provider, ProviderResult
from aave_agents.services.base import AAVE_SERVICE

logger = logging.getLogger(__name__)

HIGH_YIELD_APY = Decimal("3")
LOW_BORROW_APY = Decimal("5")
HIGH_UTILIZATION = Decimal("80")
HIGHLIGHTS = 3


class MarketDataProvider(Provider):
    """Reserve rates and liquidity across the configured market."""

    name = "AAVE_MARKET_DATA"
    description = "Aave V3 supply and borrow rates, liquidity and utilization per reserve"

    async def get(self, runtime, message: ChatMessage) -> ProviderResult:
        aave = runtime.get_service(AAVE_SERVICE)
        if aave is None:
            return ProviderResult(text="Aave market data is not available.")

        try:
            reserves = await aave.get_market_data()
        except Exception as e:
            logger.warning("Could not load Aave market data: %s", e)
            return ProviderResult(text="Aave market data is not available.")

        if not reserves:
            return ProviderResult(text="No Aave market data available.")

        reserves = sorted(reserves, key=lambda r: r.supply_apy, reverse=True)
        average_apy = sum((r.supply_apy for r in reserves), Decimal("0")) / len(reserves)

        lines = [
            f"Aave V3 market ({runtime.settings.aave_network})",
            f"Average supply APY: {format_percent(average_apy)}",
            "Reserves:",
        ]
        for r in reserves:
            lines.append(
                f"- {r.asset}: supply {format_percent(r.supply_apy)}, "
                f"borrow {format_percent(r.variable_borrow_apy)}, "
                f"utilization {format_percent(r.utilization_rate, 1)}, "
                f"liquidity {format_compact(r.available_liquidity)} {r.asset}"
            )

        high_yield = [r for r in reserves if r.supply_apy > HIGH_YIELD_APY][:HIGHLIGHTS]
        if high_yield:
            lines.append("High yield: " + ", ".join(_rate(r.asset, r.supply_apy) for r in high_yield))

        cheap: List[ReserveMarketData] = sorted(
            (r for r in reserves if r.variable_borrow_apy < LOW_BORROW_APY),
            key=lambda r: r.variable_borrow_apy,
        )[:HIGHLIGHTS]
        if cheap:
            lines.append("Low borrow cost: " + ", ".join(_rate(r.asset, r.variable_borrow_apy) for r in cheap))

        crowded = [r for r in reserves if r.utilization_rate > HIGH_UTILIZATION]
        if crowded:
            lines.append(
                "⚠️ High utilization: "
                + ", ".join(f"{r.asset} {format_percent(r.utilization_rate, 1)}" for r in crowded)
                + ". Withdrawals and new borrows may be limited and rates can jump."
            )

        return ProviderResult(
            text="\n".join(lines),
            data={
                "average_supply_apy": str(average_apy),
                "reserves": [
                    {
                        **r.model_dump(mode="json"),
                        "utilization_rate": str(r.utilization_rate),
                        "available_liquidity": str(r.available_liquidity),
                    }
                    for r in reserves
                ],
            },
        )


def _rate(asset: str, value: Decimal) -> str:
    return f"{asset} {format_percent(value)}"
