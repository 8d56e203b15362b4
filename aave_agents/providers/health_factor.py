from __future__ import annotations

import logging
from decimal import Decimal
from typing import List

from aave_agents.actions.formatting import format_health_factor, format_percent, health_factor_status, status_label
from aave_agents.config import AaveConfig
from aave_agents.models.aave import HealthFactorStatus
from aave_agents.models.chat_message import ChatMessage
from aave_agents.providers.base import Provider, ProviderResult
from aave_agents.services.base import AAVE_SERVICE, WALLET_SERVICE

logger = logging.getLogger(__name__)


def liquidation_distance(health_factor: Decimal) -> Decimal:
    """Percent the collateral value can fall before liquidation: ``(hf - 1) / hf``."""
    if health_factor <= 0:
        return Decimal("0")
    return max(Decimal("0"), (health_factor - 1) / health_factor * 100)


def recommendations(status: HealthFactorStatus) -> List[str]:
    if status == HealthFactorStatus.CRITICAL:
        return [
            "Repay debt immediately to avoid liquidation",
            "Supply more collateral right away",
        ]
    if status == HealthFactorStatus.RISKY:
        return [
            "Consider repaying part of your debt",
            "Add collateral to build a safety buffer",
        ]
    return ["Keep monitoring your position as prices move"]


class HealthFactorProvider(Provider):
    name = "AAVE_HEALTH_FACTOR"
    description = "Aave V3 health factor status and liquidation distance"

    async def get(self, runtime, message: ChatMessage) -> ProviderResult:
        aave = runtime.get_service(AAVE_SERVICE)
        wallet = runtime.get_service(WALLET_SERVICE)
        if aave is None or wallet is None:
            return ProviderResult()

        try:
            account = await aave.get_user_account_data(await wallet.get_address())
        except Exception as e:
            logger.warning("Could not load Aave account data: %s", e)
            return ProviderResult()

        if account.total_debt <= 0:
            return ProviderResult(
                text="Health factor: ∞ (no outstanding debt)",
                data={"health_factor": None, "status": HealthFactorStatus.VERY_SAFE.value},
            )

        hf = account.health_factor
        status = health_factor_status(hf)
        distance = liquidation_distance(hf)
        lines = [
            f"Health factor: {format_health_factor(hf)} ({status_label(status)})",
            f"Liquidation distance: collateral can drop {format_percent(distance)} before liquidation",
        ]
        advice: List[str] = []
        if hf < runtime.settings.health_factor_alert:
            advice = recommendations(status)
            lines.append("Recommendations:")
            lines.extend(f"- {item}" for item in advice)
        elif hf < AaveConfig.HEALTH_FACTOR_MODERATE:
            lines.append("Position is healthy but close to the alert threshold.")

        return ProviderResult(
            text="\n".join(lines),
            data={
                "health_factor": str(hf),
                "status": status.value,
                "liquidation_distance": str(distance),
                "recommendations": advice,
            },
        )
