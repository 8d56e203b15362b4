from __future__ import annotations

import logging

from aave_agents.actions.formatting import describe_health_factor, format_amount, format_percent, format_usd
from aave_agents.models.aave import UserPosition
from aave_agents.models.chat_message import ChatMessage
from aave_agents.providers.base import Provider, ProviderResult
from aave_agents.services.base import AAVE_SERVICE, WALLET_SERVICE

logger = logging.getLogger(__name__)


def position_status(position: UserPosition) -> str:
    lending = bool(position.supplies)
    borrowing = bool(position.borrows)
    if lending and borrowing:
        return "Active Lending & Borrowing"
    if lending:
        return "Lending Only"
    if borrowing:
        return "Borrowing Only"
    return "No Position"


class PositionContextProvider(Provider):
    name = "AAVE_POSITION_CONTEXT"
    description = "Current Aave V3 supplies, borrows and account health"

    async def get(self, runtime, message: ChatMessage) -> ProviderResult:
        aave = runtime.get_service(AAVE_SERVICE)
        wallet = runtime.get_service(WALLET_SERVICE)
        if aave is None or wallet is None:
            return ProviderResult(text="Aave position data is not available.")

        try:
            address = await wallet.get_address()
            position = await aave.get_user_position(address)
        except Exception as e:
            logger.warning("Could not load Aave position: %s", e)
            return ProviderResult(text="Aave position data is not available.")

        status = position_status(position)
        lines = [f"Aave V3 position ({status})"]
        if position.supplies:
            lines.append("Supplied:")
            for supply in position.supplies:
                collateral = ", collateral" if supply.is_collateral else ""
                lines.append(
                    f"- {format_amount(supply.balance)} {supply.asset} "
                    f"(APY {format_percent(supply.apy)}{collateral})"
                )
        if position.borrows:
            lines.append("Borrowed:")
            for borrow in position.borrows:
                mode = borrow.interest_rate_mode.label if borrow.interest_rate_mode else "variable"
                lines.append(
                    f"- {format_amount(borrow.balance)} {borrow.asset} "
                    f"({mode}, APR {format_percent(borrow.current_rate)})"
                )
        if status != "No Position":
            lines.extend(
                [
                    f"Total collateral: {format_usd(position.total_collateral)}",
                    f"Total debt: {format_usd(position.total_debt)}",
                    f"Available to borrow: {format_usd(position.available_borrows)}",
                    f"Current LTV: {format_percent(position.current_ltv)}",
                    f"Health factor: {describe_health_factor(position.health_factor)}",
                ]
            )
        if position.emode_enabled:
            lines.append(f"eMode category: {position.emode_category}")

        return ProviderResult(
            text="\n".join(lines),
            data={"status": status, "position": position.model_dump(mode="json")},
        )
