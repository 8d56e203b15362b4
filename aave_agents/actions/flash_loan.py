"""
Flash loans borrow and repay within one transaction. The receiver has to
be a contract implementing ``executeOperation``; when the wallet itself is
the receiver the pool only succeeds if the premium is already covered.
"""

from __future__ import annotations

from decimal import Decimal

from aave_agents.actions.base import BaseAction
from aave_agents.actions.formatting import format_amount, format_percent
from aave_agents.actions.prompts import FLASH_LOAN_TEMPLATE
from aave_agents.config import AaveConfig
from aave_agents.errors import AaveError, AaveErrorCode
from aave_agents.models.chat_message import ActionResult
from aave_agents.models.params import FlashLoanParams
from aave_agents.routing import FLASH_LOAN_ROUTE

CAVEATS = [
    "The receiver contract must implement executeOperation and repay amount plus premium",
    "The whole loan reverts if the receiver does not return the funds in the same transaction",
]


class FlashLoanAction(BaseAction):
    name = "AAVE_FLASH_LOAN"
    similes = ["FLASH_LOAN", "AAVE_FLASHLOAN", "FLASH_BORROW"]
    description = "Execute an Aave V3 flash loan"
    examples = [
        ("Flash loan 1000 USDC", "✅ Flash loan executed on Aave V3"),
        ("Take a flash loan of 1000 USDC and 0.5 WETH to 0xabc...", "✅ Flash loan executed on Aave V3"),
    ]
    route = FLASH_LOAN_ROUTE
    template = FLASH_LOAN_TEMPLATE
    params_model = FlashLoanParams
    invalid_params_message = (
        "Unable to process flash loan request. Please specify the assets and an amount for each asset."
    )

    async def execute(self, runtime, params: FlashLoanParams, aave, wallet) -> ActionResult:
        network = runtime.settings.aave_network
        unsupported = [asset for asset in params.assets if not AaveConfig.is_supported(asset, network)]
        if unsupported:
            raise AaveError(
                f"Flash loans are not supported for {', '.join(unsupported)} on {network}",
                AaveErrorCode.ASSET_NOT_SUPPORTED,
                "flash loan",
            )

        premium_percent = Decimal(AaveConfig.FLASH_LOAN_PREMIUM_BPS) / Decimal(100)
        max_fee = runtime.settings.flash_loan_max_fee
        if premium_percent > max_fee:
            raise AaveError(
                f"Flash loan fee {format_percent(premium_percent)} exceeds the configured maximum "
                f"of {format_percent(max_fee)}",
                AaveErrorCode.FEE_TOO_HIGH,
                "flash loan",
            )

        receiver = params.receiver_address or await wallet.get_address()
        result = await aave.flash_loan(receiver, params.assets, params.amounts, params.params)
        self.logger.info("Flash loan of %s to %s", list(zip(result.assets, result.amounts)), receiver)

        lines = ["✅ Flash loan executed on Aave V3"]
        for asset, amount, premium in zip(result.assets, result.amounts, result.premiums):
            lines.append(f"- {format_amount(amount)} {asset} (premium {format_amount(premium)} {asset})")
        lines.append(f"- Premium rate: {format_percent(premium_percent)}")
        lines.append(f"- Receiver: {result.receiver_address}")
        lines.append(f"- Transaction: {result.transaction_hash}")
        lines.append("")
        lines.extend(f"⚠️ {caveat}" for caveat in CAVEATS)
        return self.success("\n".join(lines), result.model_dump(mode="json"))
