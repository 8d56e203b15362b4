"""Service interfaces the actions call into."""
from __future__ import annotations

from decimal import Decimal
from typing import List, Optional, Protocol, Union, runtime_checkable

from aave_agents.config import AaveConfig
from aave_agents.models.aave import (
    BorrowResult,
    CollateralResult,
    EModeCategory,
    EModeResult,
    FlashLoanResult,
    InterestRateMode,
    RateSwitchResult,
    RepayResult,
    ReserveMarketData,
    SupplyResult,
    UserAccountData,
    UserPosition,
    WithdrawResult,
)

AAVE_SERVICE = "aave"
WALLET_SERVICE = "wallet"

# Decimal amount or the "-1" sentinel meaning the whole balance / debt
AmountArg = Union[Decimal, str]


@runtime_checkable
class WalletService(Protocol):
    async def get_address(self) -> str: ...

    async def get_balance(self, asset: str) -> Decimal: ...

    async def approve(self, asset: str, spender: str, amount: Optional[int] = None) -> Optional[str]: ...


@runtime_checkable
class AaveService(Protocol):
    async def get_user_account_data(self, address: str) -> UserAccountData: ...

    async def get_user_position(self, address: str) -> UserPosition: ...

    async def get_market_data(self) -> List[ReserveMarketData]: ...

    async def supply(self, asset: str, amount: Decimal, on_behalf_of: str) -> SupplyResult: ...

    async def withdraw(self, asset: str, amount: AmountArg, to: str) -> WithdrawResult: ...

    async def borrow(
        self, asset: str, amount: Decimal, interest_rate_mode: InterestRateMode, on_behalf_of: str
    ) -> BorrowResult: ...

    async def repay(
        self, asset: str, amount: AmountArg, interest_rate_mode: InterestRateMode, on_behalf_of: str
    ) -> RepayResult: ...

    async def set_user_emode(self, category_id: int) -> EModeResult: ...

    async def swap_borrow_rate_mode(self, asset: str, target_rate_mode: InterestRateMode) -> RateSwitchResult: ...

    async def set_collateral(self, asset: str, enable: bool) -> CollateralResult: ...

    async def flash_loan(
        self, receiver_address: str, assets: List[str], amounts: List[Decimal], params: str = ""
    ) -> FlashLoanResult: ...

    async def get_emode_categories(self) -> List[EModeCategory]: ...


def emode_categories() -> List[EModeCategory]:
    """Configured eMode categories as models."""
    return [
        EModeCategory(
            id=category_id,
            label=data["label"],
            ltv=data["ltv"],
            liquidation_threshold=data["liquidation_threshold"],
            liquidation_bonus=data["liquidation_bonus"],
            assets=sorted(data["assets"]),
        )
        for category_id, data in AaveConfig.EMODE_CATEGORIES.items()
    ]
