"""Aave V3 position, market and operation result models."""
from __future__ import annotations

from decimal import Decimal
from enum import Enum, IntEnum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from aave_agents.config import AaveConfig


class InterestRateMode(IntEnum):
    """Borrow rate selection as encoded by the Pool contract."""

    NONE = 0
    STABLE = 1
    VARIABLE = 2

    @classmethod
    def parse(cls, value: Any) -> "InterestRateMode":
        if isinstance(value, InterestRateMode):
            return value
        if isinstance(value, bool):
            raise ValueError(f"Invalid interest rate mode: {value}")
        text = str(value).strip().lower()
        if text in ("1", "stable"):
            return cls.STABLE
        if text in ("2", "variable"):
            return cls.VARIABLE
        raise ValueError(f"Invalid interest rate mode: {value}. Use 'stable' or 'variable'")

    @property
    def label(self) -> str:
        return self.name.lower()


class HealthFactorStatus(str, Enum):
    CRITICAL = "CRITICAL"
    RISKY = "RISKY"
    MODERATE = "MODERATE"
    SAFE = "SAFE"
    VERY_SAFE = "VERY_SAFE"


class AssetPosition(BaseModel):
    """One supplied or borrowed reserve."""

    asset: str
    balance: Decimal = Decimal("0")
    apy: Decimal = Decimal("0")
    is_collateral: bool = False
    interest_rate_mode: Optional[InterestRateMode] = None
    stable_rate: Decimal = Decimal("0")
    variable_rate: Decimal = Decimal("0")

    @property
    def current_rate(self) -> Decimal:
        if self.interest_rate_mode == InterestRateMode.STABLE:
            return self.stable_rate
        return self.variable_rate


class ReserveMarketData(BaseModel):
    """Market-wide state of one reserve; amounts in token units, rates in percent."""

    asset: str
    supply_apy: Decimal = Decimal("0")
    variable_borrow_apy: Decimal = Decimal("0")
    stable_borrow_apy: Decimal = Decimal("0")
    total_supplied: Decimal = Decimal("0")
    total_borrowed: Decimal = Decimal("0")

    @property
    def available_liquidity(self) -> Decimal:
        return max(Decimal("0"), self.total_supplied - self.total_borrowed)

    @property
    def utilization_rate(self) -> Decimal:
        if self.total_supplied <= 0:
            return Decimal("0")
        return self.total_borrowed / self.total_supplied * 100


class UserAccountData(BaseModel):
    """Pool.getUserAccountData, unscaled (base currency and percents)."""

    total_collateral: Decimal = Decimal("0")
    total_debt: Decimal = Decimal("0")
    available_borrows: Decimal = Decimal("0")
    current_liquidation_threshold: Decimal = Decimal("0")
    ltv: Decimal = Decimal("0")
    health_factor: Decimal = AaveConfig.INFINITE_HEALTH_FACTOR


class UserPosition(BaseModel):
    supplies: List[AssetPosition] = Field(default_factory=list)
    borrows: List[AssetPosition] = Field(default_factory=list)
    health_factor: Decimal = AaveConfig.INFINITE_HEALTH_FACTOR
    total_collateral: Decimal = Decimal("0")
    total_debt: Decimal = Decimal("0")
    available_borrows: Decimal = Decimal("0")
    current_ltv: Decimal = Decimal("0")
    liquidation_threshold: Decimal = Decimal("0")
    emode_category: int = 0

    @property
    def emode_enabled(self) -> bool:
        return self.emode_category != 0

    @property
    def has_debt(self) -> bool:
        return any(b.balance > 0 for b in self.borrows)

    def find_supply(self, asset: str) -> Optional[AssetPosition]:
        return _find(self.supplies, asset)

    def find_borrow(self, asset: str) -> Optional[AssetPosition]:
        return _find(self.borrows, asset)

    def assets(self) -> List[str]:
        seen: List[str] = []
        for pos in [*self.supplies, *self.borrows]:
            if pos.asset not in seen:
                seen.append(pos.asset)
        return seen


def _find(positions: List[AssetPosition], asset: str) -> Optional[AssetPosition]:
    wanted = AaveConfig.canonical_symbol(asset)
    for pos in positions:
        if AaveConfig.canonical_symbol(pos.asset) == wanted and pos.balance > 0:
            return pos
    return None


class EModeCategory(BaseModel):
    id: int
    label: str
    ltv: Decimal
    liquidation_threshold: Decimal
    liquidation_bonus: Decimal
    assets: List[str] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Operation results
# ---------------------------------------------------------------------------

class _Result(BaseModel):
    model_config = ConfigDict(frozen=True)

    transaction_hash: str


class SupplyResult(_Result):
    asset: str
    amount: Decimal
    a_token_balance: Decimal
    apy: Decimal = Decimal("0")
    collateral_enabled: bool = False


class WithdrawResult(_Result):
    asset: str
    amount: Decimal
    remaining_supply: Decimal
    health_factor: Decimal


class BorrowResult(_Result):
    asset: str
    amount: Decimal
    interest_rate_mode: InterestRateMode
    rate: Decimal = Decimal("0")
    health_factor: Decimal


class RepayResult(_Result):
    asset: str
    amount: Decimal
    remaining_debt: Decimal
    health_factor: Decimal


class EModeResult(_Result):
    category_id: int
    enabled: bool
    ltv_improvement: Decimal = Decimal("0")
    liquidation_threshold_improvement: Decimal = Decimal("0")
    health_factor: Decimal = AaveConfig.INFINITE_HEALTH_FACTOR


class RateSwitchResult(_Result):
    asset: str
    previous_rate_mode: InterestRateMode
    new_rate_mode: InterestRateMode
    previous_rate: Decimal
    new_rate: Decimal
    projected_savings: Decimal


class CollateralResult(_Result):
    asset: str
    enabled: bool
    health_factor_before: Decimal
    health_factor_after: Decimal
    available_borrows_before: Decimal
    available_borrows_after: Decimal


class FlashLoanResult(_Result):
    assets: List[str]
    amounts: List[Decimal]
    premiums: List[Decimal]
    total_premium: Decimal
    receiver_address: str
