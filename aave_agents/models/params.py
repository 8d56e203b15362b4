"""
Parameter records produced by LLM extraction.

Each action validates the raw model output against one of these models.
Amounts accept the "-1" / "max" / "all" sentinel where the operation
supports it; the sentinel is kept as the literal ``"-1"``.
"""

from __future__ import annotations

import re
from decimal import Decimal, InvalidOperation
from typing import Any, List, Literal, Optional, Union

from pydantic import AliasChoices, BaseModel, Field, field_validator, model_validator
from web3 import Web3

from aave_agents.config import AaveConfig
from aave_agents.models.aave import InterestRateMode

_SYMBOL_RE = re.compile(r"^[A-Z0-9.]{2,12}$")

Amount = Union[Decimal, Literal["-1"]]


def _normalize_asset(v: Any) -> str:
    if v is None:
        raise ValueError("Asset is required")
    symbol = str(v).strip().upper()
    if not _SYMBOL_RE.match(symbol):
        raise ValueError(f"Invalid asset symbol: {v}")
    return AaveConfig.canonical_symbol(symbol)


def _positive_decimal(v: Any) -> Decimal:
    if isinstance(v, bool):
        raise ValueError(f"Invalid amount: {v}")
    try:
        d = Decimal(str(v).replace(",", "").strip())
    except (InvalidOperation, TypeError, ValueError):
        raise ValueError(f"Invalid amount: {v}") from None
    if not d.is_finite() or d <= 0:
        raise ValueError("Amount must be positive")
    return d


def _amount_or_sentinel(v: Any) -> Amount:
    if v is None:
        raise ValueError("Amount is required")
    if AaveConfig.is_sentinel(v):
        return AaveConfig.AMOUNT_SENTINEL
    return _positive_decimal(v)


def _parse_bool(v: Any) -> bool:
    if isinstance(v, bool):
        return v
    text = str(v).strip().lower()
    if text in ("true", "yes", "1", "enable", "enabled", "on"):
        return True
    if text in ("false", "no", "0", "disable", "disabled", "off"):
        return False
    raise ValueError(f"Expected a boolean, got {v!r}")


def _split_list(v: Any) -> List[str]:
    if isinstance(v, str):
        items = v.split(",")
    elif isinstance(v, (list, tuple)):
        items = [str(item) for item in v]
    else:
        raise ValueError("Expected a comma separated string or a list")
    return [item.strip() for item in items if item.strip()]


# ---------------------------------------------------------------------------
# Shared base
# ---------------------------------------------------------------------------

class _AssetParams(BaseModel):
    asset: str

    @field_validator("asset", mode="before")
    @classmethod
    def _validate_asset(cls, v):
        return _normalize_asset(v)


class _AmountParams(_AssetParams):
    amount: Amount

    @property
    def is_max(self) -> bool:
        return self.amount == AaveConfig.AMOUNT_SENTINEL


# ---------------------------------------------------------------------------
# Per-operation params
# ---------------------------------------------------------------------------

class SupplyParams(_AssetParams):
    amount: Decimal
    enable_collateral: bool = Field(
        default=True,
        validation_alias=AliasChoices("enable_collateral", "enableCollateral"),
    )

    @field_validator("amount", mode="before")
    @classmethod
    def _validate_amount(cls, v):
        if v is None:
            raise ValueError("Amount is required")
        if AaveConfig.is_sentinel(v):
            raise ValueError("Supply needs an explicit amount")
        return _positive_decimal(v)

    @field_validator("enable_collateral", mode="before")
    @classmethod
    def _validate_collateral(cls, v):
        return True if v is None else _parse_bool(v)


class WithdrawParams(_AmountParams):
    @field_validator("amount", mode="before")
    @classmethod
    def _validate_amount(cls, v):
        return _amount_or_sentinel(v)


class BorrowParams(_AssetParams):
    amount: Decimal
    interest_rate_mode: InterestRateMode = Field(
        default=InterestRateMode.VARIABLE,
        validation_alias=AliasChoices("interest_rate_mode", "interestRateMode", "rateMode"),
    )

    @field_validator("amount", mode="before")
    @classmethod
    def _validate_amount(cls, v):
        if v is None:
            raise ValueError("Amount is required")
        return _positive_decimal(v)

    @field_validator("interest_rate_mode", mode="before")
    @classmethod
    def _validate_rate_mode(cls, v):
        return InterestRateMode.VARIABLE if v in (None, "") else InterestRateMode.parse(v)


class RepayParams(_AmountParams):
    interest_rate_mode: InterestRateMode = Field(
        default=InterestRateMode.VARIABLE,
        validation_alias=AliasChoices("interest_rate_mode", "interestRateMode", "rateMode"),
    )

    @field_validator("amount", mode="before")
    @classmethod
    def _validate_amount(cls, v):
        return _amount_or_sentinel(v)

    @field_validator("interest_rate_mode", mode="before")
    @classmethod
    def _validate_rate_mode(cls, v):
        return InterestRateMode.VARIABLE if v in (None, "") else InterestRateMode.parse(v)


class EModeParams(BaseModel):
    category_id: int = Field(validation_alias=AliasChoices("category_id", "categoryId"))
    enable: bool = True

    @field_validator("category_id", mode="before")
    @classmethod
    def _validate_category(cls, v):
        if v is None or isinstance(v, bool):
            raise ValueError("categoryId is required")
        try:
            category = int(str(v).strip())
        except ValueError:
            raise ValueError(f"Invalid eMode category: {v}") from None
        AaveConfig.get_emode_category(category)
        return category

    @field_validator("enable", mode="before")
    @classmethod
    def _validate_enable(cls, v):
        return True if v is None else _parse_bool(v)

    @model_validator(mode="after")
    def _disable_means_category_zero(self):
        if not self.enable:
            self.category_id = 0
        self.enable = self.category_id != 0
        return self


class RateSwitchParams(_AssetParams):
    target_rate_mode: InterestRateMode = Field(
        validation_alias=AliasChoices("target_rate_mode", "targetRateMode", "rateMode"),
    )

    @field_validator("target_rate_mode", mode="before")
    @classmethod
    def _validate_rate_mode(cls, v):
        if v in (None, ""):
            raise ValueError("targetRateMode is required")
        return InterestRateMode.parse(v)


class CollateralParams(_AssetParams):
    enable: bool

    @field_validator("enable", mode="before")
    @classmethod
    def _validate_enable(cls, v):
        if v is None:
            raise ValueError("enable is required")
        return _parse_bool(v)


class FlashLoanParams(BaseModel):
    assets: List[str]
    amounts: List[Decimal]
    receiver_address: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("receiver_address", "receiverAddress"),
    )
    params: str = ""

    @field_validator("assets", mode="before")
    @classmethod
    def _validate_assets(cls, v):
        return [_normalize_asset(item) for item in _split_list(v)]

    @field_validator("amounts", mode="before")
    @classmethod
    def _validate_amounts(cls, v):
        return [_positive_decimal(item) for item in _split_list(v)]

    @field_validator("receiver_address", mode="before")
    @classmethod
    def _validate_receiver(cls, v):
        if v is None or not str(v).strip():
            return None
        address = str(v).strip()
        if not Web3.is_address(address):
            raise ValueError(f"Invalid receiver address: {address}")
        return Web3.to_checksum_address(address)

    @field_validator("params", mode="before")
    @classmethod
    def _validate_params(cls, v):
        return "" if v is None else str(v).strip()

    @model_validator(mode="after")
    def _validate_lengths(self):
        if not self.assets or not self.amounts:
            raise ValueError("At least one asset and amount are required")
        if len(self.assets) != len(self.amounts):
            raise ValueError(
                f"Asset/amount count mismatch: {len(self.assets)} assets, {len(self.amounts)} amounts"
            )
        return self
