"""
In-memory stand-ins for the wallet and the Aave pool.

The simulated pool keeps a per-account ledger and derives account data
(collateral, debt, available borrows, health factor) from static prices
and risk parameters, so the actions behave as they would on chain
without an RPC endpoint or a funded key.
"""

from __future__ import annotations

import hashlib
import logging
from decimal import Decimal
from typing import Dict, List, Optional

from aave_agents.config import AaveConfig
from aave_agents.errors import AaveError, AaveErrorCode
from aave_agents.models.aave import (
    AssetPosition,
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
from aave_agents.services.base import AmountArg, emode_categories

logger = logging.getLogger(__name__)

DEFAULT_ADDRESS = "0x1111111111111111111111111111111111111111"

# price in USD, ltv / liquidation threshold / rates in percent
MARKET: Dict[str, Dict[str, Decimal | bool]] = {
    "WETH": {"price": Decimal("3000"), "ltv": Decimal("80"), "lt": Decimal("82.5"),
             "supply_apy": Decimal("2.1"), "variable": Decimal("2.8"), "stable": Decimal("4.5"),
             "stable_enabled": False},
    "USDC": {"price": Decimal("1"), "ltv": Decimal("75"), "lt": Decimal("78"),
             "supply_apy": Decimal("4.2"), "variable": Decimal("5.6"), "stable": Decimal("7.1"),
             "stable_enabled": True},
    "USDBC": {"price": Decimal("1"), "ltv": Decimal("75"), "lt": Decimal("78"),
              "supply_apy": Decimal("3.8"), "variable": Decimal("5.1"), "stable": Decimal("6.9"),
              "stable_enabled": False},
    "DAI": {"price": Decimal("1"), "ltv": Decimal("63"), "lt": Decimal("77"),
            "supply_apy": Decimal("3.9"), "variable": Decimal("5.2"), "stable": Decimal("6.8"),
            "stable_enabled": True},
    "CBETH": {"price": Decimal("3150"), "ltv": Decimal("67"), "lt": Decimal("74"),
              "supply_apy": Decimal("0.4"), "variable": Decimal("1.2"), "stable": Decimal("0"),
              "stable_enabled": False},
    "WSTETH": {"price": Decimal("3500"), "ltv": Decimal("71"), "lt": Decimal("76"),
               "supply_apy": Decimal("0.3"), "variable": Decimal("0.9"), "stable": Decimal("0"),
               "stable_enabled": False},
}

# reserve totals (supplied, borrowed) in token units, before this account's own positions
MARKET_DEPTH: Dict[str, tuple[Decimal, Decimal]] = {
    "WETH": (Decimal("95000"), Decimal("41000")),
    "USDC": (Decimal("310000000"), Decimal("262000000")),
    "USDBC": (Decimal("12000000"), Decimal("7500000")),
    "DAI": (Decimal("4000000"), Decimal("2900000")),
    "CBETH": (Decimal("38000"), Decimal("1500")),
    "WSTETH": (Decimal("21000"), Decimal("900")),
}

DEFAULT_BALANCES: Dict[str, Decimal] = {
    "ETH": Decimal("1"),
    "WETH": Decimal("5"),
    "USDC": Decimal("10000"),
    "USDBC": Decimal("1000"),
    "DAI": Decimal("5000"),
    "CBETH": Decimal("2"),
    "WSTETH": Decimal("1"),
}

ZERO = Decimal("0")


def _tx_hash(seed: str) -> str:
    return "0x" + hashlib.sha256(seed.encode()).hexdigest()


class SimulatedWalletService:
    """Wallet with in-memory token balances."""

    def __init__(self, address: Optional[str] = None, balances: Optional[Dict[str, Decimal]] = None):
        self.address = address or DEFAULT_ADDRESS
        source = DEFAULT_BALANCES if balances is None else balances
        self.balances: Dict[str, Decimal] = {k.upper(): Decimal(str(v)) for k, v in source.items()}
        self.approvals: Dict[tuple, int] = {}

    async def get_address(self) -> str:
        return self.address

    async def get_balance(self, asset: str) -> Decimal:
        symbol = asset.upper()
        if symbol not in self.balances and symbol != "ETH":
            symbol = AaveConfig.canonical_symbol(symbol)
        return self.balances.get(symbol, ZERO)

    async def approve(self, asset: str, spender: str, amount: Optional[int] = None) -> Optional[str]:
        self.approvals[(asset.upper(), spender)] = AaveConfig.MAX_UINT256 if amount is None else amount
        return _tx_hash(f"approve:{asset}:{spender}:{amount}")

    def credit(self, asset: str, amount: Decimal) -> None:
        symbol = AaveConfig.canonical_symbol(asset)
        self.balances[symbol] = self.balances.get(symbol, ZERO) + amount

    def debit(self, asset: str, amount: Decimal) -> None:
        symbol = AaveConfig.canonical_symbol(asset)
        available = self.balances.get(symbol, ZERO)
        if amount > available:
            raise AaveError(
                f"Insufficient {asset} balance. You have {available}, need {amount}.",
                AaveErrorCode.INSUFFICIENT_BALANCE,
            )
        self.balances[symbol] = available - amount


class SimulatedAaveService:
    """Aave V3 pool simulation for a single account."""

    def __init__(self, wallet: SimulatedWalletService, market: Optional[Dict[str, Dict]] = None):
        self.wallet = wallet
        self.market = market or MARKET
        self.supplies: Dict[str, Decimal] = {}
        self.collateral: Dict[str, bool] = {}
        self.borrows: Dict[str, Decimal] = {}
        self.borrow_modes: Dict[str, InterestRateMode] = {}
        self.emode_category = 0
        self._nonce = 0

    # ---------- Helpers ----------

    def _next_hash(self, operation: str) -> str:
        self._nonce += 1
        return _tx_hash(f"{operation}:{self._nonce}")

    def _reserve(self, asset: str, operation: str) -> Dict:
        symbol = AaveConfig.canonical_symbol(asset)
        if symbol not in self.market:
            raise AaveError(
                f"{asset} is not supported in Aave market",
                AaveErrorCode.ASSET_NOT_SUPPORTED,
                operation,
            )
        return self.market[symbol]

    def _risk(self, symbol: str) -> tuple[Decimal, Decimal]:
        reserve = self.market[symbol]
        if self.emode_category:
            category = AaveConfig.get_emode_category(self.emode_category)
            if symbol in category["assets"]:
                return category["ltv"], category["liquidation_threshold"]
        return reserve["ltv"], reserve["lt"]

    def _account(
        self,
        supplies: Dict[str, Decimal],
        collateral: Dict[str, bool],
        borrows: Dict[str, Decimal],
    ) -> UserAccountData:
        collateral_value = ZERO
        weighted_ltv = ZERO
        weighted_lt = ZERO
        for symbol, balance in supplies.items():
            if balance <= 0 or not collateral.get(symbol, False):
                continue
            value = balance * self.market[symbol]["price"]
            ltv, lt = self._risk(symbol)
            collateral_value += value
            weighted_ltv += value * ltv
            weighted_lt += value * lt

        debt_value = sum((b * self.market[s]["price"] for s, b in borrows.items() if b > 0), ZERO)
        ltv = weighted_ltv / collateral_value if collateral_value else ZERO
        lt = weighted_lt / collateral_value if collateral_value else ZERO
        available = max(ZERO, collateral_value * ltv / 100 - debt_value)
        if debt_value > 0:
            health_factor = (collateral_value * lt / 100) / debt_value
        else:
            health_factor = AaveConfig.INFINITE_HEALTH_FACTOR

        return UserAccountData(
            total_collateral=collateral_value,
            total_debt=debt_value,
            available_borrows=available,
            current_liquidation_threshold=lt,
            ltv=ltv,
            health_factor=health_factor,
        )

    def _current(self) -> UserAccountData:
        return self._account(self.supplies, self.collateral, self.borrows)

    def _guard_health(self, account: UserAccountData, operation: str) -> None:
        if account.total_debt > 0 and account.health_factor < 1:
            raise AaveError(
                "Operation would result in unsafe health factor",
                AaveErrorCode.HEALTH_FACTOR_TOO_LOW,
                operation,
            )

    # ---------- Reads ----------

    async def get_user_account_data(self, address: str) -> UserAccountData:
        return self._current()

    async def get_user_position(self, address: str) -> UserPosition:
        account = self._current()
        supplies = [
            AssetPosition(
                asset=symbol,
                balance=balance,
                apy=self.market[symbol]["supply_apy"],
                is_collateral=self.collateral.get(symbol, False),
            )
            for symbol, balance in self.supplies.items()
            if balance > 0
        ]
        borrows = [
            AssetPosition(
                asset=symbol,
                balance=balance,
                interest_rate_mode=self.borrow_modes.get(symbol, InterestRateMode.VARIABLE),
                stable_rate=self.market[symbol]["stable"],
                variable_rate=self.market[symbol]["variable"],
            )
            for symbol, balance in self.borrows.items()
            if balance > 0
        ]
        current_ltv = account.total_debt / account.total_collateral * 100 if account.total_collateral else ZERO
        return UserPosition(
            supplies=supplies,
            borrows=borrows,
            health_factor=account.health_factor,
            total_collateral=account.total_collateral,
            total_debt=account.total_debt,
            available_borrows=account.available_borrows,
            current_ltv=current_ltv,
            liquidation_threshold=account.current_liquidation_threshold,
            emode_category=self.emode_category,
        )

    async def get_market_data(self) -> List[ReserveMarketData]:
        reserves = []
        for symbol, reserve in self.market.items():
            supplied, borrowed = MARKET_DEPTH.get(symbol, (ZERO, ZERO))
            reserves.append(
                ReserveMarketData(
                    asset=symbol,
                    supply_apy=reserve["supply_apy"],
                    variable_borrow_apy=reserve["variable"],
                    stable_borrow_apy=reserve["stable"] if reserve["stable_enabled"] else ZERO,
                    total_supplied=supplied + self.supplies.get(symbol, ZERO),
                    total_borrowed=borrowed + self.borrows.get(symbol, ZERO),
                )
            )
        return reserves

    async def get_emode_categories(self) -> List[EModeCategory]:
        return emode_categories()

    # ---------- Writes ----------

    async def supply(self, asset: str, amount: Decimal, on_behalf_of: str) -> SupplyResult:
        reserve = self._reserve(asset, "supply")
        symbol = AaveConfig.canonical_symbol(asset)
        self.wallet.debit(asset, amount)
        first_supply = self.supplies.get(symbol, ZERO) <= 0
        self.supplies[symbol] = self.supplies.get(symbol, ZERO) + amount
        if first_supply:
            self.collateral[symbol] = reserve["ltv"] > 0
        logger.debug("Simulated supply of %s %s", amount, symbol)
        return SupplyResult(
            transaction_hash=self._next_hash("supply"),
            asset=asset,
            amount=amount,
            a_token_balance=self.supplies[symbol],
            apy=reserve["supply_apy"],
            collateral_enabled=self.collateral[symbol],
        )

    async def withdraw(self, asset: str, amount: AmountArg, to: str) -> WithdrawResult:
        self._reserve(asset, "withdraw")
        symbol = AaveConfig.canonical_symbol(asset)
        balance = self.supplies.get(symbol, ZERO)
        if balance <= 0:
            raise AaveError(f"No active {asset} supply position found", AaveErrorCode.NO_POSITION, "withdraw")
        withdrawn = balance if AaveConfig.is_sentinel(amount) else Decimal(amount)
        if withdrawn > balance:
            raise AaveError(
                f"Insufficient supplied {asset} balance. Supplied {balance}, requested {withdrawn}.",
                AaveErrorCode.INSUFFICIENT_BALANCE,
                "withdraw",
            )

        supplies = {**self.supplies, symbol: balance - withdrawn}
        self._guard_health(self._account(supplies, self.collateral, self.borrows), "withdraw")
        self.supplies = supplies
        self.wallet.credit(asset, withdrawn)
        return WithdrawResult(
            transaction_hash=self._next_hash("withdraw"),
            asset=asset,
            amount=withdrawn,
            remaining_supply=supplies[symbol],
            health_factor=self._current().health_factor,
        )

    async def borrow(
        self, asset: str, amount: Decimal, interest_rate_mode: InterestRateMode, on_behalf_of: str
    ) -> BorrowResult:
        reserve = self._reserve(asset, "borrow")
        symbol = AaveConfig.canonical_symbol(asset)
        if interest_rate_mode == InterestRateMode.STABLE and not reserve["stable_enabled"]:
            raise AaveError(
                "Stable rate borrowing is not enabled for this asset",
                AaveErrorCode.STABLE_BORROWING_NOT_ENABLED,
                "borrow",
            )
        if self.emode_category:
            category = AaveConfig.get_emode_category(self.emode_category)
            if symbol not in category["assets"]:
                raise AaveError(
                    f"{asset} cannot be borrowed in eMode category {self.emode_category}",
                    AaveErrorCode.INCOMPATIBLE_ASSETS,
                    "borrow",
                )

        account = self._current()
        if amount * reserve["price"] > account.available_borrows:
            raise AaveError("Insufficient collateral for this operation", AaveErrorCode.INSUFFICIENT_COLLATERAL, "borrow")

        self.borrows[symbol] = self.borrows.get(symbol, ZERO) + amount
        self.borrow_modes[symbol] = interest_rate_mode
        self.wallet.credit(asset, amount)
        rate = reserve["stable"] if interest_rate_mode == InterestRateMode.STABLE else reserve["variable"]
        return BorrowResult(
            transaction_hash=self._next_hash("borrow"),
            asset=asset,
            amount=amount,
            interest_rate_mode=interest_rate_mode,
            rate=rate,
            health_factor=self._current().health_factor,
        )

    async def repay(
        self, asset: str, amount: AmountArg, interest_rate_mode: InterestRateMode, on_behalf_of: str
    ) -> RepayResult:
        self._reserve(asset, "repay")
        symbol = AaveConfig.canonical_symbol(asset)
        debt = self.borrows.get(symbol, ZERO)
        if debt <= 0:
            raise AaveError(f"No active {asset} borrow position found", AaveErrorCode.NO_POSITION, "repay")
        repaid = debt if AaveConfig.is_sentinel(amount) else min(Decimal(amount), debt)
        self.wallet.debit(asset, repaid)
        self.borrows[symbol] = debt - repaid
        return RepayResult(
            transaction_hash=self._next_hash("repay"),
            asset=asset,
            amount=repaid,
            remaining_debt=self.borrows[symbol],
            health_factor=self._current().health_factor,
        )

    async def set_user_emode(self, category_id: int) -> EModeResult:
        category = AaveConfig.get_emode_category(category_id)
        if category_id:
            for symbol, balance in self.borrows.items():
                if balance > 0 and symbol not in category["assets"]:
                    raise AaveError(
                        f"Cannot enable eMode category {category_id}. Incompatible assets: {symbol}",
                        AaveErrorCode.INCOMPATIBLE_ASSETS,
                        "eMode",
                    )

        before = self._current()
        previous = self.emode_category
        self.emode_category = category_id
        after = self._current()
        if after.total_debt > 0 and after.health_factor < 1:
            self.emode_category = previous
            raise AaveError(
                "Operation would result in unsafe health factor",
                AaveErrorCode.HEALTH_FACTOR_TOO_LOW,
                "eMode",
            )

        return EModeResult(
            transaction_hash=self._next_hash("emode"),
            category_id=category_id,
            enabled=category_id != 0,
            ltv_improvement=after.ltv - before.ltv,
            liquidation_threshold_improvement=after.current_liquidation_threshold
            - before.current_liquidation_threshold,
            health_factor=after.health_factor,
        )

    async def swap_borrow_rate_mode(self, asset: str, target_rate_mode: InterestRateMode) -> RateSwitchResult:
        reserve = self._reserve(asset, "rate switch")
        symbol = AaveConfig.canonical_symbol(asset)
        debt = self.borrows.get(symbol, ZERO)
        if debt <= 0:
            raise AaveError(f"No active {asset} borrow position found", AaveErrorCode.NO_POSITION, "rate switch")
        current = self.borrow_modes.get(symbol, InterestRateMode.VARIABLE)
        if current == target_rate_mode:
            raise AaveError(
                f"Your {asset} debt is already using {target_rate_mode.label} rate",
                AaveErrorCode.ALREADY_SET,
                "rate switch",
            )
        if target_rate_mode == InterestRateMode.STABLE and not reserve["stable_enabled"]:
            raise AaveError(
                "Stable rate borrowing is not enabled for this asset",
                AaveErrorCode.STABLE_BORROWING_NOT_ENABLED,
                "rate switch",
            )

        rates = {InterestRateMode.STABLE: reserve["stable"], InterestRateMode.VARIABLE: reserve["variable"]}
        self.borrow_modes[symbol] = target_rate_mode
        previous_rate, new_rate = rates[current], rates[target_rate_mode]
        return RateSwitchResult(
            transaction_hash=self._next_hash("rate_switch"),
            asset=asset,
            previous_rate_mode=current,
            new_rate_mode=target_rate_mode,
            previous_rate=previous_rate,
            new_rate=new_rate,
            projected_savings=debt * (previous_rate - new_rate) / 100,
        )

    async def set_collateral(self, asset: str, enable: bool) -> CollateralResult:
        self._reserve(asset, "collateral")
        symbol = AaveConfig.canonical_symbol(asset)
        if self.supplies.get(symbol, ZERO) <= 0:
            raise AaveError(f"No active {asset} supply position found", AaveErrorCode.NO_POSITION, "collateral")

        before = self._current()
        collateral = {**self.collateral, symbol: enable}
        after = self._account(self.supplies, collateral, self.borrows)
        self._guard_health(after, "collateral")
        self.collateral = collateral
        return CollateralResult(
            transaction_hash=self._next_hash("collateral"),
            asset=asset,
            enabled=enable,
            health_factor_before=before.health_factor,
            health_factor_after=after.health_factor,
            available_borrows_before=before.available_borrows,
            available_borrows_after=after.available_borrows,
        )

    async def flash_loan(
        self, receiver_address: str, assets: List[str], amounts: List[Decimal], params: str = ""
    ) -> FlashLoanResult:
        for asset in assets:
            self._reserve(asset, "flash loan")

        premiums = [amount * AaveConfig.FLASH_LOAN_PREMIUM_BPS / Decimal(10_000) for amount in amounts]
        # the receiver returns principal plus premium; with no receiver
        # contract the wallet covers the premium
        if receiver_address.lower() == self.wallet.address.lower():
            for asset, premium in zip(assets, premiums):
                self.wallet.debit(asset, premium)

        return FlashLoanResult(
            transaction_hash=self._next_hash("flash_loan"),
            assets=assets,
            amounts=amounts,
            premiums=premiums,
            total_premium=sum(premiums, ZERO),
            receiver_address=receiver_address,
        )
