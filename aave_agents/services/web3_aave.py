"""Aave V3 Pool access through web3.py."""
from __future__ import annotations

import logging
from decimal import Decimal
from typing import List, Optional, Tuple

from web3 import Web3

from aave_agents.config import AaveConfig
from aave_agents.errors import AaveError, AaveErrorCode, map_protocol_error
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
from aave_agents.services.abis import POOL_ABI, POOL_DATA_PROVIDER_ABI
from aave_agents.services.base import AmountArg, emode_categories
from aave_agents.services.web3_wallet import Web3WalletService, from_base_units, to_base_units

logger = logging.getLogger(__name__)

BASE_CURRENCY_DECIMALS = 8
HEALTH_FACTOR_DECIMALS = 18
# ray (1e27) -> percent
RAY_PERCENT_DECIMALS = 25


def _ray_to_percent(raw: int) -> Decimal:
    return Decimal(raw).scaleb(-RAY_PERCENT_DECIMALS)


def _bps_to_percent(raw: int) -> Decimal:
    return Decimal(raw) / Decimal(100)


class Web3AaveService:
    """Reads positions and sends Pool transactions for the wallet's account."""

    def __init__(self, wallet: Web3WalletService):
        self.wallet = wallet
        self.network = wallet.network
        w3 = wallet.w3
        self.pool = w3.eth.contract(address=Web3.to_checksum_address(self.network["pool"]), abi=POOL_ABI)
        self.data_provider = w3.eth.contract(
            address=Web3.to_checksum_address(self.network["pool_data_provider"]),
            abi=POOL_DATA_PROVIDER_ABI,
        )

    # ---------- Reads ----------

    async def get_user_account_data(self, address: str) -> UserAccountData:
        (
            collateral,
            debt,
            available,
            liquidation_threshold,
            ltv,
            health_factor,
        ) = await self.pool.functions.getUserAccountData(Web3.to_checksum_address(address)).call()

        if health_factor >= AaveConfig.MAX_UINT256 or debt == 0:
            hf = AaveConfig.INFINITE_HEALTH_FACTOR
        else:
            hf = from_base_units(health_factor, HEALTH_FACTOR_DECIMALS)

        return UserAccountData(
            total_collateral=from_base_units(collateral, BASE_CURRENCY_DECIMALS),
            total_debt=from_base_units(debt, BASE_CURRENCY_DECIMALS),
            available_borrows=from_base_units(available, BASE_CURRENCY_DECIMALS),
            current_liquidation_threshold=_bps_to_percent(liquidation_threshold),
            ltv=_bps_to_percent(ltv),
            health_factor=hf,
        )

    async def _reserve_rates(self, asset: str) -> Tuple[Decimal, Decimal, Decimal]:
        token = self.wallet.token(asset)
        data = await self.data_provider.functions.getReserveData(Web3.to_checksum_address(token["address"])).call()
        return _ray_to_percent(data[5]), _ray_to_percent(data[6]), _ray_to_percent(data[7])

    async def get_user_position(self, address: str) -> UserPosition:
        user = Web3.to_checksum_address(address)
        supplies: List[AssetPosition] = []
        borrows: List[AssetPosition] = []

        for symbol, token in self.network["tokens"].items():
            reserve = await self.data_provider.functions.getUserReserveData(
                Web3.to_checksum_address(token["address"]), user
            ).call()
            a_token, stable_debt, variable_debt = reserve[0], reserve[1], reserve[2]
            if not (a_token or stable_debt or variable_debt):
                continue

            decimals = token["decimals"]
            supply_apy, variable_rate, stable_rate = await self._reserve_rates(symbol)
            if a_token:
                supplies.append(
                    AssetPosition(
                        asset=symbol,
                        balance=from_base_units(a_token, decimals),
                        apy=supply_apy,
                        is_collateral=bool(reserve[8]),
                    )
                )
            for raw, mode in ((stable_debt, InterestRateMode.STABLE), (variable_debt, InterestRateMode.VARIABLE)):
                if raw:
                    borrows.append(
                        AssetPosition(
                            asset=symbol,
                            balance=from_base_units(raw, decimals),
                            interest_rate_mode=mode,
                            stable_rate=_ray_to_percent(reserve[5]) if mode == InterestRateMode.STABLE else stable_rate,
                            variable_rate=variable_rate,
                        )
                    )

        account = await self.get_user_account_data(address)
        emode = await self.pool.functions.getUserEMode(user).call()
        current_ltv = (
            account.total_debt / account.total_collateral * 100 if account.total_collateral > 0 else Decimal("0")
        )
        return UserPosition(
            supplies=supplies,
            borrows=borrows,
            health_factor=account.health_factor,
            total_collateral=account.total_collateral,
            total_debt=account.total_debt,
            available_borrows=account.available_borrows,
            current_ltv=current_ltv,
            liquidation_threshold=account.current_liquidation_threshold,
            emode_category=int(emode),
        )

    async def get_market_data(self) -> List[ReserveMarketData]:
        reserves: List[ReserveMarketData] = []
        for symbol, token in self.network["tokens"].items():
            data = await self.data_provider.functions.getReserveData(
                Web3.to_checksum_address(token["address"])
            ).call()
            decimals = token["decimals"]
            reserves.append(
                ReserveMarketData(
                    asset=symbol,
                    supply_apy=_ray_to_percent(data[5]),
                    variable_borrow_apy=_ray_to_percent(data[6]),
                    stable_borrow_apy=_ray_to_percent(data[7]),
                    total_supplied=from_base_units(data[2], decimals),
                    total_borrowed=from_base_units(data[3] + data[4], decimals),
                )
            )
        return reserves

    async def get_emode_categories(self) -> List[EModeCategory]:
        return emode_categories()

    # ---------- Helpers ----------

    def _asset_address(self, asset: str) -> str:
        return Web3.to_checksum_address(self.wallet.token(asset)["address"])

    async def _raw_amount(self, asset: str, amount: AmountArg) -> int:
        if AaveConfig.is_sentinel(amount):
            return AaveConfig.MAX_UINT256
        return to_base_units(Decimal(amount), await self.wallet.decimals(asset))

    async def _address(self) -> str:
        return await self.wallet.get_address()

    async def _position(self) -> UserPosition:
        return await self.get_user_position(await self._address())

    # ---------- Writes ----------

    async def supply(self, asset: str, amount: Decimal, on_behalf_of: str) -> SupplyResult:
        try:
            raw = await self._raw_amount(asset, amount)
            await self.wallet.approve(asset, self.pool.address, raw)
            tx_hash = await self.wallet.send(
                self.pool.functions.supply(
                    self._asset_address(asset), raw, Web3.to_checksum_address(on_behalf_of), 0
                ),
                AaveConfig.GAS_LIMITS["supply"],
            )
            position = await self._position()
        except Exception as e:
            raise map_protocol_error(e, "supply") from e

        supplied = position.find_supply(asset)
        return SupplyResult(
            transaction_hash=tx_hash,
            asset=asset,
            amount=amount,
            a_token_balance=supplied.balance if supplied else Decimal("0"),
            apy=supplied.apy if supplied else Decimal("0"),
            collateral_enabled=supplied.is_collateral if supplied else False,
        )

    async def withdraw(self, asset: str, amount: AmountArg, to: str) -> WithdrawResult:
        try:
            before = (await self._position()).find_supply(asset)
            raw = await self._raw_amount(asset, amount)
            tx_hash = await self.wallet.send(
                self.pool.functions.withdraw(self._asset_address(asset), raw, Web3.to_checksum_address(to)),
                AaveConfig.GAS_LIMITS["withdraw"],
            )
            position = await self._position()
        except Exception as e:
            raise map_protocol_error(e, "withdraw") from e

        after = position.find_supply(asset)
        remaining = after.balance if after else Decimal("0")
        withdrawn = (before.balance if before else Decimal("0")) - remaining
        return WithdrawResult(
            transaction_hash=tx_hash,
            asset=asset,
            amount=withdrawn if AaveConfig.is_sentinel(amount) else Decimal(amount),
            remaining_supply=remaining,
            health_factor=position.health_factor,
        )

    async def borrow(
        self, asset: str, amount: Decimal, interest_rate_mode: InterestRateMode, on_behalf_of: str
    ) -> BorrowResult:
        try:
            raw = await self._raw_amount(asset, amount)
            tx_hash = await self.wallet.send(
                self.pool.functions.borrow(
                    self._asset_address(asset), raw, int(interest_rate_mode), 0, Web3.to_checksum_address(on_behalf_of)
                ),
                AaveConfig.GAS_LIMITS["borrow"],
            )
            position = await self._position()
        except Exception as e:
            raise map_protocol_error(e, "borrow") from e

        borrowed = next(
            (b for b in position.borrows if b.asset == asset and b.interest_rate_mode == interest_rate_mode),
            None,
        )
        return BorrowResult(
            transaction_hash=tx_hash,
            asset=asset,
            amount=amount,
            interest_rate_mode=interest_rate_mode,
            rate=borrowed.current_rate if borrowed else Decimal("0"),
            health_factor=position.health_factor,
        )

    async def repay(
        self, asset: str, amount: AmountArg, interest_rate_mode: InterestRateMode, on_behalf_of: str
    ) -> RepayResult:
        try:
            before = (await self._position()).find_borrow(asset)
            raw = await self._raw_amount(asset, amount)
            await self.wallet.approve(asset, self.pool.address, raw)
            tx_hash = await self.wallet.send(
                self.pool.functions.repay(
                    self._asset_address(asset), raw, int(interest_rate_mode), Web3.to_checksum_address(on_behalf_of)
                ),
                AaveConfig.GAS_LIMITS["repay"],
            )
            position = await self._position()
        except Exception as e:
            raise map_protocol_error(e, "repay") from e

        after = position.find_borrow(asset)
        owed = before.balance if before else Decimal("0")
        remaining = after.balance if after else Decimal("0")
        # the Pool never takes more than the outstanding debt
        repaid = owed - remaining if AaveConfig.is_sentinel(amount) else min(Decimal(amount), owed)
        return RepayResult(
            transaction_hash=tx_hash,
            asset=asset,
            amount=repaid,
            remaining_debt=remaining,
            health_factor=position.health_factor,
        )

    async def set_user_emode(self, category_id: int) -> EModeResult:
        address = await self._address()
        try:
            before = await self.get_user_account_data(address)
            tx_hash = await self.wallet.send(
                self.pool.functions.setUserEMode(category_id), AaveConfig.GAS_LIMITS["emode"]
            )
            after = await self.get_user_account_data(address)
        except Exception as e:
            raise map_protocol_error(e, "eMode") from e

        return EModeResult(
            transaction_hash=tx_hash,
            category_id=category_id,
            enabled=category_id != 0,
            ltv_improvement=after.ltv - before.ltv,
            liquidation_threshold_improvement=after.current_liquidation_threshold - before.current_liquidation_threshold,
            health_factor=after.health_factor,
        )

    async def swap_borrow_rate_mode(self, asset: str, target_rate_mode: InterestRateMode) -> RateSwitchResult:
        try:
            current = (await self._position()).find_borrow(asset)
            if current is None:
                raise AaveError(f"No active {asset} borrow position found", AaveErrorCode.NO_POSITION, "rate switch")
            if current.interest_rate_mode == target_rate_mode:
                raise AaveError(
                    f"Your {asset} debt is already using {target_rate_mode.label} rate",
                    AaveErrorCode.ALREADY_SET,
                    "rate switch",
                )
            tx_hash = await self.wallet.send(
                self.pool.functions.swapBorrowRateMode(self._asset_address(asset), int(current.interest_rate_mode)),
                AaveConfig.GAS_LIMITS["rate_switch"],
            )
            updated = (await self._position()).find_borrow(asset)
        except Exception as e:
            raise map_protocol_error(e, "rate switch") from e

        previous_rate = current.current_rate
        new_rate = updated.current_rate if updated else Decimal("0")
        return RateSwitchResult(
            transaction_hash=tx_hash,
            asset=asset,
            previous_rate_mode=current.interest_rate_mode,
            new_rate_mode=target_rate_mode,
            previous_rate=previous_rate,
            new_rate=new_rate,
            projected_savings=current.balance * (previous_rate - new_rate) / 100,
        )

    async def set_collateral(self, asset: str, enable: bool) -> CollateralResult:
        address = await self._address()
        try:
            before = await self.get_user_account_data(address)
            tx_hash = await self.wallet.send(
                self.pool.functions.setUserUseReserveAsCollateral(self._asset_address(asset), enable),
                AaveConfig.GAS_LIMITS["collateral"],
            )
            after = await self.get_user_account_data(address)
        except Exception as e:
            raise map_protocol_error(e, "collateral") from e

        return CollateralResult(
            transaction_hash=tx_hash,
            asset=asset,
            enabled=enable,
            health_factor_before=before.health_factor,
            health_factor_after=after.health_factor,
            available_borrows_before=before.available_borrows,
            available_borrows_after=after.available_borrows,
        )

    async def flash_loan(
        self,
        receiver_address: str,
        assets: List[str],
        amounts: List[Decimal],
        params: str = "",
    ) -> FlashLoanResult:
        try:
            premium_bps = await self.pool.functions.FLASHLOAN_PREMIUM_TOTAL().call()
            addresses = [self._asset_address(asset) for asset in assets]
            raw_amounts = [await self._raw_amount(asset, amount) for asset, amount in zip(assets, amounts)]
            tx_hash = await self.wallet.send(
                self.pool.functions.flashLoan(
                    Web3.to_checksum_address(receiver_address),
                    addresses,
                    raw_amounts,
                    [0] * len(assets),
                    await self._address(),
                    _params_bytes(params),
                    0,
                ),
                AaveConfig.GAS_LIMITS["flash_loan"],
            )
        except Exception as e:
            raise map_protocol_error(e, "flash loan") from e

        premiums = [amount * Decimal(premium_bps) / Decimal(10_000) for amount in amounts]
        return FlashLoanResult(
            transaction_hash=tx_hash,
            assets=assets,
            amounts=amounts,
            premiums=premiums,
            total_premium=sum(premiums, Decimal("0")),
            receiver_address=Web3.to_checksum_address(receiver_address),
        )


def _params_bytes(params: Optional[str]) -> bytes:
    if not params:
        return b""
    if params.startswith("0x"):
        return Web3.to_bytes(hexstr=params)
    return params.encode()
