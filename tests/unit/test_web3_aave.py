from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest

from aave_agents.config import AaveConfig, Settings
from aave_agents.errors import AaveError, AaveErrorCode
from aave_agents.models.aave import AssetPosition, InterestRateMode, UserPosition
from aave_agents.services.web3_aave import Web3AaveService
from aave_agents.services.web3_wallet import Web3WalletService

TX_HASH = "0x" + "ab" * 32
SIGNING = Settings(base_rpc_url="http://localhost:8545", wallet_private_key="0x" + "11" * 32)


def _call_returning(value):
    """Contract function double: ``fn(...).call()`` resolves to *value*."""
    return MagicMock(return_value=MagicMock(call=AsyncMock(return_value=value)))


def _position(supplies=(), borrows=(), health_factor=AaveConfig.INFINITE_HEALTH_FACTOR):
    return UserPosition(supplies=list(supplies), borrows=list(borrows), health_factor=health_factor)


@pytest.fixture
def wallet():
    wallet = Web3WalletService(SIGNING, w3=MagicMock())
    wallet.decimals = AsyncMock(return_value=6)
    wallet.approve = AsyncMock(return_value=None)
    wallet.send = AsyncMock(return_value=TX_HASH)
    return wallet


@pytest.fixture
def service(wallet):
    return Web3AaveService(wallet)


@pytest.mark.asyncio
async def test_account_data_is_unscaled(service):
    service.pool.functions.getUserAccountData = _call_returning(
        (150_000_000_000, 50_000_000_000, 62_500_000_000, 8250, 8000, 2_475_000_000_000_000_000)
    )

    account = await service.get_user_account_data("0x" + "22" * 20)

    assert account.total_collateral == Decimal("1500")
    assert account.total_debt == Decimal("500")
    assert account.available_borrows == Decimal("625")
    assert account.current_liquidation_threshold == Decimal("82.5")
    assert account.ltv == Decimal("80")
    assert account.health_factor == Decimal("2.475")


@pytest.mark.asyncio
async def test_account_without_debt_has_infinite_health_factor(service):
    service.pool.functions.getUserAccountData = _call_returning(
        (150_000_000_000, 0, 120_000_000_000, 8250, 8000, AaveConfig.MAX_UINT256)
    )

    account = await service.get_user_account_data("0x" + "22" * 20)

    assert account.health_factor == AaveConfig.INFINITE_HEALTH_FACTOR


@pytest.mark.asyncio
async def test_raw_amount_scales_and_maps_sentinel(service):
    assert await service._raw_amount("USDC", Decimal("1.5")) == 1_500_000
    assert await service._raw_amount("USDC", "-1") == AaveConfig.MAX_UINT256


@pytest.mark.asyncio
async def test_market_data_from_reserve_data(service):
    ray_percent = 10**25
    service.data_provider.functions.getReserveData = _call_returning(
        (0, 0, 1_000_000_000_000, 0, 800_000_000_000, 4 * ray_percent, 6 * ray_percent, 0, 0, 0, 0, 0)
    )

    reserves = await service.get_market_data()

    usdc = next(r for r in reserves if r.asset == "USDC")
    assert usdc.supply_apy == Decimal("4")
    assert usdc.variable_borrow_apy == Decimal("6")
    assert usdc.total_supplied == Decimal("1000000")
    assert usdc.utilization_rate == Decimal("80")
    assert usdc.available_liquidity == Decimal("200000")


@pytest.mark.asyncio
async def test_supply_approves_before_sending(service, wallet):
    calls = []
    wallet.approve = AsyncMock(side_effect=lambda *args: calls.append("approve"))
    wallet.send = AsyncMock(side_effect=lambda *args: calls.append("send") or TX_HASH)
    service._position = AsyncMock(
        return_value=_position(supplies=[AssetPosition(asset="USDC", balance=Decimal("100"), is_collateral=True)])
    )

    result = await service.supply("USDC", Decimal("100"), wallet.account.address)

    assert calls == ["approve", "send"]
    wallet.approve.assert_awaited_once_with("USDC", service.pool.address, 100_000_000)
    assert result.a_token_balance == Decimal("100")
    assert result.collateral_enabled is True


@pytest.mark.asyncio
async def test_repay_more_than_debt_reports_the_debt(service, wallet):
    debt = AssetPosition(asset="USDC", balance=Decimal("200"), interest_rate_mode=InterestRateMode.VARIABLE)
    service._position = AsyncMock(side_effect=[_position(borrows=[debt]), _position()])

    result = await service.repay("USDC", Decimal("500"), InterestRateMode.VARIABLE, wallet.account.address)

    assert result.amount == Decimal("200")
    assert result.remaining_debt == Decimal("0")
    wallet.approve.assert_awaited_once_with("USDC", service.pool.address, 500_000_000)


@pytest.mark.asyncio
async def test_partial_repay_reports_requested_amount(service, wallet):
    before = AssetPosition(asset="USDC", balance=Decimal("200"), interest_rate_mode=InterestRateMode.VARIABLE)
    after = before.model_copy(update={"balance": Decimal("150")})
    service._position = AsyncMock(side_effect=[_position(borrows=[before]), _position(borrows=[after])])

    result = await service.repay("USDC", Decimal("50"), InterestRateMode.VARIABLE, wallet.account.address)

    assert result.amount == Decimal("50")
    assert result.remaining_debt == Decimal("150")


@pytest.mark.asyncio
async def test_repay_max_uses_sentinel_and_measures_repaid(service, wallet):
    debt = AssetPosition(asset="USDC", balance=Decimal("200.5"), interest_rate_mode=InterestRateMode.VARIABLE)
    service._position = AsyncMock(side_effect=[_position(borrows=[debt]), _position()])

    result = await service.repay("USDC", "-1", InterestRateMode.VARIABLE, wallet.account.address)

    assert result.amount == Decimal("200.5")
    wallet.approve.assert_awaited_once_with("USDC", service.pool.address, AaveConfig.MAX_UINT256)
    assert service.pool.functions.repay.call_args.args[1] == AaveConfig.MAX_UINT256


@pytest.mark.asyncio
async def test_withdraw_all_reports_the_withdrawn_balance(service, wallet):
    supplied = AssetPosition(asset="USDC", balance=Decimal("1000"), is_collateral=True)
    service._position = AsyncMock(side_effect=[_position(supplies=[supplied]), _position()])

    result = await service.withdraw("USDC", "-1", wallet.account.address)

    assert result.amount == Decimal("1000")
    assert result.remaining_supply == Decimal("0")
    assert service.pool.functions.withdraw.call_args.args[1] == AaveConfig.MAX_UINT256


@pytest.mark.asyncio
async def test_contract_errors_are_mapped(service, wallet):
    wallet.send = AsyncMock(side_effect=ValueError("execution reverted: HEALTH_FACTOR_LOWER_THAN_LIQUIDATION_THRESHOLD"))

    with pytest.raises(AaveError) as exc_info:
        await service.borrow("USDC", Decimal("100"), InterestRateMode.VARIABLE, wallet.account.address)

    assert exc_info.value.code == AaveErrorCode.HEALTH_FACTOR_TOO_LOW
    assert exc_info.value.operation == "borrow"


@pytest.mark.asyncio
async def test_reverted_transaction_error_passes_through(service, wallet):
    reverted = AaveError(f"Transaction {TX_HASH} reverted", AaveErrorCode.TRANSACTION_FAILED)
    wallet.send = AsyncMock(side_effect=reverted)
    service.pool.functions.getUserAccountData = _call_returning((0, 0, 0, 0, 0, AaveConfig.MAX_UINT256))

    with pytest.raises(AaveError) as exc_info:
        await service.set_collateral("USDC", False)

    assert exc_info.value is reverted
