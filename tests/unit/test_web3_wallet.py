from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest

from aave_agents.config import Settings
from aave_agents.errors import AaveError, AaveErrorCode, ServiceUnavailableError
from aave_agents.services.web3_wallet import Web3WalletService, from_base_units, to_base_units


def test_base_unit_conversion():
    assert to_base_units(Decimal("1.5"), 6) == 1_500_000
    assert to_base_units(Decimal("0.0000009"), 6) == 0
    assert to_base_units(Decimal("2"), 18) == 2 * 10**18
    assert from_base_units(1_500_000, 6) == Decimal("1.5")


def test_wallet_requires_rpc_and_key():
    with pytest.raises(ServiceUnavailableError) as exc_info:
        Web3WalletService(Settings(wallet_private_key="0x" + "11" * 32))
    assert exc_info.value.code == AaveErrorCode.SERVICE_UNAVAILABLE
    assert "BASE_RPC_URL" in exc_info.value.message

    with pytest.raises(ServiceUnavailableError):
        Web3WalletService(Settings(base_rpc_url="http://localhost:8545"))


async def _resolved(value):
    return value


def _signing_wallet(receipt_status):
    w3 = MagicMock()
    w3.eth.get_transaction_count = AsyncMock(return_value=7)
    w3.eth.gas_price = _resolved(10**9)
    w3.eth.send_raw_transaction = AsyncMock(return_value=b"\x12" * 32)
    w3.eth.wait_for_transaction_receipt = AsyncMock(return_value={"status": receipt_status, "blockNumber": 1})
    wallet = Web3WalletService(
        Settings(base_rpc_url="http://localhost:8545", wallet_private_key="0x" + "11" * 32), w3=w3
    )
    wallet.account = MagicMock(address=wallet.account.address)
    return wallet


@pytest.mark.asyncio
async def test_send_returns_hash_of_mined_transaction():
    wallet = _signing_wallet(receipt_status=1)
    fn = MagicMock(build_transaction=AsyncMock(return_value={"to": "0x" + "22" * 20}))

    assert await wallet.send(fn, 100_000) == "0x" + "12" * 32
    tx = fn.build_transaction.call_args.args[0]
    assert tx["nonce"] == 7
    assert tx["gas"] == 100_000
    assert tx["chainId"] == 8453


@pytest.mark.asyncio
async def test_reverted_receipt_raises_transaction_failed():
    wallet = _signing_wallet(receipt_status=0)
    fn = MagicMock(build_transaction=AsyncMock(return_value={"to": "0x" + "22" * 20}))

    with pytest.raises(AaveError) as exc_info:
        await wallet.send(fn, 100_000)

    assert exc_info.value.code == AaveErrorCode.TRANSACTION_FAILED
    assert "reverted" in exc_info.value.message
