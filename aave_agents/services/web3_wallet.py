"""Signing wallet backed by web3.py."""
from __future__ import annotations

import logging
from decimal import ROUND_DOWN, Decimal
from typing import Any, Dict, Optional

from eth_account import Account
from web3 import AsyncWeb3, Web3

from aave_agents.config import AaveConfig, Settings
from aave_agents.errors import AaveError, AaveErrorCode, ServiceUnavailableError
from aave_agents.services.abis import ERC20_ABI

logger = logging.getLogger(__name__)

RECEIPT_TIMEOUT = 180


def to_base_units(amount: Decimal, decimals: int) -> int:
    return int(amount.scaleb(decimals).to_integral_value(rounding=ROUND_DOWN))


def from_base_units(raw: int, decimals: int) -> Decimal:
    return Decimal(raw).scaleb(-decimals)


class Web3WalletService:
    """Wallet for the configured private key on the configured Base network."""

    def __init__(self, settings: Settings, w3: Optional[AsyncWeb3] = None):
        if not settings.base_rpc_url:
            raise ServiceUnavailableError("BASE_RPC_URL is not configured", "wallet")
        if not settings.wallet_private_key:
            raise ServiceUnavailableError("WALLET_PRIVATE_KEY is not configured", "wallet")

        self.settings = settings
        self.network = AaveConfig.get_network(settings.aave_network)
        self.w3 = w3 or AsyncWeb3(AsyncWeb3.AsyncHTTPProvider(settings.base_rpc_url))
        self.account = Account.from_key(settings.wallet_private_key)
        self._decimals: Dict[str, int] = {}

        if settings.wallet_address and Web3.to_checksum_address(settings.wallet_address) != self.account.address:
            logger.warning(
                "WALLET_ADDRESS %s does not match the private key address %s; using the key address",
                settings.wallet_address,
                self.account.address,
            )

    async def get_address(self) -> str:
        return self.account.address

    def token(self, asset: str) -> Dict[str, Any]:
        try:
            return AaveConfig.resolve_token(asset, self.settings.aave_network)
        except ValueError as e:
            raise AaveError(str(e), AaveErrorCode.ASSET_NOT_SUPPORTED) from e

    def erc20(self, address: str):
        return self.w3.eth.contract(address=Web3.to_checksum_address(address), abi=ERC20_ABI)

    async def decimals(self, asset: str) -> int:
        token = self.token(asset)
        symbol = token["symbol"]
        if symbol not in self._decimals:
            self._decimals[symbol] = await self.erc20(token["address"]).functions.decimals().call()
        return self._decimals[symbol]

    async def get_balance(self, asset: str) -> Decimal:
        if asset.upper() == "ETH":
            wei = await self.w3.eth.get_balance(self.account.address)
            return from_base_units(wei, 18)
        token = self.token(asset)
        raw = await self.erc20(token["address"]).functions.balanceOf(self.account.address).call()
        return from_base_units(raw, await self.decimals(asset))

    async def approve(self, asset: str, spender: str, amount: Optional[int] = None) -> Optional[str]:
        """Approve *spender* for *amount* base units unless the allowance already covers it."""
        token = self.token(asset)
        contract = self.erc20(token["address"])
        spender = Web3.to_checksum_address(spender)
        wanted = AaveConfig.MAX_UINT256 if amount is None else amount

        allowance = await contract.functions.allowance(self.account.address, spender).call()
        if allowance >= wanted:
            return None

        logger.info("Approving %s for %s", token["symbol"], spender)
        return await self.send(contract.functions.approve(spender, wanted), AaveConfig.GAS_LIMITS["approve"])

    async def send(self, fn, gas: int) -> str:
        """Sign, broadcast and wait for a contract call; returns the tx hash."""
        tx = await fn.build_transaction(
            {
                "from": self.account.address,
                "nonce": await self.w3.eth.get_transaction_count(self.account.address),
                "gas": gas,
                "gasPrice": await self.w3.eth.gas_price,
                "chainId": self.network["chain_id"],
            }
        )
        signed = self.account.sign_transaction(tx)
        tx_hash = await self.w3.eth.send_raw_transaction(signed.raw_transaction)
        receipt = await self.w3.eth.wait_for_transaction_receipt(tx_hash, timeout=RECEIPT_TIMEOUT)
        hex_hash = Web3.to_hex(tx_hash)
        if receipt["status"] != 1:
            raise AaveError(
                f"Transaction {hex_hash} reverted",
                AaveErrorCode.TRANSACTION_FAILED,
                details={"transaction_hash": hex_hash},
            )
        logger.debug("Transaction %s mined in block %s", hex_hash, receipt["blockNumber"])
        return hex_hash
