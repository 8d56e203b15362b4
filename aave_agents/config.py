"""Static Aave V3 market data and environment-driven settings."""
from __future__ import annotations

import os
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

from aave_agents.llm.tiers import ModelTier


class AaveConfig:
    """Static configuration for the supported Aave V3 markets."""

    DEFAULT_NETWORK = "base"

    NETWORKS: Dict[str, Dict[str, Any]] = {
        "base": {
            "chain_id": 8453,
            "pool": "0xA238Dd80C259a72e81d7e4664a9801593F98d1c5",
            "pool_data_provider": "0x2d8A3C5677189723C4cB8873CfC9C8976FDF38Ac",
            "explorer": "https://basescan.org",
            "tokens": {
                "WETH": {"address": "0x4200000000000000000000000000000000000006", "decimals": 18},
                "USDC": {"address": "0x833589fCD6eDb6E08f4c7C32D4f71b54bdA02913", "decimals": 6},
                "USDBC": {"address": "0xd9aAEc86B65D86f6A7B5B1b0c42FFA531710b6CA", "decimals": 6},
                "CBETH": {"address": "0x2Ae3F1Ec7F1F5012CFEab0185bfc7aa3cf0DEc22", "decimals": 18},
                "WSTETH": {"address": "0xc1CBa3fCea344f92D9239c08C0568f6F2F0ee452", "decimals": 18},
                "DAI": {"address": "0x50c5725949A6F0c72E6C4a641F24049A917DB0Cb", "decimals": 18},
            },
        },
        "base-sepolia": {
            "chain_id": 84532,
            "pool": "0x07eA79F68B2B3df564D0A34F8e19D9B1e339814b",
            "pool_data_provider": "0x2d8A3C5677189723C4cB8873CfC9C8976FDF38Ac",
            "explorer": "https://sepolia.basescan.org",
            "tokens": {
                "WETH": {"address": "0x4200000000000000000000000000000000000006", "decimals": 18},
                "USDC": {"address": "0x036CbD53842c5426634e7929541eC2318f3dCF7e", "decimals": 6},
            },
        },
    }

    NETWORK_ALIASES = {
        "base-mainnet": "base",
        "basesepolia": "base-sepolia",
        "base_sepolia": "base-sepolia",
        "sepolia": "base-sepolia",
    }

    # Native ETH is handled as WETH by the pool.
    TOKEN_ALIASES = {"ETH": "WETH"}

    STABLECOINS = {"USDC", "USDT", "DAI", "FRAX", "LUSD", "USDBC"}
    ETH_CORRELATED = {"ETH", "WETH", "STETH", "WSTETH", "RETH", "CBETH"}

    # ltv / liquidation_threshold / liquidation_bonus in percent
    EMODE_CATEGORIES: Dict[int, Dict[str, Any]] = {
        0: {
            "label": "Disabled",
            "ltv": Decimal("0"),
            "liquidation_threshold": Decimal("0"),
            "liquidation_bonus": Decimal("0"),
            "assets": set(),
        },
        1: {
            "label": "Stablecoins",
            "ltv": Decimal("97"),
            "liquidation_threshold": Decimal("97.5"),
            "liquidation_bonus": Decimal("1"),
            "assets": STABLECOINS,
        },
        2: {
            "label": "ETH correlated",
            "ltv": Decimal("90"),
            "liquidation_threshold": Decimal("93"),
            "liquidation_bonus": Decimal("1"),
            "assets": ETH_CORRELATED,
        },
    }

    # Health factor bands used for status labels
    HEALTH_FACTOR_CRITICAL = Decimal("1.1")
    HEALTH_FACTOR_RISKY = Decimal("1.5")
    HEALTH_FACTOR_MODERATE = Decimal("2")
    HEALTH_FACTOR_SAFE = Decimal("3")

    MIN_BORROW_HEALTH_FACTOR = Decimal("1.2")
    HEALTH_FACTOR_WARNING = Decimal("1.5")
    MIN_COLLATERAL_DISABLE_HEALTH_FACTOR = Decimal("2.0")

    # Pool.getUserAccountData returns uint256 max when there is no debt
    INFINITE_HEALTH_FACTOR = Decimal("1e12")

    GAS_LIMITS = {
        "supply": 300_000,
        "withdraw": 400_000,
        "borrow": 400_000,
        "repay": 300_000,
        "rate_switch": 200_000,
        "collateral": 150_000,
        "emode": 200_000,
        "flash_loan": 1_000_000,
        "approve": 100_000,
    }

    FLASH_LOAN_PREMIUM_BPS = 5

    MAX_UINT256 = 2**256 - 1
    AMOUNT_SENTINEL = "-1"
    SENTINEL_ALIASES = {"-1", "max", "all"}

    @classmethod
    def list_networks(cls) -> List[str]:
        return list(cls.NETWORKS.keys())

    @classmethod
    def validate_network(cls, network: str) -> str:
        net = (network or "").lower().strip()
        net = cls.NETWORK_ALIASES.get(net, net)
        if net not in cls.NETWORKS:
            raise ValueError(f"Network '{network}' is not supported. Supported: {cls.list_networks()}")
        return net

    @classmethod
    def get_network(cls, network: str) -> Dict[str, Any]:
        return cls.NETWORKS[cls.validate_network(network)]

    @classmethod
    def list_tokens(cls, network: str) -> List[str]:
        return list(cls.get_network(network)["tokens"].keys())

    @classmethod
    def canonical_symbol(cls, symbol: str) -> str:
        sym = (symbol or "").upper().strip()
        return cls.TOKEN_ALIASES.get(sym, sym)

    @classmethod
    def is_supported(cls, symbol: str, network: str) -> bool:
        return cls.canonical_symbol(symbol) in cls.get_network(network)["tokens"]

    @classmethod
    def resolve_token(cls, symbol: str, network: str) -> Dict[str, Any]:
        """Return ``{"symbol", "address", "decimals"}`` for a token on *network*."""
        net = cls.validate_network(network)
        canonical = cls.canonical_symbol(symbol)
        tokens = cls.NETWORKS[net]["tokens"]
        if canonical not in tokens:
            raise ValueError(
                f"Asset '{symbol}' is not supported on {net}. Supported: {list(tokens.keys())}"
            )
        return {"symbol": canonical, **tokens[canonical]}

    @classmethod
    def symbol_for_address(cls, address: str, network: str) -> Optional[str]:
        target = (address or "").lower()
        for symbol, token in cls.get_network(network)["tokens"].items():
            if token["address"].lower() == target:
                return symbol
        return None

    @classmethod
    def get_emode_category(cls, category_id: int) -> Dict[str, Any]:
        if category_id not in cls.EMODE_CATEGORIES:
            raise ValueError(
                f"eMode category {category_id} is not supported. Supported: {list(cls.EMODE_CATEGORIES)}"
            )
        return cls.EMODE_CATEGORIES[category_id]

    @classmethod
    def is_sentinel(cls, value: Any) -> bool:
        return str(value).strip().lower() in cls.SENTINEL_ALIASES


def _parse_decimal(value: Any, name: str) -> Decimal:
    try:
        return Decimal(str(value).strip())
    except (InvalidOperation, TypeError, ValueError):
        raise ValueError(f"{name} must be a number") from None


class Settings(BaseModel):
    """Runtime settings read from the environment (and a local ``.env``)."""

    base_rpc_url: Optional[str] = None
    wallet_private_key: Optional[str] = None
    wallet_address: Optional[str] = None
    aave_network: str = AaveConfig.DEFAULT_NETWORK
    health_factor_alert: Decimal = Decimal("1.5")
    flash_loan_max_fee: Decimal = Decimal("0.1")
    aave_simulation: bool = False
    small_model: str = ModelTier.SMALL
    large_model: str = ModelTier.LARGE
    log_level: str = "INFO"
    log_format: str = "color"
    max_context_messages: int = Field(default=8, ge=1)

    @field_validator("aave_network", mode="before")
    @classmethod
    def _validate_network(cls, v):
        return AaveConfig.validate_network(v or AaveConfig.DEFAULT_NETWORK)

    @field_validator("health_factor_alert", mode="before")
    @classmethod
    def _validate_alert(cls, v):
        d = _parse_decimal(v, "HEALTH_FACTOR_ALERT")
        if d <= 1:
            raise ValueError("HEALTH_FACTOR_ALERT must be greater than 1")
        return d

    @field_validator("flash_loan_max_fee", mode="before")
    @classmethod
    def _validate_max_fee(cls, v):
        d = _parse_decimal(v, "FLASH_LOAN_MAX_FEE")
        if d < 0 or d > 1:
            raise ValueError("FLASH_LOAN_MAX_FEE must be a percentage between 0 and 1")
        return d

    @field_validator("log_format", mode="before")
    @classmethod
    def _validate_log_format(cls, v):
        v = str(v or "color").lower().strip()
        if v not in ("color", "json"):
            raise ValueError("LOG_FORMAT must be 'color' or 'json'")
        return v

    @field_validator("base_rpc_url", "wallet_private_key", "wallet_address", mode="before")
    @classmethod
    def _blank_to_none(cls, v):
        if v is None:
            return None
        v = str(v).strip()
        return v or None

    @property
    def can_sign(self) -> bool:
        return bool(self.base_rpc_url and self.wallet_private_key)

    @classmethod
    def from_env(cls, **overrides: Any) -> "Settings":
        load_dotenv()
        values: Dict[str, Any] = {}
        for name in cls.model_fields:
            raw = os.getenv(name.upper())
            if raw is not None:
                values[name] = raw
        values.update(overrides)
        return cls(**values)
