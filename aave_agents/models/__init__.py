from aave_agents.models.aave import (
    AssetPosition,
    BorrowResult,
    CollateralResult,
    EModeCategory,
    EModeResult,
    FlashLoanResult,
    HealthFactorStatus,
    InterestRateMode,
    RateSwitchResult,
    RepayResult,
    ReserveMarketData,
    SupplyResult,
    UserAccountData,
    UserPosition,
    WithdrawResult,
)
from aave_agents.models.chat_message import ActionResult, ChatMessage, MessageRole
from aave_agents.models.params import (
    BorrowParams,
    CollateralParams,
    EModeParams,
    FlashLoanParams,
    RateSwitchParams,
    RepayParams,
    SupplyParams,
    WithdrawParams,
)

__all__ = [
    "ActionResult",
    "AssetPosition",
    "BorrowParams",
    "BorrowResult",
    "ChatMessage",
    "CollateralParams",
    "CollateralResult",
    "EModeCategory",
    "EModeParams",
    "EModeResult",
    "FlashLoanParams",
    "FlashLoanResult",
    "HealthFactorStatus",
    "InterestRateMode",
    "MessageRole",
    "RateSwitchParams",
    "RateSwitchResult",
    "RepayParams",
    "RepayResult",
    "ReserveMarketData",
    "SupplyParams",
    "SupplyResult",
    "UserAccountData",
    "UserPosition",
    "WithdrawParams",
    "WithdrawResult",
]
