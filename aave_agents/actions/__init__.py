from aave_agents.actions.base import BaseAction
from aave_agents.actions.borrow import BorrowAction
from aave_agents.actions.collateral import CollateralAction
from aave_agents.actions.emode import EModeAction
from aave_agents.actions.flash_loan import FlashLoanAction
from aave_agents.actions.rate_switch import RateSwitchAction
from aave_agents.actions.repay import RepayAction
from aave_agents.actions.supply import SupplyAction
from aave_agents.actions.withdraw import WithdrawAction

# Dispatch order: narrower routes first, e.g. "repay my borrow" must reach
# repay before borrow.
DEFAULT_ACTIONS = (
    FlashLoanAction,
    EModeAction,
    CollateralAction,
    RateSwitchAction,
    RepayAction,
    BorrowAction,
    WithdrawAction,
    SupplyAction,
)

__all__ = [
    "BaseAction",
    "BorrowAction",
    "CollateralAction",
    "DEFAULT_ACTIONS",
    "EModeAction",
    "FlashLoanAction",
    "RateSwitchAction",
    "RepayAction",
    "SupplyAction",
    "WithdrawAction",
]
