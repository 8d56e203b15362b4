from aave_agents.services.base import AAVE_SERVICE, WALLET_SERVICE, AaveService, WalletService
from aave_agents.services.simulated import SimulatedAaveService, SimulatedWalletService

__all__ = [
    "AAVE_SERVICE",
    "WALLET_SERVICE",
    "AaveService",
    "WalletService",
    "SimulatedAaveService",
    "SimulatedWalletService",
]
