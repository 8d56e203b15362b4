from aave_agents.providers.base import Provider, ProviderResult
from aave_agents.providers.health_factor import HealthFactorProvider, liquidation_distance
from aave_agents.providers.market_data import MarketDataProvider
from aave_agents.providers.position_context import PositionContextProvider, position_status

__all__ = [
    "HealthFactorProvider",
    "MarketDataProvider",
    "PositionContextProvider",
    "Provider",
    "ProviderResult",
    "liquidation_distance",
    "position_status",
]
