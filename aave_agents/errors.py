"""
Errors raised by the Aave services and actions.

Every failure an action can report is an ``AaveError`` by the time it
reaches the handler boundary; ``map_protocol_error`` converts raw
contract / RPC exceptions into one.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class AaveErrorCode(str, Enum):
    UNKNOWN = "UNKNOWN"
    TRANSACTION_FAILED = "TRANSACTION_FAILED"
    ASSET_NOT_SUPPORTED = "ASSET_NOT_SUPPORTED"
    INVALID_PARAMETERS = "INVALID_PARAMETERS"
    INSUFFICIENT_COLLATERAL = "INSUFFICIENT_COLLATERAL"
    HEALTH_FACTOR_TOO_LOW = "HEALTH_FACTOR_TOO_LOW"
    STABLE_BORROWING_NOT_ENABLED = "STABLE_BORROWING_NOT_ENABLED"
    INSUFFICIENT_BALANCE = "INSUFFICIENT_BALANCE"
    NO_POSITION = "NO_POSITION"
    ALREADY_SET = "ALREADY_SET"
    INCOMPATIBLE_ASSETS = "INCOMPATIBLE_ASSETS"
    FEE_TOO_HIGH = "FEE_TOO_HIGH"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"


class AaveError(Exception):
    """Base exception for user-reportable Aave failures."""

    def __init__(
        self,
        message: str,
        code: AaveErrorCode = AaveErrorCode.UNKNOWN,
        operation: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.code = code
        self.operation = operation
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "message": self.message,
            "code": self.code.value,
            "operation": self.operation,
            "details": self.details,
        }


class ParameterExtractionError(AaveError):
    """The model output could not be turned into valid parameters."""

    def __init__(self, message: str, operation: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, AaveErrorCode.INVALID_PARAMETERS, operation, details)


class ServiceUnavailableError(AaveError):
    """A required service is not registered or not initialized."""

    def __init__(self, message: str, operation: Optional[str] = None):
        super().__init__(message, AaveErrorCode.SERVICE_UNAVAILABLE, operation)


# (substrings to look for, code, user-facing message)
_PROTOCOL_ERRORS = (
    (("HEALTH_FACTOR", "health factor"), AaveErrorCode.HEALTH_FACTOR_TOO_LOW,
     "Operation would result in unsafe health factor"),
    (("COLLATERAL_CANNOT_COVER", "INSUFFICIENT_COLLATERAL", "COLLATERAL_BALANCE_IS_ZERO"),
     AaveErrorCode.INSUFFICIENT_COLLATERAL, "Insufficient collateral for this operation"),
    (("NO_ACTIVE_RESERVE", "RESERVE_INACTIVE", "RESERVE_FROZEN"), AaveErrorCode.ASSET_NOT_SUPPORTED,
     "Asset is not supported in Aave market"),
    (("STABLE_BORROWING_NOT_ENABLED",), AaveErrorCode.STABLE_BORROWING_NOT_ENABLED,
     "Stable rate borrowing is not enabled for this asset"),
    (("INVALID_AMOUNT",), AaveErrorCode.INVALID_PARAMETERS, "Invalid amount specified"),
    (("insufficient funds", "exceeds balance", "NOT_ENOUGH_AVAILABLE_USER_BALANCE"),
     AaveErrorCode.INSUFFICIENT_BALANCE, "Insufficient balance for this operation"),
    (("RESERVE_PAUSED", "POOL_PAUSED"), AaveErrorCode.TRANSACTION_FAILED,
     "The Aave market is currently paused"),
)


def map_protocol_error(exc: BaseException, operation: str) -> AaveError:
    """Translate a contract/RPC exception into an ``AaveError``."""
    if isinstance(exc, AaveError):
        return exc

    raw = str(exc) or exc.__class__.__name__
    for needles, code, message in _PROTOCOL_ERRORS:
        if any(needle.lower() in raw.lower() for needle in needles):
            return AaveError(message, code, operation, {"raw": raw})

    logger.debug("Unmapped %s error: %s", operation, raw)
    return AaveError(f"Aave {operation} failed: {raw}", AaveErrorCode.TRANSACTION_FAILED, operation, {"raw": raw})
