"""Number and health-factor formatting for action responses."""
from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from aave_agents.config import AaveConfig
from aave_agents.models.aave import HealthFactorStatus

# anything above this is "no debt" for display purposes
_DISPLAY_INFINITY = Decimal("1e9")

_STATUS_LABELS = {
    HealthFactorStatus.CRITICAL: "🔴 CRITICAL",
    HealthFactorStatus.RISKY: "🟠 RISKY",
    HealthFactorStatus.MODERATE: "🟡 MODERATE",
    HealthFactorStatus.SAFE: "🟢 SAFE",
    HealthFactorStatus.VERY_SAFE: "🟢 VERY SAFE",
}


def format_amount(value: Decimal) -> str:
    normalized = Decimal(value).normalize()
    exponent = normalized.as_tuple().exponent
    if isinstance(exponent, int) and exponent > 0:
        normalized = normalized.quantize(Decimal(1))
    text = format(normalized, "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def _quantize(value: Decimal, places: int) -> Decimal:
    return Decimal(value).quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)


def format_percent(value: Decimal, places: int = 2) -> str:
    return f"{_quantize(value, places)}%"


def format_usd(value: Decimal) -> str:
    return f"${_quantize(value, 2):,}"


def format_compact(value: Decimal) -> str:
    """``310000000`` -> ``"310.0M"``"""
    value = Decimal(value)
    for threshold, suffix in ((Decimal("1e9"), "B"), (Decimal("1e6"), "M"), (Decimal("1e3"), "K")):
        if value >= threshold:
            return f"{_quantize(value / threshold, 1)}{suffix}"
    return str(_quantize(value, 2))


def format_health_factor(value: Decimal) -> str:
    if Decimal(value) >= _DISPLAY_INFINITY:
        return "∞"
    return str(_quantize(value, 2))


def health_factor_status(value: Decimal) -> HealthFactorStatus:
    hf = Decimal(value)
    if hf < AaveConfig.HEALTH_FACTOR_CRITICAL:
        return HealthFactorStatus.CRITICAL
    if hf < AaveConfig.HEALTH_FACTOR_RISKY:
        return HealthFactorStatus.RISKY
    if hf < AaveConfig.HEALTH_FACTOR_MODERATE:
        return HealthFactorStatus.MODERATE
    if hf < AaveConfig.HEALTH_FACTOR_SAFE:
        return HealthFactorStatus.SAFE
    return HealthFactorStatus.VERY_SAFE


def status_label(status: HealthFactorStatus) -> str:
    return _STATUS_LABELS[status]


def describe_health_factor(value: Decimal) -> str:
    """``"1.84 (🟡 MODERATE)"``"""
    return f"{format_health_factor(value)} ({status_label(health_factor_status(value))})"
