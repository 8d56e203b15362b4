"""
Tiered LLM model configuration.

Parameter extraction runs on the small tier. Multi-asset extraction
(flash loans) uses the large tier.
"""

from __future__ import annotations


TEXT_SMALL = "text_small"
TEXT_LARGE = "text_large"


class ModelTier:
    """Canonical model identifiers per tier."""

    SMALL = "gemini-2.5-flash"
    LARGE = "gemini-2.5-pro"


# Maps action names to the tier used for their extraction prompt.
ACTION_TIER_MAP: dict[str, str] = {
    "AAVE_SUPPLY":       TEXT_SMALL,
    "AAVE_WITHDRAW":     TEXT_SMALL,
    "AAVE_BORROW":       TEXT_SMALL,
    "AAVE_REPAY":        TEXT_SMALL,
    "AAVE_EMODE":        TEXT_SMALL,
    "AAVE_RATE_SWITCH":  TEXT_SMALL,
    "AAVE_COLLATERAL":   TEXT_SMALL,
    "AAVE_FLASH_LOAN":   TEXT_LARGE,
}


def tier_for_action(action_name: str) -> str:
    """Return the tier for *action_name*, defaulting to TEXT_SMALL."""
    return ACTION_TIER_MAP.get(action_name, TEXT_SMALL)
