"""
Keyword routing for incoming chat messages.

Each action owns a ``Route``; ``validate`` is a cheap regex check that
runs before any model call.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Pattern, Tuple


@dataclass(frozen=True)
class Route:
    """Matches when any of *patterns* and all of *requires* hit the text, and none of *excludes*."""

    patterns: Tuple[Pattern[str], ...]
    requires: Tuple[Pattern[str], ...] = ()
    excludes: Tuple[Pattern[str], ...] = ()

    def matches(self, text: str) -> bool:
        if not text:
            return False
        if not any(p.search(text) for p in self.patterns):
            return False
        if any(p.search(text) for p in self.excludes):
            return False
        return all(p.search(text) for p in self.requires)


def _rx(pattern: str) -> Pattern[str]:
    return re.compile(pattern, re.IGNORECASE)


# ---------------------------------------------------------------------------
# Compiled patterns
# ---------------------------------------------------------------------------

SUPPLY_ROUTE = Route(
    patterns=(_rx(r"\b(?:suppl(?:y|ying)|lend(?:ing)?|deposit(?:ing)?|provide)\b"),),
)

WITHDRAW_ROUTE = Route(
    patterns=(_rx(r"\b(?:withdraw(?:ing|al)?|take\s+out|pull\s+out)\b"),),
)

BORROW_ROUTE = Route(
    patterns=(
        _rx(r"\bborrow(?:ing)?\b"),
        _rx(r"\btake\s+(?:out\s+)?a\s+loan\b"),
    ),
)

REPAY_ROUTE = Route(
    patterns=(
        _rx(r"\b(?:repay(?:ing)?|pay\s+back|pay\s+off)\b"),
        _rx(r"\bclose\b.*\b(?:debt|loan|borrow)\b"),
        _rx(r"\baave\s+(?:debt|loan)\b"),
    ),
)

EMODE_ROUTE = Route(
    patterns=(_rx(r"\b(?:e-?mode|e\s+mode|efficiency\s+mode)\b"),),
)

RATE_SWITCH_ROUTE = Route(
    patterns=(
        _rx(r"\b(?:switch|change|convert|move)\b.*\b(?:rate|stable|variable|interest)\b"),
        _rx(r"\brate\s+mode\b"),
    ),
)

COLLATERAL_ROUTE = Route(
    patterns=(
        _rx(r"\b(?:enable|disable|use|stop\s+using|turn\s+on|turn\s+off|activate|deactivate|remove)\b"),
    ),
    requires=(_rx(r"\bcollateral\b"),),
    # "supply 100 USDC and use it as collateral" is a supply
    excludes=(_rx(r"\b(?:suppl(?:y|ying)|deposit(?:ing)?|lend(?:ing)?|provide)\s+(?:\d|all\b|max\b)"),),
)

FLASH_LOAN_ROUTE = Route(
    patterns=(_rx(r"\bflash[\s-]?(?:loan|borrow)s?\b"),),
)

