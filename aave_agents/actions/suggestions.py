"""Canned follow-up suggestions keyed on error text."""
from __future__ import annotations

from typing import Dict, List, Tuple, Union

# (lowercase substrings, suggestions); every matching rule contributes
Rule = Tuple[Tuple[str, ...], Tuple[str, ...]]

_RULES: Dict[str, List[Rule]] = {
    "AAVE_SUPPLY": [
        (("insufficient",), (
            "Check your wallet balance for this asset",
            "Try supplying a smaller amount",
        )),
        (("not supported",), (
            "Check which assets are listed on the Aave V3 market",
            "Try supplying USDC, WETH or DAI",
        )),
        (("paused", "frozen"), (
            "The reserve is not accepting supplies right now",
            "Try again later or pick another asset",
        )),
    ],
    "AAVE_WITHDRAW": [
        (("health factor",), (
            "Your withdrawal would make your position unsafe",
            "Try withdrawing a smaller amount",
            "Consider repaying some debt first",
        )),
        (("no active", "supply position"), (
            "Check your supplied assets on Aave",
            "You can only withdraw assets you have supplied",
        )),
        (("insufficient",), (
            "You may be trying to withdraw more than supplied",
            "Check your current supply balance",
        )),
    ],
    "AAVE_BORROW": [
        (("health factor",), (
            "Supply more collateral to improve your health factor",
            "Try borrowing a smaller amount",
            "Consider repaying existing debt first",
        )),
        (("no borrowing capacity", "insufficient collateral"), (
            "You need to supply assets as collateral first",
            "Enable existing supplies as collateral",
        )),
        (("not supported",), (
            "Check if the asset is available for borrowing on Aave V3",
            "Try borrowing USDC, WETH or DAI",
        )),
        (("stable rate",), (
            "Stable rate may not be available for all assets",
            "Try using variable rate instead",
        )),
        (("emode", "e-mode"), (
            "In eMode you can only borrow assets of the active category",
            "Disable eMode to borrow other assets",
        )),
    ],
    "AAVE_REPAY": [
        (("no active", "borrow position"), (
            "Check your current debt positions on Aave",
            "You can only repay assets you have borrowed",
        )),
        (("insufficient",), (
            "Check your wallet balance for this asset",
            "Try repaying a smaller amount",
        )),
        (("rate mode",), (
            "Make sure the rate mode matches your debt (stable or variable)",
        )),
    ],
    "AAVE_EMODE": [
        (("incompatible assets",), (
            "You have assets that are not compatible with this eMode category",
            "Consider switching all positions to compatible assets first",
            "Category 1 is for stablecoins only (USDC, DAI, etc.)",
            "Category 2 is for ETH-correlated assets only (WETH, wstETH, cbETH, etc.)",
        )),
        (("already",), (
            "The efficiency mode is already set as requested",
            "No change is needed",
        )),
        (("cannot enable",), (
            "Check your current positions for compatibility",
            "You may need to close incompatible positions first",
        )),
        (("health factor",), (
            "Changing eMode would make your position unsafe",
            "Repay some debt before changing eMode",
        )),
    ],
    "AAVE_RATE_SWITCH": [
        (("no active", "borrow position"), (
            "You need an active borrow position to switch its rate",
            "Check your current debt positions",
        )),
        (("already",), (
            "Your debt already uses the requested rate mode",
            "No change is needed",
        )),
        (("stable rate",), (
            "Stable rate borrowing is not available for this asset",
            "Keep the variable rate or choose another asset",
        )),
    ],
    "AAVE_COLLATERAL": [
        (("no active", "supply position"), (
            "You need to supply the asset first before managing collateral",
            "Check your current supply positions",
        )),
        (("already",), (
            "The collateral setting is already as requested",
            "No change is needed",
        )),
        (("health factor", "cannot disable"), (
            "Disabling collateral would make your position unsafe",
            "Improve your health factor by supplying more assets or repaying debt",
            "Keep this asset as collateral while you have outstanding debt",
        )),
    ],
    "AAVE_FLASH_LOAN": [
        (("fee",), (
            "The flash loan premium is above your configured maximum",
            "Raise FLASH_LOAN_MAX_FEE or reduce the amount",
        )),
        (("not supported",), (
            "Flash loans are only available for assets listed on the market",
            "Try USDC or WETH",
        )),
        (("mismatch", "count"), (
            "Provide one amount for each asset, in the same order",
        )),
        (("insufficient",), (
            "Your wallet needs enough balance to cover the premium",
        )),
    ],
}

_GENERIC = [
    "Check your wallet connection and network",
    "Try again with an explicit asset and amount",
]

_PARAMETER_HINTS = [
    "Include the asset symbol and the amount, e.g. '100 USDC'",
]


def suggestions_for(action_name: str, error: Union[BaseException, str]) -> List[str]:
    """Return suggestions for *error* raised by *action_name* (generic ones as fallback)."""
    text = str(error).lower()
    found: List[str] = []
    for needles, hints in _RULES.get(action_name, []):
        if any(needle in text for needle in needles):
            found.extend(hint for hint in hints if hint not in found)

    if found:
        return found
    if "unable to process" in text or "please specify" in text:
        return list(_PARAMETER_HINTS)
    return list(_GENERIC)
