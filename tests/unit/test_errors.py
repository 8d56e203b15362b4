from aave_agents.actions.suggestions import suggestions_for
from aave_agents.errors import AaveError, AaveErrorCode, map_protocol_error


def test_known_revert_reasons_are_mapped():
    err = map_protocol_error(
        Exception("execution reverted: HEALTH_FACTOR_LOWER_THAN_LIQUIDATION_THRESHOLD"), "withdraw"
    )
    assert err.code == AaveErrorCode.HEALTH_FACTOR_TOO_LOW
    assert err.message == "Operation would result in unsafe health factor"
    assert err.operation == "withdraw"
    assert "HEALTH_FACTOR" in err.details["raw"]

    err = map_protocol_error(Exception("STABLE_BORROWING_NOT_ENABLED"), "borrow")
    assert err.code == AaveErrorCode.STABLE_BORROWING_NOT_ENABLED


def test_unknown_errors_keep_raw_text():
    err = map_protocol_error(RuntimeError("nonce too low"), "repay")
    assert err.code == AaveErrorCode.TRANSACTION_FAILED
    assert err.message == "Aave repay failed: nonce too low"


def test_aave_errors_pass_through():
    original = AaveError("No active USDC supply position found", AaveErrorCode.NO_POSITION, "withdraw")
    assert map_protocol_error(original, "withdraw") is original
    assert original.to_dict()["code"] == "NO_POSITION"


def test_suggestions_match_on_substrings():
    hints = suggestions_for("AAVE_BORROW", "Health factor 1.05 is too low. Supply more collateral before borrowing.")
    assert hints[0] == "Supply more collateral to improve your health factor"


def test_suggestions_combine_matching_rules():
    hints = suggestions_for("AAVE_EMODE", "Cannot enable eMode category 1. Incompatible assets: WETH")
    assert "Category 1 is for stablecoins only (USDC, DAI, etc.)" in hints
    assert "You may need to close incompatible positions first" in hints


def test_suggestions_fall_back_to_generic():
    assert suggestions_for("AAVE_SUPPLY", "connection reset") == [
        "Check your wallet connection and network",
        "Try again with an explicit asset and amount",
    ]
    assert suggestions_for("UNKNOWN_ACTION", "Please specify the asset") == [
        "Include the asset symbol and the amount, e.g. '100 USDC'"
    ]
