from decimal import Decimal

import pytest
from pydantic import ValidationError

from aave_agents.models.aave import InterestRateMode
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


@pytest.mark.parametrize("raw", ["-1", "max", "MAX", "all", -1])
def test_withdraw_sentinel_is_kept(raw):
    params = WithdrawParams.model_validate({"asset": "USDC", "amount": raw})
    assert params.amount == "-1"
    assert params.is_max


@pytest.mark.parametrize("raw", ["-1", "max"])
def test_repay_sentinel_is_kept(raw):
    params = RepayParams.model_validate({"asset": "DAI", "amount": raw})
    assert params.amount == "-1"
    assert params.is_max
    assert params.interest_rate_mode == InterestRateMode.VARIABLE


def test_plain_amounts_become_decimals():
    params = WithdrawParams.model_validate({"asset": "weth", "amount": "1,250.5"})
    assert params.amount == Decimal("1250.5")
    assert not params.is_max


def test_supply_rejects_sentinel_and_non_positive_amounts():
    with pytest.raises(ValidationError):
        SupplyParams.model_validate({"asset": "USDC", "amount": "max"})
    with pytest.raises(ValidationError):
        SupplyParams.model_validate({"asset": "USDC", "amount": "0"})
    with pytest.raises(ValidationError):
        SupplyParams.model_validate({"asset": "USDC", "amount": "lots"})


def test_supply_accepts_camel_case_collateral_flag():
    params = SupplyParams.model_validate({"asset": "usdc", "amount": "100", "enableCollateral": "false"})
    assert params.enable_collateral is False


def test_native_eth_maps_to_weth():
    assert SupplyParams.model_validate({"asset": "eth", "amount": "1"}).asset == "WETH"


def test_invalid_asset_symbol():
    with pytest.raises(ValidationError):
        SupplyParams.model_validate({"asset": "not a token!", "amount": "1"})


@pytest.mark.parametrize(
    "raw, expected",
    [("stable", InterestRateMode.STABLE), ("1", InterestRateMode.STABLE), (2, InterestRateMode.VARIABLE)],
)
def test_borrow_rate_mode_parsing(raw, expected):
    params = BorrowParams.model_validate({"asset": "USDC", "amount": "10", "interestRateMode": raw})
    assert params.interest_rate_mode == expected


def test_borrow_rejects_unknown_rate_mode():
    with pytest.raises(ValidationError):
        BorrowParams.model_validate({"asset": "USDC", "amount": "10", "rateMode": "fixed"})


def test_emode_disable_means_category_zero():
    params = EModeParams.model_validate({"categoryId": 1, "enable": False})
    assert params.category_id == 0
    assert params.enable is False

    params = EModeParams.model_validate({"categoryId": "2"})
    assert params.category_id == 2
    assert params.enable is True


def test_emode_rejects_unknown_category():
    with pytest.raises(ValidationError):
        EModeParams.model_validate({"categoryId": 7})


def test_rate_switch_requires_target():
    with pytest.raises(ValidationError):
        RateSwitchParams.model_validate({"asset": "USDC"})
    params = RateSwitchParams.model_validate({"asset": "USDC", "targetRateMode": "Stable"})
    assert params.target_rate_mode == InterestRateMode.STABLE


def test_collateral_requires_enable_flag():
    with pytest.raises(ValidationError):
        CollateralParams.model_validate({"asset": "WETH"})
    assert CollateralParams.model_validate({"asset": "WETH", "enable": "disable"}).enable is False


def test_flash_loan_splits_lists():
    params = FlashLoanParams.model_validate({"assets": "usdc, weth", "amounts": "1000,0.5"})
    assert params.assets == ["USDC", "WETH"]
    assert params.amounts == [Decimal("1000"), Decimal("0.5")]
    assert params.receiver_address is None
    assert params.params == ""


def test_flash_loan_count_mismatch():
    with pytest.raises(ValidationError) as exc_info:
        FlashLoanParams.model_validate({"assets": "USDC,WETH", "amounts": "1000"})
    assert "Asset/amount count mismatch" in str(exc_info.value)


def test_flash_loan_receiver_is_checksummed():
    params = FlashLoanParams.model_validate(
        {
            "assets": ["USDC"],
            "amounts": ["1"],
            "receiverAddress": "0xa238dd80c259a72e81d7e4664a9801593f98d1c5",
        }
    )
    assert params.receiver_address == "0xA238Dd80C259a72e81d7e4664a9801593F98d1c5"

    with pytest.raises(ValidationError):
        FlashLoanParams.model_validate({"assets": "USDC", "amounts": "1", "receiverAddress": "0x123"})
