import pytest

from aave_agents.actions.extraction import compose_prompt, parse_model_output, validate_params
from aave_agents.errors import AaveErrorCode, ParameterExtractionError
from aave_agents.models.params import SupplyParams


def test_compose_prompt_fills_known_and_blanks_unknown():
    template = "Context:\n{{providers}}\nMessages:\n{{ recentMessages }}\n{{missing}}end"
    prompt = compose_prompt(template, {"providers": "Lending Only"}, recentMessages="user: hi")
    assert "Lending Only" in prompt
    assert "user: hi" in prompt
    assert prompt.endswith("\nend")
    assert "{{" not in prompt


def test_parse_fenced_json():
    text = 'Sure!\n```json\n{"asset": "USDC", "amount": "500", "interestRateMode": "variable"}\n```'
    assert parse_model_output(text) == {"asset": "USDC", "amount": "500", "interestRateMode": "variable"}


def test_parse_bare_json():
    assert parse_model_output('{"categoryId": 1, "enable": true}') == {"categoryId": 1, "enable": True}


def test_parse_xml_response_converts_booleans_and_nulls():
    text = """
    <response>
        <asset>USDC</asset>
        <amount>100</amount>
        <enableCollateral>false</enableCollateral>
        <note>null</note>
    </response>
    """
    assert parse_model_output(text) == {
        "asset": "USDC",
        "amount": "100",
        "enableCollateral": False,
        "note": None,
    }


def test_json_wins_over_xml():
    text = '<response><asset>DAI</asset></response>\n```json\n{"asset": "USDC"}\n```'
    assert parse_model_output(text) == {"asset": "USDC"}


@pytest.mark.parametrize("text", ["", "I could not find any amount", "{not json", "[1, 2, 3]"])
def test_unparseable_output_is_empty(text):
    assert parse_model_output(text) == {}


def test_validate_params_empty_raw_raises_generic_message():
    with pytest.raises(ParameterExtractionError) as exc_info:
        validate_params(SupplyParams, {}, "Unable to process supply request.", "AAVE_SUPPLY")
    assert exc_info.value.message == "Unable to process supply request."
    assert exc_info.value.code == AaveErrorCode.INVALID_PARAMETERS


def test_validate_params_invalid_values_raise_with_details():
    with pytest.raises(ParameterExtractionError) as exc_info:
        validate_params(SupplyParams, {"asset": "USDC", "amount": "-5"}, "bad supply")
    assert str(exc_info.value) == "bad supply"
    assert exc_info.value.details["errors"]


def test_validate_params_drops_null_fields():
    params = validate_params(SupplyParams, {"asset": "usdc", "amount": "10", "enableCollateral": None}, "bad")
    assert params.asset == "USDC"
    assert params.enable_collateral is True
