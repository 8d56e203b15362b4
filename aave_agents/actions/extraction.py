"""Prompt composition and model-output parsing for parameter extraction."""
from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict, Mapping, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from aave_agents.errors import ParameterExtractionError

logger = logging.getLogger(__name__)

ParamsT = TypeVar("ParamsT", bound=BaseModel)

_PLACEHOLDER = re.compile(r"\{\{\s*(\w+)\s*\}\}")
_FENCED_JSON = re.compile(r"```(?:json)?\s*(\{.*?\})\s*```", re.DOTALL | re.IGNORECASE)
_XML_RESPONSE = re.compile(r"<response>(.*?)</response>", re.DOTALL | re.IGNORECASE)
_XML_FIELD = re.compile(r"<(\w+)>(.*?)</\1>", re.DOTALL)


def compose_prompt(template: str, state: Optional[Mapping[str, Any]] = None, **values: Any) -> str:
    """Fill ``{{name}}`` placeholders from *state* and *values*; unknown names render empty."""
    merged: Dict[str, Any] = {**(state or {}), **values}

    def _sub(match: re.Match) -> str:
        value = merged.get(match.group(1))
        return "" if value is None else str(value)

    return _PLACEHOLDER.sub(_sub, template)


def _load_json_object(text: str) -> Optional[Dict[str, Any]]:
    try:
        obj = json.loads(text)
    except (json.JSONDecodeError, TypeError):
        return None
    return obj if isinstance(obj, dict) else None


def _xml_value(raw: str) -> Any:
    value = raw.strip()
    lowered = value.lower()
    if lowered in ("true", "false"):
        return lowered == "true"
    if lowered in ("", "null", "none"):
        return None
    return value


def parse_model_output(text: str) -> Dict[str, Any]:
    """
    Parse a model reply into a flat dict.

    Accepts a JSON object (bare or in a ```json fence) or an XML
    ``<response>`` block of ``<key>value</key>`` pairs. JSON wins when both
    are present. Returns ``{}`` when nothing parses.
    """
    if not text:
        return {}

    fenced = _FENCED_JSON.search(text)
    if fenced:
        obj = _load_json_object(fenced.group(1))
        if obj is not None:
            return obj

    start, end = text.find("{"), text.rfind("}")
    if 0 <= start < end:
        obj = _load_json_object(text[start : end + 1])
        if obj is not None:
            return obj

    xml = _XML_RESPONSE.search(text)
    if xml:
        return {key: _xml_value(value) for key, value in _XML_FIELD.findall(xml.group(1))}

    logger.debug("Unparseable model output: %.200s", text)
    return {}


def validate_params(
    model_cls: Type[ParamsT],
    raw: Mapping[str, Any],
    message: str,
    operation: Optional[str] = None,
) -> ParamsT:
    """Validate *raw* against *model_cls* or raise ``ParameterExtractionError(message)``."""
    if not raw:
        raise ParameterExtractionError(message, operation, {"reason": "empty model output"})

    # a model that cannot find a field often emits null for it
    cleaned = {key: value for key, value in raw.items() if value is not None}
    try:
        return model_cls.model_validate(cleaned)
    except ValidationError as e:
        errors = [err.get("msg", "") for err in e.errors()]
        logger.warning("Rejected %s parameters %s: %s", operation or model_cls.__name__, cleaned, errors)
        raise ParameterExtractionError(message, operation, {"errors": errors, "raw": dict(raw)}) from e
