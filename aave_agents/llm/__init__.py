"""
LLM Module - chat model access for parameter extraction.

This module provides:
- LLMFactory: chat model for a SMALL_MODEL / LARGE_MODEL name
- ModelTier, tier_for_action: default model names and the tier each action uses
"""

from .factory import LLMFactory, detect_provider, MODEL_PROVIDERS
from .tiers import ModelTier, TEXT_SMALL, TEXT_LARGE, tier_for_action
from .exceptions import (
    LLMError,
    LLMProviderError,
    LLMInvalidModelError,
)

__all__ = [
    # Factory
    "LLMFactory",
    "detect_provider",
    "MODEL_PROVIDERS",
    # Tiers
    "ModelTier",
    "TEXT_SMALL",
    "TEXT_LARGE",
    "tier_for_action",
    # Exceptions
    "LLMError",
    "LLMProviderError",
    "LLMInvalidModelError",
]
