"""
Chat model construction for the SMALL_MODEL / LARGE_MODEL settings.

The provider is picked from the model name; provider packages are
imported on first use so only the configured one has to be importable.
"""

import importlib
import logging
import os
from typing import Dict, Literal, NamedTuple

from langchain_core.language_models import BaseChatModel

from .exceptions import LLMInvalidModelError, LLMProviderError

logger = logging.getLogger(__name__)

Provider = Literal["google", "openai", "anthropic"]


class _ProviderClass(NamedTuple):
    module: str
    class_name: str
    key_kwarg: str
    key_env: str


_PROVIDER_CLASSES: Dict[Provider, _ProviderClass] = {
    "google": _ProviderClass("langchain_google_genai", "ChatGoogleGenerativeAI", "google_api_key", "GEMINI_API_KEY"),
    "openai": _ProviderClass("langchain_openai", "ChatOpenAI", "api_key", "OPENAI_API_KEY"),
    "anthropic": _ProviderClass("langchain_anthropic", "ChatAnthropic", "api_key", "ANTHROPIC_API_KEY"),
}

# model name -> provider, for names the prefix rules below don't cover
MODEL_PROVIDERS: Dict[str, Provider] = {
    "gemini-2.5-flash": "google",
    "gemini-2.5-pro": "google",
    "gpt-4o": "openai",
    "gpt-4o-mini": "openai",
    "gpt-4.1-mini": "openai",
    "claude-sonnet-4-20250514": "anthropic",
    "claude-3-5-haiku-20241022": "anthropic",
}

_NAME_PREFIXES = (
    ("gemini", "google"),
    ("gpt", "openai"),
    ("o1", "openai"),
    ("o3", "openai"),
    ("o4", "openai"),
    ("claude", "anthropic"),
)


def detect_provider(model: str) -> Provider:
    """Provider for *model*; raises ``LLMInvalidModelError`` when none matches."""
    name = (model or "").strip().lower()
    if name in MODEL_PROVIDERS:
        return MODEL_PROVIDERS[name]
    for prefix, provider in _NAME_PREFIXES:
        if name.startswith(prefix):
            return provider
    raise LLMInvalidModelError(model, MODEL_PROVIDERS)


class LLMFactory:
    """Builds langchain chat models; callers keep the instances they need."""

    @classmethod
    def create(
        cls,
        model: str,
        temperature: float = 0.0,
        timeout: int = 60,
        max_retries: int = 2,
        **kwargs,
    ) -> BaseChatModel:
        """
        Build the chat model for *model*.

        Extraction prompts expect the same JSON for the same message, hence
        temperature 0 unless overridden. The API key comes from the
        provider's usual env var unless passed as a keyword.

        Raises:
            LLMInvalidModelError: no provider serves *model*
            LLMProviderError: the provider package is missing or refused the arguments
        """
        provider = detect_provider(model)
        target = _PROVIDER_CLASSES[provider]
        kwargs.setdefault(target.key_kwarg, os.getenv(target.key_env))

        try:
            chat_class = getattr(importlib.import_module(target.module), target.class_name)
        except ImportError as e:
            raise LLMProviderError(
                f"{target.module} is required for {model} but is not installed", model, provider
            ) from e

        try:
            llm = chat_class(model=model, temperature=temperature, timeout=timeout, max_retries=max_retries, **kwargs)
        except Exception as e:
            raise LLMProviderError(f"Could not create {provider} model {model}: {e}", model, provider) from e

        logger.info("Using %s model %s", provider, model)
        return llm
