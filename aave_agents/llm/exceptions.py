"""Errors raised while building or calling the extraction models."""

from typing import Iterable, Optional


class LLMError(Exception):
    def __init__(self, message: str, model: Optional[str] = None):
        self.model = model
        super().__init__(message)


class LLMProviderError(LLMError):
    """The provider package is missing, rejected its settings, or the call failed."""

    def __init__(self, message: str, model: Optional[str] = None, provider: Optional[str] = None):
        self.provider = provider
        super().__init__(message, model)


class LLMInvalidModelError(LLMError):
    """No provider serves the configured SMALL_MODEL / LARGE_MODEL name."""

    def __init__(self, model: str, known: Iterable[str] = ()):
        self.known = sorted(known)
        hint = f" (known models: {', '.join(self.known)})" if self.known else ""
        super().__init__(f"Unsupported model {model!r}{hint}", model)
