"""
Infrastructure Module - Cross-cutting concerns.

This module provides:
- Logging: colored console output or JSON lines
"""

from .logging import setup_logging

__all__ = [
    "setup_logging",
]
