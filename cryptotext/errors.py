"""
Exception hierarchy for the crypto text engine.
"""

from __future__ import annotations


class CryptoTextError(RuntimeError):
    """Base class for crypto text errors."""


class ConfigurationError(CryptoTextError):
    """Raised when the engine or a profile cannot be configured."""


class InvalidCommand(CryptoTextError):
    """Raised when an unsupported transport command is requested."""
