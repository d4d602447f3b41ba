"""Utility helpers for the crypto text engine."""

from .logging import configure_logging

__all__ = ["configure_logging"]
