"""Exceptions raised by the card pool."""
from __future__ import annotations


class CardPoolError(Exception):
    """Base class for every error raised by this package."""


class ConfigurationError(CardPoolError, ValueError):
    """Probability inputs that cannot be resolved into a valid pool."""


class RangeError(CardPoolError, IndexError):
    """Search bounds that fall outside the sampling index."""
