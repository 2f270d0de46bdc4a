"""Outcome caching for pools."""

from .base import BaseOutcomeCache
from .cache import OutcomeCache
from .null import NullOutcomeCache

__all__ = ["BaseOutcomeCache", "NullOutcomeCache", "OutcomeCache"]
