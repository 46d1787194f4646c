"""Custom exception hierarchy for the StageQuote engine."""

from __future__ import annotations


class StageQuoteError(Exception):
    """Base exception for all StageQuote errors."""


class InvalidInputError(StageQuoteError):
    """Raised when a property description cannot be priced.

    Covers negative counts, rates, prices and distances, percentages
    outside 0-100, and non-finite numbers.
    """


class RateTableError(StageQuoteError):
    """Raised when a rate configuration is malformed or of unknown shape."""


class SettingsError(StageQuoteError):
    """Raised when a settings document cannot be read or parsed."""
