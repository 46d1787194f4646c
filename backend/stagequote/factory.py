"""Factory functions for creating pre-configured QuoteEngine instances."""

from __future__ import annotations

from stagequote.data.repository import SettingsRepository
from stagequote.engine import QuoteEngine


def create_default_engine() -> QuoteEngine:
    """Create a QuoteEngine wired up with the built-in settings.

    Uses the default rate table, the 16 standard room types and the
    Apartment/House property-type defaults, so callers don't need to
    supply a settings document.

    Example::

        from stagequote import create_default_engine, QuoteRequest

        engine = create_default_engine()
        estimate = engine.quote_request(QuoteRequest(property_type="House"))
    """
    return QuoteEngine(SettingsRepository())
