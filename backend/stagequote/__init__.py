"""StageQuote property styling quote engine.

Usage::

    from stagequote import create_default_engine, QuoteRequest

    engine = create_default_engine()
    estimate = engine.quote_request(QuoteRequest(property_type="House"))
"""

from stagequote.data.rate_config import load_rate_table
from stagequote.data.repository import SettingsRepository
from stagequote.engine import (
    QuoteEngine,
    aggregate_rooms,
    base_price,
    compute_quote,
    finalize,
    resolve_rate,
)
from stagequote.exceptions import (
    InvalidInputError,
    RateTableError,
    SettingsError,
    StageQuoteError,
)
from stagequote.factory import create_default_engine
from stagequote.models.enums import AccessDifficulty, PropertyType, StylingType
from stagequote.models.property import PropertyInput, QuoteRequest, RoomEntry
from stagequote.models.quote import QuoteEstimate, QuoteResult
from stagequote.models.rates import RateRange, RateTable

__all__ = [
    "AccessDifficulty",
    "InvalidInputError",
    "PropertyInput",
    "PropertyType",
    "QuoteEngine",
    "QuoteEstimate",
    "QuoteRequest",
    "QuoteResult",
    "RateRange",
    "RateTable",
    "RateTableError",
    "RoomEntry",
    "SettingsError",
    "SettingsRepository",
    "StageQuoteError",
    "StylingType",
    "aggregate_rooms",
    "base_price",
    "compute_quote",
    "create_default_engine",
    "finalize",
    "load_rate_table",
    "resolve_rate",
]
