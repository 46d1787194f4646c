"""Domain models for the StageQuote engine."""

from stagequote.models.enums import AccessDifficulty, PropertyType, RateUnit, StylingType
from stagequote.models.property import (
    PropertyInput,
    QuoteRequest,
    RoomEntry,
    RoomMap,
    RoomOverride,
)
from stagequote.models.quote import (
    QuoteEstimate,
    QuoteMetadata,
    QuoteResult,
    RateBreakdown,
    RoomLine,
)
from stagequote.models.rates import RateRange, RateTable

__all__ = [
    "AccessDifficulty",
    "PropertyInput",
    "PropertyType",
    "QuoteEstimate",
    "QuoteMetadata",
    "QuoteRequest",
    "QuoteResult",
    "RateBreakdown",
    "RateRange",
    "RateTable",
    "RateUnit",
    "RoomEntry",
    "RoomLine",
    "RoomMap",
    "RoomOverride",
    "StylingType",
]
