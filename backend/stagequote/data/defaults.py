"""Built-in settings used when no configuration document is supplied.

The rate defaults are the original threshold settings: apartments under
$800k get a 5% discount and over $1M a 5% premium; houses use $1M and
$1.5M. Properties within 10 km of the warehouse get 5% off, 15-30 km
costs 5% more and 30 km or further 10% more.
"""

from __future__ import annotations

from stagequote.data.rate_config import RateTableV1
from stagequote.models.enums import AccessDifficulty, PropertyType, StylingType
from stagequote.models.rates import RateTable

DEFAULT_LEGACY_RATE_SETTINGS: dict[str, float] = {
    "apartment_low_threshold": 800_000,
    "apartment_high_threshold": 1_000_000,
    "house_low_threshold": 1_000_000,
    "house_high_threshold": 1_500_000,
    "distance_close_threshold": 10,
    "distance_medium_min": 15,
    "distance_medium_max": 30,
    "distance_far_min": 30,
    "penalty_discount": 0.05,
    "reward_bonus": 0.05,
    "distance_close_discount": 0.05,
    "distance_medium_fee": 0.05,
    "distance_far_fee": 0.10,
    "access_standard_fee": 0.05,
    "access_difficult_fee": 0.10,
    "access_very_difficult_fee": 0.20,
}

DEFAULT_RATE_TABLE: RateTable = RateTableV1.model_validate(
    DEFAULT_LEGACY_RATE_SETTINGS
).to_rate_table()

DEFAULT_PROPERTY_TYPES: list[str] = [t.value for t in PropertyType]
DEFAULT_STYLING_OPTIONS: list[str] = [s.value for s in StylingType]

# Room rate per equivalent room, by property type
DEFAULT_ROOM_RATES: dict[str, float] = {
    PropertyType.APARTMENT: 350.0,
    PropertyType.HOUSE: 400.0,
}
FALLBACK_ROOM_RATE = 400.0

# Apartments usually mean lifts, stairs and loading-zone parking
DEFAULT_ACCESS_DIFFICULTY: dict[str, AccessDifficulty] = {
    PropertyType.APARTMENT: AccessDifficulty.DIFFICULT,
}
FALLBACK_ACCESS_DIFFICULTY = AccessDifficulty.EASY
