"""Enums for the StageQuote domain models.

Values match the labels stored in quote records and settings documents,
so ``PropertyType.APARTMENT == "Apartment"``.
"""

from enum import StrEnum


class PropertyType(StrEnum):
    """Built-in property types. Settings may configure additional ones."""

    APARTMENT = "Apartment"
    HOUSE = "House"


class AccessDifficulty(StrEnum):
    """How hard a property is to physically service."""

    EASY = "Easy"
    STANDARD = "Standard"
    DIFFICULT = "Difficult"
    VERY_DIFFICULT = "Very Difficult"


class StylingType(StrEnum):
    FULL = "Full"
    PARTIAL = "Partial"


class RateUnit(StrEnum):
    """Unit in which a range table stores its rates."""

    FRACTION = "fraction"  # 0.05 == +5%
    PERCENT = "percent"  # 5 == +5%
