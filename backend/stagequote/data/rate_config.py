"""Stored rate configuration shapes and their conversion to a RateTable.

Two shapes exist in stored settings:

- **V1 (legacy thresholds)** — fixed low/high listing-price thresholds per
  property type, three distance bands and three access-difficulty fees.
- **V2 (range lists)** — ordered ``{min, max, rate}`` lists per dimension
  plus a keyed access-difficulty map.

The shape is detected once in :func:`load_rate_table` and converted into
the canonical :class:`RateTable`; the resolver never sees either shape.
"""

from __future__ import annotations

import logging
import math
from decimal import Decimal
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from stagequote.exceptions import RateTableError
from stagequote.models.enums import AccessDifficulty, RateUnit
from stagequote.models.rates import RateRange, RateTable

logger = logging.getLogger(__name__)


class RateTableV2(BaseModel):
    """Range-list rate configuration."""

    apartment_ranges: list[RateRange]
    house_ranges: list[RateRange]
    distance_ranges: list[RateRange]
    access_difficulty_rates: dict[str, float] = Field(default_factory=dict)
    rate_unit: RateUnit = RateUnit.FRACTION

    def to_rate_table(self) -> RateTable:
        if self.rate_unit == RateUnit.FRACTION:
            return RateTable(
                apartment_ranges=tuple(self.apartment_ranges),
                house_ranges=tuple(self.house_ranges),
                distance_ranges=tuple(self.distance_ranges),
                access_difficulty_rates=dict(self.access_difficulty_rates),
            )

        # Percentage points -> decimal fractions
        def scaled(ranges: list[RateRange]) -> tuple[RateRange, ...]:
            return tuple(
                RateRange(min=r.min, max=r.max, rate=_from_percent(r.rate))
                for r in ranges
            )

        return RateTable(
            apartment_ranges=scaled(self.apartment_ranges),
            house_ranges=scaled(self.house_ranges),
            distance_ranges=scaled(self.distance_ranges),
            access_difficulty_rates={
                k: _from_percent(v) for k, v in self.access_difficulty_rates.items()
            },
        )


class RateTableV1(BaseModel):
    """Legacy threshold rate configuration.

    Listing price below the low threshold earns ``-penalty_discount``;
    above the high threshold earns ``+reward_bonus``. Distances below the
    close threshold earn ``-distance_close_discount``; the medium band
    ``[medium_min, medium_max)`` and far band ``[far_min, inf)`` add their
    fees. All amounts are decimal fractions.

    Note:
        Legacy settings priced listing price for ``Apartment`` and ``House``
        only; any other property type got no price adjustment. Once
        converted, every non-Apartment type resolves against the house
        thresholds, so legacy configurations with extra property types
        (e.g. ``Townhouse``) will quote differently after loading.
    """

    apartment_low_threshold: float
    apartment_high_threshold: float
    house_low_threshold: float
    house_high_threshold: float
    distance_close_threshold: float
    distance_medium_min: float
    distance_medium_max: float
    distance_far_min: float
    penalty_discount: float
    reward_bonus: float
    distance_close_discount: float
    distance_medium_fee: float
    distance_far_fee: float
    access_standard_fee: float
    access_difficult_fee: float
    access_very_difficult_fee: float

    def to_rate_table(self) -> RateTable:
        return RateTable(
            apartment_ranges=self._price_ranges(
                self.apartment_low_threshold, self.apartment_high_threshold
            ),
            house_ranges=self._price_ranges(
                self.house_low_threshold, self.house_high_threshold
            ),
            distance_ranges=_non_empty(
                (-math.inf, self.distance_close_threshold, -self.distance_close_discount),
                (self.distance_medium_min, self.distance_medium_max, self.distance_medium_fee),
                (self.distance_far_min, math.inf, self.distance_far_fee),
            ),
            access_difficulty_rates={
                AccessDifficulty.STANDARD.value: self.access_standard_fee,
                AccessDifficulty.DIFFICULT.value: self.access_difficult_fee,
                AccessDifficulty.VERY_DIFFICULT.value: self.access_very_difficult_fee,
            },
        )

    def _price_ranges(self, low: float, high: float) -> tuple[RateRange, ...]:
        # Legacy rewards strictly above the high threshold; the next float
        # up keeps that comparison under inclusive-min ranges.
        above_high = math.nextafter(high, math.inf)
        return _non_empty(
            (-math.inf, low, -self.penalty_discount),
            (above_high, math.inf, self.reward_bonus),
        )


_V1_KEYS = frozenset(RateTableV1.model_fields)
_V2_MARKERS = ("apartment_ranges", "house_ranges")


def _from_percent(value: float) -> float:
    """Percentage points to a fraction, scaled in Decimal so 0.7 -> 0.007 exactly."""
    return float(Decimal(str(value)) / 100)


def _non_empty(*bands: tuple[float, float, float]) -> tuple[RateRange, ...]:
    """Build ranges, dropping bands that can never match (min >= max)."""
    return tuple(
        RateRange(min=lo, max=hi, rate=rate) for lo, hi, rate in bands if lo < hi
    )


def load_rate_table(raw: Mapping[str, Any] | RateTable) -> RateTable:
    """Detect the shape of a stored rate configuration and convert it.

    Range lists take precedence when a document carries both shapes.

    Raises:
        RateTableError: If the document matches neither shape or fails
            structural validation (non-numeric bounds, ``min >= max``,
            missing range lists).
    """
    if isinstance(raw, RateTable):
        return raw
    if not isinstance(raw, Mapping):
        msg = f"Rate configuration must be a mapping, got {type(raw).__name__}"
        raise RateTableError(msg)

    model: type[RateTableV1] | type[RateTableV2]
    if any(key in raw for key in _V2_MARKERS):
        model = RateTableV2
    elif _V1_KEYS & raw.keys():
        model = RateTableV1
    else:
        msg = (
            "Unrecognised rate configuration: expected range lists "
            f"({', '.join(_V2_MARKERS)}) or legacy threshold keys"
        )
        raise RateTableError(msg)

    try:
        config = model.model_validate(dict(raw))
    except ValidationError as exc:
        msg = f"Invalid {model.__name__} rate configuration: {exc}"
        raise RateTableError(msg) from exc

    if isinstance(config, RateTableV1):
        logger.info("Converting legacy threshold rate configuration to range table")
    return config.to_rate_table()
