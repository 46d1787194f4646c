"""Core quote pricing engine for the StageQuote library.

A quote is produced in four steps, each a pure function of its inputs:

1. **Room aggregation** — reduce the room map to an *equivalent room count*:
   ``Σ count × (percentage / 100) × weight``.
2. **Base price** — multiply the equivalent room count by the room rate.
3. **Rate resolution** — add up the listing-price, distance and access
   difficulty modifiers from the rate table. Range tables are scanned in
   declared order; the first ``[min, max)`` band containing the value wins.
   A dimension with no matching band or key contributes 0.
4. **Finalization** — ``variation = total_rate × base_quote`` and
   ``final_quote = base_quote + variation``.

Arithmetic is done in :class:`~decimal.Decimal`. Every figure in the
result is rounded to 2 decimal places, ROUND_HALF_UP; the final quote is
the exact sum of the rounded base quote and rounded variation.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from decimal import ROUND_HALF_UP, Decimal
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from stagequote.exceptions import InvalidInputError
from stagequote.models.enums import PropertyType
from stagequote.models.property import PropertyInput, QuoteRequest, RoomEntry
from stagequote.models.quote import (
    QuoteEstimate,
    QuoteMetadata,
    QuoteResult,
    RateBreakdown,
    RoomLine,
)

if TYPE_CHECKING:
    from stagequote.data.repository import SettingsRepository
    from stagequote.models.rates import RateRange, RateTable

logger = logging.getLogger(__name__)

ENGINE_VERSION = "0.1.0"
ROUNDING_MODE = "2dp ROUND_HALF_UP"

_CENT = Decimal("0.01")
_ZERO = Decimal(0)


def to_decimal(value: float | Decimal) -> Decimal:
    """Convert via the shortest repr so 0.1 becomes Decimal('0.1')."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round_amount(value: float | Decimal) -> Decimal:
    """Round to 2 decimal places, half up."""
    # + _ZERO drops negative zero
    return to_decimal(value).quantize(_CENT, rounding=ROUND_HALF_UP) + _ZERO


# ---------------------------------------------------------------------------
# Pipeline steps
# ---------------------------------------------------------------------------


def aggregate_rooms(rooms: Mapping[str, RoomEntry]) -> Decimal:
    """Reduce a room map to its (unrounded) equivalent room count."""
    total = _ZERO
    for entry in rooms.values():
        total += (
            Decimal(entry.count)
            * to_decimal(entry.percentage)
            / 100
            * to_decimal(entry.weight)
        )
    return total


def base_price(equivalent_rooms: float | Decimal, room_rate: float | Decimal) -> Decimal:
    """Unrounded base quote: equivalent rooms × room rate."""
    return to_decimal(equivalent_rooms) * to_decimal(room_rate)


def match_range(ranges: Sequence[RateRange], value: float) -> RateRange | None:
    """Return the first range containing ``value``, in declared order."""
    for rate_range in ranges:
        if rate_range.contains(value):
            return rate_range
    return None


def resolve_rate_breakdown(
    property_input: PropertyInput, rate_table: RateTable
) -> RateBreakdown:
    """Resolve each rate component for a property against a rate table."""
    if property_input.property_type == PropertyType.APARTMENT:
        price_ranges = rate_table.apartment_ranges
    else:
        price_ranges = rate_table.house_ranges

    price_match = match_range(price_ranges, property_input.listing_price)
    distance_match = match_range(
        rate_table.distance_ranges, property_input.distance_from_warehouse
    )

    access_rate = _ZERO
    if property_input.access_difficulty is not None:
        rate = rate_table.access_difficulty_rates.get(property_input.access_difficulty)
        if rate is not None:
            access_rate = to_decimal(rate)

    breakdown = RateBreakdown(
        property_rate=to_decimal(price_match.rate) if price_match else _ZERO,
        distance_rate=to_decimal(distance_match.rate) if distance_match else _ZERO,
        access_rate=access_rate,
    )
    logger.debug(
        "Resolved rates for %s: property=%s distance=%s access=%s",
        property_input.property_type,
        breakdown.property_rate,
        breakdown.distance_rate,
        breakdown.access_rate,
    )
    return breakdown


def resolve_rate(property_input: PropertyInput, rate_table: RateTable) -> Decimal:
    """Total signed rate modifier for a property (e.g. -0.1 for -10%)."""
    return resolve_rate_breakdown(property_input, rate_table).total_rate


def finalize(
    base_quote: float | Decimal, total_rate: float | Decimal
) -> tuple[Decimal, Decimal]:
    """Apply a rate to a base quote.

    Returns:
        ``(variation, final_quote)``, both rounded to 2 decimal places,
        with ``final_quote == round(base_quote) + variation`` exactly.
    """
    base = round_amount(base_quote)
    variation = round_amount(to_decimal(total_rate) * base)
    return variation, base + variation


def coerce_property_input(value: PropertyInput | Mapping[str, Any]) -> PropertyInput:
    """Validate a raw mapping into a PropertyInput.

    Raises:
        InvalidInputError: If any field is missing, negative, out of range
            or non-finite.
    """
    if isinstance(value, PropertyInput):
        return value
    try:
        return PropertyInput.model_validate(value)
    except ValidationError as exc:
        msg = f"Invalid property input: {exc}"
        raise InvalidInputError(msg) from exc


def compute_quote(
    property_input: PropertyInput | Mapping[str, Any], rate_table: RateTable
) -> QuoteResult:
    """Price a property against an explicit rate table."""
    prop = coerce_property_input(property_input)
    equivalent_rooms = aggregate_rooms(prop.rooms)
    base_quote = round_amount(base_price(equivalent_rooms, prop.room_rate))
    variation, final_quote = finalize(base_quote, resolve_rate(prop, rate_table))
    return QuoteResult(
        equivalent_rooms=round_amount(equivalent_rooms),
        base_quote=base_quote,
        variation=variation,
        final_quote=final_quote,
    )


def build_room_lines(property_input: PropertyInput) -> list[RoomLine]:
    """Price each room type with a non-zero count, in room map order."""
    room_rate = to_decimal(property_input.room_rate)
    lines: list[RoomLine] = []
    for name, entry in property_input.rooms.items():
        if entry.count <= 0:
            continue
        equivalent = aggregate_rooms({name: entry})
        lines.append(RoomLine(
            room_type=name,
            count=entry.count,
            percentage=entry.percentage,
            weight=entry.weight,
            equivalent_rooms=round_amount(equivalent),
            amount=round_amount(equivalent * room_rate),
        ))
    return lines


class QuoteEngine:
    """Produces QuoteEstimates using the settings held by a repository.

    The repository's rate table is read once per quote and passed
    explicitly down the pipeline; callers may also supply their own.

    Args:
        repository: Settings repository providing the rate table, room
            types and property-type defaults.

    Example::

        from stagequote.data.repository import SettingsRepository

        engine = QuoteEngine(SettingsRepository())
        estimate = engine.quote(property_input)
    """

    def __init__(self, repository: SettingsRepository) -> None:
        self._repository = repository

    @property
    def repository(self) -> SettingsRepository:
        return self._repository

    def quote(
        self,
        property_input: PropertyInput | Mapping[str, Any],
        *,
        rate_table: RateTable | None = None,
        styling: str | None = None,
        property_address: str | None = None,
    ) -> QuoteEstimate:
        """Produce a quote estimate for a fully specified property.

        Raises:
            InvalidInputError: If ``property_input`` is a mapping that fails
                validation.
        """
        prop = coerce_property_input(property_input)
        if rate_table is None:
            table = self._repository.get_rate_table()
            source = self._repository.rate_table_source
        else:
            table = rate_table
            source = "explicit"

        result = compute_quote(prop, table)
        return QuoteEstimate(
            property_input=prop,
            result=result,
            rate_breakdown=resolve_rate_breakdown(prop, table),
            room_lines=build_room_lines(prop),
            metadata=QuoteMetadata(
                engine_version=ENGINE_VERSION,
                rounding=ROUNDING_MODE,
                rate_table_source=source,
            ),
            styling=styling,
            property_address=property_address,
        )

    def quote_request(self, request: QuoteRequest) -> QuoteEstimate:
        """Fill a request's omitted fields from settings, then quote it."""
        prop = self._repository.build_property_input(request)
        return self.quote(
            prop,
            styling=request.styling,
            property_address=request.property_address,
        )
