"""Quote output models for the StageQuote engine."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Annotated, Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PlainSerializer,
    computed_field,
    model_validator,
)

from stagequote.models.property import PropertyInput  # noqa: TCH001 (pydantic resolves at runtime)

# Decimal in Python, plain number in JSON
Amount = Annotated[
    Decimal, PlainSerializer(float, return_type=float, when_used="json")
]


class QuoteResult(BaseModel):
    """The four priced figures of a quote, rounded to 2 decimal places.

    ``final_quote`` is always exactly ``base_quote + variation``.
    """

    model_config = ConfigDict(frozen=True)

    equivalent_rooms: Amount
    base_quote: Amount
    variation: Amount
    final_quote: Amount

    @model_validator(mode="after")
    def final_is_base_plus_variation(self) -> QuoteResult:
        if self.final_quote != self.base_quote + self.variation:
            msg = (
                f"Must satisfy final_quote == base_quote + variation, "
                f"got {self.final_quote} != {self.base_quote} + {self.variation}"
            )
            raise ValueError(msg)
        return self


class RateBreakdown(BaseModel):
    """Contribution of each pricing dimension to the total rate."""

    model_config = ConfigDict(frozen=True)

    property_rate: Amount
    distance_rate: Amount
    access_rate: Amount

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total_rate(self) -> Amount:
        return self.property_rate + self.distance_rate + self.access_rate


class RoomLine(BaseModel):
    """Priced line for one room type with a non-zero count."""

    room_type: str
    count: int
    percentage: float
    weight: float
    equivalent_rooms: Amount
    amount: Amount


class QuoteMetadata(BaseModel):
    """Metadata about the quoting run."""

    engine_version: str
    rounding: str
    rate_table_source: str


class QuoteEstimate(BaseModel):
    """Complete quote output: input, priced result and breakdowns."""

    property_input: PropertyInput
    result: QuoteResult
    rate_breakdown: RateBreakdown
    room_lines: list[RoomLine]
    metadata: QuoteMetadata
    styling: str | None = None
    property_address: str | None = None
    generated_at: datetime = Field(default_factory=datetime.now)

    def to_summary_dict(self) -> dict[str, Any]:
        """Produce a flat dict of display strings for a quote screen or printout."""
        from stagequote.formatting import format_currency, format_rate, format_variation

        prop = self.property_input
        return {
            "property_type": prop.property_type,
            "styling": self.styling,
            "property_address": self.property_address,
            "distance_formatted": f"{prop.distance_from_warehouse:g} km",
            "listing_price_formatted": format_currency(prop.listing_price),
            "access_difficulty": prop.access_difficulty,
            "room_rate_formatted": format_currency(prop.room_rate),
            "rooms": [
                {
                    "label": f"{line.room_type} ({line.count} × {line.percentage:g}%)",
                    "amount_formatted": format_currency(line.amount),
                }
                for line in self.room_lines
            ],
            "equivalent_rooms": float(self.result.equivalent_rooms),
            "base_quote_formatted": format_currency(self.result.base_quote),
            "total_rate_formatted": format_rate(self.rate_breakdown.total_rate),
            "variation_formatted": format_variation(self.result.variation),
            "final_quote_formatted": format_currency(self.result.final_quote),
            "generated_at_formatted": self.generated_at.strftime("%Y-%m-%d %H:%M"),
        }

    def to_submission_dict(self) -> dict[str, Any]:
        """Produce the ``{formData, calculations}`` payload for webhook relays.

        Keys are camelCase to match what downstream record stores expect.
        """
        prop = self.property_input
        return {
            "formData": {
                "propertyType": prop.property_type,
                "styling": self.styling,
                "propertyAddress": self.property_address or "",
                "distanceFromWarehouse": prop.distance_from_warehouse,
                "listingPrice": prop.listing_price,
                "accessDifficulty": prop.access_difficulty,
                "roomRate": prop.room_rate,
                "rooms": {
                    name: entry.model_dump() for name, entry in prop.rooms.items()
                },
            },
            "calculations": {
                "equivalentRooms": float(self.result.equivalent_rooms),
                "baseQuote": float(self.result.base_quote),
                "variation": float(self.result.variation),
                "finalQuote": float(self.result.final_quote),
            },
        }
