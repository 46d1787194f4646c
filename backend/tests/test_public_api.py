"""Tests for the public API surface of the stagequote package.

Verifies that consumers can import everything they need from the top-level
``stagequote`` package, use ``create_default_engine`` for quick setup, and
round-trip estimates through JSON serialization.
"""

from __future__ import annotations

import json
from decimal import Decimal

import pytest

from stagequote import (
    AccessDifficulty,
    InvalidInputError,
    PropertyInput,
    PropertyType,
    QuoteEngine,
    QuoteEstimate,
    QuoteRequest,
    RateTableError,
    RoomEntry,
    SettingsRepository,
    StageQuoteError,
    compute_quote,
    create_default_engine,
    load_rate_table,
)


def _sample_input() -> PropertyInput:
    return PropertyInput(
        property_type=PropertyType.HOUSE,
        listing_price=1_600_000,
        distance_from_warehouse=42,
        access_difficulty=AccessDifficulty.VERY_DIFFICULT,
        room_rate=400,
        rooms={
            "Living Room": RoomEntry(count=1, percentage=100, weight=2),
            "Master Bedroom": RoomEntry(count=1, percentage=100, weight=1.5),
            "Standard Bedroom": RoomEntry(count=2, percentage=100, weight=1),
        },
    )


class TestPublicImports:
    def test_errors_share_base(self) -> None:
        assert issubclass(InvalidInputError, StageQuoteError)
        assert issubclass(RateTableError, StageQuoteError)

    def test_factory_returns_engine(self) -> None:
        engine = create_default_engine()
        assert isinstance(engine, QuoteEngine)
        assert isinstance(engine.repository, SettingsRepository)


class TestEndToEnd:
    def test_default_engine_quote(self) -> None:
        estimate = create_default_engine().quote(_sample_input())
        # 5.5 rooms at $400; > $1.5M house +5%, >= 30 km +10%, Very Difficult +20%
        assert estimate.result.base_quote == Decimal("2200.00")
        assert estimate.rate_breakdown.total_rate == Decimal("0.35")
        assert estimate.result.variation == Decimal("770.00")
        assert estimate.result.final_quote == Decimal("2970.00")

    def test_quote_request(self) -> None:
        estimate = create_default_engine().quote_request(QuoteRequest(property_type="House"))
        # Only the Master Bedroom is counted by default
        assert estimate.result.equivalent_rooms == Decimal("1.5")
        assert estimate.result.base_quote == Decimal("600")

    def test_compute_quote_with_loaded_table(self) -> None:
        table = load_rate_table({
            "apartment_ranges": [],
            "house_ranges": [{"min": 1_500_000, "max": None, "rate": 10}],
            "distance_ranges": [],
            "rate_unit": "percent",
        })
        result = compute_quote(_sample_input(), table)
        assert result.variation == Decimal("220.00")
        assert result.final_quote == Decimal("2420.00")

    def test_estimate_json_round_trip(self) -> None:
        estimate = create_default_engine().quote(_sample_input(), styling="Full")
        payload = json.loads(estimate.model_dump_json())
        restored = QuoteEstimate.model_validate(payload)
        assert restored.result == estimate.result
        assert restored.property_input == estimate.property_input

    def test_bad_mapping_raises_typed_error(self) -> None:
        with pytest.raises(StageQuoteError):
            create_default_engine().quote({"property_type": "House"})
