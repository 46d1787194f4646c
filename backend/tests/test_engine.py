"""Tests for the quote pipeline — aggregation, base price, rates, finalization."""

from __future__ import annotations

import math
from decimal import Decimal

import pytest

from stagequote.data.defaults import DEFAULT_RATE_TABLE
from stagequote.data.repository import SettingsRepository
from stagequote.engine import (
    ENGINE_VERSION,
    QuoteEngine,
    aggregate_rooms,
    base_price,
    build_room_lines,
    compute_quote,
    finalize,
    match_range,
    resolve_rate,
    resolve_rate_breakdown,
    round_amount,
)
from stagequote.exceptions import InvalidInputError
from stagequote.models.property import PropertyInput, RoomEntry
from stagequote.models.rates import RateRange, RateTable

# ---------------------------------------------------------------------------
# Helper builders
# ---------------------------------------------------------------------------


def _scenario_rooms() -> dict[str, RoomEntry]:
    return {
        "Living Room": RoomEntry(count=1, percentage=100, weight=2),
        "Kitchen": RoomEntry(count=1, percentage=100, weight=0.5),
    }


def _scenario_table(
    access_rates: dict[str, float] | None = None,
) -> RateTable:
    return RateTable(
        apartment_ranges=(
            RateRange(min=0, max=600_000, rate=-0.1),
            RateRange(min=600_000, max=800_000, rate=-0.05),
        ),
        house_ranges=(RateRange(min=0, max=math.inf, rate=0.02),),
        distance_ranges=(RateRange(min=0, max=15, rate=0),),
        access_difficulty_rates=access_rates if access_rates is not None else {"Easy": 0},
    )


def _apartment(
    listing_price: float = 500_000,
    distance: float = 5,
    access: str | None = "Easy",
    room_rate: float = 400,
    rooms: dict[str, RoomEntry] | None = None,
    property_type: str = "Apartment",
) -> PropertyInput:
    return PropertyInput(
        property_type=property_type,
        listing_price=listing_price,
        distance_from_warehouse=distance,
        access_difficulty=access,
        room_rate=room_rate,
        rooms=rooms if rooms is not None else _scenario_rooms(),
    )


@pytest.fixture()
def engine() -> QuoteEngine:
    return QuoteEngine(SettingsRepository())


# ---------------------------------------------------------------------------
# Room aggregation
# ---------------------------------------------------------------------------


class TestAggregateRooms:
    def test_weighted_sum(self) -> None:
        assert aggregate_rooms(_scenario_rooms()) == Decimal("2.5")

    def test_partial_styling_scales_contribution(self) -> None:
        rooms = {"Outdoor (large)": RoomEntry(count=2, percentage=50, weight=1.5)}
        assert aggregate_rooms(rooms) == Decimal("1.5")

    def test_all_zero_counts(self) -> None:
        rooms = {
            "Living Room": RoomEntry(count=0, percentage=100, weight=2),
            "Kitchen": RoomEntry(count=0, percentage=60, weight=0.5),
        }
        assert aggregate_rooms(rooms) == 0

    def test_zero_weight_contributes_nothing(self) -> None:
        rooms = {"Garage": RoomEntry(count=4, percentage=100, weight=0)}
        assert aggregate_rooms(rooms) == 0

    def test_empty_map(self) -> None:
        assert aggregate_rooms({}) == 0

    @pytest.mark.parametrize("k", [0, 1, 2, 7])
    def test_linear_in_counts(self, k: int) -> None:
        rooms = {
            "Living Room": RoomEntry(count=1, percentage=100, weight=2),
            "Standard Bathroom": RoomEntry(count=3, percentage=33, weight=0.25),
            "Pantry": RoomEntry(count=1, percentage=10, weight=0.25),
        }
        scaled = {
            name: entry.model_copy(update={"count": entry.count * k})
            for name, entry in rooms.items()
        }
        assert aggregate_rooms(scaled) == aggregate_rooms(rooms) * k


class TestBasePrice:
    def test_scenario_a(self) -> None:
        assert base_price(Decimal("2.5"), 400) == 1000

    def test_accepts_floats(self) -> None:
        assert base_price(1.75, 350.0) == Decimal("612.5")


# ---------------------------------------------------------------------------
# Rate resolution
# ---------------------------------------------------------------------------


class TestRangeLookup:
    """Inclusive min, exclusive max, first match in declared order."""

    @pytest.fixture()
    def table(self) -> RateTable:
        return RateTable(
            apartment_ranges=(
                RateRange(min=0, max=100, rate=-0.1),
                RateRange(min=100, max=200, rate=0.1),
            ),
            house_ranges=(),
            distance_ranges=(),
        )

    @pytest.mark.parametrize(
        ("price", "expected"),
        [
            (0, Decimal("-0.1")),
            (50, Decimal("-0.1")),
            (99.99, Decimal("-0.1")),
            (100, Decimal("0.1")),
            (199.5, Decimal("0.1")),
            (200, Decimal(0)),
            (250, Decimal(0)),
        ],
    )
    def test_boundaries(self, table: RateTable, price: float, expected: Decimal) -> None:
        prop = _apartment(listing_price=price, access=None, rooms={})
        assert resolve_rate(prop, table) == expected

    def test_overlapping_ranges_first_declared_wins(self) -> None:
        ranges = (
            RateRange(min=0, max=1_000, rate=0.2),
            RateRange(min=0, max=50, rate=-0.3),
        )
        match = match_range(ranges, 10)
        assert match is not None
        assert match.rate == 0.2

    def test_declared_order_not_numeric_order(self) -> None:
        ranges = (
            RateRange(min=500, max=1_000, rate=0.1),
            RateRange(min=0, max=600, rate=-0.1),
        )
        match = match_range(ranges, 550)
        assert match is not None
        assert match.rate == 0.1

    def test_no_match_returns_none(self) -> None:
        assert match_range((), 10) is None


class TestResolveRate:
    def test_scenario_b(self) -> None:
        assert resolve_rate(_apartment(), _scenario_table()) == Decimal("-0.1")

    def test_scenario_c_boundary_resolves_to_second_range(self) -> None:
        prop = _apartment(listing_price=600_000)
        assert resolve_rate(prop, _scenario_table()) == Decimal("-0.05")

    def test_scenario_d_unknown_access_difficulty_contributes_zero(self) -> None:
        prop = _apartment(access="Helicopter Only")
        breakdown = resolve_rate_breakdown(prop, _scenario_table())
        assert breakdown.access_rate == 0
        assert breakdown.total_rate == Decimal("-0.1")

    def test_missing_access_difficulty_contributes_zero(self) -> None:
        prop = _apartment(access=None)
        assert resolve_rate_breakdown(prop, _scenario_table()).access_rate == 0

    def test_non_apartment_types_use_house_ranges(self) -> None:
        for property_type in ("House", "Townhouse"):
            prop = _apartment(property_type=property_type)
            breakdown = resolve_rate_breakdown(prop, _scenario_table())
            assert breakdown.property_rate == Decimal("0.02")

    def test_components_are_additive(self) -> None:
        table = RateTable(
            apartment_ranges=(RateRange(min=0, max=math.inf, rate=-0.1),),
            house_ranges=(),
            distance_ranges=(RateRange(min=0, max=math.inf, rate=0.05),),
            access_difficulty_rates={"Difficult": 0.1},
        )
        prop = _apartment(access="Difficult")
        breakdown = resolve_rate_breakdown(prop, table)
        assert breakdown.property_rate == Decimal("-0.1")
        assert breakdown.distance_rate == Decimal("0.05")
        assert breakdown.access_rate == Decimal("0.1")
        # Exact decimal sum, no float drift
        assert breakdown.total_rate == Decimal("0.05")

    def test_distance_outside_all_ranges(self) -> None:
        prop = _apartment(distance=40)
        breakdown = resolve_rate_breakdown(prop, _scenario_table())
        assert breakdown.distance_rate == 0

    def test_default_table_far_difficult_apartment(self) -> None:
        # < $800k: -5%, >= 30 km: +10%, Difficult: +10%
        prop = _apartment(listing_price=700_000, distance=35, access="Difficult")
        assert resolve_rate(prop, DEFAULT_RATE_TABLE) == Decimal("0.15")


# ---------------------------------------------------------------------------
# Finalization and rounding
# ---------------------------------------------------------------------------


class TestFinalize:
    def test_scenario_b(self) -> None:
        variation, final_quote = finalize(Decimal(1000), Decimal("-0.1"))
        assert variation == Decimal("-100.00")
        assert final_quote == Decimal("900.00")

    def test_zero_rate(self) -> None:
        assert finalize(Decimal("812.40"), Decimal(0)) == (Decimal("0.00"), Decimal("812.40"))

    def test_rounds_half_up(self) -> None:
        # 0.05 * 10.10 = 0.505 -> 0.51
        variation, final_quote = finalize(Decimal("10.10"), Decimal("0.05"))
        assert variation == Decimal("0.51")
        assert final_quote == Decimal("10.61")

    def test_final_is_exact_sum(self) -> None:
        variation, final_quote = finalize(Decimal("1234.57"), Decimal("0.133"))
        assert final_quote == Decimal("1234.57") + variation

    def test_round_amount_has_no_negative_zero(self) -> None:
        assert str(round_amount(Decimal("-0.001"))) == "0.00"


class TestComputeQuote:
    def test_scenario_a(self) -> None:
        result = compute_quote(_apartment(), _scenario_table(access_rates={}))
        assert result.equivalent_rooms == Decimal("2.5")
        assert result.base_quote == Decimal("1000")

    def test_scenario_a_and_b(self) -> None:
        result = compute_quote(_apartment(), _scenario_table())
        assert result.equivalent_rooms == Decimal("2.50")
        assert result.base_quote == Decimal("1000.00")
        assert result.variation == Decimal("-100.00")
        assert result.final_quote == Decimal("900.00")

    def test_zero_rooms_zero_quote(self) -> None:
        rooms = {"Living Room": RoomEntry(count=0, percentage=100, weight=2)}
        result = compute_quote(_apartment(rooms=rooms), _scenario_table())
        assert result.equivalent_rooms == 0
        assert result.final_quote == 0

    def test_idempotent(self) -> None:
        prop = _apartment(listing_price=650_000, distance=3.3)
        table = _scenario_table()
        assert compute_quote(prop, table) == compute_quote(prop, table)

    def test_base_plus_variation_is_final(self) -> None:
        rooms = {
            "Living Room": RoomEntry(count=1, percentage=75, weight=2),
            "Standard Bathroom": RoomEntry(count=3, percentage=33, weight=0.25),
        }
        prop = _apartment(rooms=rooms, room_rate=333.33, listing_price=620_000)
        result = compute_quote(prop, _scenario_table())
        assert result.base_quote + result.variation == result.final_quote

    def test_equivalent_rooms_rounded_to_two_places(self) -> None:
        rooms = {"Standard Bathroom": RoomEntry(count=1, percentage=33, weight=0.25)}
        result = compute_quote(_apartment(rooms=rooms), _scenario_table())
        # 0.0825 -> 0.08; base uses the unrounded count: 0.0825 * 400 = 33
        assert result.equivalent_rooms == Decimal("0.08")
        assert result.base_quote == Decimal("33.00")

    def test_accepts_mapping_input(self) -> None:
        raw = {
            "property_type": "Apartment",
            "listing_price": 500_000,
            "distance_from_warehouse": 5,
            "access_difficulty": "Easy",
            "room_rate": 400,
            "rooms": {
                "Living Room": {"count": 1, "percentage": 100, "weight": 2},
                "Kitchen": {"count": 1, "percentage": 100, "weight": 0.5},
            },
        }
        assert compute_quote(raw, _scenario_table()).final_quote == Decimal("900")

    @pytest.mark.parametrize(
        ("field", "value"),
        [
            ("room_rate", -400),
            ("room_rate", 0),
            ("listing_price", -1),
            ("distance_from_warehouse", float("nan")),
            ("listing_price", float("inf")),
        ],
    )
    def test_invalid_property_fields_raise(self, field: str, value: float) -> None:
        raw = _apartment().model_dump()
        raw[field] = value
        with pytest.raises(InvalidInputError):
            compute_quote(raw, _scenario_table())

    @pytest.mark.parametrize(
        "room",
        [
            {"count": -1, "percentage": 100, "weight": 1},
            {"count": 1, "percentage": 101, "weight": 1},
            {"count": 1, "percentage": -5, "weight": 1},
            {"count": 1, "percentage": 100, "weight": float("inf")},
        ],
    )
    def test_invalid_rooms_raise(self, room: dict[str, float]) -> None:
        raw = _apartment().model_dump()
        raw["rooms"] = {"Study": room}
        with pytest.raises(InvalidInputError, match="Invalid property input"):
            compute_quote(raw, _scenario_table())


class TestRoomLines:
    def test_only_rooms_with_counts(self) -> None:
        rooms = {
            "Living Room": RoomEntry(count=1, percentage=100, weight=2),
            "Pantry": RoomEntry(count=0, percentage=100, weight=0.25),
            "Outdoor (small)": RoomEntry(count=2, percentage=50, weight=0.5),
        }
        lines = build_room_lines(_apartment(rooms=rooms, room_rate=350))
        assert [line.room_type for line in lines] == ["Living Room", "Outdoor (small)"]
        assert lines[0].amount == Decimal("700.00")
        assert lines[1].equivalent_rooms == Decimal("0.50")
        assert lines[1].amount == Decimal("175.00")


# ---------------------------------------------------------------------------
# QuoteEngine
# ---------------------------------------------------------------------------


class TestQuoteEngine:
    def test_uses_repository_table(self, engine: QuoteEngine) -> None:
        # Default table: < $800k apartment -5%, < 10 km -5%, Easy 0
        estimate = engine.quote(_apartment())
        assert estimate.rate_breakdown.total_rate == Decimal("-0.1")
        assert estimate.result.final_quote == Decimal("900.00")
        assert estimate.metadata.rate_table_source == "default"
        assert estimate.metadata.engine_version == ENGINE_VERSION
        assert estimate.metadata.rounding == "2dp ROUND_HALF_UP"

    def test_explicit_table_overrides_repository(self, engine: QuoteEngine) -> None:
        estimate = engine.quote(_apartment(listing_price=700_000), rate_table=_scenario_table())
        assert estimate.result.variation == Decimal("-50.00")
        assert estimate.metadata.rate_table_source == "explicit"

    def test_carries_request_metadata(self, engine: QuoteEngine) -> None:
        estimate = engine.quote(
            _apartment(), styling="Partial", property_address="1 Harbour St"
        )
        assert estimate.styling == "Partial"
        assert estimate.property_address == "1 Harbour St"
        assert len(estimate.room_lines) == 2

    def test_invalid_mapping_raises(self, engine: QuoteEngine) -> None:
        with pytest.raises(InvalidInputError):
            engine.quote({"property_type": "House", "room_rate": -1})
