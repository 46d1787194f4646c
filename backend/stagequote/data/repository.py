"""Settings repository: the configuration provider for the quote engine."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from stagequote.data.defaults import (
    DEFAULT_ACCESS_DIFFICULTY,
    DEFAULT_PROPERTY_TYPES,
    DEFAULT_RATE_TABLE,
    DEFAULT_ROOM_RATES,
    DEFAULT_STYLING_OPTIONS,
    FALLBACK_ACCESS_DIFFICULTY,
    FALLBACK_ROOM_RATE,
)
from stagequote.data.rate_config import load_rate_table
from stagequote.data.room_types import DEFAULT_ROOM_TYPES, RoomTypeSetting, build_room_map
from stagequote.exceptions import InvalidInputError, SettingsError
from stagequote.models.property import PropertyInput, QuoteRequest, RoomEntry, RoomMap
from stagequote.models.rates import RateTable

logger = logging.getLogger(__name__)

# Keys of the settings document
RATE_CONFIGURATION_KEY = "rate_configuration"
ROOM_TYPES_KEY = "room_types"
PROPERTY_TYPES_KEY = "property_types"


def _string_list(section: Mapping[str, Any], key: str) -> list[str] | None:
    value = section.get(key)
    if value is None:
        return None
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        msg = f"'{PROPERTY_TYPES_KEY}.{key}' must be a list of strings"
        raise SettingsError(msg)
    return value


class SettingsRepository:
    """Repository for quoting settings.

    Wraps an in-memory rate table, room-type settings and the property
    type / styling option lists. Anything not supplied falls back to the
    built-in defaults. The rate table is converted to its canonical form
    when the repository is built, so every quote sees the same snapshot.
    """

    def __init__(
        self,
        rate_table: RateTable | None = None,
        room_types: Mapping[str, RoomTypeSetting] | None = None,
        property_types: list[str] | None = None,
        styling_options: list[str] | None = None,
    ) -> None:
        self._rate_table = rate_table if rate_table is not None else DEFAULT_RATE_TABLE
        self._rate_table_source = "settings" if rate_table is not None else "default"
        self._room_types = dict(room_types if room_types is not None else DEFAULT_ROOM_TYPES)
        self._property_types = list(property_types or DEFAULT_PROPERTY_TYPES)
        self._styling_options = list(styling_options or DEFAULT_STYLING_OPTIONS)

    @classmethod
    def from_settings(cls, settings: Mapping[str, Any]) -> SettingsRepository:
        """Build a repository from a settings document.

        The document may carry ``rate_configuration`` (either stored rate
        shape), ``room_types`` (``{name: {weight, default_count}}``) and
        ``property_types`` (``{property_types: [...], styling_options: [...]}``).

        Raises:
            RateTableError: If the rate configuration is malformed.
            SettingsError: If the room types or property types are malformed.
        """
        rate_table: RateTable | None = None
        raw_rates = settings.get(RATE_CONFIGURATION_KEY)
        if raw_rates is not None:
            rate_table = load_rate_table(raw_rates)
        else:
            logger.warning("No rate configuration in settings; using built-in rate table")

        room_types: dict[str, RoomTypeSetting] | None = None
        raw_rooms = settings.get(ROOM_TYPES_KEY)
        if raw_rooms is not None:
            try:
                room_types = {
                    name: RoomTypeSetting.model_validate(value)
                    for name, value in raw_rooms.items()
                }
            except (AttributeError, ValidationError) as exc:
                msg = f"Invalid room type settings: {exc}"
                raise SettingsError(msg) from exc

        property_types: list[str] | None = None
        styling_options: list[str] | None = None
        raw_types = settings.get(PROPERTY_TYPES_KEY)
        if raw_types is not None:
            if not isinstance(raw_types, Mapping):
                msg = f"'{PROPERTY_TYPES_KEY}' must be a mapping"
                raise SettingsError(msg)
            property_types = _string_list(raw_types, "property_types")
            styling_options = _string_list(raw_types, "styling_options")

        return cls(
            rate_table=rate_table,
            room_types=room_types,
            property_types=property_types,
            styling_options=styling_options,
        )

    @classmethod
    def from_json_file(cls, path: str | Path) -> SettingsRepository:
        """Load a settings document from a JSON file.

        Raises:
            SettingsError: If the file cannot be read or is not a JSON object.
        """
        path = Path(path)
        try:
            settings = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            msg = f"Could not load settings from {path}: {exc}"
            raise SettingsError(msg) from exc
        if not isinstance(settings, dict):
            msg = f"Settings file {path} must contain a JSON object"
            raise SettingsError(msg)

        logger.info("Loaded quoting settings from %s", path)
        return cls.from_settings(settings)

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def get_rate_table(self) -> RateTable:
        return self._rate_table

    @property
    def rate_table_source(self) -> str:
        """'settings' when configured, 'default' for the built-in table."""
        return self._rate_table_source

    @property
    def room_types(self) -> dict[str, RoomTypeSetting]:
        return dict(self._room_types)

    @property
    def property_types(self) -> list[str]:
        return list(self._property_types)

    @property
    def styling_options(self) -> list[str]:
        return list(self._styling_options)

    def default_room_rate(self, property_type: str) -> float:
        return DEFAULT_ROOM_RATES.get(property_type, FALLBACK_ROOM_RATE)

    def default_access_difficulty(self, property_type: str) -> str:
        return DEFAULT_ACCESS_DIFFICULTY.get(property_type, FALLBACK_ACCESS_DIFFICULTY).value

    def build_room_map(self, overrides: Mapping[str, RoomEntry] | None = None) -> RoomMap:
        """Default room map for the configured room types, with overrides."""
        return build_room_map(self._room_types, overrides)

    def build_property_input(self, request: QuoteRequest) -> PropertyInput:
        """Turn a quote request into a fully specified PropertyInput.

        Omitted room rate and access difficulty come from the property
        type defaults; room overrides are merged onto configured rooms.

        Raises:
            InvalidInputError: If an unconfigured room type has no weight.
        """
        rooms = self.build_room_map()
        for name, override in request.rooms.items():
            current = rooms.get(name)
            if current is None:
                if override.weight is None:
                    msg = f"Room type '{name}' is not configured and has no weight"
                    raise InvalidInputError(msg)
                current = RoomEntry(weight=override.weight)
            rooms[name] = current.model_copy(
                update=override.model_dump(exclude_none=True)
            )

        room_rate = request.room_rate
        if room_rate is None:
            room_rate = self.default_room_rate(request.property_type)
        access_difficulty = request.access_difficulty
        if access_difficulty is None:
            access_difficulty = self.default_access_difficulty(request.property_type)

        try:
            return PropertyInput(
                property_type=request.property_type,
                listing_price=request.listing_price,
                distance_from_warehouse=request.distance_from_warehouse,
                access_difficulty=access_difficulty,
                room_rate=room_rate,
                rooms=rooms,
            )
        except ValidationError as exc:
            msg = f"Invalid property input: {exc}"
            raise InvalidInputError(msg) from exc
