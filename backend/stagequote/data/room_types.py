"""Room-type settings: pricing weights and default counts.

Weights are relative to a standard bedroom (1.0). A living room takes
roughly twice the furniture and styling time of a bedroom; bathrooms,
pantries and laundries only take a few accessories.
"""

from __future__ import annotations

from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict, Field

from stagequote.models.property import RoomEntry, RoomMap


class RoomTypeSetting(BaseModel):
    """Configured weight and default count for one room type."""

    model_config = ConfigDict(allow_inf_nan=False)

    weight: float = Field(ge=0)
    default_count: int = Field(default=0, ge=0)


# ---------------------------------------------------------------------------
# Seed data
# ---------------------------------------------------------------------------

DEFAULT_ROOM_TYPES: dict[str, RoomTypeSetting] = {
    "Foyer/Entry": RoomTypeSetting(weight=0.5),
    "Living Room": RoomTypeSetting(weight=2.0),
    "Family Room/Lounge": RoomTypeSetting(weight=1.5),
    "Dining Room": RoomTypeSetting(weight=1.0),
    "Kitchen": RoomTypeSetting(weight=0.5),
    "Master Bedroom": RoomTypeSetting(weight=1.5, default_count=1),
    "Master Wardrobe": RoomTypeSetting(weight=0.5),
    "Standard Bedroom": RoomTypeSetting(weight=1.0),
    "Standard Bathroom": RoomTypeSetting(weight=0.25),
    "Hallway": RoomTypeSetting(weight=0.5),
    "Pantry": RoomTypeSetting(weight=0.25),
    "Laundry": RoomTypeSetting(weight=0.25),
    "Office": RoomTypeSetting(weight=1.0),
    "Study": RoomTypeSetting(weight=1.0),
    "Outdoor (large)": RoomTypeSetting(weight=1.5),
    "Outdoor (small)": RoomTypeSetting(weight=0.5),
}


def build_room_map(
    room_types: Mapping[str, RoomTypeSetting],
    overrides: Mapping[str, RoomEntry] | None = None,
) -> RoomMap:
    """Build a full RoomMap from room-type settings.

    Every configured room type starts at its default count, fully styled
    (100%), at its configured weight. ``overrides`` replace entries by
    name; names not present in the settings are added as given.
    """
    rooms: RoomMap = {
        name: RoomEntry(count=s.default_count, percentage=100.0, weight=s.weight)
        for name, s in room_types.items()
    }
    if overrides:
        rooms.update(overrides)
    return rooms
