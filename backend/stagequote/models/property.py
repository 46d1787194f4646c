"""Property domain models: the input to the quote engine."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


class RoomEntry(BaseModel):
    """One room type's contribution to the equivalent room count.

    ``count`` is the number of instances styled, ``percentage`` the share
    of a full room actually styled (partial styling), and ``weight`` the
    pricing weight relative to a baseline room.
    """

    model_config = ConfigDict(allow_inf_nan=False, validate_assignment=True)

    count: int = Field(default=0, ge=0)
    percentage: float = Field(default=100.0, ge=0, le=100)
    weight: float = Field(default=1.0, ge=0)


RoomMap = dict[str, RoomEntry]


class PropertyInput(BaseModel):
    """Input record describing a property to be quoted.

    ``property_type`` and ``access_difficulty`` are plain strings so that
    property types and difficulty levels configured outside the built-in
    enums still flow through to the rate tables.
    """

    model_config = ConfigDict(allow_inf_nan=False, validate_assignment=True)

    property_type: str = Field(min_length=1)
    listing_price: float = Field(default=0.0, ge=0)
    distance_from_warehouse: float = Field(default=0.0, ge=0)
    access_difficulty: str | None = None
    room_rate: float = Field(gt=0)
    rooms: RoomMap = Field(default_factory=dict)

    @field_validator("rooms")
    @classmethod
    def room_names_must_not_be_blank(cls, v: RoomMap) -> RoomMap:
        for name in v:
            if not name.strip():
                msg = "room type names must not be blank"
                raise ValueError(msg)
        return v


class RoomOverride(BaseModel):
    """Caller-supplied changes to one configured room type.

    Unset fields keep the configured value. Room types that are not
    configured must carry a ``weight``.
    """

    model_config = ConfigDict(allow_inf_nan=False, validate_assignment=True)

    count: int | None = Field(default=None, ge=0)
    percentage: float | None = Field(default=None, ge=0, le=100)
    weight: float | None = Field(default=None, ge=0)


class QuoteRequest(BaseModel):
    """A quote request as submitted by a form or API client.

    Omitted ``room_rate`` and ``access_difficulty`` are filled from the
    property-type defaults; ``rooms`` holds overrides applied on top of
    the configured room types.
    """

    model_config = ConfigDict(allow_inf_nan=False, validate_assignment=True)

    property_type: str = Field(min_length=1)
    listing_price: float = Field(default=0.0, ge=0)
    distance_from_warehouse: float = Field(default=0.0, ge=0)
    access_difficulty: str | None = None
    room_rate: float | None = Field(default=None, gt=0)
    rooms: dict[str, RoomOverride] = Field(default_factory=dict)
    styling: str | None = None
    property_address: str | None = None
