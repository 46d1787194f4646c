"""Rate table models consumed by the rate resolver."""

from __future__ import annotations

import math
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_serializer,
    field_validator,
    model_validator,
)


class RateRange(BaseModel):
    """A half-open ``[min, max)`` band and the rate it contributes.

    ``rate`` is a signed decimal fraction (0.05 == +5%). ``min`` and
    ``max`` may be infinite; ``None`` in stored JSON means unbounded on
    that side.
    """

    model_config = ConfigDict(frozen=True)

    min: float
    max: float = math.inf
    rate: float

    @field_validator("min", mode="before")
    @classmethod
    def null_min_means_unbounded(cls, v: Any) -> Any:
        return -math.inf if v is None else v

    @field_validator("max", mode="before")
    @classmethod
    def null_max_means_unbounded(cls, v: Any) -> Any:
        return math.inf if v is None else v

    @field_serializer("min", "max", when_used="json")
    def unbounded_as_null(self, v: float) -> float | None:
        return v if math.isfinite(v) else None

    @field_validator("rate")
    @classmethod
    def rate_must_be_finite(cls, v: float) -> float:
        if not math.isfinite(v):
            msg = "rate must be a finite number"
            raise ValueError(msg)
        return v

    @model_validator(mode="after")
    def min_lt_max(self) -> RateRange:
        if not self.min < self.max:
            msg = f"Must satisfy min < max, got min={self.min} max={self.max}"
            raise ValueError(msg)
        return self

    def contains(self, value: float) -> bool:
        """Inclusive lower bound, exclusive upper bound."""
        return self.min <= value < self.max


class RateTable(BaseModel):
    """Canonical in-memory rate configuration.

    Built once at configuration-load time (see
    :func:`stagequote.data.rate_config.load_rate_table`) and passed
    explicitly to the resolver. Range order is significant: the first
    matching range wins.
    """

    model_config = ConfigDict(frozen=True)

    apartment_ranges: tuple[RateRange, ...]
    house_ranges: tuple[RateRange, ...]
    distance_ranges: tuple[RateRange, ...]
    access_difficulty_rates: dict[str, float] = Field(default_factory=dict)

    @field_validator("access_difficulty_rates")
    @classmethod
    def access_rates_must_be_finite(cls, v: dict[str, float]) -> dict[str, float]:
        for key, rate in v.items():
            if not math.isfinite(rate):
                msg = f"access difficulty rate for '{key}' must be a finite number"
                raise ValueError(msg)
        return v
