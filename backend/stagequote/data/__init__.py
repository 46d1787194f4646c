"""Settings data layer for the StageQuote engine."""

from stagequote.data.rate_config import RateTableV1, RateTableV2, load_rate_table
from stagequote.data.repository import SettingsRepository
from stagequote.data.room_types import RoomTypeSetting

__all__ = [
    "RateTableV1",
    "RateTableV2",
    "RoomTypeSetting",
    "SettingsRepository",
    "load_rate_table",
]
