"""Dependency injection for FastAPI endpoints."""

from __future__ import annotations

import logging
import os

from stagequote.data.repository import SettingsRepository
from stagequote.engine import QuoteEngine
from stagequote.factory import create_default_engine

logger = logging.getLogger(__name__)

SETTINGS_PATH_ENV = "STAGEQUOTE_SETTINGS_PATH"


def create_engine() -> QuoteEngine:
    """Create a QuoteEngine from environment configuration.

    Reads the settings document named by STAGEQUOTE_SETTINGS_PATH. When
    the variable is unset the built-in settings are used.

    Raises:
        SettingsError: If the settings file cannot be loaded.
        RateTableError: If its rate configuration is malformed.
    """
    settings_path = os.environ.get(SETTINGS_PATH_ENV, "")
    if not settings_path:
        logger.info("%s not set; using built-in quoting settings", SETTINGS_PATH_ENV)
        return create_default_engine()

    repository = SettingsRepository.from_json_file(settings_path)
    return QuoteEngine(repository)
