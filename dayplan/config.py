"""
Working configuration backed by the settings store.

Settings are stored as strings under fixed keys. Missing keys fall back to
the WorkingConfiguration defaults; values that cannot be parsed raise
ConfigurationError rather than silently planning with a wrong day.
"""

import logging
from typing import Any, Dict

from pydantic import ValidationError

from dayplan.domain import WorkingConfiguration
from dayplan.errors import ConfigurationError
from dayplan.repositories import SettingsRepository

logger = logging.getLogger(__name__)

WORK_START_KEY = "work_start"
WORK_END_KEY = "work_end"
POMODORO_DURATION_KEY = "pomodoro_duration"
REST_DURATION_KEY = "rest_duration"
LUNCH_START_KEY = "lunch_start"
LUNCH_DURATION_KEY = "lunch_duration"
GOOGLE_CLIENT_ID_KEY = "google_client_id"
GOOGLE_CLIENT_SECRET_KEY = "google_client_secret"
OAUTH_TOKENS_KEY = "oauth_tokens"

# Setting key -> WorkingConfiguration field
CONFIGURATION_KEYS = {
    WORK_START_KEY: "work_start",
    WORK_END_KEY: "work_end",
    POMODORO_DURATION_KEY: "pomodoro_duration",
    REST_DURATION_KEY: "rest_duration",
    LUNCH_START_KEY: "lunch_start",
    LUNCH_DURATION_KEY: "lunch_duration",
}


async def load_working_configuration(
    settings_repo: SettingsRepository,
) -> WorkingConfiguration:
    """Read the working configuration from the settings store."""
    values: Dict[str, Any] = {}
    for key, field in CONFIGURATION_KEYS.items():
        raw = await settings_repo.get(key)
        if raw is not None and raw.strip():
            values[field] = raw.strip()

    try:
        configuration = WorkingConfiguration(**values)
    except ValidationError as e:
        logger.error(
            "Stored working configuration is invalid",
            extra={"settings": values, "error_count": e.error_count()},
        )
        raise ConfigurationError(
            f"Invalid working configuration in settings: {e}"
        ) from e

    logger.debug(
        "Loaded working configuration",
        extra={"configuration": configuration.model_dump()},
    )
    return configuration


async def save_working_configuration(
    settings_repo: SettingsRepository, configuration: WorkingConfiguration
) -> None:
    """Write every configuration field back to the settings store."""
    data = configuration.model_dump()
    for key, field in CONFIGURATION_KEYS.items():
        await settings_repo.set(key, str(data[field]))
    logger.info("Saved working configuration", extra={"configuration": data})
