"""
Local YAML-based implementation of SettingsRepository.
"""

import logging
import os
from pathlib import Path
from typing import Dict, Optional

import yaml

from dayplan.repositories import SettingsRepository

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS_PATH = "~/.config/dayplan/settings.yaml"


class LocalSettingsRepository(SettingsRepository):
    """
    Local YAML file implementation of SettingsRepository.

    The file holds a flat mapping of setting keys to string values. It is
    re-read on every access so edits made by hand are picked up by the
    next pipeline run.
    """

    def __init__(self, settings_path: Optional[str] = None):
        """
        Initialize with path to the settings file.

        Args:
            settings_path: Path to YAML file, supports ~ expansion. Defaults
                to $DAYPLAN_SETTINGS_PATH or ~/.config/dayplan/settings.yaml
        """
        if settings_path is None:
            settings_path = os.environ.get(
                "DAYPLAN_SETTINGS_PATH", DEFAULT_SETTINGS_PATH
            )
        self.settings_path = Path(settings_path).expanduser()
        logger.debug(
            f"Initialized LocalSettingsRepository with path: "
            f"{self.settings_path}"
        )

    def _load(self) -> Dict[str, str]:
        if not self.settings_path.exists():
            return {}

        with open(self.settings_path, "r") as f:
            # BaseLoader keeps every scalar a string, so an unquoted 17:00
            # is not read as a YAML 1.1 base-60 integer.
            data = yaml.load(f, Loader=yaml.BaseLoader)

        if not data:
            return {}
        if not isinstance(data, dict):
            logger.error(
                f"Settings file must contain a YAML mapping: "
                f"{self.settings_path}"
            )
            return {}
        return {k: v for k, v in data.items() if isinstance(v, str) and v}

    def _dump(self, data: Dict[str, str]) -> None:
        self.settings_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.settings_path, "w") as f:
            yaml.safe_dump(data, f, default_flow_style=False, sort_keys=True)

    async def get(self, key: str) -> Optional[str]:
        return self._load().get(key)

    async def set(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        self._dump(data)
        logger.debug(f"Stored setting {key} in {self.settings_path}")

    async def delete(self, key: str) -> None:
        data = self._load()
        if key in data:
            del data[key]
            self._dump(data)
