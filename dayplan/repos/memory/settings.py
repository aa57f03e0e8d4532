"""
In-memory implementation of the SettingsRepository protocol.
"""

import logging
from typing import Dict, Optional

from dayplan.repositories import SettingsRepository

logger = logging.getLogger(__name__)


class MemorySettingsRepository(SettingsRepository):
    """
    Settings held in a dict, for tests and the demo API.
    """

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._settings: Dict[str, str] = dict(initial or {})
        logger.debug(
            f"Initialized MemorySettingsRepository with "
            f"{len(self._settings)} settings"
        )

    async def get(self, key: str) -> Optional[str]:
        return self._settings.get(key)

    async def set(self, key: str, value: str) -> None:
        self._settings[key] = value

    async def delete(self, key: str) -> None:
        self._settings.pop(key, None)

    def clear(self) -> None:
        self._settings.clear()
