"""
TokenRepository stored inside a settings store.

The tokens are serialized as a JSON document under the ``oauth_tokens``
settings key, so whichever settings backend is wired also holds the
calendar credentials.
"""

import logging
from typing import Optional

from pydantic import ValidationError

from dayplan.config import OAUTH_TOKENS_KEY
from dayplan.domain import OAuthTokens
from dayplan.repositories import SettingsRepository, TokenRepository

logger = logging.getLogger(__name__)


class SettingsTokenRepository(TokenRepository):
    def __init__(self, settings_repo: SettingsRepository):
        self.settings_repo = settings_repo

    async def get_tokens(self) -> Optional[OAuthTokens]:
        raw = await self.settings_repo.get(OAUTH_TOKENS_KEY)
        if raw is None:
            return None
        try:
            return OAuthTokens.model_validate_json(raw)
        except ValidationError:
            logger.warning(
                "Stored OAuth tokens are unreadable, treating as "
                "disconnected",
                exc_info=True,
            )
            return None

    async def save_tokens(self, tokens: OAuthTokens) -> None:
        await self.settings_repo.set(
            OAUTH_TOKENS_KEY, tokens.model_dump_json()
        )

    async def clear_tokens(self) -> None:
        await self.settings_repo.delete(OAUTH_TOKENS_KEY)
