"""Repositories for the day planning domain."""

from .tokens import SettingsTokenRepository

__all__ = [
    "SettingsTokenRepository",
]
