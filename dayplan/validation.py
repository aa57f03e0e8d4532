"""
Wiring checks for the planner's collaborators.

Use cases receive their settings, token, calendar and assignment stores by
constructor injection. Each store is checked against its @runtime_checkable
Protocol at assembly time, so a miswired backend fails when the API or CLI
starts rather than halfway through building a day.
"""

import logging
from typing import List, Type, TypeVar

logger = logging.getLogger(__name__)

P = TypeVar("P")


class RepositoryValidationError(Exception):
    """Raised when a collaborator does not satisfy its Protocol"""

    pass


def _missing_members(repository: object, protocol: type) -> List[str]:
    members = [
        name
        for name in vars(protocol)
        if not name.startswith("_") and callable(getattr(protocol, name))
    ]
    return [name for name in members if not hasattr(repository, name)]


def validate_repository_protocol(
    repository: object, protocol: Type[P]
) -> None:
    """
    Check that ``repository`` implements ``protocol``.

    Raises:
        RepositoryValidationError: naming the methods the store lacks

    Example:
        >>> from dayplan.repos.memory import MemorySettingsRepository
        >>> from dayplan.repositories import SettingsRepository
        >>> validate_repository_protocol(
        ...     MemorySettingsRepository(), SettingsRepository
        ... )
    """
    if isinstance(repository, protocol):
        return

    missing = _missing_members(repository, protocol)
    logger.error(
        f"{type(repository).__name__} cannot be wired as "
        f"{protocol.__name__}",
        extra={
            "repository_type": type(repository).__name__,
            "protocol_name": protocol.__name__,
            "missing_methods": missing,
        },
    )
    raise RepositoryValidationError(
        f"{type(repository).__name__} is not a {protocol.__name__}; "
        f"missing: {', '.join(missing) or 'none (signature mismatch)'}"
    )


def ensure_repository_protocol(repository: object, protocol: Type[P]) -> P:
    """Validate and return a repository typed as the protocol."""
    validate_repository_protocol(repository, protocol)
    return repository  # type: ignore[return-value]
