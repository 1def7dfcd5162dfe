"""In-memory noise profile registry."""

from typing import Optional

from .exceptions import ProfileNotFoundError
from .interfaces import NoiseProfileStoreInterface
from .logging_utils import get_logger
from .models import NoiseProfile

logger = get_logger(__name__)


class NoiseProfileStore(NoiseProfileStoreInterface):
    """Plain id -> NoiseProfile mapping owned by the caller.

    There is no locking and no eviction: a profile stays until it is deleted,
    and concurrent writers to the same id follow last-writer-wins.
    """

    def __init__(self) -> None:
        self._profiles: dict[str, NoiseProfile] = {}

    def save(self, profile: NoiseProfile) -> None:
        """Create or replace the profile stored under its id."""
        replaced = profile.id in self._profiles
        self._profiles[profile.id] = profile
        logger.debug(f"{'Updated' if replaced else 'Saved'} noise profile {profile.id}")

    def get(self, profile_id: str) -> Optional[NoiseProfile]:
        """Return the profile, or None when the id is unknown."""
        return self._profiles.get(profile_id)

    def require(self, profile_id: str) -> NoiseProfile:
        """Return the profile or raise ProfileNotFoundError."""
        profile = self._profiles.get(profile_id)
        if profile is None:
            raise ProfileNotFoundError(f"Noise profile {profile_id} not found")
        return profile

    def list(self) -> list[NoiseProfile]:
        """All stored profiles in insertion order."""
        return list(self._profiles.values())

    def delete(self, profile_id: str) -> bool:
        """Remove a profile; returns True if one was removed."""
        removed = self._profiles.pop(profile_id, None) is not None
        if removed:
            logger.debug(f"Deleted noise profile {profile_id}")
        return removed

    def clear(self) -> None:
        """Remove every profile."""
        self._profiles.clear()

    def __contains__(self, profile_id: object) -> bool:
        return profile_id in self._profiles

    def __len__(self) -> int:
        return len(self._profiles)
