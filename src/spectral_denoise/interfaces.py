"""Abstract interfaces for components supplied by the embedding application."""

from abc import ABC, abstractmethod
from collections.abc import Awaitable
from typing import Callable, Optional, Union

from .models import NoiseProfile

# Receives monotonically increasing checkpoint percentages (0-100)
ProgressCallback = Callable[[int], Union[None, Awaitable[None]]]


class NoiseProfileStoreInterface(ABC):
    """Registry of noise profiles keyed by profile id.

    Implementations are not required to be thread safe; concurrent writers
    follow last-writer-wins semantics.
    """

    @abstractmethod
    def save(self, profile: NoiseProfile) -> None:
        """
        Create or replace the profile stored under ``profile.id``.

        Args:
            profile: Profile to store
        """
        pass

    @abstractmethod
    def get(self, profile_id: str) -> Optional[NoiseProfile]:
        """
        Look up a profile.

        Args:
            profile_id: Id of the profile

        Returns:
            The stored profile, or None when the id is unknown
        """
        pass

    @abstractmethod
    def list(self) -> list[NoiseProfile]:
        """
        List all stored profiles in insertion order.

        Returns:
            Stored profiles
        """
        pass

    @abstractmethod
    def delete(self, profile_id: str) -> bool:
        """
        Remove a profile.

        Args:
            profile_id: Id of the profile

        Returns:
            True if a profile was removed
        """
        pass
