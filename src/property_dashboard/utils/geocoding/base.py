"""
Abstract base classes for the geocoding system.

These define the interfaces that all concrete implementations must follow.
"""

from abc import ABC, abstractmethod
from typing import Optional

from .models import Coords


class GeocodingService(ABC):
    """
    Abstract base for external geocoding services.

    A service turns a free-text address into a single best coordinate,
    or None when the address is not found.
    """

    @property
    def available(self) -> bool:
        """Whether the service can be called at all."""
        return True

    @abstractmethod
    def lookup(self, address: str) -> Optional[Coords]:
        """
        Look up a single address.

        Args:
            address: Free-text address

        Returns:
            Coords, or None for not-found/ambiguous results

        Raises:
            GeocodingError on transport failures
        """
        pass


class KeyValueStore(ABC):
    """
    Abstract base for durable key-value storage.

    Stores hold serialized string values under named keys and survive
    process restarts.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return the stored value, or None if the key is absent."""
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store a value, replacing any previous one."""
        pass

    @abstractmethod
    def remove(self, key: str) -> None:
        """Delete a key. Missing keys are ignored."""
        pass

    def close(self) -> None:
        """Close connections/cleanup resources."""
        pass


class RateLimiter(ABC):
    """
    Abstract base for pacing outbound geocoding requests.
    """

    @abstractmethod
    def wait(self) -> None:
        """Block until it's safe to make another request."""
        pass
