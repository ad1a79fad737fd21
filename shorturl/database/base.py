"""Abstract base class for URL shortener storage backends."""

import logging
from abc import ABC, abstractmethod
from typing import Optional, List

from .models import ShortLink, BatchItem


class ShortenerDBBase(ABC):
    """Abstract base class for short link storage.

    Short ids are unique across all owners. Duplicate-URL detection is
    scoped by ``(original_url, owner_id)``; the empty owner id is the
    anonymous namespace.
    """

    # Human readable backend name used in logs and health reports
    backend_name = "base"

    def __init__(self, logger: Optional[logging.Logger] = None):
        """Initialize backend.

        Args:
            logger: Optional logger instance
        """
        self.logger = logger or logging.getLogger(__name__)

    async def connect(self) -> None:
        """Open connections and load persisted state. No-op by default."""
        pass

    @abstractmethod
    async def get(self, short_id: str, owner_id: Optional[str] = None) -> str:
        """Get the original URL for a short id.

        Args:
            short_id: The short id to lookup
            owner_id: Restrict the lookup to this owner; ``None`` searches all owners

        Returns:
            The original URL

        Raises:
            NotFoundError: If the id is unknown in the requested scope
            StoreUnavailableError: On backend failure
        """
        pass

    @abstractmethod
    async def set(self, link: ShortLink) -> None:
        """Store a new short link.

        Args:
            link: The link to store

        Raises:
            URLConflictError: If the URL is already stored for the owner;
                carries the existing short id
            StoreUnavailableError: On backend failure
        """
        pass

    @abstractmethod
    async def set_batch(self, items: List[BatchItem]) -> List[BatchItem]:
        """Store many short links.

        Items whose URL already exists for their owner get the existing id
        written back and ``conflict`` set; the rest are inserted.

        Args:
            items: Items with generated short ids

        Returns:
            The same items, rewritten where a conflict occurred

        Raises:
            StoreUnavailableError: On backend failure
        """
        pass

    @abstractmethod
    async def get_user_urls(self, owner_id: str) -> List[ShortLink]:
        """List every link stored under an owner.

        Args:
            owner_id: The owner to list

        Returns:
            List of links, empty if the owner has none
        """
        pass

    @abstractmethod
    async def ping(self) -> None:
        """Check that the backend is alive.

        Raises:
            StoreUnavailableError: If the backend cannot be reached
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """Release backend resources."""
        pass
