"""Data models for URL shortener."""

from dataclasses import dataclass, field
from typing import List


@dataclass
class ShortLink:
    """A short id mapped to its original URL inside an owner namespace."""

    short_id: str
    original_url: str
    owner_id: str = ""

    def to_record(self, uuid: str) -> dict:
        """Convert to a file-backend record.

        Args:
            uuid: Record number written to the ``uuid`` field

        Returns:
            Dictionary in the persisted record layout
        """
        return {
            "uuid": uuid,
            "short_url": self.short_id,
            "original_url": self.original_url,
            "user_id": self.owner_id,
        }

    @classmethod
    def from_record(cls, data: dict) -> "ShortLink":
        """Create from a file-backend record."""
        return cls(
            short_id=data["short_url"],
            original_url=data["original_url"],
            owner_id=data.get("user_id") or "",
        )


@dataclass
class BatchItem:
    """One entry of a batch insert.

    ``short_id`` is rewritten by the store to the pre-existing id when the
    URL was already stored for the owner, and ``conflict`` is set.
    """

    correlation_id: str
    original_url: str
    short_id: str = ""
    owner_id: str = ""
    conflict: bool = False

    def to_link(self) -> ShortLink:
        return ShortLink(self.short_id, self.original_url, self.owner_id)


@dataclass
class ShortenResult:
    """Outcome of a single shorten call."""

    short_id: str
    original_url: str
    conflict: bool = False


@dataclass
class BatchResult:
    """Outcome of a batch shorten call."""

    items: List[BatchItem] = field(default_factory=list)

    @property
    def conflict(self) -> bool:
        """True when at least one item returned a pre-existing id."""
        return any(item.conflict for item in self.items)
