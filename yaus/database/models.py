"""Data models for the locator store."""

import enum
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional


class ResolveStatus(str, enum.Enum):
    """Outcome of a resolve-or-create call."""

    CREATED = "created"
    EXISTING = "existing"


@dataclass(frozen=True)
class UrlRecord:
    """Represents a stored long URL and its locator."""

    id: int
    created_at: datetime
    long_url: str
    locator: str

    def to_dict(self) -> dict:
        """Convert to a public dictionary (the surrogate id is left out)."""
        return {
            "locator": self.locator,
            "long_url": self.long_url,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    @classmethod
    def from_row(cls, row) -> "UrlRecord":
        """Create from a ``(id, created_at, url, locator)`` database row."""
        created_at = row["created_at"]
        if not isinstance(created_at, datetime):
            created_at = datetime.fromisoformat(created_at)
        if created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=timezone.utc)

        return cls(
            id=row["id"],
            created_at=created_at,
            long_url=row["url"],
            locator=row["locator"],
        )


@dataclass(frozen=True)
class Resolution:
    """Result of :meth:`LocatorStoreBase.resolve_or_create`."""

    locator: str
    status: ResolveStatus
    record: Optional[UrlRecord] = None

    @property
    def created(self) -> bool:
        return self.status is ResolveStatus.CREATED
