"""Record models for migration data."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from datetime import datetime, timezone


# Payload in the shape the destination API expects.
DestinationRecord = Dict[str, Any]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class SourceRecord:
    """A record fetched from the source system."""
    id: str
    entity: str
    data: Dict[str, Any]
    extracted_at: datetime = field(default_factory=_utcnow, compare=False)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "id": self.id,
            "entity": self.entity,
            "data": self.data,
            "extracted_at": self.extracted_at.isoformat(),
        }

    def get(self, key: str, default: Any = None) -> Any:
        """Get a top-level field value."""
        return self.data.get(key, default)

    def get_field(self, path: str, default: Any = None) -> Any:
        """Get a field value by dot-notation path (e.g., 'Owner.name')."""
        value: Any = self.data
        for part in path.split("."):
            if isinstance(value, dict):
                value = value.get(part)
            else:
                return default
            if value is None:
                return default
        return value


@dataclass
class Batch:
    """A contiguous slice of source records, written as one unit."""
    index: int  # 0-based
    start: int  # offset of the first record within the full set
    records: List[SourceRecord] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.records)

    @property
    def number(self) -> int:
        """1-based batch number used in logs."""
        return self.index + 1

    @property
    def first_position(self) -> int:
        return self.start + 1

    @property
    def last_position(self) -> int:
        return self.start + len(self.records)


@dataclass
class BatchResult:
    """Completion record for one written batch."""
    index: int
    count: int
    first_position: int
    last_position: int
    dry_run: bool = False
    completed_at: datetime = field(default_factory=_utcnow)
    response_data: Optional[Any] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "batch_number": self.index + 1,
            "count": self.count,
            "first_position": self.first_position,
            "last_position": self.last_position,
            "dry_run": self.dry_run,
            "completed_at": self.completed_at.isoformat(),
        }
