"""Migration execution models."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from enum import Enum
from datetime import datetime

from .record import BatchResult
from ..exceptions import MigrationError


class MigrationStatus(str, Enum):
    """Status of a migration run."""
    PENDING = "pending"
    EXTRACTING = "extracting"
    LOADING = "loading"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class ScheduleSummary:
    """Aggregate progress of a batch schedule."""
    total_records: int = 0
    batches: List[BatchResult] = field(default_factory=list)

    @property
    def batches_written(self) -> int:
        return len(self.batches)

    @property
    def records_written(self) -> int:
        return sum(b.count for b in self.batches)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "total_records": self.total_records,
            "batches_written": self.batches_written,
            "records_written": self.records_written,
            "batches": [b.to_dict() for b in self.batches],
        }


@dataclass
class MigrationOutcome:
    """Terminal result of one migration run: a success summary or a typed failure."""
    entity: str
    status: MigrationStatus = MigrationStatus.PENDING
    dry_run: bool = False
    records_fetched: int = 0
    summary: ScheduleSummary = field(default_factory=ScheduleSummary)
    error: Optional[MigrationError] = None
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    @property
    def succeeded(self) -> bool:
        return self.status == MigrationStatus.COMPLETED

    @property
    def records_written(self) -> int:
        return self.summary.records_written

    @property
    def batches_written(self) -> int:
        return self.summary.batches_written

    @property
    def duration_seconds(self) -> Optional[float]:
        """Get duration in seconds."""
        if self.started_at and self.completed_at:
            return (self.completed_at - self.started_at).total_seconds()
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "entity": self.entity,
            "status": self.status.value,
            "dry_run": self.dry_run,
            "records_fetched": self.records_fetched,
            "records_written": self.records_written,
            "batches_written": self.batches_written,
            "error": self.error.to_dict() if self.error else None,
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "duration_seconds": self.duration_seconds,
        }
