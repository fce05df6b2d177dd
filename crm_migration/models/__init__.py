"""Data models for the migration application."""

from .record import (
    SourceRecord,
    DestinationRecord,
    Batch,
    BatchResult,
)
from .entity import (
    EntityDescriptor,
    RecordMapper,
)
from .migration import (
    MigrationStatus,
    MigrationOutcome,
    ScheduleSummary,
)

__all__ = [
    "SourceRecord",
    "DestinationRecord",
    "Batch",
    "BatchResult",
    "EntityDescriptor",
    "RecordMapper",
    "MigrationStatus",
    "MigrationOutcome",
    "ScheduleSummary",
]
