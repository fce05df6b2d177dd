"""Base loader interface for the destination service."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from datetime import datetime, timezone
import logging

from ..models.entity import EntityDescriptor
from ..models.record import DestinationRecord

logger = logging.getLogger(__name__)


@dataclass
class LoadResult:
    """Result of writing one batch."""
    entity: str
    total_written: int = 0
    dry_run: bool = False
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    response_data: Optional[Any] = None

    @property
    def duration_seconds(self) -> Optional[float]:
        if self.started_at and self.completed_at:
            return (self.completed_at - self.started_at).total_seconds()
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "entity": self.entity,
            "total_written": self.total_written,
            "dry_run": self.dry_run,
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "duration_seconds": self.duration_seconds,
        }


class BaseLoader(ABC):
    """
    Base class for data loaders.

    A loader writes one batch of mapped records per call. A batch either
    succeeds as a whole or raises; loaders never retry.
    """

    def __init__(self, entity: EntityDescriptor, dry_run: bool = False):
        """
        Initialize the loader.

        Args:
            entity: Descriptor of the entity being loaded
            dry_run: If True, simulate without making changes
        """
        self.entity = entity
        self.dry_run = dry_run

    @abstractmethod
    def write_batch(self, records: List[DestinationRecord]) -> LoadResult:
        """
        Write a batch of records to the destination.

        Args:
            records: Mapped records, in position order

        Returns:
            LoadResult for the batch

        Raises:
            HttpError: if the destination rejects the batch
        """
        pass

    def _start_result(self) -> LoadResult:
        return LoadResult(
            entity=self.entity.name,
            dry_run=self.dry_run,
            started_at=datetime.now(timezone.utc),
        )
