"""Bulk-create loader for the Twenty REST API."""

import logging
from typing import List
from datetime import datetime, timezone

from .base import BaseLoader, LoadResult
from ..client import RateLimitedClient
from ..models.entity import EntityDescriptor
from ..models.record import DestinationRecord

logger = logging.getLogger(__name__)


class BatchAPILoader(BaseLoader):
    """
    Writes each batch with one POST of a JSON array to the bulk endpoint.

    The destination call is treated as atomic: a failure raises HttpError
    for the whole batch and nothing is retried here.
    """

    def __init__(
        self,
        client: RateLimitedClient,
        entity: EntityDescriptor,
        dry_run: bool = False
    ):
        """
        Initialize the batch API loader.

        Args:
            client: Rate-limited client bound to the destination API
            entity: Descriptor of the entity being loaded
            dry_run: If True, simulate without making changes
        """
        super().__init__(entity, dry_run)
        self.client = client

    def write_batch(self, records: List[DestinationRecord]) -> LoadResult:
        """Write a batch of records using the bulk-create endpoint."""
        result = self._start_result()

        if self.dry_run:
            logger.info(f"[dry run] Would POST {len(records)} {self.entity.name} to {self.entity.destination_path}")
        else:
            response = self.client.post(self.entity.destination_path, json=records)
            if response.content:
                try:
                    result.response_data = response.json()
                except ValueError:
                    logger.debug(f"Non-JSON response from {self.entity.destination_path}")

        result.total_written = len(records)
        result.completed_at = datetime.now(timezone.utc)
        return result
