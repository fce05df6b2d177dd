"""Batch scheduler: maps and writes records in fixed-size, paced batches."""

import time
import logging
from typing import Callable, Iterator, List, Optional, Sequence

from .exceptions import BatchWriteError, MappingError, MigrationError
from .loaders.base import BaseLoader
from .models.entity import RecordMapper
from .models.migration import ScheduleSummary
from .models.record import Batch, BatchResult, DestinationRecord, SourceRecord

logger = logging.getLogger(__name__)

DEFAULT_BATCH_DELAY_SECONDS = 1.0


def partition(records: Sequence[SourceRecord], batch_size: int) -> List[Batch]:
    """
    Split records into contiguous batches of `batch_size`.

    The last batch may be smaller. Concatenating the batches yields the
    input in order.
    """
    return list(iter_batches(records, batch_size))


def iter_batches(records: Sequence[SourceRecord], batch_size: int) -> Iterator[Batch]:
    """Iterate over records in batches."""
    if batch_size <= 0:
        raise ValueError("batch_size must be a positive integer")
    for index, start in enumerate(range(0, len(records), batch_size)):
        yield Batch(index=index, start=start, records=list(records[start:start + batch_size]))


def map_batch(batch: Batch, mapper: RecordMapper) -> List[DestinationRecord]:
    """
    Map every record in a batch, assigning global 1-based positions.

    Raises:
        MappingError: if the mapper fails on a record
    """
    mapped = []
    for offset, record in enumerate(batch.records):
        position = batch.start + offset + 1
        try:
            mapped.append(mapper(record, position))
        except Exception as e:
            raise MappingError(
                f"Could not map {record.entity} record {record.id} at position {position}: {e}"
            ) from e
    return mapped


class BatchScheduler:
    """
    Drives the mapper and the loader one batch at a time.

    Batches run strictly in order. A fixed pause follows every batch,
    including the last. The first failed batch aborts the schedule; batches
    already written stay on the destination.
    """

    def __init__(
        self,
        loader: BaseLoader,
        mapper: RecordMapper,
        batch_size: int,
        delay_seconds: float = DEFAULT_BATCH_DELAY_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
        on_batch: Optional[Callable[[BatchResult], None]] = None
    ):
        """
        Initialize the scheduler.

        Args:
            loader: Loader that writes one batch per call
            mapper: Function mapping (record, position) to a destination payload
            batch_size: Maximum records per batch
            delay_seconds: Pause after each batch
            sleep: Sleep function (injectable for tests)
            on_batch: Optional callback invoked after each written batch
        """
        if batch_size <= 0:
            raise ValueError("batch_size must be a positive integer")
        self.loader = loader
        self.mapper = mapper
        self.batch_size = batch_size
        self.delay_seconds = delay_seconds
        self._sleep = sleep
        self._on_batch = on_batch

    def run(self, records: Sequence[SourceRecord]) -> ScheduleSummary:
        """
        Write all records in batches.

        Returns:
            ScheduleSummary with one BatchResult per written batch

        Raises:
            BatchWriteError: when a batch fails, chained to the underlying error
        """
        summary = ScheduleSummary(total_records=len(records))
        batches = partition(records, self.batch_size)
        entity = self.loader.entity.name

        if not batches:
            logger.info(f"No {entity} to write")
            return summary

        logger.info(f"Writing {len(records)} {entity} in {len(batches)} batch(es) of up to {self.batch_size}")

        for batch in batches:
            try:
                mapped = map_batch(batch, self.mapper)
                load_result = self.loader.write_batch(mapped)
            except MigrationError as e:
                logger.error(
                    f"Batch {batch.number}/{len(batches)} failed "
                    f"(positions {batch.first_position}-{batch.last_position}): {e}"
                )
                raise BatchWriteError(batch.index, summary.records_written, e) from e

            batch_result = BatchResult(
                index=batch.index,
                count=len(batch),
                first_position=batch.first_position,
                last_position=batch.last_position,
                dry_run=load_result.dry_run,
                response_data=load_result.response_data,
            )
            summary.batches.append(batch_result)
            logger.info(f"Processed batch {batch.number}/{len(batches)} ({len(batch)} {entity})")

            if self._on_batch:
                self._on_batch(batch_result)

            if self.delay_seconds > 0:
                self._sleep(self.delay_seconds)

        return summary
