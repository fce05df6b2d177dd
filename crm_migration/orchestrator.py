"""Migration runner - coordinates one end-to-end migration of an entity type."""

import logging
import time
from datetime import datetime, timezone
from typing import Callable, List, Optional

from .client import RateLimitedClient
from .config import MigrationConfig
from .exceptions import BatchWriteError, HttpError, MigrationError
from .extractors.api_extractor import APIExtractor
from .extractors.base import BaseExtractor
from .loaders.api_loader import BatchAPILoader
from .loaders.base import BaseLoader
from .models.entity import EntityDescriptor
from .models.migration import MigrationOutcome, MigrationStatus
from .models.record import BatchResult
from .scheduler import BatchScheduler

logger = logging.getLogger(__name__)


class MigrationRunner:
    """
    Runs fetch -> map -> batched write for one entity type.

    The source and destination each get their own client, so their request
    budgets are independent. The run returns a MigrationOutcome instead of
    exiting; the caller decides what to do with a failure.
    """

    def __init__(
        self,
        config: MigrationConfig,
        entity: EntityDescriptor,
        extractor: Optional[BaseExtractor] = None,
        loader: Optional[BaseLoader] = None,
        sleep: Callable[[float], None] = time.sleep,
        on_batch: Optional[Callable[[BatchResult], None]] = None
    ):
        """
        Initialize the runner.

        Args:
            config: Validated migration configuration
            entity: Entity type to migrate
            extractor: Source reader (built from config when omitted)
            loader: Destination writer (built from config when omitted)
            sleep: Sleep function used for the inter-batch pause
            on_batch: Optional progress callback
        """
        self.config = config
        self.entity = entity
        self._owned_clients: List[RateLimitedClient] = []
        self.extractor = extractor or self._create_extractor()
        self.loader = loader or self._create_loader()
        self.scheduler = BatchScheduler(
            loader=self.loader,
            mapper=entity.mapper,
            batch_size=config.batch_size,
            delay_seconds=config.batch_delay_seconds,
            sleep=sleep,
            on_batch=on_batch,
        )

    def _create_extractor(self) -> BaseExtractor:
        client = RateLimitedClient.zoho(
            self.config.source_base_url,
            self.config.source_api_key,
            max_requests_per_second=self.config.rate_limit_per_second,
            timeout=self.config.request_timeout,
        )
        self._owned_clients.append(client)
        return APIExtractor(client)

    def _create_loader(self) -> BaseLoader:
        client = RateLimitedClient.bearer(
            self.config.destination_base_url,
            self.config.destination_api_key,
            max_requests_per_second=self.config.rate_limit_per_second,
            timeout=self.config.request_timeout,
        )
        self._owned_clients.append(client)
        return BatchAPILoader(client, self.entity, dry_run=self.config.dry_run)

    def run(self) -> MigrationOutcome:
        """
        Run the migration once.

        Returns:
            MigrationOutcome: COMPLETED with counts, or FAILED with the first fatal error
        """
        outcome = MigrationOutcome(entity=self.entity.name, dry_run=self.config.dry_run)
        outcome.started_at = datetime.now(timezone.utc)
        outcome.status = MigrationStatus.EXTRACTING

        mode = " (dry run)" if self.config.dry_run else ""
        logger.info(f"Starting {self.entity.label} migration{mode}...")

        try:
            records = self.extractor.fetch_all(self.entity)
            outcome.records_fetched = len(records)
            logger.info(f"Fetched {len(records)} {self.entity.name} from Zoho CRM")

            outcome.status = MigrationStatus.LOADING
            outcome.summary = self.scheduler.run(records)

            outcome.status = MigrationStatus.COMPLETED
            logger.info(
                f"Migration completed successfully: {outcome.records_written} {self.entity.name} "
                f"in {outcome.batches_written} batch(es)"
            )

        except BatchWriteError as e:
            outcome.status = MigrationStatus.FAILED
            outcome.error = e
            logger.error(
                f"Migration failed at batch {e.batch_number} (status {e.status_code}); "
                f"{e.records_committed} {self.entity.name} were already written and are not rolled back"
            )

        except HttpError as e:
            outcome.status = MigrationStatus.FAILED
            outcome.error = e
            logger.error(f"Migration failed while fetching {self.entity.name}: status {e.status_code}, {e.message}")

        except MigrationError as e:
            outcome.status = MigrationStatus.FAILED
            outcome.error = e
            logger.error(f"Migration failed: {e}")

        except Exception as e:
            outcome.status = MigrationStatus.FAILED
            error = MigrationError(f"Unexpected error: {e}")
            error.__cause__ = e
            outcome.error = error
            logger.exception(f"Migration failed with an unexpected error: {e}")

        finally:
            outcome.completed_at = datetime.now(timezone.utc)
            self.close()

        return outcome

    def close(self) -> None:
        """Close the HTTP clients this runner created."""
        for client in self._owned_clients:
            client.close()
