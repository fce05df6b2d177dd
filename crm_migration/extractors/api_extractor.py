"""API extractor for the Zoho CRM REST API."""

import logging
from typing import List

from .base import BaseExtractor
from ..client import RateLimitedClient
from ..exceptions import ResponseFormatError
from ..models.entity import EntityDescriptor
from ..models.record import SourceRecord

logger = logging.getLogger(__name__)


class APIExtractor(BaseExtractor):
    """
    Reads all records of an entity type with a single GET.

    No pagination is attempted: the source returns one page per call and
    only that page is migrated. `fetch_all` is where page iteration belongs
    if the source contract ever requires it.
    """

    def __init__(self, client: RateLimitedClient):
        """
        Initialize the API extractor.

        Args:
            client: Rate-limited client bound to the source API
        """
        self.client = client

    def fetch_all(self, entity: EntityDescriptor) -> List[SourceRecord]:
        """
        Fetch every record of an entity type.

        Raises:
            HttpError: on a non-2xx response or transport failure
            ResponseFormatError: if the body is not JSON or holds no record list
        """
        logger.debug(f"Fetching {entity.name} from {entity.source_path}")
        response = self.client.get(entity.source_path)

        # Zoho answers 204 with an empty body when a module has no records
        if response.status_code == 204 or not response.content:
            logger.info(f"Source has no {entity.name}")
            return []

        try:
            body = response.json()
        except ValueError as e:
            raise ResponseFormatError(f"Source returned invalid JSON for {entity.name}: {e}") from e

        records = self.parse_body(body, entity)
        logger.info(f"Fetched {len(records)} {entity.name} from source")
        return records
