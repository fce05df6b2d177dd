"""Base extractor interface."""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional
import logging

from ..exceptions import ResponseFormatError
from ..models.entity import EntityDescriptor
from ..models.record import SourceRecord

logger = logging.getLogger(__name__)


class BaseExtractor(ABC):
    """
    Base class for data extractors.

    Extractors pull the full record set of one entity type and convert each
    item to a SourceRecord, preserving source order.
    """

    @abstractmethod
    def fetch_all(self, entity: EntityDescriptor) -> List[SourceRecord]:
        """
        Fetch every record of an entity type.

        Args:
            entity: Descriptor of the entity to fetch

        Returns:
            Records in source order
        """
        pass

    def parse_body(self, body: Any, entity: EntityDescriptor) -> List[SourceRecord]:
        """
        Turn a source body into SourceRecords.

        Accepts either a `{data_field: [...]}` envelope or a bare list.

        Raises:
            ResponseFormatError: if the envelope has no collection, or the
                collection is not a list of objects
        """
        if isinstance(body, dict):
            items = body.get(entity.data_field)
            if items is None:
                raise ResponseFormatError(
                    f"Response for {entity.name} has no '{entity.data_field}' collection"
                )
        else:
            items = body

        if not isinstance(items, list):
            raise ResponseFormatError(
                f"Expected '{entity.data_field}' to be a list of {entity.label} records, "
                f"got {type(items).__name__}"
            )

        records = []
        for idx, item in enumerate(items):
            if not isinstance(item, dict):
                raise ResponseFormatError(
                    f"{entity.label} record at index {idx} is {type(item).__name__}, expected an object"
                )
            records.append(self.create_record(entity, item, idx))

        return records

    def create_record(
        self,
        entity: EntityDescriptor,
        data: Dict[str, Any],
        index: int,
        record_id: Optional[str] = None
    ) -> SourceRecord:
        """Create a SourceRecord, falling back to the index when no ID is present."""
        if record_id is None:
            record_id = data.get(entity.id_field)
        return SourceRecord(
            id=str(record_id if record_id is not None else index),
            entity=entity.name,
            data=data,
        )
