"""Entity descriptors: the parameters of one migration pipeline."""

from dataclasses import dataclass
from typing import Any, Callable, Dict

from .record import DestinationRecord, SourceRecord

RecordMapper = Callable[[SourceRecord, int], DestinationRecord]


@dataclass(frozen=True)
class EntityDescriptor:
    """
    Everything the generic pipeline needs to migrate one entity type.

    Attributes:
        name: Entity key used on the command line (e.g. "contacts")
        label: Human readable singular name used in logs
        source_path: Source API path returning all records
        destination_path: Destination bulk-create path
        mapper: Function mapping (record, position) to a destination payload
        data_field: Top-level field of the source body holding the records
        id_field: Field of a source record holding its identifier
    """
    name: str
    label: str
    source_path: str
    destination_path: str
    mapper: RecordMapper
    data_field: str = "data"
    id_field: str = "id"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "name": self.name,
            "label": self.label,
            "source_path": self.source_path,
            "destination_path": self.destination_path,
            "data_field": self.data_field,
            "id_field": self.id_field,
        }
