"""JSON file extractor, used to preview mappings offline."""

import json
import logging
from pathlib import Path
from typing import List, Union

from .base import BaseExtractor
from ..exceptions import ResponseFormatError
from ..models.entity import EntityDescriptor
from ..models.record import SourceRecord

logger = logging.getLogger(__name__)


class JSONFileExtractor(BaseExtractor):
    """
    Reads source records from a JSON export.

    The file may hold a Zoho-style `{"data": [...]}` body, a list of
    records, or a single record object.
    """

    def __init__(self, file_path: Union[str, Path]):
        self.file_path = Path(file_path)

    def fetch_all(self, entity: EntityDescriptor) -> List[SourceRecord]:
        with open(self.file_path, encoding="utf-8") as f:
            try:
                body = json.load(f)
            except json.JSONDecodeError as e:
                raise ResponseFormatError(f"Invalid JSON in {self.file_path}: {e}") from e

        if isinstance(body, dict) and entity.data_field not in body:
            body = [body]

        records = self.parse_body(body, entity)
        logger.info(f"Read {len(records)} {entity.name} from {self.file_path}")
        return records
