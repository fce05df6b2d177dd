"""Mapping preview endpoints."""

from fastapi import APIRouter, HTTPException

from ..models import (
    EntityListResponse,
    EntityResponse,
    PreviewRequest,
    PreviewResponse,
)
from ...exceptions import MappingError
from ...models.record import Batch, SourceRecord
from ...scheduler import map_batch
from ...services.entity_registry import get_entity, list_entities

router = APIRouter()


@router.get("/entities", response_model=EntityListResponse)
async def get_entities():
    """List the entity types that can be migrated."""
    entities = [EntityResponse(**e.to_dict()) for e in list_entities()]
    return EntityListResponse(entities=entities, total=len(entities))


@router.post("/preview/{entity_name}", response_model=PreviewResponse)
async def preview_mapping(entity_name: str, data: PreviewRequest):
    """Map source records to destination payloads without writing anything."""
    try:
        entity = get_entity(entity_name)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Unknown entity type: {entity_name}")

    records = [
        SourceRecord(
            id=str(item.get(entity.id_field, data.start + idx)),
            entity=entity.name,
            data=item,
        )
        for idx, item in enumerate(data.records)
    ]
    batch = Batch(index=0, start=data.start, records=records)

    try:
        mapped = map_batch(batch, entity.mapper)
    except MappingError as e:
        raise HTTPException(status_code=422, detail=str(e))

    return PreviewResponse(
        entity=entity.name,
        count=len(records),
        records=mapped,
    )
