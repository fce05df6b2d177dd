"""Pydantic models for API requests and responses."""

from typing import Any, Dict, List
from pydantic import BaseModel, Field


class EntityResponse(BaseModel):
    name: str
    label: str
    source_path: str
    destination_path: str


class EntityListResponse(BaseModel):
    entities: List[EntityResponse]
    total: int


class PreviewRequest(BaseModel):
    records: List[Dict[str, Any]] = Field(default_factory=list)
    start: int = Field(default=0, ge=0, description="Offset of the first record in the full set")


class PreviewResponse(BaseModel):
    entity: str
    count: int
    records: List[Dict[str, Any]]
