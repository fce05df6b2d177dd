"""Mapping services and the entity registry."""

from .mapper import map_contact, map_task, map_status, normalize_date
from .entity_registry import ENTITIES, CONTACTS, TASKS, get_entity, list_entities

__all__ = [
    "map_contact",
    "map_task",
    "map_status",
    "normalize_date",
    "ENTITIES",
    "CONTACTS",
    "TASKS",
    "get_entity",
    "list_entities",
]
