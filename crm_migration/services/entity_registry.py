"""Registry of the entity types the pipeline knows how to migrate."""

from typing import Dict, List

from ..models.entity import EntityDescriptor
from .mapper import map_contact, map_task

CONTACTS = EntityDescriptor(
    name="contacts",
    label="contact",
    source_path="/crm/v2/Contacts",
    destination_path="/batch/people",
    mapper=map_contact,
)

TASKS = EntityDescriptor(
    name="tasks",
    label="task",
    source_path="/crm/v2/Tasks",
    destination_path="/batch/tasks",
    mapper=map_task,
)

ENTITIES: Dict[str, EntityDescriptor] = {
    CONTACTS.name: CONTACTS,
    TASKS.name: TASKS,
}


def get_entity(name: str) -> EntityDescriptor:
    """
    Look up a descriptor by name (case-insensitive).

    Raises:
        KeyError: if the entity type is not registered
    """
    try:
        return ENTITIES[name.lower()]
    except KeyError:
        raise KeyError(f"Unknown entity type: {name}. Expected one of: {', '.join(ENTITIES)}") from None


def list_entities() -> List[EntityDescriptor]:
    return list(ENTITIES.values())
