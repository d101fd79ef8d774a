"""Entity definition lookup and per-entity code generation."""

from mobile_scaffold.entity.generator import EntityGenerator, generate_entity
from mobile_scaffold.entity.locator import EntityLocator, LocatedEntity, locate_entity
from mobile_scaffold.entity.models import EntityDefinition, load_entity_definition

__all__ = [
    "EntityDefinition",
    "EntityGenerator",
    "EntityLocator",
    "LocatedEntity",
    "generate_entity",
    "load_entity_definition",
    "locate_entity",
]
