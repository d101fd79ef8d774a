"""Pydantic models for JHipster entity definitions.

The schema of ``.jhipster/<Name>.json`` is owned by the backend generator;
only the keys the templates read are modelled, everything else is kept as
extra data so nothing is lost when a definition is re-serialised.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from mobile_scaffold.errors import ParseError
from mobile_scaffold.utils import load_json


class EntityField(BaseModel):
    """A single entity attribute."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    field_name: str = Field(alias="fieldName")
    field_type: str = Field(alias="fieldType")
    field_values: str | None = Field(default=None, alias="fieldValues")
    field_validate_rules: list[str] = Field(default_factory=list, alias="fieldValidateRules")

    @property
    def is_enum(self) -> bool:
        return bool(self.field_values)

    @property
    def enum_values(self) -> list[str]:
        if not self.field_values:
            return []
        return [v.strip() for v in self.field_values.split(",") if v.strip()]

    @property
    def required(self) -> bool:
        return "required" in self.field_validate_rules


class EntityRelationship(BaseModel):
    """A relationship to another entity."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    relationship_type: str = Field(alias="relationshipType")
    relationship_name: str = Field(alias="relationshipName")
    other_entity_name: str = Field(alias="otherEntityName")
    other_entity_field: str = Field(default="id", alias="otherEntityField")

    @property
    def is_collection(self) -> bool:
        return self.relationship_type in ("one-to-many", "many-to-many")


class EntityDefinition(BaseModel):
    """Parsed contents of ``.jhipster/<Name>.json``."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    fields: list[EntityField] = Field(default_factory=list)
    relationships: list[EntityRelationship] = Field(default_factory=list)
    changelog_date: str | None = Field(default=None, alias="changelogDate")
    entity_table_name: str | None = Field(default=None, alias="entityTableName")
    dto: str = Field(default="no")
    pagination: str = Field(default="no")
    service: str = Field(default="no")

    @property
    def paginated(self) -> bool:
        return self.pagination not in ("no", "", None)


def load_entity_definition(path: str | Path) -> EntityDefinition:
    """Read and validate an entity definition file.

    Raises:
        FileNotFoundError: If *path* does not exist.
        ParseError: If the file is not JSON or does not match the schema.
    """
    raw: dict[str, Any] = load_json(path)
    try:
        return EntityDefinition.model_validate(raw)
    except PydanticValidationError as exc:
        raise ParseError(f"Invalid entity definition in {path}: {exc}", source=str(path)) from exc
