"""Entity catalogs: declared in code or loaded from YAML/JSON files.

A catalog file lists entity types under an ``entities`` key:

    entities:
      Author:
        fields:
          - {name: id, kind: identity, type: integer}
          - {name: name}
          - {name: books, kind: collection, target: Book}
      Book:
        table: books
        fields:
          - {name: id, kind: identity, type: integer}
          - {name: title}
          - {name: author, kind: reference, target: Author}
          - {name: status, type: enum, choices: [DRAFT, PUBLISHED]}

Instances of file-declared entities are Records.
"""

import json
import logging
from abc import ABC, abstractmethod
from collections.abc import Iterator, Sequence
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from mockseed.exceptions import CatalogError
from mockseed.models import EntityDescriptor, FieldDescriptor, RelationKind

logger = logging.getLogger(__name__)

# Spellings accepted for the kind key in catalog files
KIND_ALIASES = {
    "scalar": RelationKind.SCALAR,
    "identity": RelationKind.IDENTITY,
    "id": RelationKind.IDENTITY,
    "reference": RelationKind.SINGULAR,
    "singular": RelationKind.SINGULAR,
    "many_to_one": RelationKind.SINGULAR,
    "one_to_one": RelationKind.SINGULAR,
    "collection": RelationKind.COLLECTION,
    "one_to_many": RelationKind.COLLECTION,
    "many_to_many": RelationKind.MANY_TO_MANY,
}
KIND_ALIASES.update({kind.value: kind for kind in RelationKind})


class SchemaCatalog(ABC):
    """Source of entity type descriptors."""

    @abstractmethod
    def list_entity_types(self) -> list[EntityDescriptor]:
        """Entity types in catalog order."""
        pass

    def as_mapping(self) -> dict[str, EntityDescriptor]:
        return {entity.name: entity for entity in self.list_entity_types()}

    def get(self, name: str) -> EntityDescriptor | None:
        return self.as_mapping().get(name)


class FieldSpec(BaseModel):
    """One field entry of a catalog file."""

    model_config = ConfigDict(extra="forbid")

    name: str
    type: str | None = None
    kind: RelationKind = RelationKind.SCALAR
    target: str | None = None
    choices: list[Any] | None = None
    mapped_by: str | None = None
    column: str | None = None
    join_table: str | None = None
    join_columns: tuple[str, str] | None = None

    @field_validator("kind", mode="before")
    @classmethod
    def normalize_kind(cls, value):
        if isinstance(value, str):
            key = value.strip().lower().replace("-", "_")
            if key in KIND_ALIASES:
                return KIND_ALIASES[key]
            if value in KIND_ALIASES:
                return KIND_ALIASES[value]
            raise ValueError(f"unknown kind '{value}'")
        return value

    @model_validator(mode="after")
    def check_target(self):
        if self.kind.is_reference and not self.target:
            raise ValueError(f"field '{self.name}' of kind {self.kind.value} needs a target")
        return self

    def to_descriptor(self) -> FieldDescriptor:
        value_type = self.type
        if value_type is None:
            if self.kind is RelationKind.SCALAR:
                value_type = "enum" if self.choices else "string"
            elif self.kind is RelationKind.IDENTITY:
                value_type = "integer"
        return FieldDescriptor(
            name=self.name,
            value_type=value_type,
            kind=self.kind,
            target=self.target,
            choices=self.choices,
            mapped_by=self.mapped_by,
            column=self.column,
            join_table=self.join_table,
            join_columns=self.join_columns,
        )


class EntitySpec(BaseModel):
    """One entity entry of a catalog file."""

    model_config = ConfigDict(extra="forbid")

    fields: list[FieldSpec] = Field(default_factory=list)
    extends: str | None = None
    abstract: bool = False
    table: str | None = None


class CatalogSpec(BaseModel):
    """Top level of a catalog file."""

    entities: dict[str, EntitySpec]


class StaticCatalog(SchemaCatalog):
    """
    Catalog over a fixed list of entity descriptors.

    Example:
        >>> author = EntityDescriptor("Author", fields=[FieldDescriptor("name")])
        >>> catalog = StaticCatalog([author])
        >>> catalog.get("Author") is author
        True
    """

    def __init__(self, entities: Sequence[EntityDescriptor]):
        seen: set[str] = set()
        for entity in entities:
            if entity.name in seen:
                raise CatalogError(f"duplicate entity name '{entity.name}'")
            seen.add(entity.name)
        self._entities = list(entities)

    def list_entity_types(self) -> list[EntityDescriptor]:
        return list(self._entities)

    def __iter__(self) -> Iterator[EntityDescriptor]:
        return iter(self._entities)

    def __len__(self) -> int:
        return len(self._entities)

    @classmethod
    def from_dict(cls, data: dict[str, Any], source: str | None = None) -> "StaticCatalog":
        """
        Build a catalog from parsed YAML/JSON data.

        Args:
            data: Mapping with an ``entities`` key
            source: File name used in error messages

        Raises:
            CatalogError: If the data is malformed or supertypes are inconsistent
        """
        if not isinstance(data, dict):
            raise CatalogError("top level must be a mapping", source)
        try:
            spec = CatalogSpec.model_validate(data)
        except ValidationError as e:
            raise CatalogError(str(e), source) from e

        built: dict[str, EntityDescriptor] = {}
        visiting: set[str] = set()

        def build(name: str) -> EntityDescriptor:
            if name in built:
                return built[name]
            if name in visiting:
                raise CatalogError(f"inheritance cycle through '{name}'", source)
            entity_spec = spec.entities.get(name)
            if entity_spec is None:
                raise CatalogError(f"unknown supertype '{name}'", source)

            visiting.add(name)
            supertype = build(entity_spec.extends) if entity_spec.extends else None
            visiting.discard(name)

            built[name] = EntityDescriptor(
                name=name,
                fields=[f.to_descriptor() for f in entity_spec.fields],
                supertype=supertype,
                abstract=entity_spec.abstract,
                table=entity_spec.table,
            )
            return built[name]

        for name in spec.entities:
            build(name)

        entities = [built[name] for name in spec.entities]
        logger.debug(f"Loaded {len(entities)} entity types from {source or 'dict'}")
        return cls(entities)

    @classmethod
    def from_yaml(cls, path: str | Path) -> "StaticCatalog":
        """
        Load a catalog from a YAML file.

        Example:
            >>> catalog = StaticCatalog.from_yaml("seed/catalog.yaml")
        """
        path = Path(path)
        with open(path) as f:
            try:
                data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise CatalogError(str(e), str(path)) from e
        return cls.from_dict(data, source=str(path))

    @classmethod
    def from_json(cls, path: str | Path) -> "StaticCatalog":
        """
        Load a catalog from a JSON file.

        Example:
            >>> catalog = StaticCatalog.from_json("seed/catalog.json")
        """
        path = Path(path)
        with open(path) as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise CatalogError(str(e), str(path)) from e
        return cls.from_dict(data, source=str(path))

    @classmethod
    def from_file(cls, path: str | Path) -> "StaticCatalog":
        """Load a catalog, picking the parser from the file extension."""
        path = Path(path)
        if path.suffix.lower() == ".json":
            return cls.from_json(path)
        return cls.from_yaml(path)
