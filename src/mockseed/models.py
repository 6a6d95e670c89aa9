"""Data models and type definitions."""

from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class RelationKind(str, Enum):
    """Relationship kind tag carried by every field descriptor."""

    SCALAR = "scalar"
    IDENTITY = "identity"
    SINGULAR = "singular-reference"
    COLLECTION = "collection-reference"
    MANY_TO_MANY = "many-to-many-reference"

    @property
    def is_reference(self) -> bool:
        return self in (
            RelationKind.SINGULAR,
            RelationKind.COLLECTION,
            RelationKind.MANY_TO_MANY,
        )


# Scalar value types understood by the built-in value sources
VALUE_TYPES = (
    "string",
    "integer",
    "long",
    "float",
    "decimal",
    "boolean",
    "date",
    "datetime",
    "enum",
)


def attribute_getter(name: str) -> Callable[[Any], Any]:
    """Build a getter reading attribute ``name`` (None when missing)."""

    def getter(instance: Any) -> Any:
        return getattr(instance, name, None)

    return getter


def attribute_setter(name: str) -> Callable[[Any, Any], None]:
    """Build a setter assigning attribute ``name``."""

    def setter(instance: Any, value: Any) -> None:
        setattr(instance, name, value)

    return setter


@dataclass(eq=False)
class FieldDescriptor:
    """
    Field metadata supplied by the catalog integration.

    Attributes:
        name: Field name
        value_type: Scalar type tag (see VALUE_TYPES); unknown tags are unsupported
        kind: Relationship kind
        target: Target entity name for reference kinds (element type for collections)
        choices: Declared values for enum fields (sequence or Enum subclass)
        mapped_by: Back-reference field name on the child type (collections only)
        getter: Accessor reading the field from an instance
        setter: Accessor writing the field on an instance
        column: Column name used by the Postgres sink
        join_table: Join table used by the Postgres sink (many-to-many only)
        join_columns: (source column, target column) in join_table
    """

    name: str
    value_type: str | None = "string"
    kind: RelationKind = RelationKind.SCALAR
    target: str | None = None
    choices: Sequence[Any] | type[Enum] | None = None
    mapped_by: str | None = None
    getter: Callable[[Any], Any] | None = None
    setter: Callable[[Any, Any], None] | None = None
    column: str | None = None
    join_table: str | None = None
    join_columns: tuple[str, str] | None = None

    def __post_init__(self):
        self.kind = RelationKind(self.kind)
        if self.getter is None:
            self.getter = attribute_getter(self.name)
        if self.setter is None:
            self.setter = attribute_setter(self.name)

    def get(self, instance: Any) -> Any:
        """Read this field from an instance."""
        return self.getter(instance)

    def set(self, instance: Any, value: Any) -> None:
        """Write this field on an instance."""
        self.setter(instance, value)

    @property
    def column_name(self) -> str:
        """Column used for storage (``<name>_id`` for singular references)."""
        if self.column:
            return self.column
        if self.kind is RelationKind.SINGULAR:
            return f"{self.name}_id"
        return self.name

    @property
    def choice_values(self) -> list[Any]:
        """Declared enum values as a list (empty when none)."""
        if self.choices is None:
            return []
        return list(self.choices)


@dataclass(eq=False)
class EntityDescriptor:
    """
    Entity type metadata.

    Attributes:
        name: Entity type name (unique within a catalog)
        fields: Fields declared on this type, in declaration order
        supertype: Parent entity whose fields are inherited
        factory: Zero-argument constructor for new instances (None if unavailable)
        abstract: Abstract types are never instantiated
        table: Table name used by the Postgres sink
    """

    name: str
    fields: list[FieldDescriptor] = field(default_factory=list)
    supertype: "EntityDescriptor | None" = None
    factory: Callable[[], Any] | None = None
    abstract: bool = False
    table: str | None = None

    def __post_init__(self):
        if self.factory is None and not self.abstract:
            self.factory = record_factory(self.name)

    def all_fields(self) -> list[FieldDescriptor]:
        """Inherited fields first (outermost supertype first), then own fields."""
        inherited = self.supertype.all_fields() if self.supertype else []
        return inherited + list(self.fields)

    def fields_of_kind(self, kind: RelationKind) -> list[FieldDescriptor]:
        return [f for f in self.all_fields() if f.kind is kind]

    def get_field(self, name: str) -> FieldDescriptor | None:
        for f in self.all_fields():
            if f.name == name:
                return f
        return None

    @property
    def identity_field(self) -> FieldDescriptor | None:
        """First identity field, if any."""
        ids = self.fields_of_kind(RelationKind.IDENTITY)
        return ids[0] if ids else None

    @property
    def table_name(self) -> str:
        return self.table or self.name.lower()

    @property
    def singular_targets(self) -> set[str]:
        """Entity names this type references through singular-reference fields."""
        return {
            f.target
            for f in self.fields_of_kind(RelationKind.SINGULAR)
            if f.target is not None
        }


class Record:
    """
    Default instance type: a mutable record with attribute access.

        author = Record("Author", name="Ada")
        author.name          # "Ada"
        author.books = []    # any attribute can be assigned

    Equality is identity, so records can point at each other in cycles.
    """

    __slots__ = ("_entity", "_data")

    def __init__(self, entity: str, **data: Any):
        object.__setattr__(self, "_entity", entity)
        object.__setattr__(self, "_data", dict(data))

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(f"No attribute '{name}'")
        try:
            return self._data[name]
        except KeyError:
            raise AttributeError(f"No field '{name}' on {self._entity}") from None

    def __setattr__(self, name: str, value: Any) -> None:
        if name.startswith("_"):
            raise AttributeError(f"Cannot set private attribute '{name}'")
        self._data[name] = value

    @property
    def entity(self) -> str:
        return self._entity

    def to_dict(self) -> dict[str, Any]:
        """Shallow copy of the field values."""
        return dict(self._data)

    def __repr__(self) -> str:
        scalars = ", ".join(
            f"{k}={v!r}"
            for k, v in self._data.items()
            if not isinstance(v, (Record, list))
        )
        return f"Record({self._entity}{', ' if scalars else ''}{scalars})"


def record_factory(entity: str) -> Callable[[], Record]:
    """Build a zero-argument factory producing empty Records for ``entity``."""

    def factory() -> Record:
        return Record(entity)

    return factory


@dataclass
class SkipRecord:
    """
    One non-fatal failure or skip observed during a run.

    Attributes:
        phase: Phase in which it happened (create, resolve, collections, many_to_many)
        entity: Entity type name
        field: Field name, when the skip concerns a single field
        reason: Human-readable reason
    """

    phase: str
    entity: str
    field: str | None
    reason: str


@dataclass
class SeedingReport:
    """
    Outcome of a seeding run.

    Attributes:
        created: Entity name -> instances in the pool at the end of the run
        failures: Entity name -> per-instance creation failures
        skips: Every non-fatal failure or skip, in the order observed
        flushes: Number of sink flushes requested
        phase: Last phase reached
    """

    created: dict[str, int] = field(default_factory=dict)
    failures: dict[str, int] = field(default_factory=dict)
    skips: list[SkipRecord] = field(default_factory=list)
    flushes: int = 0
    phase: str = "pending"

    def register(self, entity: str) -> None:
        """Make sure ``entity`` is reported, even with zero counts."""
        self.created.setdefault(entity, 0)
        self.failures.setdefault(entity, 0)

    def record_failure(self, entity: str, reason: str, phase: str = "create") -> None:
        self.register(entity)
        self.failures[entity] += 1
        self.skips.append(SkipRecord(phase=phase, entity=entity, field=None, reason=reason))

    def record_skip(
        self, phase: str, entity: str, reason: str, field_name: str | None = None
    ) -> None:
        self.skips.append(
            SkipRecord(phase=phase, entity=entity, field=field_name, reason=reason)
        )

    def skips_for(self, phase: str) -> list[SkipRecord]:
        return [s for s in self.skips if s.phase == phase]

    @property
    def total_created(self) -> int:
        return sum(self.created.values())

    @property
    def total_failures(self) -> int:
        return sum(self.failures.values())

    def summary_lines(self) -> Iterator[str]:
        """Per-type lines suitable for logging or printing."""
        for entity in sorted(self.created):
            line = f"{entity}: {self.created[entity]}"
            failed = self.failures.get(entity, 0)
            if failed:
                line += f" ({failed} failed)"
            yield line

    def to_dict(self) -> dict[str, Any]:
        return {
            "phase": self.phase,
            "created": dict(self.created),
            "failures": dict(self.failures),
            "flushes": self.flushes,
            "skips": [
                {
                    "phase": s.phase,
                    "entity": s.entity,
                    "field": s.field,
                    "reason": s.reason,
                }
                for s in self.skips
            ],
        }
