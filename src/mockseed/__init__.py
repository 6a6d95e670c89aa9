"""
mockseed - Entity-Graph Mock Data Seeding

Synthesizes a self-consistent mock dataset across interrelated entity types:
dependency-ordered creation, reference repair, one-to-many collections derived
from back-references, and bounded random many-to-many links.
"""

from mockseed.backends import MemorySink, PersistenceSink, PostgresSink
from mockseed.catalog import SchemaCatalog, StaticCatalog
from mockseed.config import Config, SeedLevel, SeedSettings
from mockseed.creator import InstanceCreator
from mockseed.decorators import seed_data
from mockseed.dependency import DependencyOrderer
from mockseed.linker import CollectionLinker, ManyToManyLinker
from mockseed.models import (
    EntityDescriptor,
    FieldDescriptor,
    Record,
    RelationKind,
    SeedingReport,
)
from mockseed.pool import InstancePool
from mockseed.providers import FakerValueSource, RandomValueSource, ValueSource
from mockseed.providers.registry import (
    clear_value_sources,
    create_value_source,
    list_value_sources,
    register_value_source,
)
from mockseed.resolver import ReferenceResolver
from mockseed.seeder import Seeder, SeedingPhase, SeedingResult

__version__ = "0.1.0"

__all__ = [
    "Seeder",
    "SeedingPhase",
    "SeedingResult",
    "SeedingReport",
    "seed_data",
    "Config",
    "SeedLevel",
    "SeedSettings",
    "SchemaCatalog",
    "StaticCatalog",
    "EntityDescriptor",
    "FieldDescriptor",
    "RelationKind",
    "Record",
    "InstancePool",
    "DependencyOrderer",
    "InstanceCreator",
    "ReferenceResolver",
    "CollectionLinker",
    "ManyToManyLinker",
    "PersistenceSink",
    "MemorySink",
    "PostgresSink",
    "ValueSource",
    "RandomValueSource",
    "FakerValueSource",
    "register_value_source",
    "list_value_sources",
    "clear_value_sources",
    "create_value_source",
]
