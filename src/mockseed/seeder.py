"""Seeding orchestrator: runs every phase over one catalog, once."""

import logging
import random
from dataclasses import dataclass
from enum import Enum

from mockseed.backends.base import PersistenceSink
from mockseed.catalog import SchemaCatalog
from mockseed.config import SeedSettings
from mockseed.creator import InstanceCreator
from mockseed.exceptions import SeedingStateError
from mockseed.linker import CollectionLinker, ManyToManyLinker
from mockseed.models import EntityDescriptor, SeedingReport
from mockseed.pool import InstancePool
from mockseed.providers.base import ValueSource
from mockseed.providers.registry import create_value_source
from mockseed.resolver import ReferenceResolver

logger = logging.getLogger(__name__)


class SeedingPhase(str, Enum):
    """Run states, in the only order they can occur."""

    PENDING = "pending"
    ORDERED = "ordered"
    CREATED = "created"
    REFERENCES_RESOLVED = "references_resolved"
    COLLECTIONS_LINKED = "collections_linked"
    MANY_TO_MANY_LINKED = "many_to_many_linked"
    DONE = "done"
    DISABLED = "disabled"


@dataclass
class SeedingResult:
    """
    Outcome of Seeder.run().

    Attributes:
        report: Counts and skips
        pool: Every instance created, by entity name
        order: Creation order used (empty when the run was disabled)
    """

    report: SeedingReport
    pool: InstancePool
    order: list[EntityDescriptor]


class Seeder:
    """
    Seed every entity type of a catalog into a persistence sink.

    Phases run strictly in sequence: order, create, resolve references, link
    collections, link many-to-many; the sink is flushed after each of the four
    mutation phases. A Seeder runs once.

    Example:
        >>> sink = MemorySink()
        >>> result = Seeder(catalog, sink, target_count=5, seed=42).run()
        >>> result.report.created
        {'Author': 5, 'Book': 5}
    """

    def __init__(
        self,
        catalog: SchemaCatalog,
        sink: PersistenceSink,
        settings: SeedSettings | None = None,
        value_source: ValueSource | None = None,
        rng: random.Random | None = None,
        target_count: int | None = None,
        seed: int | None = None,
    ):
        """
        Initialize Seeder.

        Args:
            catalog: Entity types to seed
            sink: Where instances are persisted
            settings: Run settings (defaults from environment when omitted)
            value_source: Scalar value source (built from settings when omitted)
            rng: Random source (seeded from ``seed`` or settings.seed when omitted)
            target_count: Instances per type (settings level when omitted)
            seed: Overrides settings.seed

        Raises:
            UnknownValueSourceError: If settings name an unregistered value source
        """
        self.catalog = catalog
        self.sink = sink
        self.settings = settings or SeedSettings()
        if seed is None:
            seed = self.settings.seed
        self.rng = rng or random.Random(seed)
        self.target_count = (
            target_count if target_count is not None else self.settings.resolve_count()
        )
        self.value_source = value_source or create_value_source(
            self.settings.value_source,
            rng=self.rng,
            locale=self.settings.locale,
            seed=seed,
        )
        self.phase = SeedingPhase.PENDING
        self.pool = InstancePool()
        self.report = SeedingReport()

    def _advance(self, phase: SeedingPhase) -> None:
        self.phase = phase
        self.report.phase = phase.value
        logger.debug(f"Phase: {phase.value}")

    def _flush(self) -> None:
        self.sink.flush()
        self.report.flushes += 1

    def run(self) -> SeedingResult:
        """
        Run every phase once.

        Returns:
            SeedingResult with the report, the pool and the creation order

        Raises:
            SeedingStateError: If this Seeder already ran
            Exception: Whatever the sink raises from flush()
        """
        if self.phase is not SeedingPhase.PENDING:
            raise SeedingStateError(self.phase.value)

        if not self.settings.enabled:
            logger.info("Seeding disabled; skipping run")
            self._advance(SeedingPhase.DISABLED)
            return SeedingResult(report=self.report, pool=self.pool, order=[])

        entities = self.catalog.list_entity_types()
        by_name = {entity.name: entity for entity in entities}
        for entity in entities:
            self.report.register(entity.name)

        logger.info(
            f"Seeding {len(entities)} entity types, count={self.target_count}, "
            f"source={type(self.value_source).__name__}"
        )

        creator = InstanceCreator(
            by_name, self.pool, self.sink, self.value_source, self.report, self.rng
        )
        order = creator.orderer.order(entities)
        self._advance(SeedingPhase.ORDERED)

        for entity in order:
            creator.ensure(entity, self.target_count)
        self._flush()
        self._advance(SeedingPhase.CREATED)

        resolver = ReferenceResolver(creator, self.target_count, self.rng)
        resolver.fix_missing_references()
        self._flush()
        self._advance(SeedingPhase.REFERENCES_RESOLVED)

        CollectionLinker(by_name, self.pool, self.report).populate_collections()
        self._flush()
        self._advance(SeedingPhase.COLLECTIONS_LINKED)

        ManyToManyLinker(by_name, self.pool, self.report, self.rng).populate_many_to_many()
        self._flush()
        self._advance(SeedingPhase.MANY_TO_MANY_LINKED)

        self.report.created.update(self.pool.counts())
        self._advance(SeedingPhase.DONE)

        logger.info("Seeding completed; persisted counts:")
        for line in self.report.summary_lines():
            logger.info(f"  {line}")

        return SeedingResult(report=self.report, pool=self.pool, order=order)
