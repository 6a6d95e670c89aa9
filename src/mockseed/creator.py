"""Instance creation with scalar values and best-effort singular references."""

import logging
import random
from collections.abc import Sequence

from mockseed.backends.base import PersistenceSink
from mockseed.dependency import DependencyOrderer
from mockseed.models import EntityDescriptor, RelationKind, SeedingReport
from mockseed.pool import InstancePool
from mockseed.providers.base import ValueSource

logger = logging.getLogger(__name__)

# Kinds left for later phases (or for the sink, for identity)
DEFERRED_KINDS = (
    RelationKind.IDENTITY,
    RelationKind.COLLECTION,
    RelationKind.MANY_TO_MANY,
)


class InstanceCreator:
    """
    Create, populate and persist instances, registering them in the pool.

    Args:
        entities: Entity name → descriptor, used to resolve reference targets
        pool: Shared instance pool for the run
        sink: Persistence sink receiving every created instance
        value_source: Source of scalar values
        report: Report collecting failures and skips
        rng: Random source for singular-reference picks and cycle tie-breaks
    """

    def __init__(
        self,
        entities: dict[str, EntityDescriptor],
        pool: InstancePool,
        sink: PersistenceSink,
        value_source: ValueSource,
        report: SeedingReport | None = None,
        rng: random.Random | None = None,
    ):
        self.entities = entities
        self.pool = pool
        self.sink = sink
        self.value_source = value_source
        self.report = report or SeedingReport()
        self.rng = rng or random.Random()
        self.orderer = DependencyOrderer(self.rng)

    def create_all(
        self, entities: Sequence[EntityDescriptor], target_count: int
    ) -> list[EntityDescriptor]:
        """
        Order the entity types once, then top each one up to ``target_count``.

        Returns:
            The creation order used
        """
        ordered = self.orderer.order(entities)
        logger.debug(f"Creation order: {[e.name for e in ordered]}")
        for entity in ordered:
            self.ensure(entity, target_count)
        return ordered

    def ensure(self, entity: EntityDescriptor, target_count: int) -> int:
        """
        Top the pool for ``entity`` up to ``target_count`` instances.

        Existing instances are left untouched; failed instances are skipped, so
        the pool may end up short.

        Returns:
            Number of instances actually created
        """
        self.report.register(entity.name)

        if entity.abstract or entity.factory is None:
            reason = "abstract type" if entity.abstract else "no factory"
            logger.info(f"Skipping '{entity.name}': {reason}")
            self.report.record_skip("create", entity.name, reason)
            return 0

        current = self.pool.size(entity.name)
        to_create = max(0, target_count - current)
        created = 0

        for index in range(current, current + to_create):
            try:
                instance = self._instantiate_and_populate(entity, index)
                self.sink.persist(entity, instance)
            except Exception as e:
                logger.warning(f"Failed to create {entity.name} #{index}: {e}")
                self.report.record_failure(entity.name, str(e))
                continue

            self.pool.add(entity.name, instance)
            created += 1

        self.report.created[entity.name] = self.pool.size(entity.name)
        if to_create:
            logger.debug(
                f"Created {created}/{to_create} {entity.name} "
                f"(pool size {self.pool.size(entity.name)})"
            )
        return created

    def _instantiate_and_populate(self, entity: EntityDescriptor, index: int):
        instance = entity.factory()

        for field in entity.all_fields():
            if field.kind in DEFERRED_KINDS:
                continue

            if field.kind is RelationKind.SINGULAR and field.target not in self.entities:
                continue

            try:
                if field.kind is RelationKind.SINGULAR:
                    value = self.pool.choice(field.target, self.rng)
                else:
                    value = self.value_source.provide(entity, field, index)
                if value is not None:
                    field.set(instance, value)
            except Exception as e:
                logger.debug(f"Could not set {entity.name}.{field.name}: {e}")
                self.report.record_skip("create", entity.name, str(e), field.name)

        return instance
