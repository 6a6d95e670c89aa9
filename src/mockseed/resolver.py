"""Second pass filling singular references left unset during creation.

Creation only picks a reference target when the target pool already exists,
so types created before their targets (cycles, self-references) come out of
the first pass with gaps. This pass fills them, creating a small fallback
batch of the target type when its pool is still empty.

The pass is not a fixpoint: instances created for a fallback batch may keep
their own unset references. Running it again is safe, since only unset
references are touched.
"""

import logging
import random

from mockseed.creator import InstanceCreator
from mockseed.models import RelationKind, SeedingReport
from mockseed.pool import InstancePool

logger = logging.getLogger(__name__)


def fallback_batch_size(configured_count: int) -> int:
    """Instances created on demand for an empty target pool."""
    return max(1, configured_count // 10)


class ReferenceResolver:
    """Fill unset singular references from the current pools."""

    def __init__(
        self,
        creator: InstanceCreator,
        configured_count: int,
        rng: random.Random | None = None,
    ):
        self.creator = creator
        self.configured_count = configured_count
        self.rng = rng or random.Random()

    @property
    def pool(self) -> InstancePool:
        return self.creator.pool

    @property
    def report(self) -> SeedingReport:
        return self.creator.report

    def fix_missing_references(self) -> int:
        """
        Resolve every unset singular reference of every pooled instance.

        Pools are snapshotted when the pass starts; instances created here as
        fallback batches are not visited by this call.

        Returns:
            Number of references set
        """
        resolved = 0
        entities = self.creator.entities

        for entity_name, instances in list(self.pool):
            entity = entities.get(entity_name)
            if entity is None:
                continue

            references = []
            for field in entity.fields_of_kind(RelationKind.SINGULAR):
                target = entities.get(field.target) if field.target else None
                if target is None:
                    logger.info(
                        f"Skipping {entity_name}.{field.name}: "
                        f"unknown target type '{field.target}'"
                    )
                    self.report.record_skip(
                        "resolve", entity_name, f"unknown target '{field.target}'", field.name
                    )
                    continue
                references.append((field, target))

            for instance in instances:
                for field, target in references:
                    if field.get(instance) is not None:
                        continue

                    if self.pool.is_empty(target.name):
                        size = fallback_batch_size(self.configured_count)
                        logger.info(
                            f"Creating fallback batch of {size} {target.name} "
                            f"for {entity_name}.{field.name}"
                        )
                        self.creator.ensure(target, size)

                    value = self.pool.choice(target.name, self.rng)
                    if value is None:
                        self.report.record_skip(
                            "resolve", entity_name, f"empty pool for '{target.name}'", field.name
                        )
                        continue

                    try:
                        field.set(instance, value)
                    except Exception as e:
                        logger.debug(f"Could not set {entity_name}.{field.name}: {e}")
                        self.report.record_skip("resolve", entity_name, str(e), field.name)
                        continue
                    resolved += 1

        logger.debug(f"Resolved {resolved} missing references")
        return resolved
