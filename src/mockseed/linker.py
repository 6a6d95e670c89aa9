"""Collection and many-to-many linking over the instance pool."""

import logging
import random

from mockseed.models import (
    EntityDescriptor,
    FieldDescriptor,
    RelationKind,
    SeedingReport,
)
from mockseed.pool import InstancePool

logger = logging.getLogger(__name__)

# Upper bound on links assigned per many-to-many field
MAX_LINKS = 5


class CollectionLinker:
    """
    Derive one-to-many collections from the singular back-references.

    A parent's collection is recomputed from scratch on every call, so it always
    matches the current state of the children's references: a child is in
    ``parent.<collection>`` exactly when its back-reference is ``parent``.
    """

    def __init__(
        self,
        entities: dict[str, EntityDescriptor],
        pool: InstancePool,
        report: SeedingReport | None = None,
    ):
        self.entities = entities
        self.pool = pool
        self.report = report or SeedingReport()

    def back_references(
        self, parent: EntityDescriptor, field: FieldDescriptor, child: EntityDescriptor
    ) -> list[FieldDescriptor]:
        """
        Singular-reference fields on ``child`` pointing back at ``parent``.

        When the collection declares ``mapped_by``, only that field qualifies.
        """
        candidates = [
            f
            for f in child.fields_of_kind(RelationKind.SINGULAR)
            if f.target == parent.name
        ]
        if field.mapped_by:
            candidates = [f for f in candidates if f.name == field.mapped_by]
        return candidates

    def populate_collections(self) -> int:
        """
        Assign every collection field of every pooled parent.

        Returns:
            Number of collection fields assigned
        """
        assigned = 0

        for parent_name in self.pool.entities():
            parent = self.entities.get(parent_name)
            if parent is None:
                continue

            for field in parent.fields_of_kind(RelationKind.COLLECTION):
                child = self.entities.get(field.target) if field.target else None
                if child is None:
                    logger.info(
                        f"Skipping {parent_name}.{field.name}: "
                        f"unknown element type '{field.target}'"
                    )
                    self.report.record_skip(
                        "collections", parent_name, f"unknown target '{field.target}'", field.name
                    )
                    continue

                back_refs = self.back_references(parent, field, child)
                if not back_refs:
                    logger.debug(
                        f"{parent_name}.{field.name}: no back-reference on {child.name}"
                    )

                # id(parent) → children in child-pool order
                children_by_parent: dict[int, list] = {}
                for child_instance in self.pool.instances(child.name):
                    owners = {
                        id(owner)
                        for owner in (ref.get(child_instance) for ref in back_refs)
                        if owner is not None
                    }
                    for owner in owners:
                        children_by_parent.setdefault(owner, []).append(child_instance)

                for parent_instance in self.pool.instances(parent_name):
                    children = children_by_parent.get(id(parent_instance), [])
                    try:
                        field.set(parent_instance, list(children))
                    except Exception as e:
                        logger.debug(f"Could not set {parent_name}.{field.name}: {e}")
                        self.report.record_skip("collections", parent_name, str(e), field.name)
                        continue
                    assigned += 1

        logger.debug(f"Assigned {assigned} collections")
        return assigned


class ManyToManyLinker:
    """
    Assign each many-to-many field a random subset of its target pool.

    Selection shuffles the target pool in place and takes a prefix, so the
    target pool's order changes with every source instance. Later selections
    and later phases see the shuffled order.
    """

    def __init__(
        self,
        entities: dict[str, EntityDescriptor],
        pool: InstancePool,
        report: SeedingReport | None = None,
        rng: random.Random | None = None,
    ):
        self.entities = entities
        self.pool = pool
        self.report = report or SeedingReport()
        self.rng = rng or random.Random()

    def populate_many_to_many(self) -> int:
        """
        Link every many-to-many field of every pooled source instance.

        Returns:
            Number of fields assigned
        """
        assigned = 0

        for source_name in self.pool.entities():
            source = self.entities.get(source_name)
            if source is None:
                continue

            for field in source.fields_of_kind(RelationKind.MANY_TO_MANY):
                if field.target not in self.entities:
                    logger.info(
                        f"Skipping {source_name}.{field.name}: "
                        f"unknown target type '{field.target}'"
                    )
                    self.report.record_skip(
                        "many_to_many", source_name, f"unknown target '{field.target}'", field.name
                    )
                    continue

                target_size = self.pool.size(field.target)
                if target_size == 0:
                    self.report.record_skip(
                        "many_to_many", source_name, f"empty pool for '{field.target}'", field.name
                    )
                    continue

                for instance in self.pool.instances(source_name):
                    link_count = self.rng.randint(1, min(MAX_LINKS, target_size))
                    self.pool.shuffle(field.target, self.rng)
                    selected = self.pool.head(field.target, link_count)
                    try:
                        field.set(instance, selected)
                    except Exception as e:
                        logger.debug(f"Could not set {source_name}.{field.name}: {e}")
                        self.report.record_skip("many_to_many", source_name, str(e), field.name)
                        continue
                    assigned += 1

        logger.debug(f"Assigned {assigned} many-to-many fields")
        return assigned
