"""Tests for ReferenceResolver: filling unset singular references."""

import random

import pytest

from mockseed import (
    EntityDescriptor,
    FieldDescriptor,
    InstanceCreator,
    InstancePool,
    MemorySink,
    RandomValueSource,
    ReferenceResolver,
    RelationKind,
    SeedingReport,
)
from mockseed.resolver import fallback_batch_size


def ref(name: str, target: str) -> FieldDescriptor:
    return FieldDescriptor(name, None, RelationKind.SINGULAR, target=target)


def make_creator(entities, seed=1) -> InstanceCreator:
    rng = random.Random(seed)
    return InstanceCreator(
        {e.name: e for e in entities},
        InstancePool(),
        MemorySink(),
        RandomValueSource(rng),
        SeedingReport(),
        rng,
    )


@pytest.mark.parametrize(
    "configured, expected",
    [(0, 1), (5, 1), (9, 1), (10, 1), (25, 2), (100, 10), (1000, 100)],
)
def test_fallback_batch_size(configured, expected):
    assert fallback_batch_size(configured) == expected


def test_resolves_references_left_by_a_cycle():
    """A ↔ B: whichever is created first gets its reference filled here."""
    a = EntityDescriptor("A", fields=[FieldDescriptor("label"), ref("b", "B")])
    b = EntityDescriptor("B", fields=[FieldDescriptor("label"), ref("a", "A")])
    creator = make_creator([a, b])
    creator.ensure(a, 4)
    creator.ensure(b, 4)

    assert all(getattr(i, "b", None) is None for i in creator.pool.instances("A"))

    resolved = ReferenceResolver(creator, 4, random.Random(2)).fix_missing_references()

    assert resolved == 4
    bs = creator.pool.instances("B")
    for instance in creator.pool.instances("A"):
        assert any(instance.b is other for other in bs)
    assert creator.pool.size("B") == 4


def test_existing_references_are_untouched():
    a = EntityDescriptor("A")
    b = EntityDescriptor("B", fields=[ref("a", "A")])
    creator = make_creator([a, b])
    creator.ensure(a, 3)
    creator.ensure(b, 3)
    before = [instance.a for instance in creator.pool.instances("B")]

    assert ReferenceResolver(creator, 3).fix_missing_references() == 0
    after = [instance.a for instance in creator.pool.instances("B")]
    assert all(x is y for x, y in zip(before, after))


def test_self_reference_is_filled():
    """The first Category sees an empty pool at creation; the resolver fills it."""
    category = EntityDescriptor("Category", fields=[ref("parent", "Category")])
    creator = make_creator([category])
    creator.ensure(category, 3)

    first = creator.pool.instances("Category")[0]
    assert getattr(first, "parent", None) is None

    ReferenceResolver(creator, 3).fix_missing_references()

    assert all(c.parent is not None for c in creator.pool.instances("Category"))


def test_empty_target_pool_gets_fallback_batch(library_catalog):
    """Books created alone trigger one fallback batch of Authors."""
    creator = make_creator(library_catalog.list_entity_types())
    creator.ensure(library_catalog.get("Book"), 20)

    ReferenceResolver(creator, 20).fix_missing_references()

    authors = creator.pool.instances("Author")
    assert len(authors) == fallback_batch_size(20) == 2
    for book in creator.pool.instances("Book"):
        assert any(book.author is a for a in authors)
    assert creator.report.created["Author"] == 2


def test_rerun_is_safe(library_catalog):
    """A second pass finds nothing left to do."""
    creator = make_creator(library_catalog.list_entity_types())
    creator.ensure(library_catalog.get("Book"), 10)
    resolver = ReferenceResolver(creator, 10)

    assert resolver.fix_missing_references() == 10
    assert resolver.fix_missing_references() == 0
    assert creator.pool.size("Author") == 1


def test_failed_fallback_leaves_reference_unset():
    """When the fallback cannot create anything the field is skipped, not fatal."""

    def broken():
        raise RuntimeError("no owners today")

    owner = EntityDescriptor("Owner", factory=broken)
    pet = EntityDescriptor("Pet", fields=[ref("owner", "Owner")])
    creator = make_creator([owner, pet])
    creator.ensure(pet, 3)

    assert ReferenceResolver(creator, 3).fix_missing_references() == 0

    for instance in creator.pool.instances("Pet"):
        assert getattr(instance, "owner", None) is None
    skips = creator.report.skips_for("resolve")
    assert len(skips) == 3
    assert all(s.field == "owner" and "Owner" in s.reason for s in skips)
    assert creator.report.failures["Owner"] == 3


def test_unknown_target_is_reported_once_per_pass():
    pet = EntityDescriptor("Pet", fields=[ref("vet", "Vet")])
    creator = make_creator([pet])
    creator.ensure(pet, 4)

    assert ReferenceResolver(creator, 4).fix_missing_references() == 0

    skips = creator.report.skips_for("resolve")
    assert len(skips) == 1
    assert skips[0].entity == "Pet"
    assert skips[0].field == "vet"
