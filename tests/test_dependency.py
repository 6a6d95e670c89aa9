"""Tests for cycle-tolerant creation ordering."""

import random

from mockseed import DependencyOrderer, EntityDescriptor, FieldDescriptor, RelationKind


def ref(name: str, target: str) -> FieldDescriptor:
    return FieldDescriptor(name, None, RelationKind.SINGULAR, target=target)


def names(entities) -> list[str]:
    return [e.name for e in entities]


def test_order_puts_dependencies_first(library_catalog):
    """Referenced types come before the types referencing them."""
    ordered = names(DependencyOrderer().order(library_catalog.list_entity_types()))

    assert sorted(ordered) == ["Author", "Book", "Tag"]
    assert ordered.index("Author") < ordered.index("Book")


def test_order_keeps_input_order_within_a_round():
    """Types freed in the same round keep catalog order."""
    a = EntityDescriptor("A")
    b = EntityDescriptor("B")
    c = EntityDescriptor("C", fields=[ref("a", "A"), ref("b", "B")])
    d = EntityDescriptor("D", fields=[ref("c", "C")])

    ordered = names(DependencyOrderer().order([d, c, b, a]))

    assert ordered == ["B", "A", "C", "D"]


def test_order_tolerates_cycles():
    """A → B → C → A terminates and returns each type exactly once."""
    a = EntityDescriptor("A", fields=[ref("b", "B")])
    b = EntityDescriptor("B", fields=[ref("c", "C")])
    c = EntityDescriptor("C", fields=[ref("a", "A")])

    ordered = names(DependencyOrderer(random.Random(1)).order([a, b, c]))

    assert sorted(ordered) == ["A", "B", "C"]
    assert len(ordered) == 3


def test_order_appends_cycle_after_free_types():
    """Acyclic types are peeled before the cyclic remainder is appended."""
    root = EntityDescriptor("Root")
    a = EntityDescriptor("A", fields=[ref("b", "B"), ref("root", "Root")])
    b = EntityDescriptor("B", fields=[ref("a", "A")])

    ordered = names(DependencyOrderer().order([a, b, root]))

    assert ordered[0] == "Root"
    assert sorted(ordered[1:]) == ["A", "B"]


def test_order_cycle_tie_break_is_reproducible_with_seed():
    """Same seed, same order for the cyclic remainder."""
    entities = [
        EntityDescriptor(f"T{i}", fields=[ref("next", f"T{(i + 1) % 6}")]) for i in range(6)
    ]

    first = names(DependencyOrderer(random.Random(42)).order(entities))
    second = names(DependencyOrderer(random.Random(42)).order(entities))

    assert first == second


def test_self_reference_is_not_a_dependency():
    """A self-referencing type is free as soon as its other dependencies are."""
    category = EntityDescriptor("Category", fields=[ref("parent", "Category")])
    product = EntityDescriptor("Product", fields=[ref("category", "Category")])

    ordered = names(DependencyOrderer().order([product, category]))

    assert ordered == ["Category", "Product"]


def test_targets_outside_input_are_ignored():
    """References to types not being ordered do not block anything."""
    book = EntityDescriptor("Book", fields=[ref("publisher", "Publisher")])

    assert names(DependencyOrderer().order([book])) == ["Book"]


def test_dependencies_map():
    """dependencies() lists other input types reached via singular references."""
    a = EntityDescriptor("A", fields=[ref("self_ref", "A"), ref("b", "B")])
    b = EntityDescriptor(
        "B",
        fields=[FieldDescriptor("as_", None, RelationKind.COLLECTION, target="A")],
    )

    deps = DependencyOrderer.dependencies([a, b])

    assert deps == {"A": {"B"}, "B": set()}
