"""Per-run registry of created instances."""

import random
from collections.abc import Iterator
from typing import Any


class InstancePool:
    """
    Entity name → ordered list of instances created in this run.

    Pools only grow: there is no way to remove an instance. The one mutation
    besides appending is shuffle(), used by many-to-many linking; it reorders
    a pool in place and the new order is what later phases iterate over.
    """

    def __init__(self):
        self._pools: dict[str, list[Any]] = {}

    def add(self, entity: str, instance: Any) -> None:
        self._pools.setdefault(entity, []).append(instance)

    def size(self, entity: str) -> int:
        return len(self._pools.get(entity, ()))

    def is_empty(self, entity: str) -> bool:
        return self.size(entity) == 0

    def instances(self, entity: str) -> list[Any]:
        """Snapshot of the pool for ``entity`` (empty list if none)."""
        return list(self._pools.get(entity, ()))

    def choice(self, entity: str, rng: random.Random) -> Any:
        """Uniform pick from the pool, or None when it is empty."""
        pool = self._pools.get(entity)
        if not pool:
            return None
        return rng.choice(pool)

    def shuffle(self, entity: str, rng: random.Random) -> None:
        """Shuffle the pool for ``entity`` in place."""
        pool = self._pools.get(entity)
        if pool:
            rng.shuffle(pool)

    def head(self, entity: str, count: int) -> list[Any]:
        """First ``count`` instances in current pool order."""
        return list(self._pools.get(entity, ())[:count])

    def entities(self) -> list[str]:
        """Entity names with a pool, in creation order."""
        return list(self._pools.keys())

    def counts(self) -> dict[str, int]:
        return {name: len(pool) for name, pool in self._pools.items()}

    def __contains__(self, instance: Any) -> bool:
        return any(
            any(member is instance for member in pool) for pool in self._pools.values()
        )

    def __iter__(self) -> Iterator[tuple[str, list[Any]]]:
        """Iterate (entity, snapshot) pairs over the pools present right now."""
        for name in self.entities():
            yield name, self.instances(name)

    def __len__(self) -> int:
        return sum(len(pool) for pool in self._pools.values())
