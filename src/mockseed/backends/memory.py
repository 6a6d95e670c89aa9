"""Memory backend - in-memory sink for testing without a database."""

from typing import Any

from mockseed.backends.base import PersistenceSink
from mockseed.models import EntityDescriptor


class MemorySink(PersistenceSink):
    """
    In-memory sink for seeding without a database.

    Simulates database behavior:
    - Assigns identity fields (sequential integers per entity type, from 1)
    - Stores instances in memory, in persist order
    - Counts flushes

    Use case: fast unit tests, offline development, prototyping catalogs.
    """

    def __init__(self):
        """Initialize memory sink with empty state."""
        self._data: dict[str, list[Any]] = {}
        self._sequences: dict[str, int] = {}
        self.flush_count = 0

    def persist(self, entity: EntityDescriptor, instance: Any) -> None:
        """
        Simulate an insert: assign identity if unset, store in memory.

        Args:
            entity: Entity type of the instance
            instance: Populated instance
        """
        identity = entity.identity_field
        if identity is not None and identity.get(instance) is None:
            sequence = self._sequences.get(entity.name, 1)
            identity.set(instance, sequence)
            self._sequences[entity.name] = sequence + 1

        self._data.setdefault(entity.name, []).append(instance)

    def flush(self) -> None:
        self.flush_count += 1

    def get_data(self, entity_name: str) -> list[Any]:
        """
        Get persisted instances for inspection.

        Args:
            entity_name: Entity type name

        Returns:
            Instances in persist order
        """
        return self._data.get(entity_name, [])

    def clear(self):
        """Clear all in-memory data and sequences."""
        self._data.clear()
        self._sequences.clear()
        self.flush_count = 0
