"""Persistence sink interface."""

from abc import ABC, abstractmethod
from typing import Any

from mockseed.models import EntityDescriptor


class PersistenceSink(ABC):
    """
    Destination for seeded instances.

    The seeder calls persist() once per created instance and flush() after each
    of its four mutation phases. flush() errors propagate to the caller.
    """

    @abstractmethod
    def persist(self, entity: EntityDescriptor, instance: Any) -> None:
        """Store a new instance, assigning its identity if the store generates one."""
        pass

    @abstractmethod
    def flush(self) -> None:
        """Make all changes so far (references, collections, links) visible."""
        pass
