"""Base value source interface."""

import random
from abc import ABC, abstractmethod
from typing import Any

from mockseed.models import EntityDescriptor, FieldDescriptor


class ValueSource(ABC):
    """
    Base class for scalar value sources.

    Subclass this to create custom sources that can be registered and selected
    by name in the seeding configuration.

    Example:
        >>> class SKUSource(ValueSource):
        ...     def provide(self, entity, field, index):
        ...         if field.name == "sku":
        ...             return f"SKU-{index:06d}"
        ...         return None
        >>>
        >>> register_value_source("sku", SKUSource)
    """

    def __init__(self, rng: random.Random | None = None, **options: Any):
        self.rng = rng or random.Random()

    @abstractmethod
    def provide(
        self, entity: EntityDescriptor, field: FieldDescriptor, index: int
    ) -> Any:
        """
        Provide a value for a scalar field.

        Args:
            entity: Entity type being populated
            field: Field being populated
            index: Creation index of the instance within its type (0-based)

        Returns:
            A value, or None to leave the field unset. Unsupported value types
            must return None rather than raise.
        """
        pass
