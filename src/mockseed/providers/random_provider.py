"""Type-driven random value source."""

import random
from collections.abc import Callable
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Any

from mockseed.models import EntityDescriptor, FieldDescriptor
from mockseed.providers.base import ValueSource


class RandomValueSource(ValueSource):
    """Generate values from the declared type alone, with light name hints for strings."""

    def __init__(self, rng: random.Random | None = None, **options: Any):
        super().__init__(rng, **options)
        # value_type → generator taking the field descriptor
        self.type_generators: dict[str, Callable[[FieldDescriptor], Any]] = {
            "string": self.string_value,
            "integer": lambda f: self.rng.randrange(1000),
            "long": lambda f: self.rng.randrange(100000),
            "float": lambda f: self.money(),
            "decimal": lambda f: Decimal(f"{self.money():.2f}"),
            "boolean": lambda f: self.rng.random() < 0.5,
            "date": lambda f: self.date_value(),
            "datetime": lambda f: self.datetime_value(),
            "enum": self.enum_value,
        }

    def provide(
        self, entity: EntityDescriptor, field: FieldDescriptor, index: int
    ) -> Any:
        """Dispatch on the field's value type; unsupported types yield None."""
        generator = self.type_generators.get(field.value_type or "")
        if generator is None:
            return None
        return generator(field)

    def string_value(self, field: FieldDescriptor) -> str:
        name = field.name.lower()
        if "email" in name:
            return f"user{self.rng.randrange(1_000_000)}@example.com"
        if "name" in name:
            return f"{field.name}-{self.rng.randrange(1_000_000)}"
        return f"str{self.rng.randrange(10000)}"

    def enum_value(self, field: FieldDescriptor) -> Any:
        values = field.choice_values
        if not values:
            return None
        return self.rng.choice(values)

    def money(self) -> float:
        return round(self.rng.random() * 10000.0) / 100.0

    def date_value(self) -> date:
        return date.today() - timedelta(days=self.rng.randrange(3650))

    def datetime_value(self) -> datetime:
        return datetime.now() - timedelta(seconds=self.rng.randrange(365 * 24 * 3600))
