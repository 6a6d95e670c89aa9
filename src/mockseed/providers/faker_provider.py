"""Faker-based value source with field-name heuristics."""

import random
from collections.abc import Callable
from typing import Any

from faker import Faker

from mockseed.models import FieldDescriptor
from mockseed.providers.random_provider import RandomValueSource

DEPARTMENTS = (
    "Books", "Movies", "Music", "Games", "Electronics", "Computers", "Home",
    "Garden", "Tools", "Grocery", "Health", "Beauty", "Toys", "Kids", "Baby",
    "Clothing", "Shoes", "Jewelry", "Sports", "Outdoors", "Automotive", "Industrial",
)

PRODUCT_ADJECTIVES = (
    "Small", "Ergonomic", "Rustic", "Intelligent", "Gorgeous", "Incredible",
    "Practical", "Sleek", "Durable", "Lightweight", "Heavy Duty", "Synergistic",
)

PRODUCT_MATERIALS = (
    "Steel", "Wooden", "Concrete", "Plastic", "Cotton", "Granite", "Rubber",
    "Leather", "Silk", "Wool", "Linen", "Marble", "Iron", "Bronze", "Copper",
)

PRODUCT_NOUNS = (
    "Chair", "Car", "Computer", "Gloves", "Pants", "Shirt", "Table", "Shoes",
    "Hat", "Plate", "Knife", "Bottle", "Coat", "Lamp", "Keyboard", "Bag",
    "Bench", "Clock", "Watch", "Wallet",
)


def product_name(fake: Faker) -> str:
    """Adjective + material + noun, e.g. "Sleek Granite Lamp"."""
    return " ".join(
        fake.random_element(words)
        for words in (PRODUCT_ADJECTIVES, PRODUCT_MATERIALS, PRODUCT_NOUNS)
    )


class FakerValueSource(RandomValueSource):
    """
    Generate realistic data using the Faker library.

    String fields are matched case-insensitively against NAME_HEURISTICS, first
    match wins; everything else falls back to the type-driven random values.
    """

    # (predicate on lower-cased field name, Faker method)
    NAME_HEURISTICS: list[tuple[Callable[[str], bool], Callable[[Faker], Any]]] = [
        (lambda n: "email" in n, lambda fake: fake.email()),
        (lambda n: "first" in n and "name" in n, lambda fake: fake.first_name()),
        (lambda n: "last" in n and "name" in n, lambda fake: fake.last_name()),
        (lambda n: "name" in n, lambda fake: fake.name()),
        (lambda n: "phone" in n, lambda fake: fake.phone_number()),
        (lambda n: "address" in n, lambda fake: fake.address()),
        (lambda n: "company" in n, lambda fake: fake.company()),
        (lambda n: "title" in n, lambda fake: fake.catch_phrase()),
        (lambda n: "desc" in n, lambda fake: fake.sentence()),
        (lambda n: "category" in n, lambda fake: fake.random_element(DEPARTMENTS)),
        (lambda n: "product" in n, lambda fake: product_name(fake)),
    ]

    def __init__(
        self,
        rng: random.Random | None = None,
        faker: Faker | None = None,
        locale: str | None = None,
        seed: int | None = None,
        **options: Any,
    ):
        """
        Initialize the source.

        Args:
            rng: Random source for the type-driven fallback
            faker: Realistic-text generator (built from locale when omitted)
            locale: Faker locale, e.g. "en_US" or "de_DE"
            seed: Seed for the Faker instance, for reproducible runs
        """
        super().__init__(rng, **options)
        self.fake = faker or Faker(locale)
        if seed is not None:
            self.fake.seed_instance(seed)
        self.type_generators["date"] = lambda f: self.fake.date_between("-10y", "today")
        self.type_generators["datetime"] = lambda f: self.fake.date_time_between("-1y", "now")

    def string_value(self, field: FieldDescriptor) -> str:
        name = field.name.lower()
        for matches, make in self.NAME_HEURISTICS:
            if matches(name):
                return make(self.fake)
        return f"{self.fake.word()}-{self.rng.randrange(10000)}"
