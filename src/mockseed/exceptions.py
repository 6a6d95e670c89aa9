"""Custom exceptions with helpful error messages."""


class MockSeedError(Exception):
    """Base exception for mockseed errors."""

    pass


class CatalogError(MockSeedError):
    """Catalog definition is malformed."""

    def __init__(self, message: str, source: str | None = None):
        where = f" in {source}" if source else ""
        super().__init__(
            f"Invalid entity catalog{where}: {message}\n\n"
            f"Suggestions:\n"
            f"1. Every entity needs a unique name and a list of fields\n"
            f"2. Reference fields need a 'target' entity name\n"
            f"3. Valid kinds: scalar, identity, reference, collection, many_to_many"
        )


class UnknownValueSourceError(MockSeedError):
    """Requested value source is not registered."""

    def __init__(self, name: str, available: list[str]):
        available_str = ", ".join(sorted(available))
        super().__init__(
            f"Unknown value source '{name}'. Available: {available_str}\n\n"
            f"Suggestions:\n"
            f"1. Use one of the built-in sources: 'random' or 'semantic'\n"
            f"2. Register a custom source first:\n"
            f"   register_value_source('{name}', MyValueSource)"
        )


class SeedingStateError(MockSeedError):
    """Seeding run was re-entered or driven out of order."""

    def __init__(self, phase: str):
        super().__init__(
            f"Seeder already ran (phase: {phase}).\n\n"
            f"Suggestions:\n"
            f"1. Create a new Seeder for each run\n"
            f"2. To top up an existing pool, call InstanceCreator.ensure() directly"
        )
