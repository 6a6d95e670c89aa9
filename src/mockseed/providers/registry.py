"""Value source registry for built-in and custom sources."""

from typing import Any

from mockseed.exceptions import UnknownValueSourceError
from mockseed.providers.base import ValueSource
from mockseed.providers.faker_provider import FakerValueSource
from mockseed.providers.random_provider import RandomValueSource

BUILTIN_SOURCES: dict[str, type] = {
    "random": RandomValueSource,
    "semantic": FakerValueSource,
}


class ValueSourceRegistry:
    """Registry of value sources by name."""

    def __init__(self):
        self._sources: dict[str, type] = dict(BUILTIN_SOURCES)

    def register(self, name: str, source_class: type) -> None:
        """
        Register a value source.

        Args:
            name: Source name (used in the value_source setting)
            source_class: Class with a provide(entity, field, index) method

        Raises:
            ValueError: If the class has no provide method
        """
        if not hasattr(source_class, "provide"):
            raise ValueError(
                f"Value source class must have 'provide' method. "
                f"Class {source_class.__name__} is missing it."
            )
        self._sources[name] = source_class

    def get(self, name: str) -> type | None:
        return self._sources.get(name)

    def list_sources(self) -> list[str]:
        return list(self._sources.keys())

    def clear(self) -> None:
        """Drop custom registrations, keeping the built-ins (for testing)."""
        self._sources = dict(BUILTIN_SOURCES)


# Global registry instance
_registry = ValueSourceRegistry()


def register_value_source(name: str, source_class: type) -> None:
    """
    Register a custom value source (user-facing API).

    The class is instantiated once per run with the keywords ``rng``,
    ``locale`` and ``seed``; subclasses of ValueSource accept them already.

    Example:
        >>> from mockseed import ValueSource, register_value_source
        >>>
        >>> class SKUSource(ValueSource):
        ...     def provide(self, entity, field, index):
        ...         return f"SKU-{index:06d}" if field.name == "sku" else None
        >>>
        >>> register_value_source("sku", SKUSource)
    """
    _registry.register(name, source_class)


def get_value_source(name: str) -> type | None:
    return _registry.get(name)


def list_value_sources() -> list[str]:
    return _registry.list_sources()


def clear_value_sources() -> None:
    """Remove custom value sources (for testing)."""
    _registry.clear()


def create_value_source(name: str, **options: Any) -> ValueSource:
    """
    Instantiate a registered value source.

    Args:
        name: Registered source name ("random", "semantic", or custom)
        **options: Passed to the source constructor (rng, locale, seed, ...)

    Raises:
        UnknownValueSourceError: If no source is registered under ``name``
    """
    source_class = _registry.get(name)
    if source_class is None:
        raise UnknownValueSourceError(name, _registry.list_sources())
    return source_class(**options)
