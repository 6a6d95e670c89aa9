"""Value sources for scalar fields."""

from mockseed.providers.base import ValueSource
from mockseed.providers.faker_provider import FakerValueSource
from mockseed.providers.random_provider import RandomValueSource

__all__ = ["ValueSource", "RandomValueSource", "FakerValueSource"]
