"""Persistence sinks for seeded instances."""

from mockseed.backends.base import PersistenceSink
from mockseed.backends.memory import MemorySink
from mockseed.backends.postgres import PostgresSink

__all__ = ["PersistenceSink", "MemorySink", "PostgresSink"]
