"""Pytest decorators for seeded test data."""

from collections.abc import Callable


def seed_data(
    count: int = 5,
    value_source: str = "random",
    seed: int | None = None,
):
    """
    Decorator attaching seeding options to a pytest test function.

    Usage:
        @seed_data(count=5, seed=42)
        def test_books(seeded):
            assert seeded.report.created["Book"] == 5

    The options are read by a ``seeded`` fixture, which runs a Seeder over the
    test's catalog and returns the SeedingResult. See tests/conftest.py.
    """

    def decorator(func: Callable) -> Callable:
        func._seed_options = {
            "count": count,
            "value_source": value_source,
            "seed": seed,
        }

        # Return original function (fixture will handle execution)
        return func

    return decorator
