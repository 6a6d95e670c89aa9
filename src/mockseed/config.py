"""
Configuration management for mockseed.

Loads and validates configuration from mockseed.toml files and MOCKSEED_*
environment variables using Pydantic.
"""

from __future__ import annotations

import sys
from enum import Enum
from pathlib import Path
from typing import Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

CONFIG_FILENAME = "mockseed.toml"


class SeedLevel(str, Enum):
    """Scale tier: how many instances to create per entity type."""

    LOW = "LOW"
    MID = "MID"
    HIGH = "HIGH"

    @property
    def count(self) -> int:
        return LEVEL_COUNTS[self]


LEVEL_COUNTS = {SeedLevel.LOW: 100, SeedLevel.MID: 500, SeedLevel.HIGH: 1000}


class DatabaseConfig(BaseSettings):
    """Database connection configuration (Postgres sink only)."""

    model_config = SettingsConfigDict(env_prefix="MOCKSEED_DATABASE_")

    url: Optional[str] = Field(
        default=None,
        description="PostgreSQL connection URL; in-memory sink when unset",
    )
    schema_name: str = Field(
        default="public", description="Schema holding the seeded tables"
    )


class SeedSettings(BaseSettings):
    """Seeding run configuration."""

    model_config = SettingsConfigDict(env_prefix="MOCKSEED_")

    enabled: bool = Field(default=True, description="Skip the entire run when false")
    level: SeedLevel = Field(default=SeedLevel.LOW, description="Scale tier")
    value_source: str = Field(
        default="random",
        description="Value source name: 'random', 'semantic' or a registered source",
    )
    seed: Optional[int] = Field(
        default=None, description="Fixed random seed for reproducible runs"
    )
    locale: Optional[str] = Field(
        default=None, description="Faker locale for the semantic value source"
    )

    @field_validator("level", mode="before")
    @classmethod
    def normalize_level(cls, value):
        """Accept tiers case-insensitively (low, Mid, HIGH)."""
        if isinstance(value, str):
            return value.strip().upper()
        return value

    def resolve_count(self) -> int:
        """Target instance count per entity type for the configured level."""
        return self.level.count


class Config(BaseSettings):
    """Main configuration for mockseed."""

    seeding: SeedSettings = Field(default_factory=SeedSettings)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)

    @classmethod
    def from_toml(cls, path: Path | str) -> Config:
        """
        Load configuration from TOML file.

        Args:
            path: Path to mockseed.toml file

        Returns:
            Config instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config file is invalid
        """
        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_path, "rb") as f:
            data = tomllib.load(f)

        return cls(
            seeding=SeedSettings(**data.get("seeding", {})),
            database=DatabaseConfig(**data.get("database", {})),
        )

    @classmethod
    def find_and_load(cls, start_dir: Optional[Path] = None) -> Config:
        """
        Find and load configuration from mockseed.toml.

        Searches from start_dir up through parent directories. Falls back to
        defaults (plus environment variables) when no file is found.

        Args:
            start_dir: Directory to start search (defaults to current directory)

        Returns:
            Config instance
        """
        if start_dir is None:
            start_dir = Path.cwd()

        current = Path(start_dir).resolve()

        # Walk up directory tree
        while True:
            config_path = current / CONFIG_FILENAME
            if config_path.exists():
                return cls.from_toml(config_path)

            # Check if we've reached filesystem root
            parent = current.parent
            if parent == current:
                break
            current = parent

        return cls()
