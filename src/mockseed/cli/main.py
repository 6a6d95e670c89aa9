"""CLI commands for mockseed."""

import json
import logging
import random
import sys

import click
import psycopg

from mockseed.backends import MemorySink, PostgresSink
from mockseed.catalog import StaticCatalog
from mockseed.config import Config, SeedLevel
from mockseed.dependency import DependencyOrderer
from mockseed.exceptions import MockSeedError
from mockseed.providers.registry import list_value_sources
from mockseed.seeder import Seeder


def _load_catalog(path: str) -> StaticCatalog:
    try:
        return StaticCatalog.from_file(path)
    except MockSeedError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@click.group()
@click.version_option(package_name="mockseed")
def cli() -> None:
    """mockseed - synthesize consistent mock data across related entity types."""
    pass


@cli.command()
@click.argument("catalog", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--level",
    type=click.Choice([level.value for level in SeedLevel], case_sensitive=False),
    help="Scale tier (LOW=100, MID=500, HIGH=1000 per type)",
)
@click.option("--count", type=int, help="Instances per type (overrides --level)")
@click.option("--value-source", help="Value source: random, semantic or registered name")
@click.option("--seed", type=int, help="Fixed random seed")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    help="Path to mockseed.toml (default: search upward from cwd)",
)
@click.option("--database-url", help="PostgreSQL URL; in-memory when omitted")
@click.option("--schema", "schema_name", help="Schema for the Postgres sink")
@click.option("--json", "output_json", is_flag=True, help="Output report as JSON")
@click.option("--verbose", "-v", is_flag=True, help="Debug logging")
def run(
    catalog: str,
    level: str | None,
    count: int | None,
    value_source: str | None,
    seed: int | None,
    config_path: str | None,
    database_url: str | None,
    schema_name: str | None,
    output_json: bool,
    verbose: bool,
) -> None:
    """Seed every entity type of CATALOG (YAML or JSON)."""
    if verbose:
        log_level = logging.DEBUG
    elif output_json:
        # keep stdout parseable
        log_level = logging.WARNING
    else:
        log_level = logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = Config.from_toml(config_path) if config_path else Config.find_and_load()
    overrides = {
        key: value
        for key, value in {"value_source": value_source, "seed": seed}.items()
        if value is not None
    }
    if level is not None:
        overrides["level"] = SeedLevel(level.upper())
    settings = config.seeding.model_copy(update=overrides)

    entity_catalog = _load_catalog(catalog)
    url = database_url or config.database.url
    schema = schema_name or config.database.schema_name

    try:
        if url:
            with psycopg.connect(url) as conn, PostgresSink(conn, schema) as sink:
                result = Seeder(entity_catalog, sink, settings, target_count=count).run()
        else:
            result = Seeder(entity_catalog, MemorySink(), settings, target_count=count).run()
    except MockSeedError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    report = result.report
    if output_json:
        click.echo(json.dumps(report.to_dict(), indent=2))
        return

    click.echo(f"Phase: {report.phase}")
    for line in report.summary_lines():
        click.echo(f"  {line}")
    if report.skips:
        click.echo(f"Skipped: {len(report.skips)} (use --json for details)")


@cli.command()
@click.argument("catalog", type=click.Path(exists=True, dir_okay=False))
@click.option("--seed", type=int, help="Fixed random seed (default: seeding.seed from config)")
def order(catalog: str, seed: int | None) -> None:
    """
    Print the creation order for CATALOG.

    With the same seed, a dependency cycle is broken in the same order as by
    `mockseed run --seed`.
    """
    if seed is None:
        seed = Config.find_and_load().seeding.seed
    entity_catalog = _load_catalog(catalog)
    orderer = DependencyOrderer(random.Random(seed))
    for position, entity in enumerate(
        orderer.order(entity_catalog.list_entity_types()), start=1
    ):
        click.echo(f"{position}. {entity.name}")


@cli.command()
def sources() -> None:
    """List registered value sources."""
    for name in list_value_sources():
        click.echo(name)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
