"""Pytest configuration and shared fixtures."""

import os

import pytest

from mockseed import (
    EntityDescriptor,
    FieldDescriptor,
    MemorySink,
    RelationKind,
    Seeder,
    SeedSettings,
    StaticCatalog,
)


def build_library_catalog() -> StaticCatalog:
    """
    Author ←─ Book ─→ Tag (many-to-many)

    Author.books is the collection mirrored by Book.author.
    """
    author = EntityDescriptor(
        "Author",
        fields=[
            FieldDescriptor("id", "integer", RelationKind.IDENTITY),
            FieldDescriptor("name", "string"),
            FieldDescriptor("books", None, RelationKind.COLLECTION, target="Book"),
        ],
    )
    book = EntityDescriptor(
        "Book",
        fields=[
            FieldDescriptor("id", "integer", RelationKind.IDENTITY),
            FieldDescriptor("title", "string"),
            FieldDescriptor("price", "decimal"),
            FieldDescriptor("author", None, RelationKind.SINGULAR, target="Author"),
            FieldDescriptor("tags", None, RelationKind.MANY_TO_MANY, target="Tag"),
        ],
    )
    tag = EntityDescriptor(
        "Tag",
        fields=[
            FieldDescriptor("id", "integer", RelationKind.IDENTITY),
            FieldDescriptor("label", "string"),
        ],
    )
    # Book listed before Author; ordering still creates Author first
    return StaticCatalog([book, author, tag])


@pytest.fixture
def library_catalog() -> StaticCatalog:
    """Catalog with a one-to-many (Author/Book) and a many-to-many (Book/Tag)."""
    return build_library_catalog()


@pytest.fixture
def sink() -> MemorySink:
    return MemorySink()


@pytest.fixture
def seeded(request, library_catalog: StaticCatalog, sink: MemorySink):
    """
    Fixture for seeded data - works with @seed_data() decorator.

    Runs a Seeder over the library catalog with the options attached by the
    decorator and returns the SeedingResult.
    """
    options = getattr(request.function, "_seed_options", None)
    if options is None:
        # No decorator, return None (test should not use this fixture)
        return None

    settings = SeedSettings(
        value_source=options["value_source"], seed=options["seed"]
    )
    return Seeder(
        library_catalog, sink, settings, target_count=options["count"]
    ).run()


@pytest.fixture
def db_conn():
    """
    Provide a test database connection.

    Skips unless MOCKSEED_TEST_DATABASE_URL points at a PostgreSQL database.
    """
    url = os.getenv("MOCKSEED_TEST_DATABASE_URL")
    if not url:
        pytest.skip("MOCKSEED_TEST_DATABASE_URL not set")

    import psycopg

    conn = psycopg.connect(url, autocommit=False)

    yield conn

    # Rollback any changes
    conn.rollback()
    conn.close()


@pytest.fixture
def test_schema(db_conn) -> str:
    """
    Create a test schema with tables matching the library catalog.

    Returns the schema name.
    """
    schema_name = "test_mockseed"

    with db_conn.cursor() as cur:
        cur.execute(f"DROP SCHEMA IF EXISTS {schema_name} CASCADE")
        cur.execute(f"CREATE SCHEMA {schema_name}")
        cur.execute(f"""
            CREATE TABLE {schema_name}.author (
                id INTEGER GENERATED ALWAYS AS IDENTITY PRIMARY KEY,
                name TEXT
            )
        """)
        cur.execute(f"""
            CREATE TABLE {schema_name}.tag (
                id INTEGER GENERATED ALWAYS AS IDENTITY PRIMARY KEY,
                label TEXT
            )
        """)
        cur.execute(f"""
            CREATE TABLE {schema_name}.book (
                id INTEGER GENERATED ALWAYS AS IDENTITY PRIMARY KEY,
                title TEXT,
                price NUMERIC(10, 2),
                author_id INTEGER REFERENCES {schema_name}.author(id)
            )
        """)
        cur.execute(f"""
            CREATE TABLE {schema_name}.book_tags (
                book_id INTEGER NOT NULL REFERENCES {schema_name}.book(id),
                tag_id INTEGER NOT NULL REFERENCES {schema_name}.tag(id)
            )
        """)
        db_conn.commit()

    yield schema_name

    # Cleanup
    with db_conn.cursor() as cur:
        cur.execute(f"DROP SCHEMA IF EXISTS {schema_name} CASCADE")
        db_conn.commit()
