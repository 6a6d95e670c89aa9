"""Tests for catalog loading from code, YAML and JSON."""

import json
from pathlib import Path

import pytest

from mockseed import EntityDescriptor, FieldDescriptor, RelationKind, StaticCatalog
from mockseed.exceptions import CatalogError

LIBRARY_YAML = """
entities:
  Author:
    fields:
      - {name: id, kind: identity}
      - {name: name}
      - {name: books, kind: one_to_many, target: Book, mapped_by: author}
  Book:
    table: books
    fields:
      - {name: id, kind: identity, type: integer}
      - {name: title}
      - {name: price, type: decimal}
      - {name: author, kind: reference, target: Author}
      - {name: tags, kind: many-to-many, target: Tag, join_table: book_tag}
      - {name: status, choices: [DRAFT, PUBLISHED]}
  Tag:
    fields:
      - {name: label}
"""


def test_static_catalog_keeps_order():
    a = EntityDescriptor("A")
    b = EntityDescriptor("B")
    catalog = StaticCatalog([b, a])

    assert [e.name for e in catalog.list_entity_types()] == ["B", "A"]
    assert catalog.get("A") is a
    assert catalog.get("Z") is None
    assert len(catalog) == 2


def test_duplicate_names_are_rejected():
    with pytest.raises(CatalogError, match="duplicate entity name 'A'"):
        StaticCatalog([EntityDescriptor("A"), EntityDescriptor("A")])


def test_from_yaml(tmp_path: Path):
    """YAML catalogs produce descriptors with kinds, defaults and Postgres hints."""
    path = tmp_path / "catalog.yaml"
    path.write_text(LIBRARY_YAML)

    catalog = StaticCatalog.from_yaml(path)

    assert [e.name for e in catalog] == ["Author", "Book", "Tag"]
    author = catalog.get("Author")
    book = catalog.get("Book")

    assert author.identity_field.value_type == "integer"
    assert author.get_field("name").value_type == "string"
    books = author.get_field("books")
    assert books.kind is RelationKind.COLLECTION
    assert books.mapped_by == "author"

    assert book.table_name == "books"
    assert book.get_field("author").kind is RelationKind.SINGULAR
    assert book.get_field("author").column_name == "author_id"
    assert book.get_field("tags").kind is RelationKind.MANY_TO_MANY
    assert book.get_field("tags").join_table == "book_tag"
    status = book.get_field("status")
    assert status.value_type == "enum"
    assert status.choice_values == ["DRAFT", "PUBLISHED"]


def test_from_json(tmp_path: Path):
    path = tmp_path / "catalog.json"
    path.write_text(
        json.dumps(
            {
                "entities": {
                    "Category": {
                        "fields": [
                            {"name": "title"},
                            {"name": "parent", "kind": "many_to_one", "target": "Category"},
                        ]
                    }
                }
            }
        )
    )

    catalog = StaticCatalog.from_file(path)

    parent = catalog.get("Category").get_field("parent")
    assert parent.kind is RelationKind.SINGULAR
    assert parent.target == "Category"


def test_file_entities_are_records(tmp_path: Path):
    path = tmp_path / "catalog.yml"
    path.write_text(LIBRARY_YAML)

    tag = StaticCatalog.from_file(path).get("Tag").factory()
    tag.label = "fiction"

    assert tag.entity == "Tag"
    assert tag.to_dict() == {"label": "fiction"}


def test_extends_inherits_fields():
    catalog = StaticCatalog.from_dict(
        {
            "entities": {
                "Post": {"extends": "Content", "fields": [{"name": "body"}]},
                "Content": {
                    "abstract": True,
                    "fields": [{"name": "created", "type": "datetime"}],
                },
            }
        }
    )

    post = catalog.get("Post")
    content = catalog.get("Content")
    assert post.supertype is content
    assert [f.name for f in post.all_fields()] == ["created", "body"]
    assert content.abstract
    assert content.factory is None


@pytest.mark.parametrize(
    "data, message",
    [
        ({"entities": {"A": {"extends": "Nope"}}}, "unknown supertype 'Nope'"),
        (
            {"entities": {"A": {"extends": "B"}, "B": {"extends": "A"}}},
            "inheritance cycle",
        ),
        ({"entities": {"A": {"fields": [{"name": "x", "kind": "weird"}]}}}, "unknown kind"),
        ({"entities": {"A": {"fields": [{"name": "x", "kind": "reference"}]}}}, "needs a target"),
        ({"entities": {"A": {"fields": [{"name": "x", "colour": "red"}]}}}, "colour"),
        ({"things": {}}, "entities"),
        (["not", "a", "mapping"], "top level must be a mapping"),
    ],
)
def test_malformed_catalogs(data, message):
    with pytest.raises(CatalogError, match=message):
        StaticCatalog.from_dict(data, source="catalog.yaml")


def test_malformed_yaml_names_the_file(tmp_path: Path):
    path = tmp_path / "broken.yaml"
    path.write_text("entities: [unclosed\n")

    with pytest.raises(CatalogError, match="broken.yaml"):
        StaticCatalog.from_yaml(path)


def test_field_descriptor_defaults():
    field = FieldDescriptor("author", None, "singular-reference", target="Author")

    assert field.kind is RelationKind.SINGULAR
    assert field.column_name == "author_id"
    assert FieldDescriptor("title").column_name == "title"
    owner = FieldDescriptor("owner", None, RelationKind.SINGULAR, column="owner_pk")
    assert owner.column_name == "owner_pk"
