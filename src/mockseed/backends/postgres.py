"""PostgreSQL backend - writes seeded instances with psycopg."""

import logging
from enum import Enum
from typing import Any

from psycopg import Connection, sql
from psycopg.pq import TransactionStatus

from mockseed.backends.base import PersistenceSink
from mockseed.models import EntityDescriptor, FieldDescriptor, RelationKind

logger = logging.getLogger(__name__)


class PostgresSink(PersistenceSink):
    """
    Persist instances into PostgreSQL tables.

    Each instance is INSERTed on persist() with its scalar columns and any
    singular references already set, using RETURNING to capture the identity
    column. flush() writes what later phases changed: foreign key columns whose
    referenced instance changed, and many-to-many join rows whose membership
    changed. Collection fields need no writes, they mirror the foreign keys.

    Every INSERT runs in its own savepoint: a row the database rejects costs
    that instance only and the rest of the run continues.

    The sink does not commit on flush. Use it as a context manager to get one
    enclosing transaction:

        with psycopg.connect(url) as conn, PostgresSink(conn, "public") as sink:
            Seeder(catalog, sink).run()
    """

    def __init__(self, conn: Connection, schema: str = "public"):
        """
        Initialize sink.

        Args:
            conn: PostgreSQL connection (not in autocommit mode)
            schema: Schema name for qualified table names
        """
        self.conn = conn
        self.schema = schema
        # id(instance) → (entity, instance), in persist order
        self._tracked: dict[int, tuple[EntityDescriptor, Any]] = {}
        # id(instance) → {column: identity value last written}
        self._written_refs: dict[int, dict[str, Any]] = {}
        # (id(instance), field name) → identity values last written to the join table
        self._written_links: dict[tuple[int, str], set[Any]] = {}

    def __enter__(self) -> "PostgresSink":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            self.flush()
            self.conn.commit()
        else:
            self.conn.rollback()

    def commit(self) -> None:
        self.conn.commit()

    def _table(self, table: str) -> sql.Identifier:
        return sql.Identifier(self.schema, table)

    def _identity_of(self, instance: Any) -> Any:
        """Identity value of a persisted instance (None if unknown)."""
        if instance is None:
            return None
        tracked = self._tracked.get(id(instance))
        if tracked is None:
            return None
        entity, _ = tracked
        identity = entity.identity_field
        return identity.get(instance) if identity else None

    @staticmethod
    def _adapt(value: Any) -> Any:
        if isinstance(value, Enum):
            return value.name
        return value

    def persist(self, entity: EntityDescriptor, instance: Any) -> None:
        """
        INSERT the instance and capture its generated identity.

        Args:
            entity: Entity type of the instance
            instance: Populated instance
        """
        columns: list[str] = []
        values: list[Any] = []
        refs: dict[str, Any] = {}

        for field in entity.all_fields():
            if field.kind is RelationKind.SCALAR:
                value = field.get(instance)
                if value is None:
                    continue
                columns.append(field.column_name)
                values.append(self._adapt(value))
            elif field.kind is RelationKind.SINGULAR:
                ref = self._identity_of(field.get(instance))
                if ref is None:
                    continue
                columns.append(field.column_name)
                values.append(ref)
                refs[field.column_name] = ref

        identity = entity.identity_field
        if columns:
            query = sql.SQL("INSERT INTO {table} ({columns}) VALUES ({values})").format(
                table=self._table(entity.table_name),
                columns=sql.SQL(", ").join(map(sql.Identifier, columns)),
                values=sql.SQL(", ").join(sql.Placeholder() * len(columns)),
            )
        else:
            query = sql.SQL("INSERT INTO {table} DEFAULT VALUES").format(
                table=self._table(entity.table_name)
            )
        if identity is not None:
            query = query + sql.SQL(" RETURNING {}").format(
                sql.Identifier(identity.column_name)
            )

        # transaction() nests as a savepoint only inside an open transaction
        if self.conn.info.transaction_status == TransactionStatus.IDLE:
            self.conn.execute("SELECT 1")
        with self.conn.transaction(), self.conn.cursor() as cur:
            cur.execute(query, values)
            if identity is not None:
                row = cur.fetchone()
                identity.set(instance, row[0])

        self._tracked[id(instance)] = (entity, instance)
        self._written_refs[id(instance)] = refs

    def flush(self) -> None:
        """Write changed foreign keys and many-to-many links."""
        updates = 0
        with self.conn.cursor() as cur:
            for key, (entity, instance) in self._tracked.items():
                identity = entity.identity_field
                if identity is None:
                    continue
                pk = identity.get(instance)

                changed = self._changed_refs(entity, instance)
                if changed:
                    query = sql.SQL("UPDATE {table} SET {assignments} WHERE {pk} = %s").format(
                        table=self._table(entity.table_name),
                        assignments=sql.SQL(", ").join(
                            sql.SQL("{} = %s").format(sql.Identifier(col)) for col in changed
                        ),
                        pk=sql.Identifier(identity.column_name),
                    )
                    cur.execute(query, [*changed.values(), pk])
                    self._written_refs[key].update(changed)
                    updates += 1

                for field in entity.fields_of_kind(RelationKind.MANY_TO_MANY):
                    updates += self._write_links(cur, entity, field, instance, pk)

        logger.debug(f"Flushed {updates} changes to schema '{self.schema}'")

    def _changed_refs(self, entity: EntityDescriptor, instance: Any) -> dict[str, Any]:
        written = self._written_refs.get(id(instance), {})
        changed = {}
        for field in entity.fields_of_kind(RelationKind.SINGULAR):
            current = self._identity_of(field.get(instance))
            if current != written.get(field.column_name):
                changed[field.column_name] = current
        return changed

    def join_spec(
        self, entity: EntityDescriptor, field: FieldDescriptor
    ) -> tuple[str, str, str]:
        """(join table, source column, target column) for a many-to-many field."""
        table = field.join_table or f"{entity.table_name}_{field.name}"
        if field.join_columns:
            source_col, target_col = field.join_columns
        else:
            source_col = f"{entity.table_name}_id"
            target_col = f"{(field.target or field.name).lower()}_id"
        return table, source_col, target_col

    def _write_links(
        self, cur, entity: EntityDescriptor, field: FieldDescriptor, instance: Any, pk: Any
    ) -> int:
        members = field.get(instance) or []
        current = {self._identity_of(m) for m in members} - {None}
        key = (id(instance), field.name)
        if current == self._written_links.get(key, set()):
            return 0

        table, source_col, target_col = self.join_spec(entity, field)
        cur.execute(
            sql.SQL("DELETE FROM {table} WHERE {source} = %s").format(
                table=self._table(table), source=sql.Identifier(source_col)
            ),
            [pk],
        )
        if current:
            cur.executemany(
                sql.SQL("INSERT INTO {table} ({source}, {target}) VALUES (%s, %s)").format(
                    table=self._table(table),
                    source=sql.Identifier(source_col),
                    target=sql.Identifier(target_col),
                ),
                [(pk, target) for target in sorted(current)],
            )
        self._written_links[key] = current
        return 1
