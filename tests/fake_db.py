from __future__ import annotations

import re
import uuid
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql
from sqlalchemy.schema import CreateTable


class FakeUniqueViolation(Exception):
    pass


class FakeInvalidTextRepresentation(Exception):
    pass


def unique_keys(table: sa.Table) -> list[tuple[str, ...]]:
    """Column groups whose values must be unique: the primary key plus single-column UNIQUE columns."""
    keys: list[tuple[str, ...]] = []
    pk = tuple(c.name for c in table.primary_key.columns)
    if pk:
        keys.append(pk)
    keys.extend((c.name,) for c in table.columns if c.unique)
    return keys


def _check_types(table: sa.Table, row: dict[str, Any]) -> None:
    # Postgres rejects UUID columns holding anything but a UUID literal.
    for c in table.columns:
        value = row[c.name]
        if value is None or not isinstance(c.type, postgresql.UUID):
            continue
        try:
            uuid.UUID(str(value))
        except ValueError:
            raise FakeInvalidTextRepresentation(f'invalid input syntax for type uuid: "{value}"') from None


class FakeDatabase:
    """
    In-memory stand-in for Postgres that understands the statements the seeder emits.

    Transactions snapshot state on entry and restore it if the block raises, so tests can
    assert atomicity. `fail_on_statement=n` raises `fail_with` on the n-th execute (1-based),
    counted across all transactions.
    """

    def __init__(self, *, fail_on_statement: int | None = None, fail_with: Exception | None = None) -> None:
        self.tables: dict[str, list[dict[str, Any]]] = {}
        self.schemas: dict[str, sa.Table] = {}
        self.extensions: set[str] = set()
        self.executed: list[str] = []
        self.commits = 0
        self.rollbacks = 0
        self.fail_on_statement = fail_on_statement
        self.fail_with = fail_with or ConnectionResetError("connection reset by peer")

    def rows(self, table: str) -> list[dict[str, Any]]:
        return list(self.tables.get(table, []))

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[FakeDatabase]:
        snapshot = (
            {name: [dict(r) for r in rows] for name, rows in self.tables.items()},
            dict(self.schemas),
            set(self.extensions),
        )
        try:
            yield self
        except BaseException:
            self.tables, self.schemas, self.extensions = snapshot
            self.rollbacks += 1
            raise
        self.commits += 1

    async def execute(self, statement: Any) -> None:
        self.executed.append(self._describe(statement))
        if self.fail_on_statement is not None and len(self.executed) == self.fail_on_statement:
            raise self.fail_with

        if isinstance(statement, CreateTable):
            table = statement.element
            if table.name not in self.schemas:
                self.schemas[table.name] = table
                self.tables[table.name] = []
        elif isinstance(statement, sa.TextClause):
            m = re.match(r'\s*CREATE EXTENSION IF NOT EXISTS "([^"]+)"', statement.text)
            if m:
                self.extensions.add(m.group(1))
            elif statement.text.strip().upper() != "SELECT 1":
                raise NotImplementedError(statement.text)
        elif isinstance(statement, sa.Insert):
            self._insert(statement)
        else:
            raise NotImplementedError(type(statement).__name__)

    def _describe(self, statement: Any) -> str:
        if isinstance(statement, CreateTable):
            return f"create:{statement.element.name}"
        if isinstance(statement, sa.Insert):
            return f"insert:{statement.table.name}"
        return f"text:{statement.text}"

    def _insert(self, statement: sa.Insert) -> None:
        name = statement.table.name
        if name not in self.tables:
            raise RuntimeError(f'relation "{name}" does not exist')

        compiled = statement.compile(dialect=postgresql.dialect())
        row = {c.name: compiled.params.get(c.name) for c in self.schemas[name].columns}
        _check_types(self.schemas[name], row)
        sql = str(compiled)
        skip_any = "ON CONFLICT DO NOTHING" in sql
        target = re.search(r"ON CONFLICT \(([^)]*)\) DO NOTHING", sql)
        target_cols = tuple(c.strip().strip('"') for c in target.group(1).split(",")) if target else ()

        for key in unique_keys(self.schemas[name]):
            if any(all(existing[c] == row[c] for c in key) for existing in self.tables[name]):
                if skip_any or key == target_cols:
                    return
                raise FakeUniqueViolation(
                    f'duplicate key value violates unique constraint "{name}_{"_".join(key)}_key"'
                )
        self.tables[name].append(row)
