"""Direct relational backend built on SQLAlchemy Core."""

import logging
import re
from collections import defaultdict
from typing import Any, Mapping, Sequence

from sqlalchemy import Column, Table, delete, exists, func, insert, select, update
from sqlalchemy.exc import DBAPIError, IntegrityError, InterfaceError, OperationalError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine

from .. import models  # noqa: F401 - registers the tables on Base.metadata
from ..core.database import Base
from ..core.exceptions import (
    BackendError,
    BackendUnavailableError,
    ConflictError,
    ValidationError,
)
from .base import DataBackend, Embed, Filter, FilterOp, ProcedureCall, Row, SelectQuery

logger = logging.getLogger(__name__)

IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def _is_unique_violation(error: IntegrityError) -> bool:
    pgcode = getattr(error.orig, "pgcode", None) or getattr(error.orig, "sqlstate", None)
    if pgcode:
        return pgcode == "23505"
    return "unique" in str(error.orig).lower()


def _translate(error: SQLAlchemyError, target: str) -> BackendError:
    """Map a SQLAlchemy error onto the backend error taxonomy."""
    message = str(getattr(error, "orig", None) or error)
    logger.warning(
        "Database operation failed",
        extra={"target": target, "error_type": type(error).__name__, "error": message}
    )
    if isinstance(error, IntegrityError):
        if _is_unique_violation(error):
            return ConflictError(detail=message, conflicting_resource={"table": target})
        return ValidationError(detail=message)
    if isinstance(error, (OperationalError, InterfaceError)):
        return BackendUnavailableError(detail=message)
    if isinstance(error, DBAPIError) and error.connection_invalidated:
        return BackendUnavailableError(detail=message)
    return BackendError(detail=message)


def _predicate(column: Column, flt: Filter):
    if flt.op is FilterOp.EQ:
        return column == flt.value
    if flt.op is FilterOp.LTE:
        return column <= flt.value
    if flt.op is FilterOp.GTE:
        return column >= flt.value
    if flt.op is FilterOp.IN:
        return column.in_(list(flt.value))
    raise ValidationError(detail=f"Unsupported filter operator: {flt.op}")


class SqlBackend(DataBackend):
    """
    Data backend that talks to the relational store directly.

    Tables come from the declarative models in ``famtivity.models``. Embedded
    relations are resolved through their declared foreign keys: a foreign key
    on the queried table embeds one object, a foreign key on the embedded
    table embeds a list.
    """

    def __init__(self, engine: AsyncEngine):
        self.engine = engine

    def _table(self, name: str) -> Table:
        table = Base.metadata.tables.get(name)
        if table is None:
            raise ValidationError(detail=f"Unknown table '{name}'")
        return table

    @staticmethod
    def _column(table: Table, name: str) -> Column:
        try:
            return table.c[name]
        except KeyError:
            raise ValidationError(detail=f"Unknown column '{table.name}.{name}'") from None

    def _relation(self, base: Table, target: Table) -> tuple[str, Column, Column]:
        """
        Return ``(kind, local, remote)`` joining ``base`` to ``target``.

        ``kind`` is ``"one"`` when ``base`` holds the foreign key and
        ``"many"`` when ``target`` does.
        """
        for fk in base.foreign_keys:
            if fk.column.table is target:
                return "one", fk.parent, fk.column
        for fk in target.foreign_keys:
            if fk.column.table is base:
                return "many", fk.column, fk.parent
        raise ValidationError(
            detail=f"No relationship between '{base.name}' and '{target.name}'"
        )

    def _related_exists(self, base: Table, target: Table, filters: Sequence[Filter]):
        _, local, remote = self._relation(base, target)
        clauses = [remote == local]
        clauses.extend(
            _predicate(self._column(target, flt.column_name), flt) for flt in filters
        )
        return exists().where(*clauses)

    def _where(self, table: Table, filters: Sequence[Filter], embeds: Sequence[Embed] = ()):
        clauses = []
        by_relation: dict[str, list[Filter]] = defaultdict(list)
        for flt in filters:
            if flt.relation:
                by_relation[flt.relation].append(flt)
            else:
                clauses.append(_predicate(self._column(table, flt.column), flt))

        inner = {embed.table for embed in embeds if embed.inner}
        for relation in inner | set(by_relation):
            target = self._table(relation)
            clauses.append(self._related_exists(table, target, by_relation.get(relation, [])))
        return clauses

    async def select(self, query: SelectQuery) -> list[Row]:
        table = self._table(query.table)
        stmt = select(table).where(*self._where(table, query.filters, query.embeds))
        for order in query.order:
            column = self._column(table, order.column)
            stmt = stmt.order_by(column.asc() if order.ascending else column.desc())
        if query.limit is not None:
            stmt = stmt.limit(query.limit)

        try:
            async with self.engine.connect() as conn:
                result = await conn.execute(stmt)
                rows = [dict(row) for row in result.mappings()]
                for embed in query.embeds:
                    await self._attach(conn, table, rows, embed)
        except SQLAlchemyError as e:
            raise _translate(e, query.table) from e
        return rows

    async def _attach(self, conn, base: Table, rows: list[Row], embed: Embed) -> None:
        target = self._table(embed.table)
        kind, local, remote = self._relation(base, target)
        keys = {row[local.name] for row in rows if row.get(local.name) is not None}

        related: dict[Any, list[Row]] = defaultdict(list)
        if keys:
            result = await conn.execute(select(target).where(remote.in_(keys)))
            for item in result.mappings():
                related[item[remote.name]].append(self._project(dict(item), embed.columns))

        for row in rows:
            matches = related.get(row.get(local.name), [])
            if kind == "one":
                row[embed.table] = matches[0] if matches else None
            else:
                row[embed.table] = matches

    @staticmethod
    def _project(row: Row, columns: tuple[str, ...]) -> Row:
        if "*" in columns:
            return row
        return {name: row[name] for name in columns if name in row}

    async def insert(self, table: str, rows: Sequence[Mapping[str, Any]]) -> list[Row]:
        if not rows:
            return []
        target = self._table(table)
        stmt = insert(target).returning(*target.c, sort_by_parameter_order=True)
        try:
            async with self.engine.begin() as conn:
                result = await conn.execute(stmt, [dict(row) for row in rows])
                return [dict(row) for row in result.mappings()]
        except SQLAlchemyError as e:
            raise _translate(e, table) from e

    async def update(
        self, table: str, values: Mapping[str, Any], filters: Sequence[Filter]
    ) -> list[Row]:
        target = self._table(table)
        stmt = (
            update(target)
            .where(*self._where(target, filters))
            .values(**dict(values))
            .returning(*target.c)
        )
        try:
            async with self.engine.begin() as conn:
                result = await conn.execute(stmt)
                return [dict(row) for row in result.mappings()]
        except SQLAlchemyError as e:
            raise _translate(e, table) from e

    async def delete(self, table: str, filters: Sequence[Filter]) -> list[Row]:
        target = self._table(table)
        stmt = delete(target).where(*self._where(target, filters)).returning(*target.c)
        try:
            async with self.engine.begin() as conn:
                result = await conn.execute(stmt)
                return [dict(row) for row in result.mappings()]
        except SQLAlchemyError as e:
            raise _translate(e, table) from e

    async def rpc(self, call: ProcedureCall) -> list[Row]:
        """Run a set-returning database function shaped like ``call.returns``."""
        if not IDENTIFIER.match(call.name):
            raise ValidationError(detail=f"Invalid procedure name '{call.name}'")
        if call.returns is None:
            raise ValidationError(
                detail=f"Procedure '{call.name}' needs a row type to run against the database"
            )
        shape = self._table(call.returns)
        procedure = getattr(func, call.name)(*call.params.values()).table_valued(
            *shape.c.keys(), name=call.name
        )
        stmt = select(procedure).where(
            *(_predicate(self._column(procedure, flt.column), flt) for flt in call.filters)
        )
        try:
            async with self.engine.connect() as conn:
                result = await conn.execute(stmt)
                return [dict(row) for row in result.mappings()]
        except SQLAlchemyError as e:
            raise _translate(e, call.name) from e

    async def aclose(self) -> None:
        await self.engine.dispose()
