"""
Generic data backend contract.

Services describe reads, writes and procedure calls with the small query
vocabulary below; a backend turns them into calls against a concrete store.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Sequence

from ..core.exceptions import ConflictError, NotFoundError

Row = dict[str, Any]


class FilterOp(str, Enum):
    """Supported filter predicates."""
    EQ = "eq"
    LTE = "lte"
    GTE = "gte"
    IN = "in"


@dataclass(frozen=True)
class Filter:
    """
    A predicate on a column.

    A dotted column (``"waitlist.email"``) filters on an embedded relation of
    the queried table rather than on the table itself.
    """

    column: str
    op: FilterOp
    value: Any

    @property
    def relation(self) -> str | None:
        if "." in self.column:
            return self.column.split(".", 1)[0]
        return None

    @property
    def column_name(self) -> str:
        return self.column.rsplit(".", 1)[-1]


def eq(column: str, value: Any) -> Filter:
    return Filter(column, FilterOp.EQ, value)


def lte(column: str, value: Any) -> Filter:
    return Filter(column, FilterOp.LTE, value)


def gte(column: str, value: Any) -> Filter:
    return Filter(column, FilterOp.GTE, value)


def in_(column: str, values: Sequence[Any]) -> Filter:
    return Filter(column, FilterOp.IN, tuple(values))


@dataclass(frozen=True)
class Embed:
    """
    A related table to fetch alongside each row, following a foreign key.

    Many-to-one relations embed a single object (or None); one-to-many
    relations embed a list. ``inner`` drops rows with no related row.
    """

    table: str
    columns: tuple[str, ...] = ("*",)
    inner: bool = False


@dataclass(frozen=True)
class Order:
    column: str
    ascending: bool = True


@dataclass(frozen=True)
class SelectQuery:
    """A filtered, ordered and limited read of one table."""

    table: str
    embeds: tuple[Embed, ...] = ()
    filters: tuple[Filter, ...] = ()
    order: tuple[Order, ...] = ()
    limit: int | None = None


@dataclass(frozen=True)
class ProcedureCall:
    """
    A call to a named remote procedure returning rows.

    ``filters`` narrow the rows the procedure returns; ``returns`` names the
    table whose row shape the procedure yields.
    """

    name: str
    params: Mapping[str, Any] = field(default_factory=dict)
    filters: tuple[Filter, ...] = ()
    returns: str | None = None


class DataBackend:
    """
    Interface for the remote data store.

    Concrete implementations raise the ``BackendError`` family from
    ``famtivity.core.exceptions`` and nothing else for backend failures.
    """

    async def select(self, query: SelectQuery) -> list[Row]:
        raise NotImplementedError

    async def select_one(self, query: SelectQuery) -> Row:
        """Run ``query`` and require exactly one row."""
        rows = await self.select(query)
        if not rows:
            raise NotFoundError(resource_type=query.table)
        if len(rows) > 1:
            raise ConflictError(
                detail=f"Expected a single {query.table} row, found {len(rows)}"
            )
        return rows[0]

    async def insert(self, table: str, rows: Sequence[Mapping[str, Any]]) -> list[Row]:
        raise NotImplementedError

    async def update(
        self, table: str, values: Mapping[str, Any], filters: Sequence[Filter]
    ) -> list[Row]:
        raise NotImplementedError

    async def delete(self, table: str, filters: Sequence[Filter]) -> list[Row]:
        raise NotImplementedError

    async def rpc(self, call: ProcedureCall) -> list[Row]:
        raise NotImplementedError

    async def aclose(self) -> None:
        """Release connections held by the backend."""
