"""Data backends: the generic contract and its hosted and direct implementations."""

from .base import (
    DataBackend,
    Embed,
    Filter,
    FilterOp,
    Order,
    ProcedureCall,
    Row,
    SelectQuery,
    eq,
    gte,
    in_,
    lte,
)
from .rest import RestBackend
from .sql import SqlBackend

__all__ = [
    "DataBackend",
    "Embed",
    "Filter",
    "FilterOp",
    "Order",
    "ProcedureCall",
    "Row",
    "SelectQuery",
    "eq",
    "gte",
    "in_",
    "lte",
    "RestBackend",
    "SqlBackend",
]
