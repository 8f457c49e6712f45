"""Fluent query helpers over SQLAlchemy models.

``factory("Review", db)`` returns a :class:`Query` that can be narrowed with
chained ``where``/``order_by``/``limit`` calls and is terminated by
``find_all()`` or ``find()``::

    reviews = (
        factory("Review", db)
        .where("rating", ">", 3)
        .order_by("posted_on", "desc")
        .limit(10)
        .find_all()
    )
"""
from __future__ import annotations

import operator
from typing import Any, Callable, Dict, Generic, List, Optional, Type, TypeVar

from sqlalchemy import asc, desc, func, select
from sqlalchemy.orm import Session

from .database import Base

ModelT = TypeVar("ModelT", bound=Base)


class ModelNotFound(LookupError):
    """No mapped model is registered under the requested name."""


class QueryError(ValueError):
    """A query was built with an unknown column, operator or direction."""


_OPERATORS: Dict[str, Callable[[Any, Any], Any]] = {
    "=": operator.eq,
    "==": operator.eq,
    "!=": operator.ne,
    "<>": operator.ne,
    "<": operator.lt,
    "<=": operator.le,
    ">": operator.gt,
    ">=": operator.ge,
    "like": lambda column, value: column.like(value),
    "in": lambda column, value: column.in_(list(value)),
}

_DIRECTIONS = {"asc": asc, "desc": desc}


def get_model(name: str) -> Type[Base]:
    for mapper in Base.registry.mappers:
        if mapper.class_.__name__.lower() == name.lower():
            return mapper.class_
    raise ModelNotFound(f"No model named {name!r}")


class Query(Generic[ModelT]):
    def __init__(self, model: Type[ModelT], db: Session) -> None:
        self.model = model
        self._db = db
        self._criteria: List[Any] = []
        self._ordering: List[Any] = []
        self._limit: Optional[int] = None
        self._offset: Optional[int] = None

    def _column(self, name: str):
        try:
            return self.model.__table__.columns[name]
        except KeyError:
            raise QueryError(f"{self.model.__name__} has no column {name!r}") from None

    def where(self, column: str, op: str, value: Any) -> "Query[ModelT]":
        try:
            compare = _OPERATORS[op.strip().lower()]
        except KeyError:
            raise QueryError(f"Unsupported operator {op!r}") from None
        self._criteria.append(compare(self._column(column), value))
        return self

    def order_by(self, column: str, direction: str = "asc") -> "Query[ModelT]":
        try:
            sort = _DIRECTIONS[direction.strip().lower()]
        except KeyError:
            raise QueryError(f"Unsupported sort direction {direction!r}") from None
        self._ordering.append(sort(self._column(column)))
        return self

    def limit(self, n: int) -> "Query[ModelT]":
        if n < 0:
            raise QueryError("limit must be non-negative")
        self._limit = n
        return self

    def offset(self, n: int) -> "Query[ModelT]":
        if n < 0:
            raise QueryError("offset must be non-negative")
        self._offset = n
        return self

    def _select(self):
        stmt = select(self.model).where(*self._criteria).order_by(*self._ordering)
        if self._limit is not None:
            stmt = stmt.limit(self._limit)
        if self._offset is not None:
            stmt = stmt.offset(self._offset)
        return stmt

    def find_all(self) -> List[ModelT]:
        return list(self._db.scalars(self._select()).all())

    def find(self) -> Optional[ModelT]:
        return self._db.scalars(self._select().limit(1)).first()

    def count_all(self) -> int:
        stmt = select(func.count()).select_from(self.model).where(*self._criteria)
        return self._db.scalar(stmt) or 0


def factory(name: str, db: Session) -> Query:
    """Return a query builder for the model registered as ``name``."""

    return Query(get_model(name), db)
