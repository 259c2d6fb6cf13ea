"""Filter-clause construction for ad-hoc searches.

All functions here are pure: they turn a mapping of columns to values into a
SQLAlchemy boolean expression with bound values, and touch neither the
session nor the database.

Two match modes are supported:

* ``LIKE_ANY``: ``a LIKE :like_0 OR b LIKE :like_1``; every value is wrapped
  in ``%...%`` and bound as a Unicode (NVARCHAR-safe) string.
* ``EXACT_IN``: ``a IN (:in_0_0, :in_0_1) AND b IN (:in_1_0)``; per-column
  clauses are joined with the caller's :class:`LogicalOperator`.

Criteria keys are mapped :class:`~sqlalchemy.Column` objects or plain column
names; the dialect quotes them when rendering. Bind-parameter names are
derived from the column's *position* in the criteria mapping rather than from
its name, so no caller-supplied column can collide with a generated key.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any, Union

import sqlalchemy as sa

from entity_repository.exceptions import ArgumentError

_LIKE_PREFIX = "like_"
_IN_PREFIX = "in_"

# Entity name reported by ArgumentError raised outside a repository.
_NO_ENTITY = "predicate"

ColumnKey = Union[str, sa.ColumnElement[Any]]


class MatchMode(str, Enum):
    """How filter values are compared against column values."""

    LIKE_ANY = "like_any"
    EXACT_IN = "exact_in"


class LogicalOperator(str, Enum):
    """Connective used between per-column exact-in clauses."""

    AND = "AND"
    OR = "OR"


@dataclass(frozen=True)
class FilterSpec:
    """Caller-supplied search criteria for one query."""

    criteria: Mapping[Any, Any]
    match_mode: MatchMode = MatchMode.LIKE_ANY
    operator: LogicalOperator = LogicalOperator.OR


@dataclass(frozen=True, eq=False)
class Predicate:
    """A filter expression plus the values bound into it, keyed by parameter name."""

    clause: sa.ColumnElement[bool]
    params: dict[str, Any]


def coerce_operator(value: LogicalOperator | str) -> LogicalOperator:
    """Accept a :class:`LogicalOperator` or a case-insensitive ``"and"``/``"or"``."""
    if isinstance(value, LogicalOperator):
        return value
    try:
        return LogicalOperator(str(value).strip().upper())
    except ValueError:
        raise ArgumentError(
            entity_name=_NO_ENTITY,
            operation="build_exact_in",
            detail=f"Unsupported logical operator {value!r}; expected AND or OR.",
        ) from None


def _as_column(key: ColumnKey, operation: str) -> sa.ColumnElement[Any]:
    if isinstance(key, sa.ColumnElement):
        return key
    if isinstance(key, str) and key.strip():
        return sa.column(key)
    raise ArgumentError(
        entity_name=_NO_ENTITY,
        operation=operation,
        detail=f"Column {key!r} is not a column name or column expression.",
    )


def _check_criteria(criteria: Mapping[Any, Any], operation: str) -> None:
    if not criteria:
        raise ArgumentError(
            entity_name=_NO_ENTITY,
            operation=operation,
            detail="Filter mapping must not be empty.",
        )


def _as_values(value: Any) -> list[Any]:
    # Strings and bytes are sequences but count as a single value here.
    if isinstance(value, (str, bytes)) or not isinstance(value, (Sequence, set, frozenset)):
        return [value]
    return list(value)


def _label(column: sa.ColumnElement[Any]) -> str:
    return getattr(column, "name", None) or str(column)


def build_like_any(criteria: Mapping[ColumnKey, Any]) -> Predicate:
    """Build ``c0 LIKE :like_0 OR c1 LIKE :like_1 ...``.

    Raises:
        ArgumentError: If *criteria* is empty, a key is not a column, or a
            value is ``None``.
    """
    _check_criteria(criteria, "build_like_any")
    clauses: list[sa.ColumnElement[bool]] = []
    params: dict[str, Any] = {}
    for position, (key, value) in enumerate(criteria.items()):
        column = _as_column(key, "build_like_any")
        if value is None:
            raise ArgumentError(
                entity_name=_NO_ENTITY,
                operation="build_like_any",
                detail=f"Column {_label(column)!r} has no search value; None cannot be matched with LIKE.",
            )
        name = f"{_LIKE_PREFIX}{position}"
        params[name] = f"%{value}%"
        clauses.append(column.like(sa.bindparam(name, params[name], type_=sa.Unicode)))
    return Predicate(clause=sa.or_(*clauses), params=params)


def build_exact_in(
    criteria: Mapping[ColumnKey, Any],
    operator: LogicalOperator | str = LogicalOperator.AND,
) -> Predicate:
    """Build ``c0 IN (:in_0_0, ...) <op> c1 IN (:in_1_0, ...)``.

    Each value binds to its own parameter, so repeated values in a list are
    kept as separate bindings. String values are bound as Unicode.

    Raises:
        ArgumentError: If *criteria* is empty, a column has no values, a key
            is not a column, or *operator* is not AND/OR.
    """
    _check_criteria(criteria, "build_exact_in")
    connective = coerce_operator(operator)
    clauses: list[sa.ColumnElement[bool]] = []
    params: dict[str, Any] = {}
    for position, (key, raw) in enumerate(criteria.items()):
        column = _as_column(key, "build_exact_in")
        values = _as_values(raw)
        if not values:
            raise ArgumentError(
                entity_name=_NO_ENTITY,
                operation="build_exact_in",
                detail=f"Column {_label(column)!r} has no values; an empty IN list is not allowed.",
            )
        binds = []
        for index, value in enumerate(values):
            name = f"{_IN_PREFIX}{position}_{index}"
            params[name] = value
            if isinstance(value, str):
                binds.append(sa.bindparam(name, value, type_=sa.Unicode))
            else:
                binds.append(sa.bindparam(name, value))
        clauses.append(column.in_(binds))
    join = sa.and_ if connective is LogicalOperator.AND else sa.or_
    return Predicate(clause=join(*clauses), params=params)


def build_exact_in_column(column: ColumnKey, values: Sequence[Any]) -> Predicate:
    """Single-column form of :func:`build_exact_in`."""
    return build_exact_in({column: values})


def build_predicate(spec: FilterSpec) -> Predicate:
    if spec.match_mode is MatchMode.LIKE_ANY:
        return build_like_any(spec.criteria)
    return build_exact_in(spec.criteria, spec.operator)
