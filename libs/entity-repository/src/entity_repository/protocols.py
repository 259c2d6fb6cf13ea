"""Repository protocol — storage-agnostic interface of the generic repository."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import Any, Protocol, TypeVar, runtime_checkable

from entity_repository.predicates import FilterSpec, LogicalOperator
from entity_repository.result import Result

E = TypeVar("E")


@runtime_checkable
class Repository(Protocol[E]):
    """Persistence interface for one entity type.

    :class:`~entity_repository.repository.GenericRepository` implements it
    over SQLAlchemy; tests and callers may substitute any other implementation.
    """

    def insert_or_replace(self, entity: E) -> Result[None]:
        """Insert an entity or overwrite the row sharing its identity."""
        ...

    def insert_or_replace_batch(self, entities: Iterable[E], batch_size: int | None = None) -> Result[None]:
        """Upsert many entities in one transaction."""
        ...

    def update_properties(self, entity: E, *field_names: str) -> Result[None]:
        """Copy the named fields onto the stored row."""
        ...

    def find_all(self) -> Result[list[E]]:
        """Retrieve every row."""
        ...

    def find_by_like_any(self, criteria: Mapping[str, Any]) -> Result[list[E]]:
        """Retrieve rows where any column contains its value."""
        ...

    def find_by_exact_in(self, column: str, values: Sequence[Any]) -> Result[list[E]]:
        """Retrieve rows whose column is one of the values."""
        ...

    def find_by_exact_in_columns(
        self,
        criteria: Mapping[str, Sequence[Any]],
        operator: LogicalOperator | str = LogicalOperator.AND,
    ) -> Result[list[E]]:
        """Retrieve rows matching several value lists."""
        ...

    def find(self, spec: FilterSpec) -> Result[list[E]]:
        """Retrieve rows matching a filter spec."""
        ...

    def find_by_id(self, id: Any) -> Result[E | None]:
        """Retrieve a single row by identity."""
        ...

    def delete(self, entity: E) -> Result[E | None]:
        """Delete a row and return it."""
        ...

    def truncate(self) -> Result[None]:
        """Delete every row."""
        ...
