"""Generic synchronous repository over a SQLAlchemy session factory."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from typing import Any, Generic, TypeVar

import sqlalchemy as sa
from sqlalchemy.orm import Session

from entity_repository.batch import BatchWriter
from entity_repository.config import RepositorySettings
from entity_repository.descriptor import EntityDescriptor, StorageMetadata
from entity_repository.exceptions import ArgumentError
from entity_repository.partial import PartialUpdater
from entity_repository.predicates import (
    FilterSpec,
    LogicalOperator,
    MatchMode,
    Predicate,
    build_predicate,
    coerce_operator,
)
from entity_repository.result import Result
from entity_repository.session import SessionFactory, SessionScope

logger = logging.getLogger(__name__)

E = TypeVar("E")


class GenericRepository(Generic[E]):
    """CRUD, bulk writes and filtered search for one mapped entity type.

    Storage metadata is resolved once, here, from *entity_type*. Each public
    method opens its own session through *session_factory* and releases it
    before returning; no two calls share a transaction.

    Every method returns a :class:`~entity_repository.result.Result`. Engine
    faults yield a failed result whose ``value`` is the neutral value (empty
    list, ``None``), unless ``settings.raise_on_failure`` is set. Invalid
    arguments raise :class:`~entity_repository.exceptions.ArgumentError`
    before any session is opened.

    The factory should be configured with ``expire_on_commit=False`` so that
    entities returned from write operations stay readable once detached.
    """

    def __init__(
        self,
        session_factory: SessionFactory,
        entity_type: type[E],
        *,
        settings: RepositorySettings | None = None,
    ) -> None:
        self._settings = settings or RepositorySettings()
        self._descriptor = EntityDescriptor.for_model(entity_type)
        self._scope = SessionScope(
            session_factory,
            self._descriptor.physical_name,
            raise_on_failure=self._settings.raise_on_failure,
        )
        self._updater = PartialUpdater(self._descriptor)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.entity_type.__name__}, table={self.table_name!r})"

    @property
    def descriptor(self) -> EntityDescriptor:
        return self._descriptor

    @property
    def metadata(self) -> StorageMetadata:
        return self._descriptor.metadata

    @property
    def entity_type(self) -> type[E]:
        return self._descriptor.entity_type

    @property
    def table_name(self) -> str:
        return self._descriptor.physical_name

    @property
    def settings(self) -> RepositorySettings:
        return self._settings

    # -- Writes ---------------------------------------------------------------

    def insert_or_replace(self, entity: E) -> Result[None]:
        """Insert *entity*, or overwrite the row sharing its identity."""

        def _merge(session: Session) -> None:
            session.merge(entity)

        return self._scope.run("insert_or_replace", _merge, mutates=True, default=None)

    def insert_or_replace_batch(self, entities: Iterable[E], batch_size: int | None = None) -> Result[None]:
        """Upsert *entities* in order within a single transaction.

        The session is flushed and cleared after every ``batch_size`` entities
        (``settings.batch_size`` when omitted). Any engine fault rolls back the
        whole batch.
        """
        size = self._settings.batch_size if batch_size is None else batch_size
        writer = BatchWriter(size, entity_name=self.table_name)

        def _write(session: Session) -> None:
            report = writer.write(session, entities)
            logger.debug(
                "Batch upsert of %d %s rows, flushed at %s",
                report.written,
                self.table_name,
                list(report.flush_points),
            )

        return self._scope.run("insert_or_replace_batch", _write, mutates=True, default=None)

    def update_properties(self, entity: E, *field_names: str) -> Result[None]:
        """Copy only *field_names* from *entity* onto the stored row.

        A missing row is a silent no-op. Unknown field names are logged and
        skipped.
        """

        def _update(session: Session) -> None:
            self._updater.apply(session, entity, field_names)

        return self._scope.run("update_properties", _update, mutates=True, default=None)

    def delete(self, entity: E) -> Result[E | None]:
        """Delete the row with *entity*'s identity and return it, or ``None``."""
        identity = self._descriptor.identity_of(entity)

        def _delete(session: Session) -> E | None:
            current = session.get(self.entity_type, identity)
            if current is None:
                logger.debug("No %s row with id=%s to delete", self.table_name, identity)
                return None
            session.delete(current)
            return current

        return self._scope.run("delete", _delete, mutates=True, default=None)

    def truncate(self) -> Result[None]:
        """Delete every row of the bound table."""

        def _truncate(session: Session) -> None:
            result = session.execute(sa.delete(self.entity_type))
            logger.debug("Truncated %s (%s rows)", self.table_name, result.rowcount)

        return self._scope.run("truncate", _truncate, mutates=True, default=None)

    # -- Reads ----------------------------------------------------------------

    def find_by_id(self, id: Any) -> Result[E | None]:
        def _get(session: Session) -> E | None:
            return session.get(self.entity_type, id)

        return self._scope.run("find_by_id", _get, mutates=False, default=None)

    def find_by_entity(self, entity: E) -> Result[E | None]:
        """Look up the stored row sharing *entity*'s identity."""
        return self.find_by_id(self._descriptor.identity_of(entity))

    def find_all(self) -> Result[list[E]]:
        stmt = sa.select(self.entity_type)
        return self._scope.run("find_all", lambda session: list(session.scalars(stmt).all()), mutates=False, default=[])

    def find_by_like_any(self, criteria: Mapping[str, Any]) -> Result[list[E]]:
        """Rows where *any* listed column contains its value as a substring."""
        return self.find(FilterSpec(criteria=criteria, match_mode=MatchMode.LIKE_ANY))

    def find_by_exact_in(self, column: str, values: Sequence[Any]) -> Result[list[E]]:
        """Rows whose *column* equals one of *values*."""
        return self.find(FilterSpec(criteria={column: values}, match_mode=MatchMode.EXACT_IN))

    def find_by_exact_in_columns(
        self,
        criteria: Mapping[str, Sequence[Any]],
        operator: LogicalOperator | str = LogicalOperator.AND,
    ) -> Result[list[E]]:
        """Rows matching per-column value lists, combined with *operator*."""
        return self.find(
            FilterSpec(criteria=criteria, match_mode=MatchMode.EXACT_IN, operator=coerce_operator(operator))
        )

    def find(self, spec: FilterSpec) -> Result[list[E]]:
        """Run an ad-hoc search described by *spec*."""
        operation = f"find_by_{spec.match_mode.value}"
        predicate = build_predicate(self._physical_spec(spec, operation))
        return self._search(operation, predicate)

    # -- Internals ------------------------------------------------------------

    def _physical_spec(self, spec: FilterSpec, operation: str) -> FilterSpec:
        """Replace the attribute or column names in *spec* with mapped columns."""
        if not spec.criteria:
            raise ArgumentError(
                entity_name=self.table_name,
                operation=operation,
                detail="Filter mapping must not be empty.",
            )
        seen: set[str] = set()
        criteria: dict[sa.ColumnElement[Any], Any] = {}
        for name, value in spec.criteria.items():
            column = self._descriptor.column_element(name) if isinstance(name, str) else None
            if column is None:
                raise ArgumentError(
                    entity_name=self.table_name,
                    operation=operation,
                    detail=f"Unknown column {name!r}.",
                )
            if column.name in seen:
                raise ArgumentError(
                    entity_name=self.table_name,
                    operation=operation,
                    detail=f"Column {column.name!r} is given more than once.",
                )
            seen.add(column.name)
            criteria[column] = value
        return FilterSpec(criteria=criteria, match_mode=spec.match_mode, operator=spec.operator)

    def _search(self, operation: str, predicate: Predicate) -> Result[list[E]]:
        stmt = sa.select(self.entity_type).where(predicate.clause)

        def _query(session: Session) -> list[E]:
            return list(session.scalars(stmt).all())

        return self._scope.run(operation, _query, mutates=False, default=[])
