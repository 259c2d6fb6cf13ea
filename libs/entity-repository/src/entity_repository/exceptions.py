"""Domain exceptions for the repository layer.

Driver exceptions raised by SQLAlchemy are caught at the session boundary and
re-raised (or returned inside a :class:`~entity_repository.result.Result`) as
one of the :class:`EngineFailure` subclasses below, so callers never see raw
database errors.
"""

from __future__ import annotations


class PersistenceError(Exception):
    """Base exception for all repository-layer errors.

    Attributes:
        entity_name: The physical name of the table involved.
        operation: The repository operation that failed (e.g. ``"find_by_id"``).
        detail: A sanitised description of what went wrong.
    """

    def __init__(
        self,
        *,
        entity_name: str,
        operation: str,
        detail: str,
        cause: Exception | None = None,
    ) -> None:
        self.entity_name = entity_name
        self.operation = operation
        self.detail = detail
        msg = f"[{entity_name}] {operation} failed: {detail}"
        super().__init__(msg)
        if cause is not None:
            self.__cause__ = cause


class ConfigurationError(PersistenceError):
    """Raised when an entity type lacks usable storage metadata."""


class ArgumentError(PersistenceError, ValueError):
    """Raised for invalid caller input, before the engine is touched."""


class EngineFailure(PersistenceError):
    """Base class for faults raised by the storage engine."""


class DuplicateEntityError(EngineFailure):
    """Raised when a write violates a uniqueness constraint."""


class ConnectionFailedError(EngineFailure):
    """Raised when the engine cannot reach the database."""


class QueryError(EngineFailure):
    """Raised when a read query fails to execute."""


class TransactionError(EngineFailure):
    """Raised when a write transaction fails to flush or commit."""
