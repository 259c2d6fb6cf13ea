"""Entity Repository — generic SQLAlchemy persistence layer."""

from entity_repository.batch import BatchReport, BatchWriter
from entity_repository.config import RepositorySettings
from entity_repository.connections import ConnectionManager, ConnectionProfile, InvalidConnectionURL
from entity_repository.descriptor import EntityDescriptor, FieldAccessor, StorageMetadata, resolve_metadata
from entity_repository.exceptions import (
    ArgumentError,
    ConfigurationError,
    ConnectionFailedError,
    DuplicateEntityError,
    EngineFailure,
    PersistenceError,
    QueryError,
    TransactionError,
)
from entity_repository.partial import PartialUpdater
from entity_repository.predicates import (
    FilterSpec,
    LogicalOperator,
    MatchMode,
    Predicate,
    build_exact_in,
    build_exact_in_column,
    build_like_any,
    build_predicate,
)
from entity_repository.protocols import Repository
from entity_repository.registry import RepositoryRegistry
from entity_repository.repository import GenericRepository
from entity_repository.result import Result
from entity_repository.session import SessionScope

__all__ = [
    "ArgumentError",
    "BatchReport",
    "BatchWriter",
    "ConfigurationError",
    "ConnectionFailedError",
    "ConnectionManager",
    "ConnectionProfile",
    "DuplicateEntityError",
    "EngineFailure",
    "EntityDescriptor",
    "FieldAccessor",
    "FilterSpec",
    "GenericRepository",
    "InvalidConnectionURL",
    "LogicalOperator",
    "MatchMode",
    "PartialUpdater",
    "PersistenceError",
    "Predicate",
    "QueryError",
    "Repository",
    "RepositoryRegistry",
    "RepositorySettings",
    "Result",
    "SessionScope",
    "StorageMetadata",
    "TransactionError",
    "build_exact_in",
    "build_exact_in_column",
    "build_like_any",
    "build_predicate",
    "resolve_metadata",
]
