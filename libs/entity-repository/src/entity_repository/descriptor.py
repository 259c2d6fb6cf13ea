"""Per-entity storage metadata, resolved once from the SQLAlchemy mapping."""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from operator import attrgetter
from types import MappingProxyType
from typing import Any

import sqlalchemy as sa
from sqlalchemy.orm import Mapper

from entity_repository.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

# Bare SQL identifier: letter or underscore, then alphanumerics/underscores.
_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

# Quoting decoration accepted in declared table names: `name`, "name", [name].
_QUOTE_CHARS = "`\"[]"


def normalize_identifier(name: str) -> str:
    """Strip quoting decoration and surrounding whitespace from *name*.

    >>> normalize_identifier("`user_account`")
    'user_account'
    >>> normalize_identifier('[Orders]')
    'Orders'
    """
    return name.translate(str.maketrans("", "", _QUOTE_CHARS)).strip()


def is_identifier(name: str) -> bool:
    return bool(_IDENTIFIER_RE.match(name))


@dataclass(frozen=True)
class StorageMetadata:
    """Immutable binding between an entity class and its table."""

    entity_type: type
    physical_name: str
    identity_field: str


@dataclass(frozen=True)
class FieldAccessor:
    """Get/set pair for one mapped attribute."""

    name: str
    get: Callable[[Any], Any]
    set: Callable[[Any, Any], None]


def _accessor(key: str) -> FieldAccessor:
    def _set(obj: Any, value: Any) -> None:
        setattr(obj, key, value)

    return FieldAccessor(name=key, get=attrgetter(key), set=_set)


def _mapper_for(entity_type: type) -> Mapper[Any]:
    mapper = sa.inspect(entity_type, raiseerr=False)
    if not isinstance(mapper, Mapper):
        raise ConfigurationError(
            entity_name=getattr(entity_type, "__name__", repr(entity_type)),
            operation="resolve_metadata",
            detail="Entity type is not a mapped class; declare it with a table name.",
        )
    return mapper


def resolve_metadata(entity_type: type) -> StorageMetadata:
    """Derive :class:`StorageMetadata` from a mapped entity class.

    Raises:
        ConfigurationError: If the class is unmapped, its table name is empty
            or not a bare identifier once quoting is stripped, or it does not
            have exactly one primary-key column.
    """
    mapper = _mapper_for(entity_type)
    type_name = entity_type.__name__
    table = mapper.local_table
    declared = getattr(table, "name", None) or ""
    physical_name = normalize_identifier(str(declared))
    if not physical_name:
        raise ConfigurationError(
            entity_name=type_name,
            operation="resolve_metadata",
            detail="Declared table name is empty.",
        )
    if not is_identifier(physical_name):
        raise ConfigurationError(
            entity_name=type_name,
            operation="resolve_metadata",
            detail=f"Table name {physical_name!r} is not a bare identifier.",
        )

    pk_columns = list(mapper.primary_key)
    if len(pk_columns) != 1:
        raise ConfigurationError(
            entity_name=physical_name,
            operation="resolve_metadata",
            detail=f"Expected exactly one primary key column, found {len(pk_columns)}.",
        )
    identity_field = mapper.get_property_by_column(pk_columns[0]).key

    return StorageMetadata(
        entity_type=entity_type,
        physical_name=physical_name,
        identity_field=identity_field,
    )


@dataclass(frozen=True)
class EntityDescriptor:
    """Everything the repository needs to know about one entity type.

    ``fields`` maps attribute names to accessors, ``columns`` maps attribute
    names to physical column names and ``table_columns`` maps physical column
    names to the mapped :class:`~sqlalchemy.Column` objects. All are
    read-only views built once.
    """

    metadata: StorageMetadata
    fields: Mapping[str, FieldAccessor]
    columns: Mapping[str, str]
    table_columns: Mapping[str, sa.ColumnElement[Any]]

    @classmethod
    def for_model(cls, entity_type: type) -> EntityDescriptor:
        metadata = resolve_metadata(entity_type)
        mapper = _mapper_for(entity_type)
        fields: dict[str, FieldAccessor] = {}
        columns: dict[str, str] = {}
        table_columns: dict[str, sa.ColumnElement[Any]] = {}
        for prop in mapper.column_attrs:
            column = prop.columns[0]
            fields[prop.key] = _accessor(prop.key)
            columns[prop.key] = column.name
            table_columns[column.name] = column
        logger.debug(
            "Resolved %s -> table=%s identity=%s (%d fields)",
            entity_type.__name__,
            metadata.physical_name,
            metadata.identity_field,
            len(fields),
        )
        return cls(
            metadata=metadata,
            fields=MappingProxyType(fields),
            columns=MappingProxyType(columns),
            table_columns=MappingProxyType(table_columns),
        )

    @property
    def entity_type(self) -> type:
        return self.metadata.entity_type

    @property
    def physical_name(self) -> str:
        return self.metadata.physical_name

    def identity_of(self, entity: Any) -> Any:
        """Return the identity value of *entity*."""
        return self.fields[self.metadata.identity_field].get(entity)

    def column_for(self, name: str) -> str | None:
        """Resolve an attribute or column name to its physical column name."""
        if name in self.columns:
            return self.columns[name]
        if name in self.columns.values():
            return name
        return None

    def column_element(self, name: str) -> sa.ColumnElement[Any] | None:
        """Resolve an attribute or column name to its mapped column object."""
        physical = self.column_for(name)
        if physical is None:
            return None
        return self.table_columns.get(physical)
