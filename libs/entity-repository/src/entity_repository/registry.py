"""Entity routing — maps mapped entity classes to repository instances per connection profile."""

from __future__ import annotations

from typing import Any, TypeVar

from entity_repository.config import RepositorySettings
from entity_repository.connections import ConnectionManager
from entity_repository.repository import GenericRepository

E = TypeVar("E")

DEFAULT_PROFILE = "default"


class RepositoryRegistry:
    """Builds one repository per (entity type, profile) pair and hands out the same one after.

    Each entity's storage metadata is therefore resolved once per profile, at
    first use, for the lifetime of the registry.
    """

    def __init__(
        self,
        connection_manager: ConnectionManager,
        *,
        settings: RepositorySettings | None = None,
    ) -> None:
        self._connection_manager = connection_manager
        self._settings = settings
        self._repositories: dict[tuple[type, str], GenericRepository[Any]] = {}

    def register(
        self,
        entity_type: type[E],
        repository: GenericRepository[E] | None = None,
        profile_name: str = DEFAULT_PROFILE,
    ) -> GenericRepository[E]:
        """Register *entity_type* under *profile_name*, optionally with a prebuilt repository override."""
        if repository is None:
            repository = self._build(entity_type, profile_name)
        elif repository.entity_type is not entity_type:
            raise ValueError(
                f"Repository is bound to {repository.entity_type.__name__}, not {entity_type.__name__}."
            )
        self._repositories[(entity_type, profile_name)] = repository
        return repository

    def get_repository(self, entity_type: type[E], profile_name: str = DEFAULT_PROFILE) -> GenericRepository[E]:
        """Return the repository for *entity_type* on *profile_name*, building it on first use."""
        key = (entity_type, profile_name)
        if key not in self._repositories:
            self._repositories[key] = self._build(entity_type, profile_name)
        return self._repositories[key]

    def _build(self, entity_type: type[E], profile_name: str) -> GenericRepository[E]:
        return GenericRepository(
            self._connection_manager.get_session_factory(profile_name),
            entity_type,
            settings=self._settings,
        )

    def __contains__(self, entity_type: object) -> bool:
        return any(registered is entity_type for registered, _ in self._repositories)
