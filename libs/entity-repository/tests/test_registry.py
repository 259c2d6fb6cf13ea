"""Tests for the repository registry."""

import pytest
from entity_repository.config import RepositorySettings
from entity_repository.connections import ConnectionManager, ConnectionProfile
from entity_repository.registry import RepositoryRegistry
from entity_repository.repository import GenericRepository
from repo_models import Base, User, make_user


@pytest.fixture
def manager():
    mgr = ConnectionManager(profiles={"default": ConnectionProfile(url="sqlite:///:memory:")})
    Base.metadata.create_all(mgr.get_engine())
    yield mgr
    mgr.close_all()


def test_registry_builds_repository(manager):
    registry = RepositoryRegistry(manager)
    repo = registry.get_repository(User)
    assert isinstance(repo, GenericRepository)
    assert repo.table_name == "users"


def test_registry_returns_same_instance(manager):
    registry = RepositoryRegistry(manager)
    assert registry.get_repository(User) is registry.get_repository(User)
    assert User in registry


def test_registry_repository_is_usable(manager):
    repo = RepositoryRegistry(manager).get_repository(User)
    repo.insert_or_replace(make_user("1", "Alice")).unwrap()
    assert repo.find_by_id("1").unwrap().name == "Alice"


def test_registry_passes_settings(manager):
    registry = RepositoryRegistry(manager, settings=RepositorySettings(batch_size=25))
    assert registry.get_repository(User).settings.batch_size == 25


def test_register_override(manager, session_factory):
    registry = RepositoryRegistry(manager)
    custom = GenericRepository(session_factory, User)
    assert registry.register(User, custom) is custom
    assert registry.get_repository(User) is custom


def test_register_rejects_mismatched_override(manager, session_factory):
    class Other:
        pass

    registry = RepositoryRegistry(manager)
    with pytest.raises(ValueError, match="bound to User"):
        registry.register(Other, GenericRepository(session_factory, User))


def test_unknown_profile_raises(manager):
    with pytest.raises(KeyError, match="not found"):
        RepositoryRegistry(manager).get_repository(User, profile_name="missing")


@pytest.fixture
def two_profile_manager():
    mgr = ConnectionManager(
        profiles={
            "default": ConnectionProfile(url="sqlite:///:memory:"),
            "other": ConnectionProfile(url="sqlite:///:memory:"),
        }
    )
    Base.metadata.create_all(mgr.get_engine("default"))
    Base.metadata.create_all(mgr.get_engine("other"))
    yield mgr
    mgr.close_all()


def test_repositories_are_per_profile(two_profile_manager):
    registry = RepositoryRegistry(two_profile_manager)
    default_repo = registry.get_repository(User, "default")
    other_repo = registry.get_repository(User, "other")

    default_repo.insert_or_replace(make_user("1", "Alice")).unwrap()

    assert other_repo is not default_repo
    assert registry.get_repository(User, "other") is other_repo
    assert other_repo.find_all().unwrap() == []
    assert len(default_repo.find_all().unwrap()) == 1


def test_register_override_for_named_profile(two_profile_manager, session_factory):
    registry = RepositoryRegistry(two_profile_manager)
    custom = GenericRepository(session_factory, User)
    registry.register(User, custom, profile_name="other")

    assert registry.get_repository(User, "other") is custom
    assert registry.get_repository(User) is not custom
