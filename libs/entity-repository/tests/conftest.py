"""Shared fixtures for entity-repository tests."""

import pytest
from entity_repository.repository import GenericRepository
from repo_models import Base, User, make_user
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, expire_on_commit=False)


@pytest.fixture
def user_repo(session_factory) -> GenericRepository[User]:
    return GenericRepository(session_factory, User)


@pytest.fixture
def seeded_repo(user_repo: GenericRepository[User]) -> GenericRepository[User]:
    user_repo.insert_or_replace_batch(
        [
            make_user("1", "Alice", 30, nickname="ally"),
            make_user("2", "Bob", 25),
            make_user("3", "Charlie", 30, nickname="chuck"),
            make_user("4", "Alicia", 41),
            make_user("5", "Dave", 25),
        ]
    ).unwrap()
    return user_repo
