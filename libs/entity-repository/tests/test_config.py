"""Tests for repository settings."""

import pytest
from entity_repository.config import DEFAULT_BATCH_SIZE, RepositorySettings
from entity_repository.repository import GenericRepository
from pydantic import ValidationError
from repo_models import User


def test_defaults():
    settings = RepositorySettings()
    assert settings.batch_size == DEFAULT_BATCH_SIZE == 10
    assert settings.raise_on_failure is False


def test_batch_size_must_be_positive():
    with pytest.raises(ValidationError):
        RepositorySettings(batch_size=0)


def test_unknown_keys_rejected():
    with pytest.raises(ValidationError):
        RepositorySettings(batchsize=5)


def test_settings_are_frozen():
    settings = RepositorySettings(batch_size=50)
    with pytest.raises(ValidationError):
        settings.batch_size = 5


def test_repository_uses_custom_batch_size(session_factory):
    repo = GenericRepository(session_factory, User, settings=RepositorySettings(batch_size=3))
    assert repo.settings.batch_size == 3
