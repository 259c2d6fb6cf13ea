"""Tests for field-level partial updates."""

import logging

from entity_repository.descriptor import EntityDescriptor
from entity_repository.partial import PartialUpdater
from entity_repository.repository import GenericRepository
from repo_models import User, as_dict, make_user


def test_updates_only_named_field(seeded_repo: GenericRepository[User]):
    before = as_dict(seeded_repo.find_by_id("1").unwrap())
    replacement = make_user("1", "Alicia", 99, email="changed@example.com", nickname="al")

    assert seeded_repo.update_properties(replacement, "name").ok

    after = as_dict(seeded_repo.find_by_id("1").unwrap())
    assert after == {**before, "name": "Alicia"}


def test_updates_several_fields(seeded_repo: GenericRepository[User]):
    replacement = make_user("2", "Robert", 26, email="bob@example.com")
    seeded_repo.update_properties(replacement, "name", "age").unwrap()

    stored = seeded_repo.find_by_id("2").unwrap()
    assert (stored.name, stored.age, stored.email) == ("Robert", 26, "2@example.com")


def test_field_with_different_column_name(seeded_repo: GenericRepository[User]):
    seeded_repo.update_properties(make_user("3", "ignored", nickname="charles"), "nickname").unwrap()
    assert seeded_repo.find_by_id("3").unwrap().nickname == "charles"


def test_missing_row_is_noop(seeded_repo: GenericRepository[User]):
    before = sorted(map(as_dict, seeded_repo.find_all().unwrap()), key=lambda d: d["id"])

    result = seeded_repo.update_properties(make_user("404", "Ghost"), "name")

    assert result.ok
    assert seeded_repo.find_by_id("404").unwrap() is None
    after = sorted(map(as_dict, seeded_repo.find_all().unwrap()), key=lambda d: d["id"])
    assert after == before


def test_unknown_field_skipped_and_rest_applied(seeded_repo: GenericRepository[User], caplog):
    replacement = make_user("4", "Ali", 42)
    with caplog.at_level(logging.WARNING, logger="entity_repository.partial"):
        result = seeded_repo.update_properties(replacement, "does_not_exist", "age")

    assert result.ok
    assert seeded_repo.find_by_id("4").unwrap().age == 42
    assert seeded_repo.find_by_id("4").unwrap().name == "Alicia"
    assert "does_not_exist" in caplog.text


def test_no_field_names_changes_nothing(seeded_repo: GenericRepository[User]):
    before = as_dict(seeded_repo.find_by_id("5").unwrap())
    seeded_repo.update_properties(make_user("5", "Other", 1)).unwrap()
    assert as_dict(seeded_repo.find_by_id("5").unwrap()) == before


def test_updater_returns_loaded_entity(session_factory, seeded_repo: GenericRepository[User]):
    updater = PartialUpdater(EntityDescriptor.for_model(User))
    with session_factory() as session:
        updated = updater.apply(session, make_user("1", "Changed"), ["name", "id"])
        assert updated is not None
        assert updated.id == "1"
        assert updated.name == "Changed"
        assert updated.email == "1@example.com"
        session.rollback()


def test_updater_returns_none_when_absent(session_factory, seeded_repo: GenericRepository[User]):
    updater = PartialUpdater(EntityDescriptor.for_model(User))
    with session_factory() as session:
        assert updater.apply(session, make_user("missing", "x"), ["name"]) is None
