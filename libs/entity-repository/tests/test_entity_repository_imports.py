"""Test that all public exports are importable."""


def test_entity_repository_imports():
    import entity_repository

    assert entity_repository is not None


def test_public_api_exports():
    from entity_repository import (
        ArgumentError,
        BatchWriter,
        ConfigurationError,
        ConnectionManager,
        EngineFailure,
        EntityDescriptor,
        FilterSpec,
        GenericRepository,
        PartialUpdater,
        Repository,
        RepositoryRegistry,
        RepositorySettings,
        Result,
        SessionScope,
        build_exact_in,
        build_like_any,
    )

    assert all(
        [
            ArgumentError,
            BatchWriter,
            ConfigurationError,
            ConnectionManager,
            EngineFailure,
            EntityDescriptor,
            FilterSpec,
            GenericRepository,
            PartialUpdater,
            Repository,
            RepositoryRegistry,
            RepositorySettings,
            Result,
            SessionScope,
            build_exact_in,
            build_like_any,
        ]
    )


def test_all_names_resolve():
    import entity_repository

    for name in entity_repository.__all__:
        assert hasattr(entity_repository, name), name
