"""Repository behaviour settings."""

from __future__ import annotations

from pydantic import BaseModel, Field

DEFAULT_BATCH_SIZE = 10


class RepositorySettings(BaseModel):
    """Tunables shared by every operation of a repository instance."""

    batch_size: int = Field(
        default=DEFAULT_BATCH_SIZE,
        ge=1,
        description="Entities merged between flushes during bulk writes.",
    )
    raise_on_failure: bool = Field(
        default=False,
        description="Raise EngineFailure instead of returning a failed Result.",
    )

    model_config = {"extra": "forbid", "frozen": True}
