"""Bulk upserts with bounded session memory."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from sqlalchemy.orm import Session

from entity_repository.config import DEFAULT_BATCH_SIZE
from entity_repository.exceptions import ArgumentError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BatchReport:
    """Summary of one :meth:`BatchWriter.write` call.

    ``flush_points`` holds, for each intermediate flush, the index of the
    first entity written after it.
    """

    written: int
    flush_points: tuple[int, ...]


class BatchWriter:
    """Merges entities in order, flushing after every ``batch_size`` of them.

    After each flush the session's identity map is cleared, so at most
    ``batch_size`` entities are tracked at once. The remainder is flushed by
    the enclosing transaction's commit.
    """

    def __init__(self, batch_size: int = DEFAULT_BATCH_SIZE, *, entity_name: str = "batch") -> None:
        if batch_size < 1:
            raise ArgumentError(
                entity_name=entity_name,
                operation="insert_or_replace_batch",
                detail=f"batch_size must be >= 1, got {batch_size}",
            )
        self.batch_size = batch_size
        self._entity_name = entity_name

    def write(self, session: Session, entities: Iterable[Any]) -> BatchReport:
        written = 0
        flush_points: list[int] = []
        for index, entity in enumerate(entities):
            session.merge(entity)
            written += 1
            if written % self.batch_size == 0:
                session.flush()
                session.expunge_all()
                flush_points.append(index + 1)
                logger.debug("Flushed %d %s rows", written, self._entity_name)
        return BatchReport(written=written, flush_points=tuple(flush_points))
