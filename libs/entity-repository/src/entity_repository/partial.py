"""Field-level updates of an existing record."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from sqlalchemy.orm import Session

from entity_repository.descriptor import EntityDescriptor

logger = logging.getLogger(__name__)


class PartialUpdater:
    """Copies a whitelist of fields from a replacement onto the stored row."""

    def __init__(self, descriptor: EntityDescriptor) -> None:
        self._descriptor = descriptor

    def apply(self, session: Session, replacement: Any, field_names: Iterable[str]) -> Any | None:
        """Overlay *field_names* from *replacement* onto the persisted entity.

        Returns the updated entity, or ``None`` when no row has the
        replacement's identity. Unknown field names are skipped with a
        warning; the remaining fields are still applied.
        """
        descriptor = self._descriptor
        identity = descriptor.identity_of(replacement)
        current = session.get(descriptor.entity_type, identity)
        if current is None:
            logger.debug("No %s row with id=%s; nothing to update", descriptor.physical_name, identity)
            return None

        for name in field_names:
            if name == descriptor.metadata.identity_field:
                continue
            accessor = descriptor.fields.get(name)
            if accessor is None:
                logger.warning("Unknown field %r on %s; skipping", name, descriptor.physical_name)
                continue
            accessor.set(current, accessor.get(replacement))
        return current
