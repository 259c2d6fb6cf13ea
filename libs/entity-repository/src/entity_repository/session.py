"""Unit-of-work scoping around a SQLAlchemy session."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TypeVar

from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session

from entity_repository.exceptions import (
    ConnectionFailedError,
    DuplicateEntityError,
    EngineFailure,
    QueryError,
    TransactionError,
)
from entity_repository.result import Result

logger = logging.getLogger(__name__)

T = TypeVar("T")

SessionFactory = Callable[[], Session]


def classify_failure(exc: SQLAlchemyError, *, entity_name: str, operation: str, mutates: bool) -> EngineFailure:
    """Map a SQLAlchemy exception onto the :class:`EngineFailure` hierarchy.

    An :class:`~sqlalchemy.exc.OperationalError` counts as a connection
    failure only when it was raised while connecting (no statement) or the
    driver reported a disconnect. Operational errors raised by an executed
    statement, such as SQLite reporting a syntax error or a missing table,
    are classified as query or transaction failures.
    """
    if isinstance(exc, IntegrityError):
        return DuplicateEntityError(
            entity_name=entity_name,
            operation=operation,
            detail="A record violates a key or unique constraint.",
            cause=exc,
        )
    if isinstance(exc, OperationalError) and (exc.statement is None or exc.connection_invalidated):
        return ConnectionFailedError(
            entity_name=entity_name,
            operation=operation,
            detail="Database connection failed.",
            cause=exc,
        )
    if mutates:
        return TransactionError(
            entity_name=entity_name,
            operation=operation,
            detail="Write transaction was rejected by the database.",
            cause=exc,
        )
    return QueryError(
        entity_name=entity_name,
        operation=operation,
        detail="Query was rejected by the database.",
        cause=exc,
    )


class SessionScope:
    """Runs one action inside one session with guaranteed release.

    Mutating actions run inside ``session.begin()``: they commit when the
    action returns and roll back when it raises. Read-only actions get a bare
    session. The session is closed on every exit path and is never handed
    out beyond the action.
    """

    def __init__(
        self,
        session_factory: SessionFactory,
        entity_name: str,
        *,
        raise_on_failure: bool = False,
    ) -> None:
        self._session_factory = session_factory
        self._entity_name = entity_name
        self._raise_on_failure = raise_on_failure

    def run(
        self,
        operation: str,
        action: Callable[[Session], T],
        *,
        mutates: bool,
        default: T,
    ) -> Result[T]:
        """Execute *action* and wrap its outcome in a :class:`Result`.

        Engine faults raised by the action or by commit become a failed
        result carrying *default*, or are raised as :class:`EngineFailure`
        when the scope was built with ``raise_on_failure=True``. Any other
        exception propagates unchanged.
        """
        try:
            with self._session_factory() as session:
                if mutates:
                    with session.begin():
                        value = action(session)
                else:
                    value = action(session)
        except SQLAlchemyError as exc:
            logger.error("SQL %s failed for %s: %s", operation, self._entity_name, type(exc).__name__)
            failure = classify_failure(exc, entity_name=self._entity_name, operation=operation, mutates=mutates)
            if self._raise_on_failure:
                raise failure from exc
            return Result.failure(failure, default)
        return Result.success(value)
