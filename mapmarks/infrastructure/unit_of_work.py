# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Transaction boundary around a SQLAlchemy session.

Driver failures leave the scope as ``StorageError`` tagged with the operation
name. ``IntegrityError`` is let through untouched so repositories can map
constraint violations to domain errors.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping
from contextlib import AbstractContextManager, contextmanager
from dataclasses import dataclass, field
from typing import Any, NoReturn

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from mapmarks.shared.errors import StorageError
from mapmarks.shared.logging import logger


@dataclass(slots=True)
class SqlAlchemyUnitOfWork(AbstractContextManager):
    session_factory: Callable[[], Session]
    operation: str = "storage"
    context: Mapping[str, Any] = field(default_factory=dict)
    _session: Session | None = field(default=None, init=False, repr=False)

    def __enter__(self) -> SqlAlchemyUnitOfWork:
        self._session = self.session_factory()
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        session = self.session
        try:
            if exc is None:
                session.commit()
            else:
                session.rollback()
        except IntegrityError:
            session.rollback()
            raise
        except SQLAlchemyError as finalise_exc:
            session.rollback()
            self._fail(finalise_exc)
        finally:
            session.close()
            self._session = None

        if isinstance(exc, SQLAlchemyError) and not isinstance(exc, IntegrityError):
            self._fail(exc)
        return False

    @property
    def session(self) -> Session:
        if self._session is None:
            raise RuntimeError("UnitOfWork session accessed before entering context")
        return self._session

    def _fail(self, exc: SQLAlchemyError) -> NoReturn:
        details = ", ".join(f"{key}={value}" for key, value in self.context.items())
        suffix = f" ({details})" if details else ""
        logger.error(f"{self.operation}: {type(exc).__name__}{suffix}")
        raise StorageError(self.operation) from exc


@contextmanager
def unit_of_work_scope(
    factory: Callable[[], Session], operation: str = "storage", **context: Any
) -> Iterator[Session]:
    with SqlAlchemyUnitOfWork(factory, operation, context) as uow:
        yield uow.session


__all__ = ["SqlAlchemyUnitOfWork", "unit_of_work_scope"]
