# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from typing import Any

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import DeclarativeBase, scoped_session, sessionmaker
from tenacity import (
    RetryCallState,
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from mapmarks.shared.config import load_config
from mapmarks.shared.logging import logger

_config = load_config()


class Base(DeclarativeBase):
    pass


engine_options: dict[str, Any] = {"echo": False, "pool_pre_ping": True}
if _config.database.url.startswith("sqlite"):
    # sqlite picks its own pool class; only the driver options apply
    engine_options["connect_args"] = {
        "check_same_thread": False,
        "timeout": _config.database.pool_timeout,
    }
else:
    engine_options.update(
        pool_size=_config.database.pool_size,
        max_overflow=_config.database.max_overflow,
        pool_timeout=_config.database.pool_timeout,
    )

ENGINE: Engine = create_engine(_config.database.url, **engine_options)


SessionLocal = scoped_session(
    sessionmaker(bind=ENGINE, autoflush=False, expire_on_commit=False)
)


def _log_retry(state: RetryCallState) -> None:
    exc = state.outcome.exception() if state.outcome else None
    delay = state.next_action.sleep if state.next_action else 0.0
    logger.warning(
        f"db.connect: attempt {state.attempt_number} failed ({type(exc).__name__}), "
        f"retrying in {delay:.1f}s"
    )


def wait_for_database() -> None:
    """Probe the database, retrying with exponential backoff.

    Raises the last ``OperationalError`` once the retry budget is spent.
    """

    db = _config.database
    retrying = Retrying(
        stop=stop_after_attempt(db.connect_retries + 1),
        wait=wait_exponential(multiplier=db.connect_backoff_base, max=db.connect_backoff_cap),
        retry=retry_if_exception_type(OperationalError),
        before_sleep=_log_retry,
        reraise=True,
    )
    for attempt in retrying:
        with attempt:
            with ENGINE.connect() as connection:
                connection.execute(text("SELECT 1"))
    logger.info("db.connect: database reachable")


def init_db() -> None:
    from . import models  # noqa: F401  (registers tables on Base.metadata)

    Base.metadata.create_all(bind=ENGINE)
    logger.info("Database schema ensured")
