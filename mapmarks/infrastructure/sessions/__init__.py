# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .memory import InMemorySessionStore
from .sqlalchemy_session_store import SqlAlchemySessionStore

__all__ = ["InMemorySessionStore", "SqlAlchemySessionStore"]
