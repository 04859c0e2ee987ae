"""Use-case for ending a client session."""

from __future__ import annotations

from mapmarks.application.services.sessions import SessionIssuer


class LogoutUserUseCase:
    def __init__(self, *, sessions: SessionIssuer) -> None:
        self._sessions = sessions

    def execute(self, session_id: str | None) -> None:
        if session_id:
            self._sessions.revoke(session_id)
