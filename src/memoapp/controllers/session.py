"""Session controller: credential input, login and the initial category fetch."""

from __future__ import annotations

import logging

from memoapp.credentials import is_valid_credential
from memoapp.errors import RemoteFailure
from memoapp.fallback import OfflinePolicy
from memoapp.models import Session, SessionPhase
from memoapp.remote.base import RemoteStore
from memoapp.state import AppState

logger = logging.getLogger(__name__)


class SessionController:
    """Owns the none → pending → active session lifecycle."""

    def __init__(self, state: AppState, store: RemoteStore, policy: OfflinePolicy) -> None:
        self._state = state
        self._store = store
        self._policy = policy

    def set_credential_input(self, raw: str) -> bool:
        """Record what the user typed; returns whether login is now enabled."""
        if self._state.phase is not SessionPhase.NONE:
            return False
        self._state.credential_input = raw
        return self._state.publish().login_enabled

    async def login(self, raw: str | None = None) -> bool:
        """Validate the credential and load categories.

        Returns True once the session is active. Invalid input or a login
        already in progress is a silent no-op.
        """
        state = self._state
        token = (state.credential_input if raw is None else raw).strip()
        if state.phase is not SessionPhase.NONE or not is_valid_credential(token):
            return False

        state.credential_input = token
        state.phase = SessionPhase.PENDING
        state.publish()

        result = await self._store.list_categories()
        if isinstance(result, RemoteFailure):
            logger.warning("Login: failed to fetch categories: %s", result)
            state.record_failure(result)
            fallback = self._policy.categories()
            if fallback is None:
                state.phase = SessionPhase.NONE
                state.categories = []
                state.publish()
                return False
            logger.info("Login: offline demo mode, using %d demo categories", len(fallback))
            state.categories = fallback
        else:
            state.record_success()
            state.categories = result.value

        state.session = Session(token=token)
        state.phase = SessionPhase.ACTIVE
        logger.info("Session active (%d categories)", len(state.categories))
        state.publish()
        return True
