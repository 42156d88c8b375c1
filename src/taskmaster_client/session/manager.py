# src/taskmaster_client/session/manager.py

"""
Session lifecycle.

One SessionManager per running app, built in the composition root and
passed around via AppState (never a module-level singleton).

Key invariants:
- user is set iff a validated access token is persisted,
- a stored token that fails validation is cleared together with the user
  (no partial state),
- while restore() is pending the session is RESTORING: views must neither
  treat the user as logged in nor as logged out.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from ..api.errors import TaskMasterError
from ..core.ports import AuthApi, Navigator, TokenStorage
from .session_models import GuardDecision, SessionPhase, StoredTokens, User

logger = logging.getLogger(__name__)

LOGIN_PATH = "/login"
DASHBOARD_PATH = "/dashboard"

SessionListener = Callable[[SessionPhase, User | None], None]


class SessionManager:
    def __init__(
        self,
        *,
        auth_api: AuthApi,
        token_storage: TokenStorage,
        navigator: Navigator,
    ) -> None:
        self._auth = auth_api
        self._storage = token_storage
        self._navigator = navigator

        self._user: User | None = None
        self._phase = SessionPhase.RESTORING
        # Bumped by login/logout/invalidate so a slow restore() can't undo them.
        self._epoch = 0
        self._listeners: list[SessionListener] = []

    # ---- observation ----

    @property
    def user(self) -> User | None:
        return self._user

    @property
    def phase(self) -> SessionPhase:
        return self._phase

    @property
    def is_settled(self) -> bool:
        return self._phase is not SessionPhase.RESTORING

    @property
    def is_authenticated(self) -> bool:
        return self._phase is SessionPhase.AUTHENTICATED and self._user is not None

    def add_listener(self, listener: SessionListener) -> None:
        self._listeners.append(listener)

    def _set_state(self, phase: SessionPhase, user: User | None) -> None:
        self._phase = phase
        self._user = user
        for listener in list(self._listeners):
            try:
                listener(phase, user)
            except Exception:
                logger.exception("Session listener failed (phase=%s)", phase.value)

    # ---- lifecycle ----

    async def restore(self) -> bool:
        """
        Exchange a persisted access token for the current user.

        Failure is the ordinary "not logged in" path: credentials are cleared,
        nothing is reported to the user. Returns True if a session was restored.
        """
        epoch = self._epoch
        tokens = self._storage.load()
        if tokens is None:
            # Drop whatever unusable leftovers the store may still hold.
            self._storage.clear()
            self._set_state(SessionPhase.ANONYMOUS, None)
            return False

        try:
            user = await self._auth.current_user()
        except TaskMasterError as e:
            if epoch != self._epoch:
                return self.is_authenticated
            logger.warning("Failed to restore session: %s", e)
            self._storage.clear()
            self._set_state(SessionPhase.ANONYMOUS, None)
            return False

        if epoch != self._epoch:
            # login()/logout() happened meanwhile; their outcome wins.
            return self.is_authenticated

        logger.info("Session restored for user id=%s", user.id)
        self._set_state(SessionPhase.AUTHENTICATED, user)
        return True

    def login(self, access_token: str, refresh_token: str, user: User) -> None:
        """
        Adopt credentials from a successful login/register exchange.

        No network I/O here: the exchange already happened.
        """
        self._epoch += 1
        self._storage.save(StoredTokens(access_token=access_token, refresh_token=refresh_token or None))
        logger.info("Logged in as user id=%s", user.id)
        self._set_state(SessionPhase.AUTHENTICATED, user)
        self._navigator.navigate(DASHBOARD_PATH)

    async def logout(self) -> None:
        """Tell the server (best-effort), then always drop local credentials."""
        self._epoch += 1
        try:
            await self._auth.logout()
        except TaskMasterError as e:
            logger.info("Server logout failed (ignored): %s", e)
        finally:
            self._storage.clear()
            self._set_state(SessionPhase.ANONYMOUS, None)
            logger.info("Logged out.")
            self._navigator.navigate(LOGIN_PATH)

    def invalidate(self) -> None:
        """
        The server rejected our token mid-session (expired/revoked).

        Treated as a logout without the server round-trip.
        """
        if self._phase is SessionPhase.ANONYMOUS:
            return
        self._epoch += 1
        logger.warning("Session rejected by server; clearing credentials.")
        self._storage.clear()
        self._set_state(SessionPhase.ANONYMOUS, None)
        self._navigator.navigate(LOGIN_PATH)

    # ---- view guards ----

    def guard_protected(self) -> GuardDecision:
        """Gate for views that need a user (dashboard)."""
        if not self.is_settled:
            return GuardDecision.WAIT
        if self.is_authenticated:
            return GuardDecision.ALLOW
        self._navigator.navigate(LOGIN_PATH)
        return GuardDecision.REDIRECT

    def guard_public_only(self) -> GuardDecision:
        """Gate for views that only make sense logged out (login/register)."""
        if not self.is_settled:
            return GuardDecision.WAIT
        if not self.is_authenticated:
            return GuardDecision.ALLOW
        self._navigator.navigate(DASHBOARD_PATH)
        return GuardDecision.REDIRECT
