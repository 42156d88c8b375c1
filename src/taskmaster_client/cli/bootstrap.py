# src/taskmaster_client/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires concrete implementations into AppState (HTTP transport, token file,
  session manager, console ports),
- closes the dashboard whenever the session ends.
"""

from __future__ import annotations

import logging

from ..api.auth_service import HttpAuthApi
from ..api.http import ApiTransport
from ..api.task_service import HttpTasksApi
from ..config import get_settings
from ..connectors.console_connector import ConsoleConfirm, ConsoleNavigator, ConsoleNotifier
from ..core.ports import Confirmer, Navigator, Notifier
from ..core.state import AppState, close_dashboard
from ..session.auth_flow import AuthFlow
from ..session.manager import SessionManager
from ..session.session_models import SessionPhase, User
from ..session.token_store import FileTokenStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.session_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(
    *,
    settings=None,
    notifier: Notifier | None = None,
    navigator: Navigator | None = None,
    confirmer: Confirmer | None = None,
) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings and front-end ports injectable makes the app easier to
    test and avoids hidden global config reads. Missing ports default to the
    console implementations.
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    notifier = notifier or ConsoleNotifier()
    navigator = navigator or ConsoleNavigator()
    confirmer = confirmer or ConsoleConfirm()

    token_store = FileTokenStore(settings.session_path)
    transport = ApiTransport(
        settings.api_base_url,
        token_storage=token_store,
        timeout_seconds=settings.request_timeout_seconds,
    )
    auth_api = HttpAuthApi(transport)
    session = SessionManager(auth_api=auth_api, token_storage=token_store, navigator=navigator)

    state = AppState(
        settings=settings,
        session=session,
        auth_flow=AuthFlow(auth_api=auth_api, session=session, notifier=notifier),
        tasks_api=HttpTasksApi(transport),
        notifier=notifier,
        navigator=navigator,
        confirmer=confirmer,
        transport=transport,
    )
    bind_session_lifecycle(state)
    logger.info("Client ready api=%s session_file=%s", settings.api_base_url, settings.session_path)
    return state


def bind_session_lifecycle(state: AppState) -> None:
    """Tear the dashboard down whenever the session stops being authenticated."""

    def _on_session_change(phase: SessionPhase, user: User | None) -> None:
        if phase is not SessionPhase.AUTHENTICATED:
            close_dashboard(state)

    state.session.add_listener(_on_session_change)


async def shutdown(state: AppState) -> None:
    """Best-effort shutdown (no exceptions should escape)."""
    try:
        close_dashboard(state)
    except Exception:
        logger.exception("Failed to close the dashboard.")

    if state.transport is not None:
        try:
            await state.transport.aclose()
        except Exception:
            logger.debug("HTTP client close failed.", exc_info=True)
