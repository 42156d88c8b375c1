# src/taskmaster_client/core/state.py

from __future__ import annotations

from dataclasses import dataclass

from ..api.http import ApiTransport
from ..session.auth_flow import AuthFlow
from ..session.manager import SessionManager
from ..tasks.collection import TaskCollectionController
from .ports import Confirmer, Navigator, Notifier, TasksApi


@dataclass
class AppState:
    # Store Settings on the state for easy access in other modules later.
    settings: object

    session: SessionManager
    auth_flow: AuthFlow
    tasks_api: TasksApi

    notifier: Notifier
    navigator: Navigator
    confirmer: Confirmer

    # None in tests that wire fake APIs.
    transport: ApiTransport | None = None

    # Present only while the dashboard view is open (i.e. while logged in).
    dashboard: TaskCollectionController | None = None


def open_dashboard(state: AppState) -> TaskCollectionController:
    """Attach a task controller for the current session (idempotent)."""
    if state.dashboard is None:
        settings = state.settings
        state.dashboard = TaskCollectionController(
            tasks_api=state.tasks_api,
            notifier=state.notifier,
            confirmer=state.confirmer,
            search_debounce_seconds=float(getattr(settings, "search_debounce_seconds", 0.5)),
            page_size=getattr(settings, "page_size", None),
            on_auth_lost=state.session.invalidate,
        )
    return state.dashboard


def close_dashboard(state: AppState) -> None:
    """Drop the task controller; anything still in flight is ignored."""
    if state.dashboard is not None:
        state.dashboard.detach()
        state.dashboard = None
