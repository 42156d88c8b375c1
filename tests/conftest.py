# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from taskmaster_client.cli.bootstrap import bind_session_lifecycle
from taskmaster_client.core.state import AppState
from taskmaster_client.session.auth_flow import AuthFlow
from taskmaster_client.session.manager import SessionManager
from taskmaster_client.tasks.collection import TaskCollectionController

from .fakes import (
    FakeAuthApi,
    FakeConfirmer,
    FakeNavigator,
    FakeNotifier,
    FakeTasksApi,
    FakeTokenStore,
)


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Stand-in for config.Settings with only the fields AppState and the
    dashboard read. Never touches the real environment.
    """
    return SimpleNamespace(
        app_name="TaskMaster",
        api_base_url="http://api.test/api",
        data_dir=tmp_path,
        session_path=tmp_path / "session.json",
        # Short quiet period keeps debounce tests fast.
        search_debounce_seconds=0.05,
        page_size=None,
        console_enabled=False,
    )


@pytest.fixture()
def notifier() -> FakeNotifier:
    return FakeNotifier()


@pytest.fixture()
def navigator() -> FakeNavigator:
    return FakeNavigator()


@pytest.fixture()
def confirmer() -> FakeConfirmer:
    return FakeConfirmer(answer=True)


@pytest.fixture()
def token_store() -> FakeTokenStore:
    return FakeTokenStore()


@pytest.fixture()
def auth_api() -> FakeAuthApi:
    return FakeAuthApi()


@pytest.fixture()
def tasks_api() -> FakeTasksApi:
    return FakeTasksApi()


@pytest.fixture()
def session(auth_api: FakeAuthApi, token_store: FakeTokenStore, navigator: FakeNavigator) -> SessionManager:
    return SessionManager(auth_api=auth_api, token_storage=token_store, navigator=navigator)


@pytest.fixture()
def controller(
    tasks_api: FakeTasksApi,
    notifier: FakeNotifier,
    confirmer: FakeConfirmer,
    settings: SimpleNamespace,
) -> TaskCollectionController:
    return TaskCollectionController(
        tasks_api=tasks_api,
        notifier=notifier,
        confirmer=confirmer,
        search_debounce_seconds=settings.search_debounce_seconds,
    )


@pytest.fixture()
def state(
    settings: SimpleNamespace,
    session: SessionManager,
    auth_api: FakeAuthApi,
    tasks_api: FakeTasksApi,
    notifier: FakeNotifier,
    navigator: FakeNavigator,
    confirmer: FakeConfirmer,
) -> AppState:
    """
    AppState wired with deterministic fakes (no HTTP transport).
    """
    app = AppState(
        settings=settings,
        session=session,
        auth_flow=AuthFlow(auth_api=auth_api, session=session, notifier=notifier),
        tasks_api=tasks_api,
        notifier=notifier,
        navigator=navigator,
        confirmer=confirmer,
    )
    bind_session_lifecycle(app)
    return app
