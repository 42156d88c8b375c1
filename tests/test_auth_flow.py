# tests/test_auth_flow.py

from __future__ import annotations

import re

import pytest

from taskmaster_client.api.errors import NetworkError, ValidationError
from taskmaster_client.session.auth_flow import GUEST_NAME, AuthFlow, guest_credentials
from taskmaster_client.session.manager import DASHBOARD_PATH
from taskmaster_client.session.session_models import StoredTokens


@pytest.fixture()
def flow(auth_api, session, notifier) -> AuthFlow:
    return AuthFlow(auth_api=auth_api, session=session, notifier=notifier)


@pytest.mark.asyncio
async def test_sign_in_adopts_session(flow, auth_api, session, token_store, navigator, notifier) -> None:
    user = auth_api.add_user("ann@example.com", "secret1", "Ann")

    assert await flow.sign_in(" ann@example.com ", "secret1") is True

    assert session.user == user
    assert token_store.tokens == StoredTokens(f"access-{user.id}", f"refresh-{user.id}")
    assert navigator.current == DASHBOARD_PATH
    assert notifier.successes == ["Welcome back!"]


@pytest.mark.asyncio
async def test_sign_in_shows_server_message_on_rejection(flow, auth_api, session, notifier) -> None:
    auth_api.add_user("ann@example.com", "secret1")

    assert await flow.sign_in("ann@example.com", "wrong") is False

    assert notifier.errors == ["Invalid credentials"]
    assert session.user is None


@pytest.mark.asyncio
async def test_invalid_form_raises_before_any_request(flow, auth_api) -> None:
    with pytest.raises(ValidationError) as exc:
        await flow.sign_in("not-an-email", "")

    assert exc.value.errors == {
        "email": "Invalid email address",
        "password": "Password is required",
    }
    assert auth_api.calls == []


@pytest.mark.asyncio
async def test_sign_up_creates_account(flow, session, notifier) -> None:
    assert await flow.sign_up("Bob", "bob@example.com", "hunter22", "hunter22") is True

    assert session.user is not None
    assert session.user.name == "Bob"
    assert notifier.successes == ["Account created successfully!"]


@pytest.mark.asyncio
async def test_sign_up_duplicate_uses_server_message(flow, auth_api, notifier) -> None:
    auth_api.add_user("bob@example.com", "hunter22")

    assert await flow.sign_up("Bob", "bob@example.com", "hunter22", "hunter22") is False
    assert notifier.errors == ["User already exists"]


@pytest.mark.asyncio
async def test_sign_up_network_failure_falls_back(flow, auth_api, notifier) -> None:
    auth_api.register_error = NetworkError("POST /auth/register: ConnectError")

    assert await flow.sign_up("Bob", "bob@example.com", "hunter22", "hunter22") is False
    assert notifier.errors == ["Registration failed"]


@pytest.mark.asyncio
async def test_guest_mode_registers_throwaway_account(flow, session, notifier) -> None:
    assert await flow.enter_guest_mode() is True

    user = session.user
    assert user is not None
    assert re.fullmatch(r"guest_[a-z0-9]{6}@demo\.com", user.email)
    assert user.name == GUEST_NAME
    assert notifier.successes == ["Entered Guest Mode!"]


@pytest.mark.asyncio
async def test_guest_mode_failure(flow, auth_api, session, notifier) -> None:
    auth_api.register_error = NetworkError("POST /auth/register: ConnectError")

    assert await flow.enter_guest_mode() is False
    assert session.user is None
    assert notifier.errors == ["Failed to enter guest mode"]


def test_guest_credentials_shape() -> None:
    assert guest_credentials("abc123") == ("guest_abc123@demo.com", "guest_abc123!", "Guest User")
