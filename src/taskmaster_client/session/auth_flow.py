# src/taskmaster_client/session/auth_flow.py

from __future__ import annotations

import logging
import secrets
import string

from ..api.errors import TaskMasterError, friendly_error_message
from ..core.ports import AuthApi, Notifier
from ..core.validation import validate_login, validate_registration
from .manager import SessionManager
from .session_models import AuthResult

logger = logging.getLogger(__name__)

GUEST_NAME = "Guest User"
GUEST_DOMAIN = "demo.com"

_GUEST_ALPHABET = string.ascii_lowercase + string.digits


def guest_credentials(token: str | None = None) -> tuple[str, str, str]:
    """(email, password, name) for a throwaway guest account."""
    rid = token or "".join(secrets.choice(_GUEST_ALPHABET) for _ in range(6))
    return f"guest_{rid}@{GUEST_DOMAIN}", f"guest_{rid}!", GUEST_NAME


class AuthFlow:
    """
    Login/register screens' submit handlers.

    Every method:
    - validates first (ValidationError propagates: the form shows it inline),
    - performs the exchange, hands the result to SessionManager.login(),
    - reports success/failure through the notifier and returns a bool.
    """

    def __init__(self, *, auth_api: AuthApi, session: SessionManager, notifier: Notifier) -> None:
        self._auth = auth_api
        self._session = session
        self._notifier = notifier

    def _adopt(self, result: AuthResult, success_text: str) -> None:
        self._session.login(result.access_token, result.refresh_token, result.user)
        self._notifier.success(success_text)

    async def sign_in(self, email: str, password: str) -> bool:
        payload = validate_login(email, password)
        try:
            result = await self._auth.login(payload["email"], payload["password"])
        except TaskMasterError as e:
            logger.info("Login failed: %s", e)
            self._notifier.error(friendly_error_message(e, "Login failed"))
            return False
        self._adopt(result, "Welcome back!")
        return True

    async def sign_up(self, name: str, email: str, password: str, confirm_password: str) -> bool:
        payload = validate_registration(name, email, password, confirm_password)
        try:
            result = await self._auth.register(payload["email"], payload["password"], payload["name"])
        except TaskMasterError as e:
            logger.info("Registration failed: %s", e)
            self._notifier.error(friendly_error_message(e, "Registration failed"))
            return False
        self._adopt(result, "Account created successfully!")
        return True

    async def enter_guest_mode(self) -> bool:
        email, password, name = guest_credentials()
        try:
            result = await self._auth.register(email, password, name)
        except TaskMasterError:
            logger.exception("Guest login failed")
            self._notifier.error("Failed to enter guest mode")
            return False
        self._adopt(result, "Entered Guest Mode!")
        return True
