# src/taskmaster_client/connectors/console_connector.py

from __future__ import annotations

import asyncio
import logging
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..cli.commands import render_task_list
from ..core.state import AppState, open_dashboard
from ..session.manager import DASHBOARD_PATH
from ..session.session_models import GuardDecision

logger = logging.getLogger(__name__)

_PUBLIC_HINT = (
    "Sign in with /login <email> <password>, create an account with "
    '/register "<name>" <email> <password> <confirm>, or try /guest.'
)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}")


class ConsoleNotifier:
    """Toasts, console edition."""

    def success(self, text: str) -> None:
        _print_ts(f"[OK] {text}")

    def error(self, text: str) -> None:
        _print_ts(f"[ERROR] {text}")


class ConsoleNavigator:
    """
    Remembers the current logical view.

    The REPL checks consume_change() after each command and re-enters the
    view, which is where guards run.
    """

    def __init__(self, initial: str = DASHBOARD_PATH) -> None:
        self.current = initial
        self._changed = True

    def navigate(self, path: str) -> None:
        if path != self.current:
            logger.debug("Navigate %s -> %s", self.current, path)
        self.current = path
        self._changed = True

    def consume_change(self) -> bool:
        changed = self._changed
        self._changed = False
        return changed


class ConsoleConfirm:
    """window.confirm(), console edition. Anything but y/yes declines."""

    async def confirm(self, prompt: str) -> bool:
        try:
            answer = await asyncio.to_thread(input, f"{prompt} [y/N] ")
        except (EOFError, KeyboardInterrupt):
            return False
        return answer.strip().lower() in ("y", "yes")


async def _enter_view(state: AppState, navigator: ConsoleNavigator) -> None:
    """Render whatever view the navigator points at, after running its guard."""
    # A guard may redirect; follow until the view is stable.
    for _ in range(3):
        path = navigator.current

        if path == DASHBOARD_PATH:
            decision = state.session.guard_protected()
            if decision is GuardDecision.ALLOW:
                dash = open_dashboard(state)
                user = state.session.user
                _print_ts(f"Welcome, {user.display_name if user else '?'}")
                await dash.refresh()
                print(render_task_list(dash))
                return
        else:
            decision = state.session.guard_public_only()
            if decision is GuardDecision.ALLOW:
                _print_ts(_PUBLIC_HINT)
                return

        if decision is GuardDecision.WAIT:
            # Session not settled: render nothing.
            return

        # REDIRECT: the guard already navigated elsewhere.
        navigator.consume_change()


async def run_console_loop(state: AppState) -> None:
    logger.info("Console connector started.")
    navigator = state.navigator
    if not isinstance(navigator, ConsoleNavigator):
        raise TypeError("run_console_loop requires a ConsoleNavigator")

    _print_ts("Restoring session...")
    await state.session.restore()

    app_name = str(getattr(state.settings, "app_name", "TaskMaster"))
    _print_ts(f"[{app_name}] Use /help for commands. Use /exit to quit.\n")

    def emit(text: str) -> None:
        print(f"[{_ts_local()}] {text}", flush=True)

    while True:
        if navigator.consume_change():
            try:
                await _enter_view(state, navigator)
            except Exception:
                logger.exception("View rendering crashed.")
                _print_ts("Internal error while rendering the view.")

        try:
            user_input = (await asyncio.to_thread(input, ">>> ")).strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not user_input:
            continue

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        if not user_input.startswith("/"):
            if navigator.current == DASHBOARD_PATH and state.dashboard is not None:
                # Bare text on the dashboard is a search.
                user_input = "/search " + user_input
            else:
                _print_ts("Commands start with '/'. Use /help.")
                continue

        try:
            cmd_response = await command_registry.handle(state, user_input, emit=emit)
        except Exception:
            logger.exception("Command handler crashed.")
            cmd_response = "Internal error while handling a command."

        if cmd_response:
            print(f"[{_ts_local()}] {cmd_response}")

    logger.info("Console connector finished.")
