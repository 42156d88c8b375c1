# src/taskmaster_client/cli/commands.py

from __future__ import annotations

import inspect
import logging
import shlex
from collections.abc import Awaitable, Callable

from ..api.errors import ValidationError
from ..core.state import AppState, open_dashboard
from ..session.session_models import GuardDecision
from ..tasks.collection import TaskCollectionController
from ..tasks.task_models import Task, TaskStatus

CommandEmitter = Callable[[str], None]
CommandHandler = Callable[[AppState, list[str], CommandEmitter | None], Awaitable[str] | str]

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console front end (/help, /login, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    async def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.

        Arguments are shell-split, so quoted titles keep their spaces.
        """
        if not line.startswith("/"):
            return None

        try:
            parts = shlex.split(line[1:])
        except ValueError:
            parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        result = handler(state, args, emit)
        if inspect.isawaitable(result):
            result = await result
        return result

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- rendering ----


def format_validation(err: ValidationError) -> str:
    lines = ["Please fix the following:"]
    for field_name, message in err.errors.items():
        lines.append(f"  {field_name}: {message}")
    return "\n".join(lines)


def render_task(task: Task) -> str:
    badge = task.status.value.replace("_", " ")
    created = task.created_at.date().isoformat() if task.created_at else "?"
    action = "Mark as Pending" if task.status is TaskStatus.COMPLETED else "Advance Status"
    line = f"#{task.id} [{badge}] {task.title}  (created {created}; /toggle {task.id}: {action})"
    if task.description:
        line += f"\n      {task.description}"
    return line


def render_task_list(controller: TaskCollectionController) -> str:
    if controller.loading:
        return "Loading..."

    f = controller.filters
    p = controller.pagination
    header = "My Tasks"
    info: list[str] = []
    if p.total_pages:
        info.append(f"page {p.page}/{p.total_pages}")
    if p.total is not None:
        info.append(f"{p.total} total")
    if f.search:
        info.append(f"search={f.search!r}")
    if f.status:
        info.append(f"status={f.status.value}")
    if info:
        header += " (" + ", ".join(info) + ")"

    tasks = controller.tasks
    if not tasks:
        return f"{header}\n  No tasks found. Create your first task with /new <title>."
    return "\n".join([header, *(f"  {render_task(t)}" for t in tasks)])


# ---- helpers ----


def _dashboard(state: AppState) -> TaskCollectionController | None:
    if state.session.guard_protected() is not GuardDecision.ALLOW:
        return None
    return open_dashboard(state)


_LOGIN_FIRST = "You are not logged in. Use /login, /register or /guest."


def _parse_id(args: list[str]) -> int | None:
    if not args:
        return None
    try:
        return int(args[0].lstrip("#"))
    except ValueError:
        return None


def _parse_fields(args: list[str]) -> dict[str, str]:
    """key=value pairs (title=..., description=..., status=...)."""
    out: dict[str, str] = {}
    for a in args:
        key, sep, value = a.partition("=")
        if sep:
            out[key.strip().lower()] = value
    return out


# ---- commands ----


def cmd_help(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    return registry.build_help()


async def cmd_login(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """/login <email> <password>"""
    if state.session.guard_public_only() is not GuardDecision.ALLOW:
        return "Already logged in. Use /logout first."
    if len(args) < 2:
        return "Usage: /login <email> <password>"
    try:
        ok = await state.auth_flow.sign_in(args[0], args[1])
    except ValidationError as e:
        return format_validation(e)
    return "" if ok else "Login failed. Check your credentials and try again."


async def cmd_register(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """/register <name> <email> <password> <confirm-password>"""
    if state.session.guard_public_only() is not GuardDecision.ALLOW:
        return "Already logged in. Use /logout first."
    if len(args) < 4:
        return 'Usage: /register "<full name>" <email> <password> <confirm-password>'
    try:
        ok = await state.auth_flow.sign_up(args[0], args[1], args[2], args[3])
    except ValidationError as e:
        return format_validation(e)
    return "" if ok else "Registration failed."


async def cmd_guest(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if state.session.guard_public_only() is not GuardDecision.ALLOW:
        return "Already logged in. Use /logout first."
    if emit:
        emit("Creating a guest account...")
    ok = await state.auth_flow.enter_guest_mode()
    return "" if ok else "Guest mode is unavailable right now."


async def cmd_logout(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if not state.session.is_authenticated:
        return "You are not logged in."
    await state.session.logout()
    return "Logged out."


def cmd_whoami(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    user = state.session.user
    if user is None:
        return "Not logged in."
    if user.name:
        return f"Welcome, {user.name} <{user.email}> (id={user.id})"
    return f"Welcome, {user.email} (id={user.id})"


async def cmd_tasks(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """/tasks -> reload current page and show it"""
    dash = _dashboard(state)
    if dash is None:
        return _LOGIN_FIRST
    await dash.refresh()
    return render_task_list(dash)


async def cmd_search(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /search <text>  -> search titles/descriptions
    /search         -> clear search

    A typed command is a finished input (Enter), so it skips the quiet period.
    """
    dash = _dashboard(state)
    if dash is None:
        return _LOGIN_FIRST
    dash.set_search(" ".join(args))
    dash.flush_search()
    await dash.settle()
    return render_task_list(dash)


async def cmd_filter(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """/filter all|pending|in_progress|completed"""
    dash = _dashboard(state)
    if dash is None:
        return _LOGIN_FIRST
    raw = args[0] if args else "all"
    try:
        await dash.set_status(raw)
    except ValueError:
        return "Usage: /filter all|pending|in_progress|completed"
    return render_task_list(dash)


async def cmd_page(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    dash = _dashboard(state)
    if dash is None:
        return _LOGIN_FIRST
    page = _parse_id(args)
    if page is None:
        return "Usage: /page <n>"
    await dash.set_page(page)
    return render_task_list(dash)


async def cmd_new(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """/new "<title>" ["<description>"]"""
    dash = _dashboard(state)
    if dash is None:
        return _LOGIN_FIRST
    data: dict[str, str] = {"title": args[0] if args else ""}
    if len(args) > 1:
        data["description"] = " ".join(args[1:])
    try:
        ok = await dash.create(data)
    except ValidationError as e:
        return format_validation(e)
    if not ok:
        return "Task was not created. Fix the problem and try again."
    return render_task_list(dash)


async def cmd_edit(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """/edit <id> title=... description=... status=PENDING|IN_PROGRESS|COMPLETED"""
    dash = _dashboard(state)
    if dash is None:
        return _LOGIN_FIRST
    task_id = _parse_id(args)
    fields = _parse_fields(args[1:])
    if task_id is None or not fields:
        return 'Usage: /edit <id> title="..." description="..." status=COMPLETED'
    if dash.get(task_id) is None:
        return f"No task #{task_id} on this page."
    try:
        ok = await dash.update(task_id, fields)
    except ValidationError as e:
        return format_validation(e)
    if not ok:
        return "Changes were not saved."
    return render_task_list(dash)


async def cmd_delete(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    dash = _dashboard(state)
    if dash is None:
        return _LOGIN_FIRST
    task_id = _parse_id(args)
    if task_id is None:
        return "Usage: /delete <id>"
    if dash.get(task_id) is None:
        return f"No task #{task_id} on this page."
    await dash.delete(task_id)
    return render_task_list(dash)


async def cmd_toggle(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    dash = _dashboard(state)
    if dash is None:
        return _LOGIN_FIRST
    task_id = _parse_id(args)
    if task_id is None:
        return "Usage: /toggle <id>"
    await dash.toggle_status(task_id)
    return render_task_list(dash)


def cmd_show(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    dash = _dashboard(state)
    if dash is None:
        return _LOGIN_FIRST
    task_id = _parse_id(args)
    task = dash.get(task_id) if task_id is not None else None
    if task is None:
        return "Usage: /show <id> (the task must be on the current page)"
    updated = task.updated_at.isoformat(sep=" ", timespec="minutes") if task.updated_at else "?"
    return f"{render_task(task)}\n      last updated {updated}"


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("login", cmd_login, help_text="Sign in: /login <email> <password>.")
registry.register(
    "register", cmd_register, help_text='Create an account: /register "<name>" <email> <password> <confirm>.'
)
registry.register("guest", cmd_guest, help_text="Continue with a throwaway guest account.")
registry.register("logout", cmd_logout, help_text="Sign out and forget the stored session.")
registry.register("whoami", cmd_whoami, help_text="Show the signed-in user.")
registry.register("tasks", cmd_tasks, help_text="Reload and show your tasks.", aliases=["ls"])
registry.register("search", cmd_search, help_text="Search tasks: /search <text> (empty clears).")
registry.register("filter", cmd_filter, help_text="Filter by status: /filter all|pending|in_progress|completed.")
registry.register("page", cmd_page, help_text="Go to page: /page <n>.")
registry.register("new", cmd_new, help_text='Create a task: /new "<title>" ["<description>"].')
registry.register("edit", cmd_edit, help_text='Edit a task: /edit <id> title="..." status=COMPLETED.')
registry.register("delete", cmd_delete, help_text="Delete a task (asks for confirmation): /delete <id>.")
registry.register("toggle", cmd_toggle, help_text="Advance a task's status: /toggle <id>.")
registry.register("show", cmd_show, help_text="Show one task: /show <id>.")
