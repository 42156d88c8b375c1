# src/taskmaster_client/core/validation.py

"""
Client-side form validation.

Runs before any request is sent. Each form is a pydantic model; the public
validators return a clean payload or raise our ValidationError with one
message per field, so the front end can show it next to the input.
"""

from __future__ import annotations

from typing import Annotated, Any, ClassVar, Optional

from pydantic import BaseModel, EmailStr, Field, StringConstraints, field_validator, model_validator
from pydantic import ValidationError as PydanticValidationError

from ..api.errors import ValidationError
from ..tasks.task_models import TaskStatus

MIN_NAME_LEN = 2
MIN_PASSWORD_LEN = 6

Title = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
Description = Annotated[str, StringConstraints(strip_whitespace=True)]

_STATUS_MESSAGE = "Status must be one of: " + ", ".join(s.value for s in TaskStatus)


class _Form(BaseModel):
    # field -> user-facing message; pydantic's own text is only a fallback.
    messages: ClassVar[dict[str, str]] = {}
    # Where model-level (cross-field) errors are reported.
    root_field: ClassVar[str] = "form"

    @classmethod
    def check(cls, data: dict[str, Any]) -> _Form:
        try:
            return cls.model_validate(data)
        except PydanticValidationError as e:
            errors: dict[str, str] = {}
            for err in e.errors():
                loc = err.get("loc") or ()
                key = str(loc[0]) if loc else cls.root_field
                errors.setdefault(key, cls.messages.get(key, err["msg"]))
            raise ValidationError(errors) from None


class LoginForm(_Form):
    messages: ClassVar[dict[str, str]] = {
        "email": "Invalid email address",
        "password": "Password is required",
    }

    email: EmailStr
    password: str = Field(min_length=1)


class RegistrationForm(_Form):
    messages: ClassVar[dict[str, str]] = {
        "name": f"Name must be at least {MIN_NAME_LEN} characters",
        "email": "Invalid email address",
        "password": f"Password must be at least {MIN_PASSWORD_LEN} characters",
        "confirmPassword": "Passwords don't match",
    }
    root_field: ClassVar[str] = "confirmPassword"

    name: Annotated[str, StringConstraints(strip_whitespace=True, min_length=MIN_NAME_LEN)]
    email: EmailStr
    password: str = Field(min_length=MIN_PASSWORD_LEN)
    confirm_password: str = ""

    @model_validator(mode="after")
    def _passwords_match(self) -> RegistrationForm:
        # Only reached once every field is valid on its own.
        if self.password != self.confirm_password:
            raise ValueError("Passwords don't match")
        return self


class TaskUpdate(_Form):
    """Edit form: every field optional, only what was given is sent."""

    messages: ClassVar[dict[str, str]] = {
        "title": "Title is required",
        "status": _STATUS_MESSAGE,
    }

    title: Optional[Title] = None
    description: Optional[Description] = None
    status: Optional[TaskStatus] = None

    @field_validator("status", mode="before")
    @classmethod
    def _parse_status(cls, v: Any) -> TaskStatus | None:
        if v is None or v == "":
            return None
        return TaskStatus.parse(v)

    def payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_unset=True, exclude_none=True)


class TaskInput(TaskUpdate):
    """Create form: title is mandatory."""

    title: Title


def _email(raw: str) -> str:
    return (raw or "").strip()


def validate_login(email: str, password: str) -> dict[str, str]:
    form = LoginForm.check({"email": _email(email), "password": password or ""})
    return {"email": str(form.email), "password": form.password}


def validate_registration(name: str, email: str, password: str, confirm_password: str) -> dict[str, str]:
    form = RegistrationForm.check(
        {
            "name": name or "",
            "email": _email(email),
            "password": password or "",
            "confirm_password": confirm_password or "",
        }
    )
    return {"name": form.name, "email": str(form.email), "password": form.password}


def validate_task_input(data: dict[str, Any], *, partial: bool = False) -> dict[str, Any]:
    """
    Validate a create (partial=False) or update (partial=True) payload.

    Only known keys are forwarded; an empty description is sent as "" so an
    edit can clear it.
    """
    form_cls = TaskUpdate if partial else TaskInput
    return form_cls.check(dict(data)).payload()  # type: ignore[attr-defined]
