"""
Wire schemas for the team-mate finder backend.

The backend speaks camelCase JSON (`userId`, `projectName`, ...) and uses the
Mongo-style `_id` for identity. Models here use snake_case attributes with
aliases, so build them from payloads with `Model.model_validate(data)` and
send them with `to_payload()`.
"""

from datetime import date
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class _WireModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
    )

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


# ---------------------------------------------------------------------------
# Accounts
# ---------------------------------------------------------------------------

class UserType(str, Enum):
    STUDENT  = "Student"
    ALUMNI   = "Alumni"
    INDUSTRY = "Industry"


# User types that must pick a university at registration
UNIVERSITY_USER_TYPES = frozenset({UserType.STUDENT, UserType.ALUMNI})


class University(_WireModel):
    model_config = ConfigDict(extra="ignore")

    name: str


class Session(_WireModel):
    """Identity of the logged-in user, as kept in the session store."""

    user_id: str
    user_name: str = ""
    token: str | None = None


class LoginResult(_WireModel):
    model_config = ConfigDict(extra="allow")

    success: bool = False
    token: str | None = None
    message: str = ""
    user_id: str | None = None
    user_name: str | None = None

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> "LoginResult":
        """
        Parse a /login response.

        The identity is read from top-level `userId`/`userName` when present,
        otherwise from a nested `user` object (`_id`/`id` and `name`).
        """
        payload = {k: v for k, v in data.items() if k != "user" and v is not None}
        user = data.get("user")
        if isinstance(user, dict):
            payload = {
                "userId":   user.get("_id") or user.get("id"),
                "userName": user.get("name") or user.get("username"),
                **payload,
            }
        return cls.model_validate(payload)


class ApiResult(_WireModel):
    model_config = ConfigDict(extra="allow")

    success: bool = False
    message: str = ""

    @field_validator("message", mode="before")
    @classmethod
    def _null_message(cls, value: Any) -> Any:
        return "" if value is None else value


class RegistrationForm(_WireModel):
    name: str
    email: str
    password: str
    confirm_password: str
    user_type: UserType
    university: str = ""

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")


# ---------------------------------------------------------------------------
# Team requests
# ---------------------------------------------------------------------------

# Text fields covered by the board's free-text search
SEARCH_FIELDS = ("project_name", "course_name", "semester", "description")

# Fields a user may change through the request form
EDITABLE_FIELDS = SEARCH_FIELDS + ("end_time",)


class TeamRequest(_WireModel):
    model_config = ConfigDict(extra="allow")

    id: str | None = Field(default=None, alias="_id")
    user_id: str
    user_name: str = ""
    project_name: str = ""
    course_name: str = ""
    semester: str = ""
    description: str = ""
    end_time: str = ""

    @field_validator("user_name", "project_name", "course_name", "semester", "description", mode="before")
    @classmethod
    def _null_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("end_time", mode="before")
    @classmethod
    def _date_to_iso(cls, value: Any) -> Any:
        if value is None:
            return ""
        if isinstance(value, date):
            return value.isoformat()
        return value

    @property
    def end_date(self) -> date | None:
        """`end_time` as a date; the backend may append a time component."""
        if not self.end_time:
            return None
        try:
            return date.fromisoformat(self.end_time[:10])
        except ValueError:
            return None

    @classmethod
    def draft_for(cls, session: Session) -> "TeamRequest":
        """Empty request attributed to the session's user."""
        return cls(user_id=session.user_id, user_name=session.user_name)


def field_name(name: str) -> str:
    """Resolve a wire name (`projectName`) or attribute name to the attribute name."""
    for attr, info in TeamRequest.model_fields.items():
        if name == attr or name == info.alias:
            return attr
    raise KeyError(name)
