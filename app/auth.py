"""
Auth gateway: the login / registration form pair.

Exactly one of the two forms is active at a time. The gateway owns the form
fields, the university options for the registration dropdown, and the
notices to show after each action. It talks to the backend through
TeammateAPI and, on a successful login, writes the session to the
SessionStore and hands it back to the caller.

Public API:
    AuthGateway(api, store)
    .load_universities()        fetch dropdown options (once per mount)
    .toggle_form()              switch login ↔ register, clearing every field
    .on_user_type_change(t)     set user type, clear selected university
    .login()    → Session | None
    .register() → bool
    .forgot_password()
"""

import logging
from enum import Enum

from pydantic import ValidationError

from app.notices import NoticeQueue
from client.api import ApiError, TeammateAPI
from client.models import (
    UNIVERSITY_USER_TYPES,
    RegistrationForm,
    Session,
    University,
    UserType,
)
from client.session_store import SessionStore

log = logging.getLogger(__name__)


class FormMode(str, Enum):
    LOGIN    = "login"
    REGISTER = "register"


class AuthGateway:
    def __init__(self, api: TeammateAPI, store: SessionStore):
        self.api   = api
        self.store = store

        self.mode = FormMode.LOGIN
        self.university_options: list[University] = []
        self.notices = NoticeQueue()
        self._universities_loaded = False

        self.clear_fields()

    @property
    def is_login(self) -> bool:
        return self.mode is FormMode.LOGIN

    @property
    def needs_university(self) -> bool:
        """Only students and alumni pick a university."""
        return self.user_type in UNIVERSITY_USER_TYPES

    def clear_fields(self) -> None:
        self.name = ""
        self.email = ""
        self.password = ""
        self.confirm_password = ""
        self.user_type: UserType | None = None
        self.selected_university = ""

    # ------------------------------------------------------------------
    # Form state
    # ------------------------------------------------------------------

    def load_universities(self) -> None:
        """Fetch university options; a failure leaves the list empty."""
        if self._universities_loaded:
            return
        self._universities_loaded = True
        try:
            self.university_options = self.api.list_universities()
        except ApiError as exc:
            log.error("Error fetching universities: %s", exc)
            self.university_options = []
            self.notices.error("Failed to load universities!")
            return
        log.info("Loaded %d universities.", len(self.university_options))

    def toggle_form(self) -> None:
        self.mode = FormMode.REGISTER if self.is_login else FormMode.LOGIN
        self.clear_fields()

    def on_user_type_change(self, user_type: UserType | str | None) -> None:
        self.user_type = UserType(user_type) if user_type else None
        self.selected_university = ""

    def select_university(self, name: str) -> None:
        self.selected_university = name

    def forgot_password(self) -> None:
        self.notices.info("Password reset is not available here yet. Please contact your administrator.")

    # ------------------------------------------------------------------
    # Submit handlers
    # ------------------------------------------------------------------

    def login(self) -> Session | None:
        """
        Submit the login form.

        On success the token and identity are stored and the new Session is
        returned; the form is left as-is on any failure.
        """
        if not self.email.strip() or not self.password:
            self.notices.error("Please enter your email and password.")
            return None

        log.info("Login attempt for %s", self.email)
        try:
            result = self.api.login(self.email.strip(), self.password)
        except ApiError as exc:
            log.error("Error during login: %s", exc)
            self.notices.error("An error occurred during login!")
            return None

        if not result.success:
            log.warning("Login failed for %s: %s", self.email, result.message)
            self.notices.error(f"Login failed: {result.message}")
            return None

        if not result.user_id:
            log.error("Login response for %s carried no user id.", self.email)
            self.notices.error("Login failed: the server did not return your account details.")
            return None

        session = Session(
            user_id=result.user_id,
            user_name=result.user_name or "",
            token=result.token,
        )
        self.store.save_session(session)
        self.api.set_token(session.token)
        self.clear_fields()
        log.info("User %s logged in.", session.user_id)
        return session

    def register(self) -> bool:
        """Submit the registration form; True when the account was created."""
        if self.password != self.confirm_password:
            self.notices.error("Passwords don't match!")
            return False

        missing = self._missing_registration_fields()
        if missing:
            self.notices.error("Please fill in: " + ", ".join(missing) + ".")
            return False

        try:
            form = RegistrationForm(
                name=self.name.strip(),
                email=self.email.strip(),
                password=self.password,
                confirm_password=self.confirm_password,
                user_type=self.user_type,
                university=self.selected_university if self.needs_university else "",
            )
        except ValidationError as exc:
            log.warning("Registration form rejected: %s", exc)
            self.notices.error("Please check the registration form.")
            return False

        try:
            result = self.api.register(form)
        except ApiError as exc:
            log.error("Error during registration: %s", exc)
            self.notices.error("An error occurred during registration!")
            return False

        if not result.success:
            log.warning("Registration failed for %s: %s", form.email, result.message)
            self.notices.error(f"Registration failed: {result.message}")
            return False

        log.info("Registered %s as %s.", form.email, form.user_type.value)
        self.notices.success("Registration successful! Please log in.")
        self.mode = FormMode.LOGIN
        self.clear_fields()
        return True

    def _missing_registration_fields(self) -> list[str]:
        missing = []
        if not self.name.strip():
            missing.append("name")
        if not self.email.strip():
            missing.append("email")
        if not self.password:
            missing.append("password")
        if self.user_type is None:
            missing.append("user type")
        elif self.needs_university and not self.selected_university:
            missing.append("university")
        return missing
