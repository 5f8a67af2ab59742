"""
HTTP client for the team-mate finder backend.

Wraps the REST surface under the configured base path:

    GET    /unilist                 → [{name}]
    POST   /login                   → {success, token, message, ...}
    POST   /register                → {success, message}
    GET    /team/requests           → [TeamRequest]
    POST   /team/requests           → TeamRequest   (201)
    PUT    /team/requests/<id>      → TeamRequest   (200)
    DELETE /team/requests/<id>      → 200

Every transport failure, non-JSON body and unexpected status is raised as
ApiError. Login and register are the exception on status codes: their JSON
body carries `success`/`message` whatever the status, so it is always parsed.
"""

import logging
from typing import Any

import requests
from pydantic import ValidationError

from app.config import API_URL, REQUEST_TIMEOUT
from client.models import (
    ApiResult,
    LoginResult,
    RegistrationForm,
    TeamRequest,
    University,
)

log = logging.getLogger(__name__)


class ApiError(Exception):
    """The backend could not be reached or answered with something unusable."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class TeammateAPI:
    def __init__(
        self,
        base_url: str = API_URL,
        timeout: float = REQUEST_TIMEOUT,
        session: requests.Session | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout  = timeout
        self.http     = session if session is not None else requests.Session()
        self.http.headers["Accept"] = "application/json"

    # ------------------------------------------------------------------
    # Auth header
    # ------------------------------------------------------------------

    def set_token(self, token: str | None) -> None:
        """Send `token` as a bearer credential on every later call (None removes it)."""
        if token:
            self.http.headers["Authorization"] = f"Bearer {token}"
        else:
            self.http.headers.pop("Authorization", None)

    # ------------------------------------------------------------------
    # HTTP helpers
    # ------------------------------------------------------------------

    def _send(self, method: str, path: str, body: Any = None) -> requests.Response:
        url = f"{self.base_url}{path}"
        try:
            resp = self.http.request(method, url, json=body, timeout=self.timeout)
        except requests.RequestException as exc:
            log.error("%s %s failed: %s", method, url, exc)
            raise ApiError(f"Could not reach the server ({exc.__class__.__name__}).") from exc
        log.debug("%s %s → %d", method, url, resp.status_code)
        return resp

    @staticmethod
    def _json(resp: requests.Response) -> Any:
        try:
            return resp.json()
        except ValueError as exc:
            raise ApiError("Server returned a non-JSON response.", resp.status_code) from exc

    @staticmethod
    def _requests(resp: requests.Response, data: Any) -> list[TeamRequest]:
        try:
            return [TeamRequest.model_validate(r) for r in data]
        except ValidationError as exc:
            raise ApiError(
                f"Malformed team request in response ({exc.error_count()} error(s)).", resp.status_code
            ) from exc

    @staticmethod
    def _expect(resp: requests.Response, status: int, what: str) -> None:
        if resp.status_code != status:
            raise ApiError(f"{what} failed with status {resp.status_code}.", resp.status_code)

    # ------------------------------------------------------------------
    # University directory
    # ------------------------------------------------------------------

    def list_universities(self) -> list[University]:
        resp = self._send("GET", "/unilist")
        if not resp.ok:
            raise ApiError(f"Loading universities failed with status {resp.status_code}.", resp.status_code)
        data = self._json(resp)
        if not isinstance(data, list):
            raise ApiError("Unexpected university list format.", resp.status_code)
        try:
            return [University.model_validate(u) for u in data]
        except ValidationError as exc:
            raise ApiError("Malformed university list.", resp.status_code) from exc

    # ------------------------------------------------------------------
    # Accounts
    # ------------------------------------------------------------------

    def login(self, email: str, password: str) -> LoginResult:
        resp = self._send("POST", "/login", {"email": email, "password": password})
        data = self._json(resp)
        if not isinstance(data, dict):
            raise ApiError("Unexpected login response format.", resp.status_code)
        try:
            return LoginResult.from_payload(data)
        except ValidationError as exc:
            raise ApiError("Malformed login response.", resp.status_code) from exc

    def register(self, form: RegistrationForm) -> ApiResult:
        resp = self._send("POST", "/register", form.to_payload())
        data = self._json(resp)
        if not isinstance(data, dict):
            raise ApiError("Unexpected registration response format.", resp.status_code)
        try:
            return ApiResult.model_validate(data)
        except ValidationError as exc:
            raise ApiError("Malformed registration response.", resp.status_code) from exc

    # ------------------------------------------------------------------
    # Team requests
    # ------------------------------------------------------------------

    def list_requests(self) -> list[TeamRequest]:
        resp = self._send("GET", "/team/requests")
        self._expect(resp, 200, "Loading requests")
        data = self._json(resp)
        if not isinstance(data, list):
            raise ApiError("Unexpected request list format.", resp.status_code)
        return self._requests(resp, data)

    def create_request(self, draft: TeamRequest) -> TeamRequest:
        resp = self._send("POST", "/team/requests", draft.to_payload())
        self._expect(resp, 201, "Creating request")
        return self._requests(resp, [self._json(resp)])[0]

    def update_request(self, request: TeamRequest) -> TeamRequest:
        if not request.id:
            raise ValueError("Cannot update a request that has no _id.")
        resp = self._send("PUT", f"/team/requests/{request.id}", request.to_payload())
        self._expect(resp, 200, "Updating request")
        return self._requests(resp, [self._json(resp)])[0]

    def delete_request(self, request_id: str) -> None:
        resp = self._send("DELETE", f"/team/requests/{request_id}")
        self._expect(resp, 200, "Deleting request")
