"""
Request board: browse, search and manage team-formation requests.

State:
    requests          full in-memory copy of the backend collection
    search_query      free-text filter (case-insensitive substring)
    view_my_requests  restrict to the session user's own requests
    modal             CLOSED | CREATE | EDIT, with `draft` as the form object

The visible list is never stored; `visible` recomputes it from `requests`
and the two filter flags on every call.

After a successful create/update/delete the server's answer is applied to
the local list (append / replace by _id / remove by _id). With
Reconcile.REFETCH the whole list is reloaded afterwards as well.

Edit and delete are refused with OwnershipError for requests the session
user does not own, whether or not the UI offers the controls.
"""

import logging
from collections.abc import Iterable
from enum import Enum
from typing import Any

from app.config import RECONCILE, Reconcile
from app.notices import NoticeQueue
from client.api import ApiError, TeammateAPI
from client.models import EDITABLE_FIELDS, SEARCH_FIELDS, Session, TeamRequest, field_name

log = logging.getLogger(__name__)


class ModalMode(str, Enum):
    CLOSED = "closed"
    CREATE = "create"
    EDIT   = "edit"


class OwnershipError(PermissionError):
    """Raised when a user tries to change a request they do not own."""


def matches_query(request: TeamRequest, query: str) -> bool:
    if not query:
        return True
    needle = query.lower()
    return any(needle in getattr(request, f).lower() for f in SEARCH_FIELDS)


def filter_requests(
    requests: Iterable[TeamRequest],
    query: str = "",
    user_id: str | None = None,
) -> list[TeamRequest]:
    """
    Requests matching `query` and, when `user_id` is given, owned by that user.

    The query matches case-insensitively as a substring of the project name,
    course name, semester or description.
    """
    return [
        r for r in requests
        if (user_id is None or r.user_id == user_id) and matches_query(r, query)
    ]


class RequestBoard:
    def __init__(
        self,
        api: TeammateAPI,
        session: Session,
        reconcile: Reconcile = RECONCILE,
    ):
        self.api       = api
        self.session   = session
        self.reconcile = reconcile

        self.requests: list[TeamRequest] = []
        self.search_query = ""
        self.view_my_requests = False

        self.modal = ModalMode.CLOSED
        self.editing: TeamRequest | None = None
        self.draft: TeamRequest | None = None

        self.pending_delete: str | None = None
        self.notices = NoticeQueue()
        self.loaded = False

    # ------------------------------------------------------------------
    # Listing
    # ------------------------------------------------------------------

    def load(self) -> None:
        """Fetch the collection once; later calls are no-ops."""
        if self.loaded:
            return
        self.loaded = True
        self.refresh()

    def refresh(self) -> bool:
        try:
            self.requests = self.api.list_requests()
        except ApiError as exc:
            log.error("Error fetching requests: %s", exc)
            self.notices.error("Could not load team requests.")
            return False
        log.info("Loaded %d team requests.", len(self.requests))
        return True

    @property
    def visible(self) -> list[TeamRequest]:
        owner = self.session.user_id if self.view_my_requests else None
        return filter_requests(self.requests, self.search_query, owner)

    def set_search_query(self, query: str) -> None:
        self.search_query = query

    def submit_search(self) -> None:
        log.info("Search query: %r  (%d matches)", self.search_query, len(self.visible))

    def toggle_my_requests(self) -> None:
        self.view_my_requests = not self.view_my_requests

    def owns(self, request: TeamRequest) -> bool:
        return request.user_id == self.session.user_id

    def find(self, request_id: str) -> TeamRequest | None:
        return next((r for r in self.requests if r.id == request_id), None)

    # ------------------------------------------------------------------
    # Modal form
    # ------------------------------------------------------------------

    def open_create(self) -> None:
        self.editing = None
        self.draft = TeamRequest.draft_for(self.session)
        self.modal = ModalMode.CREATE

    def open_edit(self, request: TeamRequest) -> None:
        self._check_owner(request, "edit")
        if not request.id:
            raise ValueError("Only saved requests can be edited.")
        self.editing = request
        self.draft = request.model_copy()
        self.modal = ModalMode.EDIT

    def close_modal(self) -> None:
        self.modal = ModalMode.CLOSED
        self.editing = None
        self.draft = None

    def set_field(self, name: str, value: Any) -> None:
        """Merge one form field into the active draft; every other field is kept."""
        if self.draft is None:
            raise RuntimeError("No request form is open.")
        attr = field_name(name)
        if attr not in EDITABLE_FIELDS:
            raise KeyError(f"{name!r} is not an editable field")
        self.draft = TeamRequest.model_validate(
            {**self.draft.model_dump(by_alias=True), TeamRequest.model_fields[attr].alias: value}
        )

    def submit(self) -> TeamRequest | None:
        """
        Send the open form to the backend.

        Returns the stored record, or None if nothing was saved. With no open
        form (e.g. a repeated click after a successful submit) nothing is sent.
        """
        if self.modal is ModalMode.CLOSED or self.draft is None:
            log.warning("Submit ignored: no request form is open.")
            return None

        if self.modal is ModalMode.EDIT:
            return self._submit_update()
        return self._submit_create()

    def _submit_create(self) -> TeamRequest | None:
        try:
            created = self.api.create_request(self.draft)
        except ApiError as exc:
            log.error("Error creating request: %s", exc)
            self.notices.error("Could not create the request. Please try again.")
            return None

        self.requests = [*self.requests, created]
        log.info("Created request %s (%r).", created.id, created.project_name)
        self.close_modal()
        self._reconcile()
        return created

    def _submit_update(self) -> TeamRequest | None:
        original = self.editing
        self._check_owner(original, "edit")
        # owner and identity always come from the request being edited
        outgoing = self.draft.model_copy(
            update={"id": original.id, "user_id": original.user_id, "user_name": original.user_name}
        )
        try:
            updated = self.api.update_request(outgoing)
        except ApiError as exc:
            log.error("Error updating request %s: %s", original.id, exc)
            self.notices.error("Could not update the request. Please try again.")
            return None

        self.requests = [updated if r.id == original.id else r for r in self.requests]
        log.info("Updated request %s.", original.id)
        self.close_modal()
        self._reconcile()
        return updated

    # ------------------------------------------------------------------
    # Delete (two-step: ask, then confirm or cancel)
    # ------------------------------------------------------------------

    def ask_delete(self, request: TeamRequest) -> None:
        self._check_owner(request, "delete")
        self.pending_delete = request.id

    def cancel_delete(self) -> None:
        self.pending_delete = None

    def confirm_delete(self) -> bool:
        """Delete the request awaiting confirmation; True when it was removed."""
        request_id, self.pending_delete = self.pending_delete, None
        if request_id is None:
            return False

        self._check_owner(self.find(request_id), "delete")

        try:
            self.api.delete_request(request_id)
        except ApiError as exc:
            log.error("Error deleting request %s: %s", request_id, exc)
            self.notices.error("Could not delete the request. Please try again.")
            return False

        self.requests = [r for r in self.requests if r.id != request_id]
        log.info("Deleted request %s.", request_id)
        self._reconcile()
        return True

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _check_owner(self, request: TeamRequest | None, action: str) -> None:
        if request is None or not self.owns(request):
            owner = request.user_id if request is not None else None
            log.warning("User %s may not %s request owned by %s.", self.session.user_id, action, owner)
            raise OwnershipError(f"You can only {action} your own requests.")

    def _reconcile(self) -> None:
        if self.reconcile is Reconcile.REFETCH:
            self.refresh()
