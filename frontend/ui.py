"""
Streamlit rendering for the team-mate finder.

The AuthGateway and RequestBoard objects live in st.session_state so they
survive reruns; every widget callback goes through them and the page is
rerun afterwards. Nothing here talks to the backend directly.
"""

from datetime import date

import streamlit as st

from app.auth import AuthGateway
from app.board import ModalMode, OwnershipError, RequestBoard
from app.config import SESSION_FILE
from app.notices import Notice
from client.api import TeammateAPI
from client.models import Session, TeamRequest, UserType
from client.session_store import SessionStore

_SHOW = {
    "success": st.success,
    "info":    st.info,
    "warning": st.warning,
    "error":   st.error,
}

USER_TYPE_PLACEHOLDER = "Select User Type"
UNIVERSITY_PLACEHOLDER = "Select University"


# ---------------------------------------------------------------------------
# State
# ---------------------------------------------------------------------------

def _state() -> tuple[TeammateAPI, SessionStore]:
    # One store per browser session; a file only when TEAMMATE_SESSION_FILE is set
    if "api" not in st.session_state:
        st.session_state.api = TeammateAPI()
        st.session_state.store = SessionStore(SESSION_FILE)
    return st.session_state.api, st.session_state.store


def _gateway() -> AuthGateway:
    if "gateway" not in st.session_state:
        api, store = _state()
        st.session_state.gateway = AuthGateway(api, store)
    return st.session_state.gateway


def _board(session: Session) -> RequestBoard:
    board = st.session_state.get("board")
    if board is None or board.session != session:
        api, _ = _state()
        api.set_token(session.token)
        board = RequestBoard(api, session)
        st.session_state.board = board
    return board


def _logout() -> None:
    api, store = _state()
    store.clear()
    api.set_token(None)
    for key in ("board", "gateway"):
        st.session_state.pop(key, None)


def show_notices(notices: list[Notice]) -> None:
    for notice in notices:
        _SHOW.get(notice.level, st.info)(notice.message)


# ---------------------------------------------------------------------------
# Login / register
# ---------------------------------------------------------------------------

def render_auth(gateway: AuthGateway) -> Session | None:
    gateway.load_universities()
    show_notices(gateway.notices.drain())

    session = None
    if gateway.is_login:
        session = _render_login(gateway)
    else:
        _render_register(gateway)

    prompt, target = (
        ("Don't have an account?", "Register") if gateway.is_login
        else ("Already have an account?", "Login")
    )
    st.caption(prompt)
    if st.button(target, key="toggle_form"):
        gateway.toggle_form()
        st.rerun()
    return session


def _render_login(gateway: AuthGateway) -> Session | None:
    st.subheader("Login")
    with st.form("login_form"):
        gateway.email = st.text_input("Email", value=gateway.email)
        gateway.password = st.text_input("Password", value=gateway.password, type="password")
        submitted = st.form_submit_button("Login")

    if st.button("Forgot Password?", key="forgot_password"):
        gateway.forgot_password()
        st.rerun()

    if submitted:
        session = gateway.login()
        if session is None:
            st.rerun()
        return session
    return None


def _render_register(gateway: AuthGateway) -> None:
    st.subheader("Register")
    gateway.name = st.text_input("Name", value=gateway.name)
    gateway.email = st.text_input("Email", value=gateway.email)

    type_options = [USER_TYPE_PLACEHOLDER] + [t.value for t in UserType]
    current = gateway.user_type.value if gateway.user_type else USER_TYPE_PLACEHOLDER
    picked = st.selectbox("User type", type_options, index=type_options.index(current))
    picked_type = None if picked == USER_TYPE_PLACEHOLDER else UserType(picked)
    if picked_type != gateway.user_type:
        gateway.on_user_type_change(picked_type)

    if gateway.needs_university:
        uni_options = [UNIVERSITY_PLACEHOLDER] + [u.name for u in gateway.university_options]
        current_uni = gateway.selected_university or UNIVERSITY_PLACEHOLDER
        index = uni_options.index(current_uni) if current_uni in uni_options else 0
        # keyed by user type so a type change always starts from the placeholder
        uni = st.selectbox("University", uni_options, index=index, key=f"university_{picked}")
        gateway.select_university("" if uni == UNIVERSITY_PLACEHOLDER else uni)

    gateway.password = st.text_input("Password", value=gateway.password, type="password")
    gateway.confirm_password = st.text_input(
        "Confirm Password", value=gateway.confirm_password, type="password"
    )

    if st.button("Register", key="register_submit", type="primary"):
        gateway.register()
        st.rerun()


# ---------------------------------------------------------------------------
# Request board
# ---------------------------------------------------------------------------

def render_request_card(request: TeamRequest) -> None:
    st.markdown(f"**{request.project_name or 'Untitled project'}**")
    st.caption(
        f"{request.course_name or 'No course'} · {request.semester or 'No semester'} · "
        f"posted by {request.user_name or 'unknown'}"
    )
    if request.end_date:
        st.caption(f"Open until {request.end_date:%d %b %Y}")
    if request.description:
        st.write(request.description)


def render_board(board: RequestBoard) -> None:
    board.load()
    st.title("Find TeamMate's")
    st.caption(f"Signed in as {board.session.user_name or board.session.user_id}")
    if st.button("Log out", key="logout"):
        _logout()
        st.rerun()
    show_notices(board.notices.drain())

    left, middle, right = st.columns([1, 2, 1])
    with left:
        if st.button("➕ Create Request", key="create_request"):
            board.open_create()
            st.rerun()
    with middle:
        query = st.text_input("Search", value=board.search_query, placeholder="Search...")
        if query != board.search_query:
            board.set_search_query(query)
            board.submit_search()
    with right:
        label = "View All Requests" if board.view_my_requests else "My Requests"
        if st.button(label, key="toggle_mine"):
            board.toggle_my_requests()
            st.rerun()

    st.write("Displaying only my requests..." if board.view_my_requests else "Displaying all requests...")

    if board.modal is not ModalMode.CLOSED:
        _render_request_form(board)

    if board.pending_delete is not None:
        _render_delete_prompt(board)

    for request in board.visible:
        with st.container(border=True):
            render_request_card(request)
            if board.owns(request) and request.id:
                edit_col, delete_col, _ = st.columns([1, 1, 6])
                try:
                    if edit_col.button("Edit", key=f"edit_{request.id}"):
                        board.open_edit(request)
                        st.rerun()
                    if delete_col.button("Delete", key=f"delete_{request.id}"):
                        board.ask_delete(request)
                        st.rerun()
                except OwnershipError as exc:
                    st.error(str(exc))


def _render_request_form(board: RequestBoard) -> None:
    draft = board.draft
    editing = board.modal is ModalMode.EDIT
    st.subheader("Edit Request" if editing else "Create Request")

    with st.form("request_form"):
        values = {
            "projectName": st.text_input("Project Name:", value=draft.project_name),
            "courseName":  st.text_input("Course Name:", value=draft.course_name),
            "semester":    st.text_input("Semester:", value=draft.semester),
            "description": st.text_area("Description:", value=draft.description),
        }
        end = st.date_input("End Time:", value=draft.end_date, min_value=date(2000, 1, 1))
        values["endTime"] = end.isoformat() if isinstance(end, date) else ""

        submit_col, cancel_col = st.columns(2)
        submitted = submit_col.form_submit_button("Update" if editing else "Submit")
        cancelled = cancel_col.form_submit_button("Cancel")

    if cancelled:
        board.close_modal()
        st.rerun()
    if submitted:
        for name, value in values.items():
            board.set_field(name, value)
        board.submit()
        st.rerun()


def _render_delete_prompt(board: RequestBoard) -> None:
    st.warning("Are you sure you want to delete this request?")
    yes, no, _ = st.columns([1, 1, 6])
    if yes.button("Yes, delete", key="confirm_delete"):
        board.confirm_delete()
        st.rerun()
    if no.button("Cancel", key="cancel_delete"):
        board.cancel_delete()
        st.rerun()


# ---------------------------------------------------------------------------
# Page
# ---------------------------------------------------------------------------

def main() -> None:
    st.set_page_config(page_title="Team-Mate Finder", layout="centered")
    _, store = _state()

    session = store.load_session()
    if session is None:
        session = render_auth(_gateway())
        if session is None:
            return
        st.rerun()

    render_board(_board(session))
