from __future__ import annotations

from flask import Blueprint

from sampleparquet.app.common.auth import FlaskSessionAuth, load_session_store
from sampleparquet.app.common.errors import abort_json
from sampleparquet.app.common.validation import get_json, require_fields
from sampleparquet.navigation.session import AdminSession, AuthState, SessionStore

bp = Blueprint("auth", __name__)


def _session_payload(state: AuthState, admin: AdminSession | None) -> dict:
    return {
        "state": state.value,
        "admin": (
            {"id": admin.id, "email": admin.email, "full_name": admin.full_name}
            if admin is not None
            else None
        ),
    }


@bp.post("/auth/login")
def login():
    """POST /api/auth/login - Start an admin session."""
    data = get_json()
    require_fields(data, ["email", "password"])

    store = SessionStore()
    if not store.sign_in(FlaskSessionAuth(), str(data["email"]), str(data["password"])):
        abort_json(401, "unauthorized", "Invalid email or password")

    return _session_payload(store.state, store.admin), 200


@bp.post("/auth/logout")
def logout():
    """POST /api/auth/logout - End the admin session."""
    store = SessionStore()
    store.sign_out(FlaskSessionAuth())
    return _session_payload(store.state, store.admin), 200


@bp.get("/auth/session")
def current_session():
    """GET /api/auth/session - Current admin session (or anonymous)."""
    store = load_session_store()
    return _session_payload(store.state, store.admin), 200
