"""Admin auth backed by the Flask session.

`FlaskSessionAuth` is the auth collaborator the navigation layer talks to:
it checks credentials against ``admin_users`` and keeps ``admin_id`` in the
Flask session.
"""

from __future__ import annotations

from functools import wraps
from typing import Any, Callable, Optional, TypeVar

from flask import current_app, session
from werkzeug.security import check_password_hash

from sampleparquet.app.extensions import db
from sampleparquet.app.models import AdminUser
from sampleparquet.app.common.errors import abort_json
from sampleparquet.navigation.session import AdminSession, SessionStore

F = TypeVar("F", bound=Callable[..., Any])

SESSION_KEY = "admin_id"


def _to_session(user: AdminUser) -> AdminSession:
    return AdminSession(id=user.id, email=user.email, full_name=user.full_name)


class FlaskSessionAuth:
    def sign_in(self, email: str, password: str) -> Optional[AdminSession]:
        email = (email or "").strip().lower()
        user = AdminUser.query.filter_by(email=email).first()
        if not user or not user.is_active or not check_password_hash(user.password_hash, password or ""):
            current_app.logger.warning("admin sign-in failed for %s", email or "<blank>")
            return None

        session[SESSION_KEY] = user.id
        current_app.logger.info("admin %s signed in", user.email)
        return _to_session(user)

    def sign_out(self) -> None:
        session.pop(SESSION_KEY, None)

    def current_admin(self) -> Optional[AdminSession]:
        admin_id = session.get(SESSION_KEY)
        if not admin_id:
            return None
        user = db.session.get(AdminUser, admin_id)
        if not user or not user.is_active:
            # Account removed or disabled since sign-in
            session.pop(SESSION_KEY, None)
            return None
        return _to_session(user)


def load_session_store() -> SessionStore:
    """A session store resolved against the current request."""
    store = SessionStore()
    store.check(FlaskSessionAuth())
    return store


def admin_required(fn: F) -> F:
    @wraps(fn)
    def wrapper(*args, **kwargs):
        if FlaskSessionAuth().current_admin() is None:
            abort_json(401, "unauthorized", "Admin authentication required")
        return fn(*args, **kwargs)

    return wrapper  # type: ignore
