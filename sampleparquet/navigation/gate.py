from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from sampleparquet.navigation.resolver import LOGIN_PATH, is_admin_path, resolve, resolve_admin
from sampleparquet.navigation.session import AuthState, SessionStore
from sampleparquet.navigation.views import Resolution, View


class GateState(str, Enum):
    UNPROTECTED = "unprotected"
    CHECKING = "checking"
    DENIED = "denied"
    GRANTED = "granted"


@dataclass(frozen=True)
class GateDecision:
    state: GateState
    resolution: Optional[Resolution] = None
    redirect_to: Optional[str] = None

    @property
    def view(self) -> Optional[View]:
        return self.resolution.view if self.resolution else None


class AccessGate:
    """Branches admin-scoped paths on the session state.

    ``checking`` carries no resolution: the caller shows a loading
    placeholder until the session resolves.
    """

    def __init__(self, session: SessionStore, login_path: str = LOGIN_PATH) -> None:
        self._session = session
        self._login_path = login_path

    def check(self, path: str) -> GateDecision:
        if not is_admin_path(path) or path == self._login_path:
            return GateDecision(GateState.UNPROTECTED, resolve(path))

        state = self._session.state
        if state is AuthState.PENDING:
            return GateDecision(GateState.CHECKING)
        if state is AuthState.ANONYMOUS:
            return GateDecision(
                GateState.DENIED,
                Resolution(View.ADMIN_LOGIN),
                redirect_to=self._login_path,
            )
        return GateDecision(GateState.GRANTED, resolve_admin(path))
