"""Admin session state shared by the access gate and the login screens.

The store never authenticates anybody itself. It asks an auth collaborator
and records the answer as one of three states.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Protocol

log = logging.getLogger(__name__)


class AuthState(str, Enum):
    PENDING = "pending"
    AUTHENTICATED_ADMIN = "authenticated-admin"
    ANONYMOUS = "anonymous"


@dataclass(frozen=True)
class AdminSession:
    id: int
    email: str
    full_name: str = ""


class AuthCollaborator(Protocol):
    def sign_in(self, email: str, password: str) -> Optional[AdminSession]: ...

    def sign_out(self) -> None: ...

    def current_admin(self) -> Optional[AdminSession]: ...


Listener = Callable[[AuthState], None]


class SessionStore:
    """Holds the tri-state auth value.

    Starts ``PENDING`` and moves to ``AUTHENTICATED_ADMIN`` or ``ANONYMOUS``
    once a check resolves. It never goes back to ``PENDING``; only explicit
    sign-in / sign-out change it afterwards.
    """

    def __init__(self) -> None:
        self._state = AuthState.PENDING
        self._admin: Optional[AdminSession] = None
        self._listeners: List[Listener] = []

    @property
    def state(self) -> AuthState:
        return self._state

    @property
    def admin(self) -> Optional[AdminSession]:
        return self._admin

    @property
    def is_admin(self) -> bool:
        return self._state is AuthState.AUTHENTICATED_ADMIN

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def resolve(self, admin: Optional[AdminSession]) -> AuthState:
        self._admin = admin
        self._state = AuthState.AUTHENTICATED_ADMIN if admin is not None else AuthState.ANONYMOUS
        log.debug("session resolved: %s", self._state.value)
        for listener in list(self._listeners):
            listener(self._state)
        return self._state

    def check(self, auth: AuthCollaborator) -> AuthState:
        """Initial check against the collaborator."""
        return self.resolve(auth.current_admin())

    def sign_in(self, auth: AuthCollaborator, email: str, password: str) -> bool:
        admin = auth.sign_in(email, password)
        self.resolve(admin)
        return admin is not None

    def sign_out(self, auth: AuthCollaborator) -> None:
        auth.sign_out()
        self.resolve(None)
