"""Keeps the current path in step with the history and picks the view.

Three things move the current path: explicit ``navigate()`` calls (and
intercepted same-origin links), history traversal (popstate) and the initial
load. Every change goes through the access gate; the resulting decision is
what the page layer renders.
"""

from __future__ import annotations

import logging
from typing import Callable, List, MutableMapping, Optional

from sampleparquet.navigation.base_path import normalize_base_path, strip_base_path, with_base_path
from sampleparquet.navigation.gate import AccessGate, GateDecision
from sampleparquet.navigation.history import MemoryHistory
from sampleparquet.navigation.session import AuthState, SessionStore

log = logging.getLogger(__name__)

REDIRECT_MARKER = "redirect"

DecisionListener = Callable[[GateDecision], None]


class NavigationController:
    def __init__(self, history: MemoryHistory, session: SessionStore, base_path: str = "/") -> None:
        self._history = history
        self._session = session
        self._gate = AccessGate(session)
        self.base_path = normalize_base_path(base_path)

        self._path = "/"
        self._decision: Optional[GateDecision] = None
        self._listeners: List[DecisionListener] = []
        self._unsubscribe_session: Optional[Callable[[], None]] = None
        self._started = False

    @property
    def current_path(self) -> str:
        return self._path

    @property
    def decision(self) -> GateDecision:
        if self._decision is None:
            raise RuntimeError("NavigationController.start() has not been called")
        return self._decision

    @property
    def history(self) -> MemoryHistory:
        return self._history

    def href(self, path: str) -> str:
        return with_base_path(path, self.base_path)

    def subscribe(self, listener: DecisionListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def start(self, storage: Optional[MutableMapping[str, str]] = None) -> GateDecision:
        """Seed the current path from the history location and start listening.

        ``storage`` is the session-scoped store a static host's fallback page
        uses to remember the originally requested URL. The marker is consumed
        exactly once.
        """
        if self._started:
            return self.decision

        if storage is not None:
            marker = storage.pop(REDIRECT_MARKER, None)
            if marker:
                target = marker
                if target.startswith(self._history.origin):
                    target = target[len(self._history.origin):]
                self._history.replace_state(target or "/")

        self._path = strip_base_path(self._history.location, self.base_path)
        self._history.add_listener(self._on_popstate)
        self._unsubscribe_session = self._session.subscribe(self._on_session_change)
        self._started = True
        return self._refresh()

    def stop(self) -> None:
        self._history.remove_listener(self._on_popstate)
        if self._unsubscribe_session is not None:
            self._unsubscribe_session()
            self._unsubscribe_session = None
        self._started = False

    def navigate(self, path: str) -> GateDecision:
        """Go to an application path without reloading."""
        self._history.push_state(self.href(path))
        return self._location_changed()

    def handle_link(self, href: str, target: Optional[str] = None) -> bool:
        """Intercept an activated anchor.

        Returns ``True`` when the link was handled in place; ``False`` means
        the caller should let the default navigation happen. Relative links
        resolve against the current location. Fragment-only links stay with
        the default in-page jump.
        """
        if target or href.startswith("#") or not self._history.same_origin(href):
            return False
        self._history.push_state(href)
        self._location_changed()
        return True

    def _on_popstate(self, location: str) -> None:
        self._location_changed()

    def _on_session_change(self, state: AuthState) -> None:
        self._refresh()

    def _location_changed(self) -> GateDecision:
        self._path = strip_base_path(self._history.location, self.base_path)
        self._history.scroll_to(0, 0)
        return self._refresh()

    def _refresh(self) -> GateDecision:
        decision = self._gate.check(self._path)
        if decision.redirect_to is not None and decision.redirect_to != self._path:
            log.debug("redirecting %s -> %s", self._path, decision.redirect_to)
            self._history.replace_state(self.href(decision.redirect_to))
            self._path = decision.redirect_to

        self._decision = decision
        for listener in list(self._listeners):
            listener(decision)
        return decision
