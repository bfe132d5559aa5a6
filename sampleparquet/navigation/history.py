"""In-memory stand-in for the browser's history and location.

Used by the web layer (one instance per request) and by tests. It keeps a
stack of entries like ``window.history`` and counts full document loads so
callers can tell an in-place navigation from a reload.
"""

from __future__ import annotations

from typing import Callable, List
from urllib.parse import urljoin, urlsplit

PopStateListener = Callable[[str], None]

DEFAULT_ORIGIN = "http://localhost"


class MemoryHistory:
    def __init__(self, url: str = "/", origin: str = DEFAULT_ORIGIN) -> None:
        self.origin = origin.rstrip("/")
        self._entries: List[str] = [self._pathname(url, base="/")]
        self._index = 0
        self._listeners: List[PopStateListener] = []
        self.scroll_y = 0
        self.document_loads = 1

    def _absolute(self, url: str, base: str | None = None) -> str:
        # Relative URLs resolve against the current document, as in a browser.
        return urljoin(self.origin + (base if base is not None else self.location), url)

    def _pathname(self, url: str, base: str | None = None) -> str:
        return urlsplit(self._absolute(url, base)).path or "/"

    def same_origin(self, url: str) -> bool:
        parts = urlsplit(self._absolute(url))
        return f"{parts.scheme}://{parts.netloc}" == self.origin

    @property
    def location(self) -> str:
        return self._entries[self._index]

    @property
    def length(self) -> int:
        return len(self._entries)

    def push_state(self, url: str) -> None:
        # Pushing drops any forward entries, as browsers do.
        del self._entries[self._index + 1:]
        self._entries.append(self._pathname(url))
        self._index += 1

    def replace_state(self, url: str) -> None:
        self._entries[self._index] = self._pathname(url)

    def add_listener(self, listener: PopStateListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: PopStateListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def go(self, delta: int) -> None:
        target = self._index + delta
        if delta == 0 or target < 0 or target >= len(self._entries):
            return
        self._index = target
        for listener in list(self._listeners):
            listener(self.location)

    def back(self) -> None:
        self.go(-1)

    def forward(self) -> None:
        self.go(1)

    def scroll_to(self, x: int, y: int) -> None:
        self.scroll_y = y

    def load(self, url: str) -> None:
        """Full page load: new entry, fresh document, scroll at top."""
        self.push_state(url)
        self.document_loads += 1
        self.scroll_y = 0
