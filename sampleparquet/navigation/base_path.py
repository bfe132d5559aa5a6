"""Deployment base path handling.

The site can be served under a sub-path (e.g. ``/ozanparquet/``). Incoming
paths have the prefix stripped before resolution and outgoing links get it
added back. Both directions are plain string transforms.
"""

from __future__ import annotations


def normalize_base_path(base: str | None) -> str:
    """Return the base as ``""`` (root) or ``/segment`` without trailing slash."""
    base = (base or "").strip()
    if not base or base == "/":
        return ""
    if not base.startswith("/"):
        base = "/" + base
    return base.rstrip("/")


def strip_base_path(full_path: str, base: str | None) -> str:
    """Map a browser pathname to an application path.

    ``/ozanparquet/about`` -> ``/about`` and ``/ozanparquet`` -> ``/``.
    Paths outside the prefix come back unchanged.
    """
    prefix = normalize_base_path(base)
    path = full_path or "/"
    if not path.startswith("/"):
        path = "/" + path

    if prefix and path.startswith(prefix):
        rest = path[len(prefix):]
        # "/ozanparquetx" is not under "/ozanparquet"
        if not rest or rest.startswith("/"):
            return rest or "/"
    return path


def with_base_path(path: str, base: str | None) -> str:
    """Map an application path to the link the browser should follow."""
    prefix = normalize_base_path(base)
    clean = (path or "").lstrip("/")

    if not clean or clean == "index.html":
        return prefix or "/"
    return f"{prefix}/{clean}"
