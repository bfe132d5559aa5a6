from __future__ import annotations

from typing import Any, Dict, Iterable
from flask import request

from sampleparquet.app.common.errors import abort_json


def get_json() -> Dict[str, Any]:
    if not request.is_json:
        abort_json(400, "invalid_json", "Request must be application/json")
    data = request.get_json(silent=True)
    if data is None or not isinstance(data, dict):
        abort_json(400, "invalid_json", "Malformed JSON body")
    return data


def require_fields(data: Dict[str, Any], fields: Iterable[str]) -> None:
    missing = [f for f in fields if data.get(f) in (None, "")]
    if missing:
        abort_json(400, "validation_error", "Missing required fields", {"missing": missing})


def parse_paging(default_limit: int, max_limit: int) -> tuple[int, int]:
    """Read ``limit``/``offset`` query args, clamped to sane bounds."""
    try:
        limit = int(request.args.get("limit", default_limit))
        offset = int(request.args.get("offset", 0))
    except ValueError:
        abort_json(400, "validation_error", "limit/offset must be integers")

    return max(1, min(limit, max_limit)), max(0, offset)
