"""Response error extraction for load test observability.

Parses storefront API error responses into human-readable messages.
Handles two response shapes:

- Pydantic validation (422): {"detail": [{"loc": [...], "msg": "...", "type": "..."}]}
- Storefront errors (400/403/404/409): {"error": {"field": ["msg"]}, "kind": "InsufficientStock"}
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from requests import Response


def error_kind(response: Response) -> str | None:
    """The storefront error kind of a failed response, if it has one."""
    try:
        return response.json().get("kind")
    except Exception:
        return None


def extract_error_detail(response: Response) -> str:
    """Extract a human-readable error message from an API error response.

    Returns a compact string suitable for Locust failure messages and log lines.
    """
    try:
        body = response.json()
    except Exception:
        # Not JSON
        text = getattr(response, "text", "") or ""
        return text[:300] or "(empty response body)"

    if "detail" in body and isinstance(body["detail"], list):
        parts = []
        for err in body["detail"]:
            loc = ".".join(str(p) for p in err.get("loc", []))
            msg = err.get("msg", str(err))
            parts.append(f"{loc}: {msg}" if loc else msg)
        return " | ".join(parts)

    if "error" in body:
        error = body["error"]
        prefix = f"[{body['kind']}] " if body.get("kind") else ""
        if isinstance(error, dict):
            parts = (f"{k}: {'; '.join(map(str, v)) if isinstance(v, list) else v}" for k, v in error.items())
            return prefix + " | ".join(parts)
        return prefix + str(error)

    return str(body)[:300]
