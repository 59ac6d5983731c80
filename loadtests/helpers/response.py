"""Response error extraction for load test observability.

Parses Checkout API error responses into human-readable messages. Every
failure shares one envelope::

    {"success": false, "message": "...", "errors": {"field": ["..."]}}
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from requests import Response


def extract_error_detail(response: Response) -> str:
    """Extract a human-readable error message from an API error response.

    Returns a compact string suitable for Locust failure messages and log lines.
    Gracefully handles unparseable bodies and missing fields.
    """
    try:
        body = response.json()
    except ValueError:
        # Not JSON, return raw text truncated
        text = getattr(response, "text", "") or ""
        return text[:300] or "(empty response body)"

    if not isinstance(body, dict):
        return str(body)[:300]

    message = body.get("message")
    errors = body.get("errors")
    if isinstance(errors, dict) and errors:
        fields = " | ".join(f"{k}: {', '.join(map(str, v)) if isinstance(v, list) else v}" for k, v in errors.items())
        return f"{message} ({fields})" if message else fields
    if message:
        return str(message)

    # Unknown shape, stringify and truncate
    return str(body)[:300]
