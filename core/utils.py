# core/utils.py

import re
from datetime import datetime, timezone
from typing import Optional
from urllib.parse import unquote

from fastapi import Request


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def sanitize(data: dict) -> dict:
    """
    Sanitize dictionary data:
    - Empty strings → None
    - Strip string whitespace
    - Nested dicts are sanitized; a dict left with only None values → None
    - Everything else kept as-is
    """
    clean = {}

    for k, v in data.items():
        if isinstance(v, str):
            stripped = v.strip()
            clean[k] = stripped or None
            continue

        if isinstance(v, dict):
            nested = sanitize(v)
            clean[k] = nested if any(val is not None for val in nested.values()) else None
            continue

        clean[k] = v

    return clean


def normalize_path(raw: Optional[str]) -> Optional[str]:
    """
    Decode repeated URL encoding and make sure the page path starts with `/`.
    `home` is kept as-is.
    """
    if raw is None:
        return None

    path = raw.strip()
    decoded = unquote(path)
    while decoded != path:
        path = decoded
        decoded = unquote(path)

    if path and not path.startswith("/") and path != "home":
        path = f"/{path}"
    return path


_SLUG_INVALID = re.compile(r"[^a-z0-9-]")
_SLUG_DASHES = re.compile(r"-+")


def clean_slug(raw: Optional[str]) -> Optional[str]:
    """Lowercase, replace anything outside [a-z0-9-] with '-', collapse and trim dashes."""
    if not raw:
        return None

    slug = _SLUG_INVALID.sub("-", raw.strip().lower())
    slug = _SLUG_DASHES.sub("-", slug).strip("-")
    return slug or None


def request_metadata(request: Optional[Request]) -> dict:
    """User agent + client IP for audit/activity records."""
    if request is None:
        return {}

    headers = request.headers
    forwarded = headers.get("x-forwarded-for")
    ip = (
        forwarded.split(",")[0].strip() if forwarded
        else headers.get("x-real-ip")
        or (request.client.host if request.client else None)
        or "unknown"
    )
    return {"user_agent": headers.get("user-agent"), "ip_address": ip}
