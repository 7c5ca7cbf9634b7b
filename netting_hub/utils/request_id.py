from __future__ import annotations

import contextvars
import re
import uuid

request_id_var: contextvars.ContextVar[str | None] = contextvars.ContextVar("request_id", default=None)


# X-Request-ID policy: ASCII only, length 1..64, charset [A-Za-z0-9._-].
# Anything else is dropped and replaced so it never reaches log lines.
_REQUEST_ID_ALLOWED_RE = re.compile(r"^[A-Za-z0-9._-]{1,64}$", flags=re.ASCII)


def validate_request_id(value: str | None) -> str | None:
    """Return value if it is a safe request id, otherwise None."""

    if not isinstance(value, str):
        return None
    if not 1 <= len(value) <= 64:
        return None
    if _REQUEST_ID_ALLOWED_RE.fullmatch(value) is None:
        return None
    return value


def new_request_id() -> str:
    return uuid.uuid4().hex


def resolve_request_id(incoming: str | None) -> str:
    """Reuse a client-provided request id when safe, otherwise mint a new one."""
    return validate_request_id(incoming) or new_request_id()
