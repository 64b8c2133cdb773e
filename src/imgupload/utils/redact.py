"""Token / payload redaction for safe logging.

Before an upload request or response is written to logs or debug dumps the
:func:`redact` function must be applied.  It enforces the following rules:

* **Authorization headers** and other credential-like keys are replaced with
  a masked placeholder that shows only the last four characters of the token
  (or a generic marker if the token is unknown).
* **Binary values** (image bytes in multipart parts) are replaced with
  ``<binary:N_bytes>``.
* The full bearer **token is never present** in the output.
"""

from __future__ import annotations

import re
from typing import Any

# If any of these appear in a key name (case-insensitive), the value is
# redacted.
_SENSITIVE_KEY_PATTERNS: frozenset[str] = frozenset({
    "token",
    "secret",
    "password",
    "credential",
    "authorization",
    "cookie",
    "api_key",
    "api-key",
})

_BEARER_RE = re.compile(r"(Bearer\s+)\S+")


def _mask_token(value: str, token: str | None) -> str:
    """Replace bearer / token strings with a safe placeholder."""
    if token and token in value:
        suffix = token[-4:] if len(token) >= 4 else "****"
        placeholder = f"<redacted:...{suffix}>"
        if token in placeholder:
            placeholder = "<redacted>"
        value = value.replace(token, placeholder)
    return _BEARER_RE.sub(lambda m: f"{m.group(1)}<redacted>", value)


def _redact_value(value: Any, token: str | None) -> Any:
    if isinstance(value, dict):
        return _redact_dict(value, token)
    if isinstance(value, (list, tuple)):
        return [_redact_value(item, token) for item in value]
    if isinstance(value, (bytes, bytearray)):
        return f"<binary:{len(value)}_bytes>"
    if isinstance(value, str) and token:
        return _mask_token(value, token)
    return value


def _redact_dict(d: dict, token: str | None) -> dict:
    result: dict = {}
    for key, value in d.items():
        key_lower = key.lower() if isinstance(key, str) else ""
        if any(pat in key_lower for pat in _SENSITIVE_KEY_PATTERNS):
            if isinstance(value, str):
                result[key] = _mask_token(value, token)
            else:
                result[key] = "<redacted>"
        else:
            result[key] = _redact_value(value, token)
    return result


def redact(payload: dict, token: str | None = None) -> dict:
    """Return a copy of *payload* with sensitive data redacted.

    Parameters
    ----------
    payload:
        The dictionary to sanitize (typically request headers, multipart
        parts, or a response body).
    token:
        The bearer token.  If supplied, any occurrence of this exact string
        anywhere in the payload is replaced.

    Returns
    -------
    dict
        A new dictionary with all sensitive data removed.  The original
        *payload* is never mutated.

    Examples
    --------
    >>> redact({"Authorization": "Bearer abc123"})
    {'Authorization': 'Bearer <redacted>'}
    """
    return _redact_dict(payload, token)
