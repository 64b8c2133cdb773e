"""User-facing failure messages for a pipeline run.

The message is chosen by trying an ordered list of extractor functions and
taking the first non-empty answer:

1. :func:`from_response_body` -- the ``error`` field of a structured
   response body returned by the upload endpoint.
2. :func:`from_exception_message` -- the exception's own message (for
   upload failures, the generic transport message).
3. :data:`FALLBACK_MESSAGE` -- ``"Upload failed"``.

Callers may pass their own extractor list to :func:`extract_error_message`.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any

import httpx

ErrorMessageExtractor = Callable[[BaseException], str | None]

FALLBACK_MESSAGE = "Upload failed"


def _response_body(exc: BaseException) -> Any:
    """Return the parsed response body attached to *exc*, if any."""
    context = getattr(exc, "context", None)
    if isinstance(context, dict) and "body" in context:
        return context["body"]
    if isinstance(exc, httpx.HTTPStatusError):
        try:
            return exc.response.json()
        except ValueError:
            return None
    return None


def from_response_body(exc: BaseException) -> str | None:
    """Return the structured ``error`` field of the response body."""
    body = _response_body(exc)
    if not isinstance(body, dict):
        return None
    error = body.get("error")
    if isinstance(error, str) and error:
        return error
    return None


def from_exception_message(exc: BaseException) -> str | None:
    """Return the exception's message, or ``None`` if it is empty."""
    message = getattr(exc, "message", None)
    if isinstance(message, str) and message:
        return message
    text = str(exc)
    return text or None


DEFAULT_EXTRACTORS: tuple[ErrorMessageExtractor, ...] = (
    from_response_body,
    from_exception_message,
)


def extract_error_message(
    exc: BaseException,
    extractors: Sequence[ErrorMessageExtractor] = DEFAULT_EXTRACTORS,
    fallback: str = FALLBACK_MESSAGE,
) -> str:
    """Return the most specific failure message available for *exc*.

    Parameters
    ----------
    exc:
        The exception that ended the run.
    extractors:
        Extractor functions, tried in order.
    fallback:
        Returned when every extractor yields nothing.
    """
    for extractor in extractors:
        message = extractor(exc)
        if message:
            return message
    return fallback
