"""Async HTTP transport for the upload endpoint.

:class:`AsyncUploadTransport` sends one authenticated multipart ``POST``
per call and maps the outcome onto the package's error types:

1. On ``2xx`` -- return the parsed JSON body (or text, or ``{}`` if empty).
2. On any other status -- raise :class:`UploadError` carrying the generic
   message ``"Request failed with status code <n>"`` and the parsed body.
3. On a network failure or timeout -- raise :class:`UploadTransportError`.

Requests are never retried here; retry policy belongs to the caller.
"""

from __future__ import annotations

import json as _json
import sys
import time
from typing import Any

import httpx

from imgupload.config import UploadConfig
from imgupload.errors import UploadError, UploadTransportError
from imgupload.observability import get_logger, resolve_metrics

log = get_logger("imgupload.transport")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _parse_body(response: httpx.Response) -> Any:
    """Parse a response body as JSON, falling back to text."""
    if not response.content:
        return {}
    try:
        return response.json()
    except ValueError:
        return response.text


def _raise_for_status(response: httpx.Response, url: str) -> None:
    """Raise :class:`UploadError` for any non-``2xx`` response."""
    status = response.status_code
    if 200 <= status < 300:
        return
    try:
        body = response.json()
    except ValueError:
        body = None
    raise UploadError(
        message=f"Request failed with status code {status}",
        context={"status_code": status, "body": body, "url": url},
    )


def _dump_payload(
    url: str,
    headers: dict[str, str],
    files: dict[str, tuple[str, bytes, str]],
    data: dict[str, str],
    response: httpx.Response,
    token: str | None = None,
) -> None:
    """Write a redacted debug dump of the request/response to stderr."""
    from imgupload.utils.redact import redact

    dump: dict[str, Any] = {
        "method": "POST",
        "url": url,
        "headers": headers,
        "files": {
            field: {"filename": name, "content_type": ctype, "content": content}
            for field, (name, content, ctype) in files.items()
        },
        "data": data,
        "response_status": response.status_code,
        "response_body": _parse_body(response),
    }
    print(
        _json.dumps(redact(dump, token), indent=2, default=str),
        file=sys.stderr,
    )


# ---------------------------------------------------------------------------
# Async transport
# ---------------------------------------------------------------------------

class AsyncUploadTransport:
    """Asynchronous multipart upload transport with bearer authentication.

    Parameters
    ----------
    config:
        An :class:`UploadConfig` supplying token, endpoint, timeout, proxy
        and metrics settings.
    http_transport:
        Optional ``httpx`` transport, e.g. :class:`httpx.MockTransport` in
        tests.
    """

    def __init__(
        self,
        config: UploadConfig,
        http_transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config
        self._metrics = resolve_metrics(config.metrics)
        self._headers = {"Authorization": f"Bearer {config.token}"}
        self._client = httpx.AsyncClient(
            headers=self._headers,
            timeout=httpx.Timeout(config.timeout_seconds),
            proxy=config.http_proxy,
            transport=http_transport,
        )

    # -- public API --------------------------------------------------------

    async def post_multipart(
        self,
        files: dict[str, tuple[str, bytes, str]],
        data: dict[str, str] | None = None,
        url: str | None = None,
    ) -> Any:
        """POST a multipart body to the upload endpoint.

        ``httpx`` sets ``Content-Type: multipart/form-data`` with a
        generated boundary.

        Parameters
        ----------
        files:
            File parts as ``{field: (filename, bytes, content_type)}``.
        data:
            Text parts as ``{field: value}``.
        url:
            Override for the target URL; defaults to
            :attr:`UploadConfig.upload_url`.

        Returns
        -------
        Any
            Parsed response body.

        Raises
        ------
        UploadError
            On non-``2xx`` responses.
        UploadTransportError
            On network errors and timeouts.
        """
        target = url or self._config.upload_url
        data = data or {}

        t0 = time.monotonic()
        try:
            response = await self._client.post(target, files=files, data=data)
        except httpx.RequestError as exc:
            self._metrics.increment(
                "imgupload.requests_total",
                tags={"status": "error"},
            )
            log.warning(
                "Upload request network error",
                extra={
                    "extra_fields": {
                        "op": "upload",
                        "url": target,
                        "error": str(exc),
                        "error_type": type(exc).__name__,
                    }
                },
            )
            raise UploadTransportError(
                message=str(exc),
                context={"url": target},
                cause=exc,
            ) from exc
        elapsed_ms = (time.monotonic() - t0) * 1000

        status = str(response.status_code)
        self._metrics.increment("imgupload.requests_total", tags={"status": status})
        self._metrics.timing(
            "imgupload.request_duration_ms", elapsed_ms, tags={"status": status},
        )

        if self._config.debug_dump_payload:
            _dump_payload(
                target, self._headers, files, data, response,
                token=self._config.token,
            )

        if not response.is_success:
            log.warning(
                "Upload rejected",
                extra={
                    "extra_fields": {
                        "op": "upload",
                        "url": target,
                        "status_code": response.status_code,
                    }
                },
            )
        _raise_for_status(response, target)
        return _parse_body(response)

    async def close(self) -> None:
        """Close the underlying async HTTP client and release resources."""
        await self._client.aclose()

    async def __aenter__(self) -> AsyncUploadTransport:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()
