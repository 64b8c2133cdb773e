"""Configuration for imgupload.

:class:`UploadConfig` is a dataclass that captures every tuneable knob of
the preprocessing-and-upload pipeline.  Instances are passed to
:class:`~imgupload.client.AsyncImageUploadClient`, the pipeline, the
upload transport and the default image store.

Three module-level constants hold the defaults for the tunables callers
change most often:

* :data:`DEFAULT_MAX_DIMENSION` — bound on the longest image side.
* :data:`DEFAULT_QUALITY` — JPEG compression quality fraction.
* :data:`DEFAULT_UPLOAD_PATH` — path appended to ``base_url``.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any

from imgupload.models import Platform

DEFAULT_MAX_DIMENSION: int = 800
"""Maximum width or height, in pixels, of an uploaded image."""

DEFAULT_QUALITY: float = 0.7
"""Lossy compression quality in (0, 1]; smaller means smaller payloads."""

DEFAULT_UPLOAD_PATH: str = "/api/upload"
"""Path of the upload endpoint, relative to ``base_url``."""


@dataclass
class UploadConfig:
    """Complete configuration for an upload pipeline.

    Every parameter has a sensible default except ``token`` and
    ``base_url``, which identify the caller and the destination.

    Parameters
    ----------
    token:
        Bearer credential sent in the ``Authorization`` header.  Never
        logged.
    base_url:
        Destination root URL, e.g. ``"https://api.example.com"``.
    upload_path:
        Path of the upload endpoint appended to *base_url*.
    platform:
        Platform whose file-access layer consumes image locations.  Decides
        whether local paths are rewritten to ``file://`` URIs.
    max_dimension:
        Images whose width or height exceeds this bound are resized so that
        the longest side equals it.
    quality:
        JPEG compression quality as a fraction in ``(0, 1]``.
    content_type:
        MIME type declared for the uploaded image part.
    timeout_seconds:
        HTTP request timeout in seconds.
    http_proxy:
        Optional HTTP/HTTPS proxy URL.
    temp_dir:
        Directory for derived (resized) images.  ``None`` uses the system
        temporary directory.
    metrics:
        A :class:`~imgupload.observability.MetricsHook` implementation, or
        ``None`` for the no-op hook.
    debug_dump_payload:
        Write a (redacted) request/response dump to *stderr* for every
        upload.
    """

    # ── Destination ────────────────────────────────────────────────────
    token: str = ""

    base_url: str = ""

    upload_path: str = DEFAULT_UPLOAD_PATH

    # ── Preprocessing ──────────────────────────────────────────────────
    platform: Platform | str = Platform.DESKTOP

    max_dimension: int = DEFAULT_MAX_DIMENSION

    quality: float = DEFAULT_QUALITY

    content_type: str = "image/jpeg"

    temp_dir: str | None = None

    # ── HTTP ────────────────────────────────────────────────────────────
    timeout_seconds: float = 30.0

    http_proxy: str | None = None

    # ── Observability ──────────────────────────────────────────────────
    metrics: Any | None = None

    # ── Debug ───────────────────────────────────────────────────────────
    debug_dump_payload: bool = False

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        from urllib.parse import urlparse

        parsed = urlparse(self.base_url)
        if parsed.scheme == "http" and parsed.hostname not in (
            "localhost",
            "127.0.0.1",
            "::1",
        ):
            raise ValueError(
                f"base_url uses insecure HTTP for non-local host '{parsed.hostname}'. "
                "Use HTTPS to protect your token, or target localhost for testing."
            )

        if not self.upload_path.startswith("/"):
            raise ValueError(f"upload_path must start with '/', got {self.upload_path!r}")
        if self.max_dimension <= 0:
            raise ValueError(f"max_dimension must be > 0, got {self.max_dimension}")
        if not 0 < self.quality <= 1:
            raise ValueError(f"quality must be in (0, 1], got {self.quality}")
        if self.timeout_seconds <= 0:
            raise ValueError(f"timeout_seconds must be > 0, got {self.timeout_seconds}")

    @property
    def upload_url(self) -> str:
        """Full URL of the upload endpoint."""
        return f"{self.base_url.rstrip('/')}{self.upload_path}"

    def __repr__(self) -> str:
        """Mask the token to prevent accidental credential leakage."""
        parts: list[str] = []
        for f in dataclasses.fields(self):
            val = getattr(self, f.name)
            if f.name == "token":
                masked = f"...{val[-4:]}" if len(val) >= 4 else "****"
                parts.append(f"token='{masked}'")
            else:
                parts.append(f"{f.name}={val!r}")
        return f"UploadConfig({', '.join(parts)})"
