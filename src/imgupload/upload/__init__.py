"""imgupload.upload -- multipart upload transport and helpers.

This sub-package provides:

* :mod:`.transport` -- async HTTP transport with bearer authentication.
* :mod:`.uploader` -- request assembly and the upload call.
* :mod:`.messages` -- ordered failure-message extraction.
"""

from __future__ import annotations

from .messages import (
    DEFAULT_EXTRACTORS,
    FALLBACK_MESSAGE,
    extract_error_message,
    from_exception_message,
    from_response_body,
)
from .transport import AsyncUploadTransport
from .uploader import build_upload_request, make_file_name, upload_image

__all__ = [
    "AsyncUploadTransport",
    "DEFAULT_EXTRACTORS",
    "FALLBACK_MESSAGE",
    "build_upload_request",
    "extract_error_message",
    "from_exception_message",
    "from_response_body",
    "make_file_name",
    "upload_image",
]
