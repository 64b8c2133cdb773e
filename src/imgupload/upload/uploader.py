"""Multipart upload of a single image.

Builds an :class:`UploadRequest` (one ``file`` part plus an optional
``message`` part) and sends it through an :class:`AsyncUploadTransport`.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import Any

from imgupload.errors import UploadError
from imgupload.image.store import ImageStore
from imgupload.models import ImageRef, UploadRequest
from imgupload.observability import MetricsHook, get_logger, resolve_metrics

from .transport import AsyncUploadTransport

log = get_logger("imgupload.upload")


def make_file_name(clock: Callable[[], float] = time.time) -> str:
    """Return ``upload_<unixMillis>.jpg`` for the current time."""
    return f"upload_{int(clock() * 1000)}.jpg"


async def build_upload_request(
    store: ImageStore,
    ref: ImageRef,
    annotation: str | None = None,
    content_type: str = "image/jpeg",
    clock: Callable[[], float] = time.time,
) -> UploadRequest:
    """Read *ref* and assemble the multipart request.

    Raises
    ------
    UploadError
        If the image bytes cannot be read.
    """
    try:
        data = await store.read_bytes(ref)
    except OSError as exc:
        raise UploadError(
            message=f"Could not read image {ref.location}: {exc}",
            context={"location": ref.location},
            cause=exc,
        ) from exc

    return UploadRequest(
        image=ref,
        file_name=make_file_name(clock),
        data=data,
        content_type=content_type,
        annotation=annotation,
    )


async def upload_image(
    transport: AsyncUploadTransport,
    store: ImageStore,
    ref: ImageRef,
    annotation: str | None = None,
    *,
    content_type: str = "image/jpeg",
    clock: Callable[[], float] = time.time,
    metrics: MetricsHook | None = None,
) -> Any:
    """Upload *ref* with an optional text *annotation*.

    Parameters
    ----------
    transport:
        Authenticated transport bound to the destination.
    store:
        Store used to read the image bytes.
    ref:
        The image to upload (derived or original).
    annotation:
        Optional text sent as the ``message`` part.
    content_type:
        MIME type of the image part.
    clock:
        Time source for the synthetic file name.
    metrics:
        Optional metrics hook.

    Returns
    -------
    Any
        The parsed upload response.

    Raises
    ------
    UploadError
        If the image cannot be read, or the endpoint rejects the upload, or
        the endpoint cannot be reached.
    """
    metrics = resolve_metrics(metrics)
    t0 = time.monotonic()
    try:
        request = await build_upload_request(
            store, ref, annotation, content_type=content_type, clock=clock,
        )
        payload = await transport.post_multipart(
            request.files(), request.form_data(),
        )
    except UploadError:
        metrics.increment("imgupload.upload_failure_total")
        raise
    metrics.timing("imgupload.upload_duration_ms", (time.monotonic() - t0) * 1000)
    metrics.increment("imgupload.upload_success_total")

    log.info(
        "Image uploaded",
        extra={
            "extra_fields": {
                "op": "upload",
                "location": ref.location,
                "file_name": request.file_name,
                "bytes": len(request.data),
                "annotated": bool(request.form_data()),
            }
        },
    )
    return payload
