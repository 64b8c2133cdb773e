"""Filesystem collaborator for the pipeline.

:class:`ImageStore` is the contract the pipeline consumes: probe pixel
dimensions, produce a resized and recompressed copy, read the bytes to
upload, and delete a derived copy.  :class:`LocalImageStore` is the
default implementation, backed by Pillow and the local filesystem.  Pillow
work is blocking, so each call is pushed to a worker thread with
:func:`asyncio.to_thread`.
"""

from __future__ import annotations

import asyncio
import os
import tempfile
from pathlib import Path
from typing import Protocol, runtime_checkable

from PIL import Image

from imgupload.errors import ImageProbeError, ImageTransformError
from imgupload.models import FILE_SCHEME, Dimensions, ImageRef
from imgupload.observability import get_logger

log = get_logger("imgupload.store")

# Errors Pillow raises for missing, unreadable, or hostile images.
_PIL_ERRORS = (OSError, ValueError, Image.DecompressionBombError)


@runtime_checkable
class ImageStore(Protocol):
    """Protocol that any image store must satisfy."""

    async def probe_dimensions(self, ref: ImageRef) -> Dimensions:
        """Return the pixel dimensions of *ref*.

        Raises
        ------
        ImageProbeError
            If the image cannot be read or decoded.
        """
        ...

    async def transform(
        self,
        ref: ImageRef,
        target: Dimensions,
        quality: float,
    ) -> ImageRef:
        """Resize *ref* to *target* and recompress it at *quality*.

        Returns a new, derived :class:`ImageRef`; *ref* is left untouched.

        Raises
        ------
        ImageTransformError
            If the image cannot be resized or written.
        """
        ...

    async def read_bytes(self, ref: ImageRef) -> bytes:
        """Return the raw bytes stored at *ref*."""
        ...

    async def delete(self, ref: ImageRef, missing_ok: bool = True) -> None:
        """Delete the image at *ref*.

        With *missing_ok* an already-absent image is not an error.
        """
        ...


def _jpeg_quality(quality: float) -> int:
    """Map a quality fraction in (0, 1] to Pillow's 1-100 JPEG scale."""
    return max(1, min(100, round(quality * 100)))


class LocalImageStore:
    """Pillow-backed :class:`ImageStore` for images on the local filesystem.

    Derived images are written as JPEG files into *temp_dir* (the system
    temporary directory when ``None``) under unique names, so concurrent
    runs never share a derived file.

    Parameters
    ----------
    temp_dir:
        Directory for derived images.
    """

    def __init__(self, temp_dir: str | None = None) -> None:
        self._temp_dir = temp_dir

    # -- public API --------------------------------------------------------

    async def probe_dimensions(self, ref: ImageRef) -> Dimensions:
        return await asyncio.to_thread(self._probe_sync, ref)

    async def transform(
        self,
        ref: ImageRef,
        target: Dimensions,
        quality: float,
    ) -> ImageRef:
        fd, out_path = tempfile.mkstemp(
            prefix="imgupload_", suffix=".jpg", dir=self._temp_dir,
        )
        os.close(fd)
        worker = asyncio.ensure_future(
            asyncio.to_thread(self._transform_sync, ref, target, quality, out_path)
        )
        try:
            return await asyncio.shield(worker)
        except asyncio.CancelledError:
            # The worker thread keeps running; wait for it before removing its output.
            await asyncio.wait([worker])
            if not worker.cancelled() and worker.exception() is not None:
                log.debug(
                    "Transform failed after cancellation",
                    extra={"extra_fields": {"op": "transform", "location": ref.location}},
                )
            Path(out_path).unlink(missing_ok=True)
            raise
        except Exception:
            Path(out_path).unlink(missing_ok=True)
            raise

    async def read_bytes(self, ref: ImageRef) -> bytes:
        return await asyncio.to_thread(Path(ref.path).read_bytes)

    async def delete(self, ref: ImageRef, missing_ok: bool = True) -> None:
        await asyncio.to_thread(Path(ref.path).unlink, missing_ok=missing_ok)

    # -- blocking implementations -------------------------------------------

    def _probe_sync(self, ref: ImageRef) -> Dimensions:
        try:
            with Image.open(ref.path) as img:
                width, height = img.size
            return Dimensions(width, height)
        except _PIL_ERRORS as exc:
            raise ImageProbeError(
                message=f"Could not read dimensions of {ref.location}: {exc}",
                context={"location": ref.location, "reason": type(exc).__name__},
                cause=exc,
            ) from exc

    def _transform_sync(
        self,
        ref: ImageRef,
        target: Dimensions,
        quality: float,
        out_path: str,
    ) -> ImageRef:
        try:
            with Image.open(ref.path) as img:
                resized = img.resize(
                    (target.width, target.height),
                    Image.Resampling.LANCZOS,
                )
            if resized.mode != "RGB":
                resized = resized.convert("RGB")
            resized.save(
                out_path,
                format="JPEG",
                quality=_jpeg_quality(quality),
                optimize=True,
            )
        except _PIL_ERRORS as exc:
            raise ImageTransformError(
                message=f"Could not resize {ref.location} to {target}: {exc}",
                context={
                    "location": ref.location,
                    "target_width": target.width,
                    "target_height": target.height,
                    "quality": quality,
                },
                cause=exc,
            ) from exc

        # Keep the caller's addressing style for the derived image.
        if ref.location.startswith(FILE_SCHEME):
            out_path = f"{FILE_SCHEME}{out_path}"
        return ImageRef(out_path, derived=True)
