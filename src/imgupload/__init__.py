"""imgupload — image preprocessing and multipart upload pipeline.

Public re-exports
-----------------

* **Client:** :class:`AsyncImageUploadClient`, :func:`process_and_upload_image`
* **Pipeline:** :class:`ImageUploadPipeline`
* **Configuration:** :class:`UploadConfig`
* **Errors:** Every :class:`ImgUploadError` subclass and :class:`ErrorCode`
* **Models:** Result dataclasses, enums, and supporting types

Usage::

    from imgupload import process_and_upload_image

    result = await process_and_upload_image(
        photo_path,
        "Analyze this image",
        user_token,
        "https://api.example.com",
        platform="android",
    )
"""

from __future__ import annotations

# ── Client ─────────────────────────────────────────────────────────────
from imgupload.client import AsyncImageUploadClient, process_and_upload_image

# ── Configuration ───────────────────────────────────────────────────────
from imgupload.config import (
    DEFAULT_MAX_DIMENSION,
    DEFAULT_QUALITY,
    DEFAULT_UPLOAD_PATH,
    UploadConfig,
)

# ── Errors ──────────────────────────────────────────────────────────────
from imgupload.errors import (
    CleanupError,
    ErrorCode,
    ImageError,
    ImageProbeError,
    ImageTransformError,
    ImgUploadError,
    UploadError,
    UploadTransportError,
)

# ── Image stages ────────────────────────────────────────────────────────
from imgupload.image import (
    ImageStore,
    LocalImageStore,
    cleanup_derived,
    normalize_uri,
    plan_resize,
    resize_image,
)

# ── Models ──────────────────────────────────────────────────────────────
from imgupload.models import (
    Dimensions,
    ImageRef,
    PipelineResult,
    PipelineStage,
    Platform,
    ResizeOutcome,
    ResizePlan,
    ResizeResult,
    UploadRequest,
)

# ── Pipeline ────────────────────────────────────────────────────────────
from imgupload.pipeline import ImageUploadPipeline, PipelineStateMachine

# ── Upload ──────────────────────────────────────────────────────────────
from imgupload.upload import AsyncUploadTransport, extract_error_message, upload_image

__all__ = [
    # Client
    "AsyncImageUploadClient",
    "process_and_upload_image",
    # Configuration
    "UploadConfig",
    "DEFAULT_MAX_DIMENSION",
    "DEFAULT_QUALITY",
    "DEFAULT_UPLOAD_PATH",
    # Errors
    "ImgUploadError",
    "ErrorCode",
    "ImageError",
    "ImageProbeError",
    "ImageTransformError",
    "UploadError",
    "UploadTransportError",
    "CleanupError",
    # Image stages
    "ImageStore",
    "LocalImageStore",
    "normalize_uri",
    "plan_resize",
    "resize_image",
    "cleanup_derived",
    # Upload
    "AsyncUploadTransport",
    "upload_image",
    "extract_error_message",
    # Pipeline
    "ImageUploadPipeline",
    "PipelineStateMachine",
    # Models
    "Platform",
    "ImageRef",
    "Dimensions",
    "ResizePlan",
    "ResizeOutcome",
    "ResizeResult",
    "UploadRequest",
    "PipelineStage",
    "PipelineResult",
]
