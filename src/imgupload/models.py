"""Public data models for the imgupload package.

This module contains every result type, enum, and supporting dataclass
referenced by the public API surface.  All types are plain dataclasses
with no behaviour beyond what is needed for structural equality and
simple construction helpers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

FILE_SCHEME = "file://"


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class Platform(str, Enum):
    """Runtime platform whose file-access layer receives image locations."""

    ANDROID = "android"
    """Local file locations must carry an explicit ``file://`` scheme."""

    IOS = "ios"
    """Raw filesystem paths are used as-is."""

    WEB = "web"

    DESKTOP = "desktop"


class ResizeOutcome(str, Enum):
    """How the resize stage of a pipeline run ended."""

    RESIZED = "resized"
    """A derived, resized and recompressed image was produced."""

    SKIPPED = "skipped"
    """The source already fit within the bound; the original is used."""

    DEGRADED = "degraded"
    """Probing or transforming failed; the original is used unchanged."""


class PipelineStage(str, Enum):
    """Lifecycle states of a single pipeline run."""

    START = "start"
    NORMALIZED = "normalized"
    RESIZED = "resized"
    SKIPPED = "skipped"
    """Resize stage finished without producing a derived image."""
    UPLOADED = "uploaded"
    FAILED = "failed"
    DONE = "done"


# ---------------------------------------------------------------------------
# Image references and geometry
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ImageRef:
    """Opaque handle to image bytes at rest.

    Two refs are equal when they name the same ``location``; the
    ``derived`` flag is informational and does not take part in equality.

    Attributes
    ----------
    location:
        The location string handed to the file-access layer, either a raw
        path or a ``file://`` URI.
    derived:
        ``True`` when the pipeline produced this image and owns its
        lifetime.  Caller-supplied originals are never derived.
    """

    location: str
    derived: bool = field(default=False, compare=False)

    @property
    def path(self) -> str:
        """Local filesystem path for *location* (``file://`` stripped)."""
        if self.location.startswith(FILE_SCHEME):
            return self.location[len(FILE_SCHEME):]
        return self.location

    def __str__(self) -> str:
        return self.location


@dataclass(frozen=True)
class Dimensions:
    """Pixel width and height of an image.  Both must be positive."""

    width: int
    height: int

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(
                f"Dimensions must be positive, got {self.width}x{self.height}"
            )

    @property
    def aspect_ratio(self) -> float:
        return self.width / self.height

    def __str__(self) -> str:
        return f"{self.width}x{self.height}"


@dataclass(frozen=True)
class ResizePlan:
    """Outcome of resize planning.

    ``target`` is ``None`` for the no-op plan (the source already fits
    within the bound).
    """

    target: Dimensions | None = None

    @classmethod
    def noop(cls) -> ResizePlan:
        return cls(target=None)

    @classmethod
    def resize(cls, width: int, height: int) -> ResizePlan:
        return cls(target=Dimensions(width, height))

    @property
    def is_noop(self) -> bool:
        return self.target is None


@dataclass
class ResizeResult:
    """Result of the resize stage.

    Attributes
    ----------
    ref:
        The image to upload: either a derived image or the original.
    outcome:
        Whether the image was resized, skipped, or degraded to the original.
    plan:
        The computed plan, or ``None`` if probing failed before planning.
    error:
        The exception that caused degradation, if any.
    """

    ref: ImageRef
    outcome: ResizeOutcome
    plan: ResizePlan | None = None
    error: Exception | None = None


# ---------------------------------------------------------------------------
# Upload request
# ---------------------------------------------------------------------------

@dataclass
class UploadRequest:
    """A multipart upload carrying exactly one image part.

    Attributes
    ----------
    image:
        The image being uploaded.
    file_name:
        Synthetic file name sent with the image part.
    data:
        Raw image bytes.
    content_type:
        MIME type of the image part.
    annotation:
        Optional text sent as the ``message`` part.
    """

    image: ImageRef
    file_name: str
    data: bytes
    content_type: str = "image/jpeg"
    annotation: str | None = None

    def files(self) -> dict[str, tuple[str, bytes, str]]:
        """Multipart file parts in the form accepted by ``httpx``."""
        return {"file": (self.file_name, self.data, self.content_type)}

    def form_data(self) -> dict[str, str]:
        """Multipart text parts; empty when there is no annotation."""
        if self.annotation:
            return {"message": self.annotation}
        return {}


# ---------------------------------------------------------------------------
# Pipeline result
# ---------------------------------------------------------------------------

@dataclass
class PipelineResult:
    """Tagged outcome of a pipeline run.

    Exactly one of ``data`` (on success) and ``error`` (on failure) is
    meaningful.  Use :meth:`ok` and :meth:`fail` to construct instances.

    Attributes
    ----------
    success:
        ``True`` if the upload succeeded.
    data:
        The parsed upload response on success.
    error:
        A user-facing failure message on failure.
    resize_outcome:
        How the resize stage ended, or ``None`` if the run failed before
        reaching it.
    """

    success: bool
    data: Any = None
    error: str | None = None
    resize_outcome: ResizeOutcome | None = None

    @classmethod
    def ok(
        cls,
        data: Any,
        resize_outcome: ResizeOutcome | None = None,
    ) -> PipelineResult:
        return cls(success=True, data=data, resize_outcome=resize_outcome)

    @classmethod
    def fail(
        cls,
        message: str,
        resize_outcome: ResizeOutcome | None = None,
    ) -> PipelineResult:
        return cls(success=False, error=message, resize_outcome=resize_outcome)

    def to_dict(self) -> dict[str, Any]:
        """Return the ``{"success": ..., "data"|"error": ...}`` shape."""
        if self.success:
            return {"success": True, "data": self.data}
        return {"success": False, "error": self.error}
