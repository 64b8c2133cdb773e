"""Full error hierarchy for the imgupload package.

Every public error class inherits from ImgUploadError. Each carries a
machine-readable ``code`` (from :class:`ErrorCode`), a human-readable
``message``, an optional structured ``context`` dict, and an optional
``cause`` (chained exception).

Error codes are defined as a :class:`str` enum so that they serialise
naturally to JSON and can be matched with simple ``==`` comparisons.

Only :class:`UploadError` and its subclasses are fatal to a pipeline run.
Image errors are absorbed by the resize stage, and :class:`CleanupError`
is never raised out of the cleanup step.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

# ---------------------------------------------------------------------------
# Error code enum
# ---------------------------------------------------------------------------

class ErrorCode(str, Enum):
    """Machine-readable error codes for every error the package can raise."""

    IMAGE_ERROR = "IMAGE_ERROR"
    IMAGE_PROBE_ERROR = "IMAGE_PROBE_ERROR"
    IMAGE_TRANSFORM_ERROR = "IMAGE_TRANSFORM_ERROR"
    UPLOAD_ERROR = "UPLOAD_ERROR"
    UPLOAD_TRANSPORT_ERROR = "UPLOAD_TRANSPORT_ERROR"
    CLEANUP_ERROR = "CLEANUP_ERROR"


# ---------------------------------------------------------------------------
# Base error
# ---------------------------------------------------------------------------

class ImgUploadError(Exception):
    """Base exception for all imgupload errors.

    Parameters
    ----------
    code:
        A value from :class:`ErrorCode` (or any string) identifying the
        error category.
    message:
        A developer-friendly description of what went wrong.
    context:
        Arbitrary structured data providing extra diagnostic detail.
        Keys and expected types are documented per subclass.
    cause:
        The underlying exception, if this error wraps another.
    """

    def __init__(
        self,
        code: str,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.code: str = code
        self.message: str = message
        self.context: dict[str, Any] = context or {}
        self.cause: Exception | None = cause
        super().__init__(message)
        if cause is not None:
            self.__cause__ = cause

    def __repr__(self) -> str:
        ctx = f", context={self.context!r}" if self.context else ""
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r}{ctx})"


# ---------------------------------------------------------------------------
# Image errors (recoverable)
# ---------------------------------------------------------------------------

class ImageError(ImgUploadError):
    """Base class for errors raised by the image store.

    Context varies by subclass.
    """

    def __init__(
        self,
        code: str = ErrorCode.IMAGE_ERROR,
        message: str = "Image error",
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=code,
            message=message,
            context=context,
            cause=cause,
        )


class ImageProbeError(ImageError):
    """The pixel dimensions of an image could not be determined.

    Context keys: ``location``, ``reason``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.IMAGE_PROBE_ERROR,
            message=message,
            context=context,
            cause=cause,
        )


class ImageTransformError(ImageError):
    """Resizing or re-encoding an image failed.

    Context keys: ``location``, ``target_width``, ``target_height``,
    ``quality``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.IMAGE_TRANSFORM_ERROR,
            message=message,
            context=context,
            cause=cause,
        )


# ---------------------------------------------------------------------------
# Upload errors (fatal)
# ---------------------------------------------------------------------------

class UploadError(ImgUploadError):
    """The upload endpoint rejected the request or could not be reached.

    Context keys: ``status_code``, ``body`` (parsed response body, when the
    server answered with JSON), ``url``.
    """

    def __init__(
        self,
        code: str = ErrorCode.UPLOAD_ERROR,
        message: str = "Upload error",
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=code,
            message=message,
            context=context,
            cause=cause,
        )


class UploadTransportError(UploadError):
    """A transport-level failure occurred (timeout, DNS, connection reset).

    Context keys: ``url``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.UPLOAD_TRANSPORT_ERROR,
            message=message,
            context=context,
            cause=cause,
        )


# ---------------------------------------------------------------------------
# Cleanup errors (never raised outward)
# ---------------------------------------------------------------------------

class CleanupError(ImgUploadError):
    """Deleting a derived image failed.

    Built by the cleanup step for logging and metrics only; it is never
    raised out of the pipeline.

    Context keys: ``location``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.CLEANUP_ERROR,
            message=message,
            context=context,
            cause=cause,
        )
