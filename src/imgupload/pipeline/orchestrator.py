"""Pipeline orchestrator: normalize, resize, upload, and always clean up.

A run moves through ``START -> NORMALIZED -> RESIZED|SKIPPED -> UPLOADED ->
DONE``.  The resize stage degrades to the original image instead of
failing, so only the upload (or an unexpected fault) can make a run fail.
Cleanup of the derived image runs exactly once in a ``finally`` block, on
every exit path including cancellation.
"""

from __future__ import annotations

import time
import uuid
from collections.abc import Callable

from imgupload.config import UploadConfig
from imgupload.errors import ImgUploadError
from imgupload.image import (
    ImageStore,
    LocalImageStore,
    cleanup_derived,
    normalize_uri,
    resize_image,
)
from imgupload.models import (
    ImageRef,
    PipelineResult,
    PipelineStage,
    ResizeOutcome,
)
from imgupload.observability import get_logger, resolve_metrics
from imgupload.upload import AsyncUploadTransport, extract_error_message, upload_image

from .state import PipelineStateMachine

log = get_logger("imgupload.pipeline")


class ImageUploadPipeline:
    """Preprocess an image and upload it, producing a :class:`PipelineResult`.

    The pipeline object holds only configuration and collaborators; every
    call to :meth:`run` keeps its own state, so concurrent runs are
    independent.

    Parameters
    ----------
    config:
        Pipeline configuration.
    transport:
        Authenticated upload transport.
    store:
        Image store; defaults to a :class:`LocalImageStore` writing into
        ``config.temp_dir``.
    clock:
        Time source for synthetic upload file names.
    """

    def __init__(
        self,
        config: UploadConfig,
        transport: AsyncUploadTransport,
        store: ImageStore | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._config = config
        self._transport = transport
        self._store = store if store is not None else LocalImageStore(config.temp_dir)
        self._metrics = resolve_metrics(config.metrics)
        self._clock = clock

    async def run(
        self,
        raw_path: str,
        annotation: str | None = None,
    ) -> PipelineResult:
        """Normalize, resize, and upload the image at *raw_path*.

        Parameters
        ----------
        raw_path:
            Path as reported by the platform (camera, picker, ...).
        annotation:
            Optional text sent alongside the image.

        Returns
        -------
        PipelineResult
            Success with the parsed upload response, or failure with a
            user-facing message.
        """
        state = PipelineStateMachine(uuid.uuid4().hex[:12])
        original: ImageRef | None = None
        derived: ImageRef | None = None
        resize_outcome: ResizeOutcome | None = None

        try:
            original = ImageRef(normalize_uri(raw_path, self._config.platform))
            state.transition(PipelineStage.NORMALIZED)

            resized = await resize_image(
                self._store,
                original,
                self._config.max_dimension,
                self._config.quality,
                metrics=self._metrics,
            )
            resize_outcome = resized.outcome
            if resized.ref != original:
                derived = resized.ref
            state.transition(
                PipelineStage.RESIZED if derived is not None else PipelineStage.SKIPPED
            )

            payload = await upload_image(
                self._transport,
                self._store,
                resized.ref,
                annotation,
                content_type=self._config.content_type,
                clock=self._clock,
                metrics=self._metrics,
            )
            state.transition(PipelineStage.UPLOADED)
            result = PipelineResult.ok(payload, resize_outcome=resize_outcome)
        except Exception as exc:
            failed_in = state.state
            state.transition(PipelineStage.FAILED)
            message = extract_error_message(exc)
            log.warning(
                "Image upload pipeline failed",
                exc_info=not isinstance(exc, ImgUploadError),
                extra={
                    "extra_fields": {
                        "op": "pipeline",
                        "run_id": state.run_id,
                        "stage": failed_in.value,
                        "error": message,
                        "error_type": type(exc).__name__,
                    }
                },
            )
            result = PipelineResult.fail(message, resize_outcome=resize_outcome)
        finally:
            await cleanup_derived(self._store, original, derived, metrics=self._metrics)

        state.transition(PipelineStage.DONE)
        self._metrics.increment(
            "imgupload.runs_total",
            tags={"result": "success" if result.success else "failure"},
        )
        log.debug(
            "Image upload pipeline finished",
            extra={
                "extra_fields": {
                    "op": "pipeline",
                    "run_id": state.run_id,
                    "success": result.success,
                    "resize_outcome": resize_outcome.value if resize_outcome else None,
                    "stages": [s.value for s in state.history],
                }
            },
        )
        return result
