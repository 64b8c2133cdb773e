"""Best-effort removal of derived images.

:func:`cleanup_derived` never raises.  A derived image is deleted only
when it differs from the caller's original; the original is never passed
to :meth:`ImageStore.delete`.
"""

from __future__ import annotations

from imgupload.errors import CleanupError
from imgupload.models import ImageRef
from imgupload.observability import MetricsHook, get_logger, resolve_metrics

from .store import ImageStore

log = get_logger("imgupload.cleanup")


async def cleanup_derived(
    store: ImageStore,
    original: ImageRef | None,
    derived: ImageRef | None,
    metrics: MetricsHook | None = None,
) -> bool:
    """Delete *derived* unless it is absent or the same ref as *original*.

    Deletion is requested with ``missing_ok=True``.  Any error raised by the
    store is logged and counted, then discarded.

    Returns
    -------
    bool
        ``True`` if a delete was attempted and succeeded, ``False`` if there
        was nothing to delete or the delete failed.
    """
    if derived is None or derived == original:
        return False

    metrics = resolve_metrics(metrics)
    metrics.increment("imgupload.cleanup_total")
    try:
        await store.delete(derived, missing_ok=True)
    except Exception as exc:
        err = CleanupError(
            message=f"Could not delete derived image {derived.location}: {exc}",
            context={"location": derived.location},
            cause=exc,
        )
        metrics.increment("imgupload.cleanup_failure_total")
        log.warning(
            "Cleanup of derived image failed",
            extra={
                "extra_fields": {
                    "op": "cleanup",
                    "code": err.code.value,
                    "location": derived.location,
                    "error": err.message,
                }
            },
        )
        return False
    return True
