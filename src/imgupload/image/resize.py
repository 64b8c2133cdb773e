"""Resize stage: probe, plan, and transform with graceful degradation.

The stage never fails.  If probing or transforming raises, the original
image is returned unchanged with :attr:`ResizeOutcome.DEGRADED` so the
upload can still go ahead.
"""

from __future__ import annotations

from imgupload.models import ImageRef, ResizeOutcome, ResizePlan, ResizeResult
from imgupload.observability import MetricsHook, get_logger, resolve_metrics

from .plan import plan_resize
from .store import ImageStore

log = get_logger("imgupload.resize")


async def resize_image(
    store: ImageStore,
    ref: ImageRef,
    max_dimension: int,
    quality: float,
    metrics: MetricsHook | None = None,
) -> ResizeResult:
    """Fit *ref* within *max_dimension*, recompressing it at *quality*.

    Parameters
    ----------
    store:
        The :class:`ImageStore` used to probe and transform.
    ref:
        The normalized original image.
    max_dimension:
        Bound on the longest side, in pixels.
    quality:
        JPEG quality fraction in ``(0, 1]``.
    metrics:
        Optional metrics hook; receives ``imgupload.resize_total``.

    Returns
    -------
    ResizeResult
        ``RESIZED`` with a derived ref, ``SKIPPED`` with *ref* when no
        resize is needed, or ``DEGRADED`` with *ref* when a step failed.
    """
    metrics = resolve_metrics(metrics)
    plan: ResizePlan | None = None

    try:
        dims = await store.probe_dimensions(ref)
        plan = plan_resize(dims, max_dimension)
        if plan.is_noop:
            result = ResizeResult(ref=ref, outcome=ResizeOutcome.SKIPPED, plan=plan)
        else:
            derived = await store.transform(ref, plan.target, quality)
            result = ResizeResult(ref=derived, outcome=ResizeOutcome.RESIZED, plan=plan)
            log.debug(
                "Image resized",
                extra={
                    "extra_fields": {
                        "op": "resize",
                        "location": ref.location,
                        "source": str(dims),
                        "target": str(plan.target),
                        "derived": derived.location,
                    }
                },
            )
    except Exception as exc:
        log.warning(
            "Image resize failed, using original",
            extra={
                "extra_fields": {
                    "op": "resize",
                    "location": ref.location,
                    "error": str(exc),
                    "error_type": type(exc).__name__,
                }
            },
        )
        result = ResizeResult(
            ref=ref, outcome=ResizeOutcome.DEGRADED, plan=plan, error=exc,
        )

    metrics.increment(
        "imgupload.resize_total",
        tags={"outcome": result.outcome.value},
    )
    return result
