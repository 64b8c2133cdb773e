"""Metrics hook protocol and no-op default implementation.

imgupload emits counters and timings at each pipeline stage.  By default a
:class:`NoopMetricsHook` is used so there is zero overhead.  Users can supply
their own implementation that satisfies the :class:`MetricsHook` protocol to
route metrics to Datadog, Prometheus, StatsD, or any other backend.

Emitted metric names:

* ``imgupload.runs_total``               -- counter (tag ``result``)
* ``imgupload.resize_total``             -- counter (tag ``outcome``)
* ``imgupload.upload_success_total``     -- counter
* ``imgupload.upload_failure_total``     -- counter
* ``imgupload.upload_duration_ms``       -- timing
* ``imgupload.requests_total``           -- counter (tag ``status``)
* ``imgupload.request_duration_ms``      -- timing
* ``imgupload.cleanup_total``            -- counter
* ``imgupload.cleanup_failure_total``    -- counter
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class MetricsHook(Protocol):
    """Protocol that any metrics backend must satisfy.

    All methods accept an optional *tags* dict whose keys and values are
    strings.
    """

    def increment(
        self,
        name: str,
        value: int = 1,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Increment a counter metric."""
        ...

    def timing(
        self,
        name: str,
        ms: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Record a duration in milliseconds."""
        ...

    def gauge(
        self,
        name: str,
        value: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Set a gauge metric to an absolute value."""
        ...


class NoopMetricsHook:
    """Default metrics implementation that silently discards all data points."""

    __slots__ = ()

    def increment(
        self,
        name: str,
        value: int = 1,
        tags: dict[str, str] | None = None,
    ) -> None:
        pass

    def timing(
        self,
        name: str,
        ms: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        pass

    def gauge(
        self,
        name: str,
        value: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        pass


def resolve_metrics(metrics: MetricsHook | None) -> MetricsHook:
    """Return *metrics*, or a :class:`NoopMetricsHook` when it is ``None``."""
    return metrics if metrics is not None else NoopMetricsHook()
