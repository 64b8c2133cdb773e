"""Aspect-preserving resize planning."""

from __future__ import annotations

import math

from imgupload.models import Dimensions, ResizePlan


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def plan_resize(dims: Dimensions, max_dimension: int) -> ResizePlan:
    """Compute target dimensions that fit within *max_dimension*.

    Returns the no-op plan when both sides already fit.  Otherwise the
    longer side (width for landscape, height for portrait and square) is set
    to *max_dimension* and the other side is scaled by the source aspect
    ratio, rounded to the nearest pixel and never below 1.

    Parameters
    ----------
    dims:
        Source dimensions.
    max_dimension:
        The bound on either side, in pixels.

    Raises
    ------
    ValueError
        If *max_dimension* is not positive.
    """
    if max_dimension <= 0:
        raise ValueError(f"max_dimension must be > 0, got {max_dimension}")

    if dims.width <= max_dimension and dims.height <= max_dimension:
        return ResizePlan.noop()

    ratio = dims.aspect_ratio
    if dims.width > dims.height:
        width = max_dimension
        height = max(1, _round_half_up(max_dimension / ratio))
    else:
        height = max_dimension
        width = max(1, _round_half_up(max_dimension * ratio))

    return ResizePlan.resize(width, height)
