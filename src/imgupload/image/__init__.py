"""Image preprocessing: normalize, probe, plan, transform, and clean up.

Exports
-------
normalize_uri
    Map a platform-reported path to the form its file layer expects.
plan_resize
    Compute aspect-preserving target dimensions within a bound.
resize_image
    Probe, plan and transform with graceful degradation.
cleanup_derived
    Best-effort, idempotent deletion of a derived image.
ImageStore / LocalImageStore
    Filesystem collaborator contract and its Pillow-backed default.
"""

from .cleanup import cleanup_derived
from .normalize import normalize_uri, requires_file_scheme
from .plan import plan_resize
from .resize import resize_image
from .store import ImageStore, LocalImageStore

__all__ = [
    "ImageStore",
    "LocalImageStore",
    "cleanup_derived",
    "normalize_uri",
    "plan_resize",
    "requires_file_scheme",
    "resize_image",
]
