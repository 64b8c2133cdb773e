"""Platform URI normalization.

Maps a platform-reported file path to the form the platform's file-access
layer expects.  The platform is always passed explicitly so the mapping can
be exercised for every platform value without runtime detection.
"""

from __future__ import annotations

from imgupload.models import FILE_SCHEME, Platform

# Platforms whose file layer rejects bare paths.
_SCHEME_PLATFORMS = frozenset({Platform.ANDROID.value})


def _platform_value(platform: Platform | str) -> str:
    if isinstance(platform, Platform):
        return platform.value
    return str(platform).strip().lower()


def requires_file_scheme(platform: Platform | str) -> bool:
    """Return ``True`` if *platform* needs an explicit ``file://`` prefix."""
    return _platform_value(platform) in _SCHEME_PLATFORMS


def normalize_uri(path: str, platform: Platform | str) -> str:
    """Normalize *path* for *platform*.

    On platforms that require an explicit scheme (Android), ``file://`` is
    prepended unless already present.  Every other platform, including
    unrecognised ones, gets *path* back unchanged.  The function is total and
    idempotent.

    Examples
    --------
    >>> normalize_uri("/a/b", "android")
    'file:///a/b'
    >>> normalize_uri("file:///a/b", Platform.ANDROID)
    'file:///a/b'
    >>> normalize_uri("/a/b", "ios")
    '/a/b'
    """
    if requires_file_scheme(platform) and not path.startswith(FILE_SCHEME):
        return f"{FILE_SCHEME}{path}"
    return path
