"""Shared test fixtures for the imgupload test suite."""

from __future__ import annotations

import threading
import time
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
from PIL import Image

from imgupload.config import UploadConfig
from imgupload.image.store import LocalImageStore
from imgupload.models import Dimensions, ImageRef


class RecordingMetricsHook:
    """A metrics backend that records all calls for assertion."""

    def __init__(self) -> None:
        self.increments: list[dict[str, Any]] = []
        self.timings: list[dict[str, Any]] = []
        self.gauges: list[dict[str, Any]] = []

    def increment(
        self,
        name: str,
        value: int = 1,
        tags: dict[str, str] | None = None,
    ) -> None:
        self.increments.append({"name": name, "value": value, "tags": tags})

    def timing(
        self,
        name: str,
        ms: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        self.timings.append({"name": name, "ms": ms, "tags": tags})

    def gauge(
        self,
        name: str,
        value: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        self.gauges.append({"name": name, "value": value, "tags": tags})

    def names(self) -> list[str]:
        return [c["name"] for c in self.increments]


def make_store(
    dims: Dimensions | None = Dimensions(1600, 1200),
    derived: str = "/tmp/imgupload_derived.jpg",
    data: bytes = b"\xff\xd8\xffjpeg-bytes",
) -> MagicMock:
    """Return a mock ImageStore whose async methods succeed by default."""
    store = MagicMock()
    store.probe_dimensions = AsyncMock(return_value=dims)
    store.transform = AsyncMock(return_value=ImageRef(derived, derived=True))
    store.read_bytes = AsyncMock(return_value=data)
    store.delete = AsyncMock(return_value=None)
    return store


class SlowLocalImageStore(LocalImageStore):
    """LocalImageStore whose transform worker blocks for *delay* seconds.

    ``started`` is set once the worker thread is running, so a test can
    cancel the awaiting task while the thread is still busy.
    """

    def __init__(self, temp_dir: str, delay: float = 0.3) -> None:
        super().__init__(temp_dir=temp_dir)
        self.delay = delay
        self.started = threading.Event()

    def _transform_sync(self, *args: Any) -> ImageRef:
        self.started.set()
        time.sleep(self.delay)
        return super()._transform_sync(*args)


def write_image(
    path: Path,
    size: tuple[int, int],
    mode: str = "RGB",
    fmt: str = "JPEG",
) -> Path:
    """Write a solid-colour image of *size* to *path*."""
    colors = {"RGB": (200, 40, 40), "RGBA": (200, 40, 40, 255), "L": 128}
    Image.new(mode, size, colors[mode]).save(path, format=fmt)
    return path


@pytest.fixture
def config() -> UploadConfig:
    """Default test configuration with a dummy token and local endpoint."""
    return UploadConfig(token="test_token_1234", base_url="https://api.example.com")


@pytest.fixture
def metrics() -> RecordingMetricsHook:
    return RecordingMetricsHook()
