"""Tests for the Pillow-backed LocalImageStore."""

from __future__ import annotations

import asyncio
from pathlib import Path

import pytest
from conftest import SlowLocalImageStore, write_image
from PIL import Image

from imgupload.errors import ErrorCode, ImageProbeError, ImageTransformError
from imgupload.image.store import ImageStore, LocalImageStore, _jpeg_quality
from imgupload.models import Dimensions, ImageRef


def test_local_store_satisfies_protocol():
    assert isinstance(LocalImageStore(), ImageStore)


@pytest.mark.parametrize(
    "fraction, expected",
    [(0.7, 70), (1.0, 100), (0.001, 1), (0.5, 50)],
)
def test_jpeg_quality_mapping(fraction, expected):
    assert _jpeg_quality(fraction) == expected


class TestProbe:

    @pytest.mark.asyncio
    async def test_returns_dimensions(self, tmp_path):
        path = write_image(tmp_path / "a.jpg", (320, 200))
        dims = await LocalImageStore().probe_dimensions(ImageRef(str(path)))
        assert dims == Dimensions(320, 200)

    @pytest.mark.asyncio
    async def test_file_uri_accepted(self, tmp_path):
        path = write_image(tmp_path / "a.png", (10, 20), fmt="PNG")
        dims = await LocalImageStore().probe_dimensions(ImageRef(f"file://{path}"))
        assert dims == Dimensions(10, 20)

    @pytest.mark.asyncio
    async def test_missing_file_raises_probe_error(self, tmp_path):
        with pytest.raises(ImageProbeError) as exc_info:
            await LocalImageStore().probe_dimensions(ImageRef(str(tmp_path / "nope.jpg")))
        assert exc_info.value.code == ErrorCode.IMAGE_PROBE_ERROR
        assert exc_info.value.context["reason"] == "FileNotFoundError"

    @pytest.mark.asyncio
    async def test_not_an_image_raises_probe_error(self, tmp_path):
        path = tmp_path / "junk.jpg"
        path.write_bytes(b"definitely not an image")
        with pytest.raises(ImageProbeError):
            await LocalImageStore().probe_dimensions(ImageRef(str(path)))


class TestTransform:

    @pytest.mark.asyncio
    async def test_writes_resized_jpeg_to_temp_dir(self, tmp_path):
        src = write_image(tmp_path / "big.jpg", (1600, 1200))
        out_dir = tmp_path / "out"
        out_dir.mkdir()
        store = LocalImageStore(temp_dir=str(out_dir))

        derived = await store.transform(ImageRef(str(src)), Dimensions(800, 600), 0.7)

        assert derived.derived
        assert derived != ImageRef(str(src))
        assert Path(derived.path).parent == out_dir
        with Image.open(derived.path) as img:
            assert img.size == (800, 600)
            assert img.format == "JPEG"
        assert src.exists()

    @pytest.mark.asyncio
    async def test_rgba_png_converted_to_rgb(self, tmp_path):
        src = write_image(tmp_path / "alpha.png", (100, 50), mode="RGBA", fmt="PNG")
        store = LocalImageStore(temp_dir=str(tmp_path))
        derived = await store.transform(ImageRef(str(src)), Dimensions(40, 20), 0.7)
        with Image.open(derived.path) as img:
            assert img.mode == "RGB"

    @pytest.mark.asyncio
    async def test_file_uri_input_gives_file_uri_output(self, tmp_path):
        src = write_image(tmp_path / "big.jpg", (200, 100))
        store = LocalImageStore(temp_dir=str(tmp_path))
        derived = await store.transform(ImageRef(f"file://{src}"), Dimensions(100, 50), 0.7)
        assert derived.location.startswith("file://")
        assert Path(derived.path).exists()

    @pytest.mark.asyncio
    async def test_failure_raises_and_leaves_no_partial_file(self, tmp_path):
        out_dir = tmp_path / "out"
        out_dir.mkdir()
        store = LocalImageStore(temp_dir=str(out_dir))
        with pytest.raises(ImageTransformError) as exc_info:
            await store.transform(
                ImageRef(str(tmp_path / "missing.jpg")), Dimensions(10, 10), 0.7,
            )
        assert exc_info.value.context["target_width"] == 10
        assert list(out_dir.iterdir()) == []

    @pytest.mark.asyncio
    async def test_cancelled_transform_removes_output(self, tmp_path):
        src = write_image(tmp_path / "big.jpg", (200, 100))
        out_dir = tmp_path / "out"
        out_dir.mkdir()
        store = SlowLocalImageStore(temp_dir=str(out_dir))

        task = asyncio.create_task(
            store.transform(ImageRef(str(src)), Dimensions(100, 50), 0.7)
        )
        assert await asyncio.to_thread(store.started.wait, 5)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        assert list(out_dir.iterdir()) == []

    @pytest.mark.asyncio
    async def test_percent_in_temp_dir_round_trips(self, tmp_path):
        src = write_image(tmp_path / "big.jpg", (200, 100))
        out_dir = tmp_path / "100%25"
        out_dir.mkdir()
        store = LocalImageStore(temp_dir=str(out_dir))

        derived = await store.transform(ImageRef(f"file://{src}"), Dimensions(100, 50), 0.7)

        assert derived.path.startswith(str(out_dir))
        with Image.open(derived.path) as img:
            assert img.size == (100, 50)
        assert await store.read_bytes(derived)
        await store.delete(derived, missing_ok=False)
        assert list(out_dir.iterdir()) == []

    @pytest.mark.asyncio
    async def test_unique_names_per_call(self, tmp_path):
        src = write_image(tmp_path / "big.jpg", (200, 100))
        store = LocalImageStore(temp_dir=str(tmp_path))
        first = await store.transform(ImageRef(str(src)), Dimensions(100, 50), 0.7)
        second = await store.transform(ImageRef(str(src)), Dimensions(100, 50), 0.7)
        assert first != second


class TestReadAndDelete:

    @pytest.mark.asyncio
    async def test_read_bytes(self, tmp_path):
        path = tmp_path / "x.jpg"
        path.write_bytes(b"abc")
        assert await LocalImageStore().read_bytes(ImageRef(f"file://{path}")) == b"abc"

    @pytest.mark.asyncio
    async def test_delete_removes_file(self, tmp_path):
        path = tmp_path / "x.jpg"
        path.write_bytes(b"abc")
        await LocalImageStore().delete(ImageRef(str(path)))
        assert not path.exists()

    @pytest.mark.asyncio
    async def test_delete_missing_is_idempotent(self, tmp_path):
        ref = ImageRef(str(tmp_path / "gone.jpg"))
        await LocalImageStore().delete(ref)
        await LocalImageStore().delete(ref)

    @pytest.mark.asyncio
    async def test_delete_missing_strict_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            await LocalImageStore().delete(ImageRef(str(tmp_path / "gone.jpg")), missing_ok=False)
