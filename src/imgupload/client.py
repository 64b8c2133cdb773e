"""Asynchronous image upload client.

:class:`AsyncImageUploadClient` wires an :class:`UploadConfig`, an
:class:`AsyncUploadTransport`, an image store and the
:class:`ImageUploadPipeline` together behind one object.

Usage::

    import asyncio
    from imgupload import AsyncImageUploadClient

    async def main():
        async with AsyncImageUploadClient(
            token="user-token",
            base_url="https://api.example.com",
            platform="android",
        ) as client:
            result = await client.process_and_upload(
                "/storage/emulated/0/DCIM/photo.jpg",
                annotation="Analyze this image",
            )
            if result.success:
                print(result.data)
            else:
                print(result.error)

    asyncio.run(main())
"""

from __future__ import annotations

from typing import Any

import httpx

from imgupload.config import UploadConfig
from imgupload.image import ImageStore
from imgupload.models import PipelineResult
from imgupload.pipeline import ImageUploadPipeline
from imgupload.upload import AsyncUploadTransport


class AsyncImageUploadClient:
    """Asynchronous client for the preprocessing-and-upload pipeline.

    Parameters
    ----------
    token:
        Bearer credential.  **Required.**
    base_url:
        Destination root URL.  **Required.**
    store:
        Optional custom :class:`ImageStore`.
    http_transport:
        Optional ``httpx`` transport (for tests or custom networking).
    **kwargs:
        All remaining keyword arguments are forwarded to
        :class:`UploadConfig`.
    """

    def __init__(
        self,
        token: str,
        base_url: str,
        *,
        store: ImageStore | None = None,
        http_transport: httpx.AsyncBaseTransport | None = None,
        **kwargs: Any,
    ) -> None:
        self._config = UploadConfig(token=token, base_url=base_url, **kwargs)
        self._transport = AsyncUploadTransport(self._config, http_transport=http_transport)
        self._pipeline = ImageUploadPipeline(self._config, self._transport, store=store)

    @property
    def config(self) -> UploadConfig:
        return self._config

    async def process_and_upload(
        self,
        raw_path: str,
        annotation: str | None = None,
    ) -> PipelineResult:
        """Run the full pipeline for *raw_path*.

        See :meth:`ImageUploadPipeline.run`.
        """
        return await self._pipeline.run(raw_path, annotation)

    # ------------------------------------------------------------------
    # Resource management
    # ------------------------------------------------------------------

    async def close(self) -> None:
        """Close the HTTP transport."""
        await self._transport.close()

    async def __aenter__(self) -> AsyncImageUploadClient:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()


async def process_and_upload_image(
    raw_path: str,
    annotation: str | None,
    token: str,
    base_url: str,
    **kwargs: Any,
) -> dict[str, Any]:
    """One-shot helper: run the pipeline with a short-lived client.

    Returns ``{"success": True, "data": ...}`` or
    ``{"success": False, "error": ...}``.  Keyword arguments are forwarded
    to :class:`AsyncImageUploadClient`.
    """
    async with AsyncImageUploadClient(token, base_url, **kwargs) as client:
        result = await client.process_and_upload(raw_path, annotation)
    return result.to_dict()
