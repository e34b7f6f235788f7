"""Figma REST API provider."""

import logging
from typing import Any

import httpx
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)
from tenacity.wait import wait_base

from app.core.config import get_settings
from app.services.figma.base import DesignProvider, FigmaApiError, RemoteDocument

logger = logging.getLogger(__name__)

# Only transport-level failures are retried; an HTTP error answer never is.
RETRYABLE_ERRORS = (httpx.TimeoutException, httpx.ConnectError)


class FigmaProvider(DesignProvider):
    """Figma REST API client."""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        max_attempts: int | None = None,
        image_batch_size: int | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        retry_wait: wait_base | None = None,
    ):
        """Initialize the Figma provider.

        Args:
            base_url: API root (defaults to settings.figma_api_base)
            timeout: Request timeout in seconds
            max_attempts: Attempts per request for transport failures
            image_batch_size: Node ids per image-render request
            transport: Optional httpx transport (tests use httpx.MockTransport)
            retry_wait: Optional tenacity wait strategy between attempts
        """
        settings = get_settings()
        self._base_url = (base_url or settings.figma_api_base).rstrip("/")
        self._timeout = timeout or settings.figma_timeout
        self._max_attempts = max_attempts or settings.figma_max_attempts
        self._image_batch_size = image_batch_size or settings.figma_image_batch_size
        self._image_format = settings.figma_image_format
        self._image_scale = settings.figma_image_scale
        self._transport = transport
        self._retry_wait = retry_wait or wait_exponential(multiplier=1, min=1, max=10)

    @property
    def name(self) -> str:
        return "figma"

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._base_url,
            timeout=self._timeout,
            transport=self._transport,
        )

    async def _get(
        self,
        client: httpx.AsyncClient,
        path: str,
        token: str,
        params: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        """GET a JSON document, retrying transport failures only."""
        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(self._max_attempts),
                wait=self._retry_wait,
                retry=retry_if_exception_type(RETRYABLE_ERRORS),
                reraise=True,
            ):
                with attempt:
                    response = await client.get(
                        path,
                        params=params,
                        headers={"X-Figma-Token": token},
                    )
        except httpx.TimeoutException as e:
            logger.error(f"Figma request {path} timed out after {self._max_attempts} attempts")
            raise FigmaApiError(f"Request timed out after {self._timeout}s", cause=e) from e
        except httpx.ConnectError as e:
            logger.error(f"Cannot connect to Figma at {self._base_url}: {e}")
            raise FigmaApiError(f"Cannot connect to {self._base_url}", cause=e) from e
        except httpx.HTTPError as e:
            logger.error(f"Figma request {path} failed: {e}")
            raise FigmaApiError(str(e), cause=e) from e

        if not response.is_success:
            logger.error(f"Figma request {path} returned {response.status_code}")
            raise FigmaApiError(response.text, status_code=response.status_code)

        try:
            return response.json()
        except ValueError as e:
            raise FigmaApiError("Response was not valid JSON", status_code=response.status_code, cause=e) from e

    async def fetch_document(self, file_key: str, token: str) -> RemoteDocument:
        async with self._client() as client:
            data = await self._get(client, f"/files/{file_key}", token)

        document = data.get("document")
        if not isinstance(document, dict):
            raise FigmaApiError(f"File {file_key} has no document tree")

        return RemoteDocument(
            name=data.get("name", ""),
            document=document,
            styles=data.get("styles") or {},
            last_modified=data.get("lastModified"),
        )

    async def fetch_images(
        self,
        file_key: str,
        token: str,
        node_ids: list[str],
    ) -> dict[str, str | None]:
        if not node_ids:
            return {}

        images: dict[str, str | None] = {}
        async with self._client() as client:
            for start in range(0, len(node_ids), self._image_batch_size):
                batch = node_ids[start : start + self._image_batch_size]
                data = await self._get(
                    client,
                    f"/images/{file_key}",
                    token,
                    params={
                        "ids": ",".join(batch),
                        "format": self._image_format,
                        "scale": str(self._image_scale),
                    },
                )
                if data.get("err"):
                    logger.error(f"Figma image render failed for {file_key}: {data['err']}")
                    raise FigmaApiError(str(data["err"]), status_code=data.get("status"))
                images.update(data.get("images") or {})

        logger.debug(f"Rendered {len(images)} images for {file_key}")
        return images
