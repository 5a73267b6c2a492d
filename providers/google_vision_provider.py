"""
Google Cloud Vision provider — plain REST over aiohttp.

Endpoint:  POST https://vision.googleapis.com/v1/images:annotate?key=<API key>
API docs:  https://cloud.google.com/vision/docs/reference/rest/v1/images/annotate

One call per analysis, no retries or batching. If the call fails the
pipeline's fallback policy decides what the user sees.
"""
from __future__ import annotations

import asyncio
import logging
import time
from typing import Optional

import aiohttp

import config
import key_store
from providers.base import MalformedResponse, TransportError, VisionProvider

logger = logging.getLogger(__name__)


class GoogleVisionProvider(VisionProvider):

    def __init__(
        self,
        api_key: str,
        api_url: Optional[str] = None,
        timeout_secs: Optional[float] = None,
    ) -> None:
        self.name     = "google/cloud-vision"
        self._api_key = api_key
        self._api_url = api_url or config.VISION_API_URL
        self._timeout = timeout_secs if timeout_secs is not None else config.VISION_TIMEOUT_SECS
        self._headers = {"Content-Type": "application/json"}

    async def annotate(self, request_body: dict) -> dict:
        t0 = time.monotonic()
        try:
            async with aiohttp.ClientSession() as session:
                async with session.post(
                    self._api_url,
                    params  = {"key": self._api_key},
                    headers = self._headers,
                    json    = request_body,
                    timeout = aiohttp.ClientTimeout(total=self._timeout),
                ) as resp:
                    if resp.status != 200:
                        text = await resp.text()
                        raise TransportError(
                            f"Vision API error {resp.status}: {text[:200]}",
                            status=resp.status,
                        )
                    try:
                        data = await resp.json(content_type=None)
                    except ValueError as exc:
                        raise MalformedResponse(f"Vision API returned non-JSON body: {exc}") from exc
        except asyncio.TimeoutError as exc:
            raise TransportError(f"Vision API timed out after {self._timeout:.0f}s") from exc
        except aiohttp.ClientError as exc:
            raise TransportError(f"Vision API request failed: {exc}") from exc

        latency_ms = int((time.monotonic() - t0) * 1000)
        logger.info(
            "[%s] OK — latency=%dms key=%s",
            self.name, latency_ms, key_store.mask(self._api_key),
        )
        return data


def provider_from_config() -> GoogleVisionProvider:
    """Build the provider from key_store / config. Raises RuntimeError without a key."""
    api_key = key_store.get("google_vision_api_key")
    if not api_key:
        raise RuntimeError(
            "No Cloud Vision API key configured.\n"
            "Set GOOGLE_VISION_API_KEY (or GOOGLE_API_KEY) in .env"
        )
    return GoogleVisionProvider(api_key)
