"""HTTP conduit to the upstream employee directory."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any

import aiohttp

from app.core.config import Settings
from app.core.exceptions import ConfigurationError, ErrorKind, UpstreamError

logger = logging.getLogger(__name__)


class UpstreamClient:
    def __init__(self) -> None:
        self.initialized = False
        self.base_url = ""
        self.timeout_seconds = 0.0

    async def initialize(self, settings: Settings) -> None:
        if self.initialized:
            return

        if not settings.API_BASE_URL:
            raise ConfigurationError("API_BASE_URL (api.base.url) is not configured")

        self.base_url = settings.API_BASE_URL
        self.timeout_seconds = settings.UPSTREAM_TIMEOUT_SECONDS
        self.initialized = True
        logger.info("UpstreamClient initialized (base_url=%s)", self.base_url)

    async def close(self) -> None:
        self.initialized = False
        self.base_url = ""
        self.timeout_seconds = 0.0

    async def get(self, endpoint: str) -> Any:
        return await self._request("GET", endpoint)

    async def post(self, endpoint: str, body: dict[str, Any]) -> Any:
        return await self._request("POST", endpoint, payload=body)

    async def delete(self, endpoint: str) -> None:
        await self._request("DELETE", endpoint, parse_body=False)

    async def _request(
        self,
        method: str,
        endpoint: str,
        payload: dict[str, Any] | None = None,
        parse_body: bool = True,
    ) -> Any:
        if not self.initialized:
            raise RuntimeError("UpstreamClient not initialized")

        url = f"{self.base_url}{endpoint}"
        logger.info("%s Api call for: %s", method, url)

        timeout = aiohttp.ClientTimeout(total=self.timeout_seconds)
        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.request(method, url, json=payload) as response:
                    raw = await response.read()
                    if response.status >= 400:
                        logger.warning("%s %s failed with HTTP %s", method, url, response.status)
                        body = raw.decode("utf-8", errors="replace")
                        raise UpstreamError.from_status(response.status, response.reason, body)
                    if not parse_body:
                        return None
                    return self._parse_json(raw, url)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error("%s %s unreachable: %s", method, url, e)
            raise UpstreamError(
                ErrorKind.UNREACHABLE,
                f"I/O error on {method} request for \"{url}\": {str(e) or type(e).__name__}",
            ) from e
        except asyncio.CancelledError as e:
            logger.warning("%s %s cancelled", method, url)
            raise UpstreamError(
                ErrorKind.UNREACHABLE,
                f"{method} request for \"{url}\" was cancelled",
            ) from e

    @staticmethod
    def _parse_json(raw: bytes, url: str) -> Any:
        # UnicodeDecodeError is a ValueError: undecodable bodies are malformed too
        try:
            return json.loads(raw.decode("utf-8"))
        except ValueError as e:
            raise UpstreamError(
                ErrorKind.MALFORMED_RESPONSE,
                f"Upstream returned a non-JSON body for {url}: {raw[:200]!r}",
            ) from e


upstream_client = UpstreamClient()
