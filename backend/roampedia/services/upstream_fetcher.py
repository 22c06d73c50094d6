"""Upstream fetcher — JSON GET with timeout and linear-backoff retries for public data APIs."""

import asyncio
import logging
from typing import Any

import httpx

from roampedia.config import settings

logger = logging.getLogger(__name__)


class UpstreamFetcher:
    """Fetches JSON from third-party APIs; failures become None, never exceptions."""

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        timeout: float | None = None,
        retries: int | None = None,
        backoff_seconds: float | None = None,
    ):
        self._client = client
        self.timeout = timeout if timeout is not None else settings.upstream_timeout_seconds
        self.retries = retries if retries is not None else settings.upstream_retries
        self.backoff_seconds = (
            backoff_seconds if backoff_seconds is not None else settings.upstream_backoff_seconds
        )

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout, follow_redirects=True)
        return self._client

    async def fetch_json(self, url: str, params: dict | None = None) -> Any | None:
        """GET ``url`` and decode JSON; retry on any failure with 0.5s, 1.0s, ... waits.

        Only a 200 response counts as success.
        """
        client = await self._get_client()
        for attempt in range(self.retries + 1):
            try:
                resp = await client.get(url, params=params, timeout=self.timeout)
                if resp.status_code != 200:
                    raise httpx.HTTPStatusError(
                        f"Unexpected status {resp.status_code}", request=resp.request, response=resp
                    )
                return resp.json()
            except (httpx.HTTPError, ValueError) as e:
                if attempt == self.retries:
                    logger.error(f"Failed to fetch {url}: {e}")
                    return None
                logger.debug(f"Fetch attempt {attempt + 1} for {url} failed: {e}")
                await asyncio.sleep(self.backoff_seconds * (attempt + 1))
        return None

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
