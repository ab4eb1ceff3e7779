"""
History index client — talks to the Elasticsearch REST API over httpx.

Only two calls are needed:
- health(): GET /_cat/health, returns the HTTP status (the health gate
  treats anything but 200 as "index unusable")
- search(): POST /<index>/_search with an aggregation body, returns the
  decoded response (the part we read is response["aggregations"])

The client is built once at startup, and only when ELASTICSEARCH_URI is
configured. No URI means no client, which is a valid deployment.
"""

import logging
from typing import Optional

import httpx

from resolver.errors import UpstreamError

logger = logging.getLogger(__name__)


class HistoryIndexClient:

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._client = httpx.AsyncClient(base_url=base_url, timeout=timeout, transport=transport)

    async def health(self) -> int:
        response = await self._client.get("/_cat/health", params={"format": "json"})
        return response.status_code

    async def search(self, index: str, body: dict) -> dict:
        """
        Run a search against an index.

        Raises:
            UpstreamError: the index answered with a non-2xx status or a
                non-JSON body, or could not be reached (status=None)
        """
        try:
            response = await self._client.post(f"/{index}/_search", json=body)
        except httpx.HTTPError as e:
            logger.error(f"History search on '{index}' failed: {e}")
            raise UpstreamError(None, str(e) or type(e).__name__, source="history") from e

        if not response.is_success:
            logger.error(
                f"History search on '{index}' failed: "
                f"HTTP {response.status_code}: {response.text[:200]}"
            )
            raise UpstreamError(response.status_code, response.text[:200], source="history")

        try:
            return response.json()
        except ValueError as e:
            logger.error(f"History search on '{index}' returned a non-JSON body: {response.text[:200]}")
            raise UpstreamError(
                response.status_code, f"invalid JSON from history index: {response.text[:200]}", source="history"
            ) from e

    async def close(self) -> None:
        await self._client.aclose()


def create_history_client(uri: Optional[str], timeout: float = 30.0) -> Optional[HistoryIndexClient]:
    """Build a client for the configured URI, or None when history is not configured."""
    if not uri:
        logger.info("ELASTICSEARCH_URI not set — job attempt history disabled")
        return None
    return HistoryIndexClient(uri, timeout=timeout)
