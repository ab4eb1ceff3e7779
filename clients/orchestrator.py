"""
Orchestrator API client — thin async wrapper over httpx.

The client does NOT interpret status codes. Every answer, 200 or 404 or 500,
comes back as an OrchestratorResponse; deciding what a status means is the
live fetcher's job (resolver/live.py).

Transport failures (connection refused, timeout, TLS) are not caught here:
they raise httpx.HTTPError and the caller classifies them.
"""

import logging
import ssl
from dataclasses import dataclass, field
from typing import Optional, Union

import httpx

logger = logging.getLogger(__name__)


@dataclass
class OrchestratorResponse:
    status_code: int
    data: dict = field(default_factory=dict)


class OrchestratorClient:

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        verify: Union[bool, ssl.SSLContext] = True,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            verify=verify,
            transport=transport,
        )

    async def get(self, path: str, headers: Optional[dict] = None) -> OrchestratorResponse:
        """GET a resource and return its status plus decoded body."""
        response = await self._client.get(path, headers=headers)
        logger.debug(f"GET {path} → HTTP {response.status_code}")
        return OrchestratorResponse(status_code=response.status_code, data=_decode(response))

    async def close(self) -> None:
        await self._client.aclose()


def _decode(response: httpx.Response) -> dict:
    """JSON body if there is one; otherwise wrap the raw text as a message."""
    try:
        body = response.json()
    except ValueError:
        return {"message": response.text}
    if isinstance(body, dict):
        return body
    return {"message": str(body)}
