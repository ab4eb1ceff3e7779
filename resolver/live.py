"""
Live state fetcher — reads the current framework object from the orchestrator.

Every outcome is returned as a LiveFetchResult, never raised:

    200          → FOUND      (framework + uid)
    404          → NOT_FOUND  (job unknown to the orchestrator)
    other status → ERROR      (status + upstream message)
    no response  → ERROR      (status=None, transport error message)

The reconciler matches on result.outcome and decides what each case means
for the caller. Nothing here retries.
"""

import logging
from dataclasses import dataclass
from typing import Optional

import httpx

from clients.orchestrator import OrchestratorClient
from config.settings import Settings
from models.enums import FetchOutcome

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LiveFetchResult:
    outcome: FetchOutcome
    framework: Optional[dict] = None
    status: Optional[int] = None
    message: Optional[str] = None

    @property
    def uid(self) -> Optional[str]:
        if self.framework is None:
            return None
        return (self.framework.get("metadata") or {}).get("uid")

    @property
    def max_retry_count(self) -> Optional[int]:
        """spec.retryPolicy.maxRetryCount, or None when the framework lacks it."""
        spec = (self.framework or {}).get("spec") or {}
        value = (spec.get("retryPolicy") or {}).get("maxRetryCount")
        return None if value is None else int(value)


class LiveStateFetcher:

    def __init__(self, client: OrchestratorClient, settings: Settings):
        self._client = client
        self._settings = settings

    async def fetch(self, encoded_name: str) -> LiveFetchResult:
        path = self._settings.framework_path(encoded_name)
        try:
            response = await self._client.get(path, headers=self._settings.request_headers)
        except httpx.HTTPError as e:
            logger.error(f"Error getting framework {encoded_name} from orchestrator: {e}")
            return LiveFetchResult(FetchOutcome.ERROR, message=str(e) or type(e).__name__)

        if response.status_code == 200:
            return LiveFetchResult(FetchOutcome.FOUND, framework=response.data, status=200)

        if response.status_code == 404:
            logger.warning(f"Framework {encoded_name} not found in orchestrator")
            return LiveFetchResult(FetchOutcome.NOT_FOUND, status=404)

        message = response.data.get("message") or f"HTTP {response.status_code}"
        logger.error(
            f"Unexpected orchestrator response for framework {encoded_name}: "
            f"HTTP {response.status_code}: {message}"
        )
        return LiveFetchResult(FetchOutcome.ERROR, status=response.status_code, message=message)
