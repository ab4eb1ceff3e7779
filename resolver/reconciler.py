"""
Attempt reconciler — the only entry point the API layer talks to.

Two sources, two kinds of truth:

    orchestrator (live)   → the CURRENT attempt, always fresh
    history index         → SUPERSEDED attempts, periodic snapshots

           job name
              │ encode_name()
              ▼
    ┌──────────────────┐  uid, maxRetryCount   ┌─────────────────┐
    │ LiveStateFetcher │──────────────────────>│ history queries │
    └──────────────────┘                       └─────────────────┘
              │                                         │
              └───────────── convert_to_attempt ────────┘

The history query needs the uid from the live object, so the two calls are
always sequential. A live fetch error aborts the call: no history is read.

Attempt index boundary (get_attempt), using the live object's maxRetryCount:
    index <  max  → superseded attempt, read it from history
    index == max  → the live attempt, history is never touched
    index >  max  → does not exist (yet)
"""

import logging
from typing import Optional

import httpx

from clients.history_index import HistoryIndexClient
from models.attempt import AttemptSummary, ResolverResult
from models.enums import FetchOutcome
from resolver.converter import convert_to_attempt
from resolver.encoder import encode_name
from resolver.errors import UpstreamError
from resolver.health import HistoryGate
from resolver.history import (
    build_all_attempts_query,
    build_single_attempt_query,
    extract_attempt_snapshots,
    extract_single_snapshot,
)
from resolver.live import LiveFetchResult, LiveStateFetcher

logger = logging.getLogger(__name__)

NOT_FOUND = 404
UNSUPPORTED = 501


class AttemptResolver:

    def __init__(
        self,
        fetcher: LiveStateFetcher,
        gate: HistoryGate,
        history_index: str = "framework",
        max_attempts: int = 100,
    ):
        self._fetcher = fetcher
        self._gate = gate
        self._history_index = history_index
        self._max_attempts = max_attempts

    @property
    def _history(self) -> Optional[HistoryIndexClient]:
        return self._gate.history_client

    async def health_check(self) -> bool:
        """Whether attempt history can be served right now."""
        return await self._gate.is_available()

    async def list_attempts(self, job_name: str) -> ResolverResult[list[AttemptSummary]]:
        """
        All attempts of a job, most recent first.

        The live attempt comes first with is_latest=True, followed by the
        latest snapshot of each superseded attempt in descending attempt order.
        """
        if not await self._gate.is_available():
            logger.info(f"Attempt history unsupported, cannot list attempts of {job_name}")
            return ResolverResult(status=UNSUPPORTED)

        live = await self._fetch_live(job_name)
        if live is None:
            return ResolverResult(status=NOT_FOUND)

        latest = convert_to_attempt(live.framework, is_latest=True)
        attempts = [latest]

        query = build_all_attempts_query(live.uid, self._max_attempts)
        result = await self._search(job_name, query)
        snapshots = extract_attempt_snapshots(result)

        # Empty history makes the whole list a 404, even though the live
        # attempt exists. Kept as is for compatibility with existing clients.
        if not snapshots:
            logger.warning(f"No attempt history recorded for {job_name} (uid={live.uid})")
            return ResolverResult(status=NOT_FOUND)

        for snapshot in snapshots:
            attempt = convert_to_attempt(snapshot, is_latest=False)
            if attempt.attempt_index == latest.attempt_index:
                continue  # superseded by the live object
            attempts.append(attempt)

        return ResolverResult(status=200, data=attempts)

    async def get_attempt(self, job_name: str, attempt_index: int) -> ResolverResult[AttemptSummary]:
        """One attempt of a job, from the live object or from history."""
        if not await self._gate.is_available():
            logger.info(f"Attempt history unsupported, cannot get attempt {attempt_index} of {job_name}")
            return ResolverResult(status=UNSUPPORTED)

        live = await self._fetch_live(job_name)
        if live is None:
            return ResolverResult(status=NOT_FOUND)

        max_retry_count = live.max_retry_count
        if max_retry_count is None:
            logger.error(f"Framework of {job_name} has no spec.retryPolicy.maxRetryCount")
            raise UpstreamError(
                200, "framework has no spec.retryPolicy.maxRetryCount", source="orchestrator"
            )

        if attempt_index == max_retry_count:
            return ResolverResult(status=200, data=convert_to_attempt(live.framework, is_latest=True))

        if attempt_index > max_retry_count:
            logger.warning(
                f"Attempt {attempt_index} of {job_name} does not exist "
                f"(maxRetryCount={max_retry_count})"
            )
            return ResolverResult(status=NOT_FOUND)

        query = build_single_attempt_query(live.uid, attempt_index)
        result = await self._search(job_name, query)
        snapshot = extract_single_snapshot(result)
        if snapshot is None:
            logger.warning(f"No history for attempt {attempt_index} of {job_name} (uid={live.uid})")
            return ResolverResult(status=NOT_FOUND)

        return ResolverResult(status=200, data=convert_to_attempt(snapshot, is_latest=False))

    async def _fetch_live(self, job_name: str) -> Optional[LiveFetchResult]:
        """
        Live framework for a job name, or None when it is unknown.

        Raises:
            UpstreamError: the orchestrator failed in any other way
        """
        encoded = encode_name(job_name)
        live = await self._fetcher.fetch(encoded)

        if live.outcome == FetchOutcome.NOT_FOUND:
            return None
        if live.outcome == FetchOutcome.ERROR:
            raise UpstreamError(live.status, live.message or "unknown error", source="orchestrator")

        if live.uid is None:
            logger.warning(f"Framework {encoded} has no uid, treating as not found")
            return None
        return live

    async def _search(self, job_name: str, query: dict) -> dict:
        """
        Run a history query for a job.

        Raises:
            UpstreamError: the index failed or could not be reached (source="history")
        """
        try:
            return await self._history.search(self._history_index, query)
        except UpstreamError as e:
            logger.error(f"History search for {job_name} failed: {e}")
            raise
        except httpx.HTTPError as e:
            logger.error(f"History search for {job_name} failed: {e}")
            raise UpstreamError(None, str(e) or type(e).__name__, source="history") from e
