"""
Resolver factory — wires the resolver from settings.

The history client is built here, once, and passed down explicitly. It is
None when ELASTICSEARCH_URI is unset; the health gate handles that case.
"""

from dataclasses import dataclass
from typing import Optional

from clients.history_index import HistoryIndexClient, create_history_client
from clients.orchestrator import OrchestratorClient
from config.settings import Settings
from resolver.health import HistoryGate
from resolver.live import LiveStateFetcher
from resolver.reconciler import AttemptResolver


@dataclass
class ResolverBundle:
    """The resolver plus the clients it owns (closed on shutdown)."""
    resolver: AttemptResolver
    orchestrator: OrchestratorClient
    history: Optional[HistoryIndexClient]

    async def close(self) -> None:
        await self.orchestrator.close()
        if self.history is not None:
            await self.history.close()


def build_resolver(
    settings: Settings,
    orchestrator: Optional[OrchestratorClient] = None,
    history: Optional[HistoryIndexClient] = None,
) -> ResolverBundle:
    """
    Build an AttemptResolver for the given settings.

    Clients can be passed in (tests); otherwise they are created from settings.
    """
    if orchestrator is None:
        orchestrator = OrchestratorClient(
            settings.ORCHESTRATOR_API_URL,
            timeout=settings.REQUEST_TIMEOUT,
            verify=settings.orchestrator_verify,
        )
    if history is None:
        history = create_history_client(settings.ELASTICSEARCH_URI, timeout=settings.REQUEST_TIMEOUT)

    resolver = AttemptResolver(
        fetcher=LiveStateFetcher(orchestrator, settings),
        gate=HistoryGate(settings.LAUNCHER_TYPE, history),
        history_index=settings.HISTORY_INDEX,
        max_attempts=settings.HISTORY_MAX_ATTEMPTS,
    )
    return ResolverBundle(resolver=resolver, orchestrator=orchestrator, history=history)
