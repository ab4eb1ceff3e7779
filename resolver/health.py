"""
Health gate — is the history path usable right now?

Three conditions, checked in order:
1. The launcher is not the legacy "yarn" one (it never wrote snapshots)
2. A history index client exists (ELASTICSEARCH_URI was configured)
3. The index answers its health probe with 200

The gate is evaluated on every call. The index can go down (or come back)
while the service is running, so a result from a previous call means nothing.

is_available() never raises: a failed probe is logged and reported as False.
"""

import logging
from typing import Optional

from clients.history_index import HistoryIndexClient
from models.enums import LauncherType

logger = logging.getLogger(__name__)


class HistoryGate:

    def __init__(self, launcher_type: str, history_client: Optional[HistoryIndexClient]):
        self._launcher_type = launcher_type
        self._history_client = history_client

    @property
    def history_client(self) -> Optional[HistoryIndexClient]:
        return self._history_client

    async def is_available(self) -> bool:
        if self._launcher_type == LauncherType.YARN.value:
            return False
        if self._history_client is None:
            return False

        try:
            status_code = await self._history_client.health()
        except Exception as e:
            logger.warning(f"History index health probe failed: {e}")
            return False

        if status_code != 200:
            logger.warning(f"History index is not healthy: HTTP {status_code}")
            return False
        return True
