"""
Error classes for the attempt resolver.

Only one failure is an exception: UpstreamError. "Not found" and
"unsupported" are ordinary outcomes and travel as ResolverResult statuses
(404 / 501), so callers never need try/except for them.
"""

from typing import Optional


class ResolverError(Exception):
    """Base exception for the attempt resolver."""
    pass


class UpstreamError(ResolverError):
    """
    The orchestrator or the history index answered with an unexpected status,
    or could not be reached at all (status is None in that case).
    """

    def __init__(self, status: Optional[int], message: str, source: str = "orchestrator"):
        self.status = status
        self.message = message
        self.source = source
        super().__init__(f"{source} error (status={status}): {message}")
