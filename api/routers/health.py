"""
Health check endpoint.

The service itself is up if it can answer. Whether attempt history is
available is reported alongside, since it depends on the history index.
"""

from fastapi import APIRouter, Depends

from api.dependencies import get_resolver
from resolver.reconciler import AttemptResolver

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check(
    resolver: AttemptResolver = Depends(get_resolver),
) -> dict:
    """Service liveness plus attempt-history availability."""
    history_ok = await resolver.health_check()
    return {
        "status": "healthy",
        "attempt_history": "ok" if history_ok else "unavailable",
    }
