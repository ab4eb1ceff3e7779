"""
FastAPI dependency injection.

An endpoint declares `resolver: AttemptResolver = Depends(get_resolver)` and
receives the resolver built during startup. Tests swap it out through
app.dependency_overrides[get_resolver].
"""

from fastapi import Request

from resolver.reconciler import AttemptResolver


async def get_resolver(request: Request) -> AttemptResolver:
    """Returns the resolver stored on the app during startup."""
    return request.app.state.resolver
