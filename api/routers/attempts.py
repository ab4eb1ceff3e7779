"""
Job attempt endpoints.

GET /api/v2/jobs/{job_name}/job-attempts/healthz          → is attempt history enabled?
GET /api/v2/jobs/{job_name}/job-attempts                  → all attempts, newest first
GET /api/v2/jobs/{job_name}/job-attempts/{attempt_index}  → one attempt

job_name is the display name, e.g. "alice~train-resnet". The routers only
translate ResolverResult statuses into HTTP:

    200 → body
    404 → job or attempt not found
    501 → attempt history not supported in this deployment

UpstreamError is not caught here; the app-level handler in api/main.py maps it.
"""

from fastapi import APIRouter, Depends, HTTPException, Path
from fastapi.responses import JSONResponse

from api.dependencies import get_resolver
from api.schemas.attempt import AttemptHealth
from models.attempt import AttemptSummary, ResolverResult
from resolver.reconciler import AttemptResolver

router = APIRouter(prefix="/api/v2/jobs/{job_name}/job-attempts", tags=["job-attempts"])

_DETAILS = {
    404: "Job or job attempt not found",
    501: "Job attempt history is not supported in this deployment",
}


def _unwrap(result: ResolverResult, job_name: str):
    if result.ok:
        return result.data
    detail = _DETAILS.get(result.status, "Unexpected resolver status")
    raise HTTPException(status_code=result.status, detail=f"{detail}: {job_name}")


@router.get("/healthz", response_model=AttemptHealth)
async def attempts_health(
    job_name: str,
    resolver: AttemptResolver = Depends(get_resolver),
) -> JSONResponse:
    """200 when attempt history can be served, 501 otherwise."""
    enabled = await resolver.health_check()
    return JSONResponse(
        status_code=200 if enabled else 501,
        content=AttemptHealth(is_enabled=enabled).model_dump(),
    )


@router.get("", response_model=list[AttemptSummary])
async def list_attempts(
    job_name: str,
    resolver: AttemptResolver = Depends(get_resolver),
) -> list[AttemptSummary]:
    """
    List every attempt of a job.

    The first entry is the live attempt (is_latest=true), the rest come from
    history in descending attempt order.
    """
    result = await resolver.list_attempts(job_name)
    return _unwrap(result, job_name)


@router.get("/{attempt_index}", response_model=AttemptSummary)
async def get_attempt(
    job_name: str,
    attempt_index: int = Path(..., ge=0, description="Attempt index, starting at 0"),
    resolver: AttemptResolver = Depends(get_resolver),
) -> AttemptSummary:
    """Get one attempt of a job by index."""
    result = await resolver.get_attempt(job_name, attempt_index)
    return _unwrap(result, job_name)
