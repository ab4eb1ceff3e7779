"""
Pydantic schemas for the job-attempts endpoints.

AttemptSummary (models/attempt.py) is returned as is for list/get; only the
healthz response needs its own schema.
"""

from pydantic import BaseModel


class AttemptHealth(BaseModel):
    """Response body for GET /api/v2/jobs/{job_name}/job-attempts/healthz."""

    is_enabled: bool
