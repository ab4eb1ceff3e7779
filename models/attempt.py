"""
Attempt models — what the resolver hands back to its callers.

These are NOT raw orchestrator objects. A framework object (live or from a
history snapshot) is run through resolver/converter.py and comes out as an
AttemptSummary. Both sources produce the same shape, the only difference
being the is_latest flag.
"""

from datetime import datetime
from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, Field

from models.enums import AttemptState

T = TypeVar("T")


class TaskSummary(BaseModel):
    """One task instance inside a task role."""

    task_index: int
    state: str
    retries: int = 0
    pod_name: Optional[str] = None
    pod_ip: Optional[str] = None
    node_name: Optional[str] = None
    started_time: Optional[datetime] = None
    completed_time: Optional[datetime] = None
    exit_code: Optional[int] = None


class TaskRoleSummary(BaseModel):
    name: str
    task_count: int
    tasks: list[TaskSummary] = Field(default_factory=list)


class AttemptSummary(BaseModel):
    """Normalized view of one execution attempt of a job."""

    job_name: str
    framework_name: str
    uid: Optional[str] = None
    attempt_index: int
    state: AttemptState
    framework_state: Optional[str] = None
    retry_count: int = 0
    created_time: Optional[datetime] = None
    started_time: Optional[datetime] = None
    completed_time: Optional[datetime] = None
    exit_code: Optional[int] = None
    exit_phrase: Optional[str] = None
    exit_type: Optional[str] = None
    task_roles: list[TaskRoleSummary] = Field(default_factory=list)
    is_latest: bool = False


class ResolverResult(BaseModel, Generic[T]):
    """
    Outcome of a resolver call: an HTTP-like status plus the payload.

    status is one of 200 / 404 / 501; data is None unless status == 200.
    Upstream failures are never expressed here, they are raised as UpstreamError.
    """

    status: int
    data: Optional[T] = None

    @property
    def ok(self) -> bool:
        return self.status == 200
