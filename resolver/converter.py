"""
Framework → AttemptSummary converter.

Pure function, no I/O. Works the same on a live framework object and on a
history snapshot (a snapshot IS a past copy of the framework object).

Fields read from the framework:

    metadata.name / metadata.uid / metadata.creationTimestamp
    metadata.annotations.userName + jobName   (platform job identity)
    spec.executionType                        ("Stop" → STOPPED)
    status.state / status.retryPolicyStatus.totalRetriedCount
    status.attemptStatus.{id, startTime, completionTime, completionStatus}
    status.attemptStatus.taskRoleStatuses[].taskStatuses[]
"""

from typing import Optional

from models.attempt import AttemptSummary, TaskRoleSummary, TaskSummary
from models.enums import AttemptState

_WAITING_SUFFIXES = ("CreationPending", "CreationRequested", "Preparing")


def derive_state(
    state: Optional[str],
    completion_status: Optional[dict],
    execution_type: Optional[str] = None,
) -> AttemptState:
    """
    Collapse the controller's fine-grained states into an AttemptState.

    Works for both framework states ("AttemptRunning") and task states
    ("TaskAttemptRunning") since only the suffix matters.
    """
    state = state or ""
    if completion_status:
        if completion_status.get("code") == 0:
            return AttemptState.SUCCEEDED
        if execution_type == "Stop":
            return AttemptState.STOPPED
        return AttemptState.FAILED
    if execution_type == "Stop" and state.endswith("Completed"):
        return AttemptState.STOPPED
    if state.endswith("AttemptRunning"):
        return AttemptState.RUNNING
    if state.endswith(_WAITING_SUFFIXES):
        return AttemptState.WAITING
    return AttemptState.UNKNOWN


def job_name_of(framework: dict) -> str:
    metadata = framework.get("metadata") or {}
    annotations = metadata.get("annotations") or {}
    user = annotations.get("userName")
    job = annotations.get("jobName")
    if user and job:
        return f"{user}~{job}"
    return metadata.get("name", "")


def _convert_task(task_status: dict) -> TaskSummary:
    attempt = task_status.get("attemptStatus") or {}
    completion = attempt.get("completionStatus")
    return TaskSummary(
        task_index=task_status.get("index", 0),
        state=derive_state(task_status.get("state"), completion).value,
        retries=(task_status.get("retryPolicyStatus") or {}).get("totalRetriedCount", 0),
        pod_name=attempt.get("podName"),
        pod_ip=attempt.get("podIP"),
        node_name=attempt.get("podNodeName"),
        started_time=attempt.get("startTime"),
        completed_time=attempt.get("completionTime"),
        exit_code=(completion or {}).get("code"),
    )


def _convert_task_roles(framework: dict) -> list[TaskRoleSummary]:
    spec_roles = {
        role.get("name"): role.get("taskNumber", 0)
        for role in (framework.get("spec") or {}).get("taskRoles") or []
    }
    attempt = (framework.get("status") or {}).get("attemptStatus") or {}

    roles = []
    for role_status in attempt.get("taskRoleStatuses") or []:
        name = role_status.get("name", "")
        tasks = [_convert_task(t) for t in role_status.get("taskStatuses") or []]
        roles.append(TaskRoleSummary(
            name=name,
            task_count=spec_roles.get(name, len(tasks)),
            tasks=sorted(tasks, key=lambda t: t.task_index),
        ))
    return roles


def convert_to_attempt(framework: dict, is_latest: bool = False) -> AttemptSummary:
    metadata = framework.get("metadata") or {}
    spec = framework.get("spec") or {}
    status = framework.get("status") or {}
    attempt = status.get("attemptStatus") or {}
    completion = attempt.get("completionStatus")

    exit_type = None
    if completion:
        exit_type = (completion.get("type") or {}).get("name")

    return AttemptSummary(
        job_name=job_name_of(framework),
        framework_name=metadata.get("name", ""),
        uid=metadata.get("uid"),
        attempt_index=attempt.get("id", 0),
        state=derive_state(status.get("state"), completion, spec.get("executionType")),
        framework_state=status.get("state"),
        retry_count=(status.get("retryPolicyStatus") or {}).get("totalRetriedCount", 0),
        created_time=metadata.get("creationTimestamp"),
        started_time=attempt.get("startTime"),
        completed_time=attempt.get("completionTime"),
        exit_code=(completion or {}).get("code"),
        exit_phrase=(completion or {}).get("phrase"),
        exit_type=exit_type,
        task_roles=_convert_task_roles(framework),
        is_latest=is_latest,
    )
