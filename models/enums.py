"""
Shared enumerations used across the entire project.

Using Python enums (inheriting from str) means:
- They serialize to JSON automatically ("MANAGED", not "NameScheme.MANAGED")
- They compare equal to the plain strings found in config and upstream payloads
- Typos become immediate errors instead of silent bugs
"""

import enum


class LauncherType(str, enum.Enum):
    K8S = "k8s"                # framework controller on Kubernetes, supports attempt history
    YARN = "yarn"              # legacy launcher, no attempt history


class NameScheme(str, enum.Enum):
    NOT_MANAGED = "NOT_MANAGED"  # framework created directly against the orchestrator
    MANAGED = "MANAGED"          # platform job, named "<user>~<job>"


class FetchOutcome(str, enum.Enum):
    FOUND = "FOUND"            # orchestrator returned the framework
    NOT_FOUND = "NOT_FOUND"    # orchestrator does not know the framework
    ERROR = "ERROR"            # any other status, or no response at all


class AttemptState(str, enum.Enum):
    WAITING = "WAITING"
    RUNNING = "RUNNING"
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"
    STOPPED = "STOPPED"
    UNKNOWN = "UNKNOWN"
