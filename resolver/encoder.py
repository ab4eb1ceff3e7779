"""
Name encoder — maps a job's display name to its framework name.

Framework names must satisfy a restrictive grammar (lower-case alphanumerics,
bounded length). Two naming conventions exist:

    NOT_MANAGED:  "unknownmyframework", "My_Framework"
                  → strip one leading "unknown", lower-case, keep [a-z0-9]
    MANAGED:      "alice~train-resnet"
                  → md5 hex of the full name (always 32 chars)
"""

import hashlib
import re

from models.enums import NameScheme

UNASSIGNED_OWNER_MARKER = "unknown"
NAME_SEPARATOR = "~"

_INVALID_CHARS = re.compile(r"[^a-z0-9]")


def classify_name(name: str) -> NameScheme:
    if name.startswith(UNASSIGNED_OWNER_MARKER) or NAME_SEPARATOR not in name:
        return NameScheme.NOT_MANAGED
    return NameScheme.MANAGED


def normalize_name(name: str) -> str:
    """Lower-case and drop everything outside [a-z0-9]."""
    return _INVALID_CHARS.sub("", name.lower())


def hash_name(name: str) -> str:
    return hashlib.md5(name.encode("utf-8")).hexdigest()


def encode_name(name: str) -> str:
    """Derive the framework name used to address the orchestrator API."""
    scheme = classify_name(name)
    if scheme == NameScheme.NOT_MANAGED:
        if name.startswith(UNASSIGNED_OWNER_MARKER):
            name = name[len(UNASSIGNED_OWNER_MARKER):]
        return normalize_name(name)
    return hash_name(name)
