"""Structural validation for the repository manifest."""

from __future__ import annotations

import re
import typing as typ

if typ.TYPE_CHECKING:
    from .models import Manifest, RepositoryEntry

REPO_SEGMENT_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")
WORKFLOW_ID_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_.-]*$")


class ConfigurationValidationError(ValueError):
    """Raised when the manifest cannot be parsed or fails validation."""

    def __init__(self, issues: list[str]) -> None:
        """Keep the individual issues alongside the joined message."""
        super().__init__("\n".join(issues))
        self.issues = issues


def validate_manifest(manifest: Manifest) -> Manifest:
    """Return ``manifest`` unchanged when every check passes."""
    issues: list[str] = []
    seen: dict[str, int] = {}

    for index, entry in enumerate(manifest.repositories):
        label = f"repositories[{index}]"
        _validate_entry(entry, label, issues)

        key = entry.name.lower()
        if key in seen:
            issues.append(
                f"{label}.name {entry.name!r} duplicates repositories[{seen[key]}]"
            )
        else:
            seen[key] = index

    if issues:
        raise ConfigurationValidationError(issues)
    return manifest


def _validate_entry(entry: RepositoryEntry, label: str, issues: list[str]) -> None:
    segments = entry.name.split("/")
    if len(segments) != 2 or not all(  # noqa: PLR2004 - owner and name
        REPO_SEGMENT_PATTERN.match(segment) for segment in segments
    ):
        issues.append(f"{label}.name must be 'owner/name', got {entry.name!r}")

    if not entry.branch.strip() or any(char.isspace() for char in entry.branch):
        issues.append(f"{label}.branch must be a non-empty ref name")

    workflows_seen: set[str] = set()
    for workflow in entry.workflows:
        if not WORKFLOW_ID_PATTERN.match(workflow) or ".." in workflow:
            issues.append(f"{label}.workflows has invalid identifier {workflow!r}")
        elif workflow in workflows_seen:
            issues.append(f"{label}.workflows lists {workflow!r} more than once")
        workflows_seen.add(workflow)

    if entry.runs_on is not None and not entry.runs_on.strip():
        issues.append(f"{label}.runsOn must not be empty when set")
