"""GitHub REST access for workflow files, Actions secrets and variables."""

from __future__ import annotations

from .client import ArtifactStore, GitHubRestClient, GitHubRestConfig
from .errors import (
    GitHubAPIError,
    GitHubConflictError,
    GitHubError,
    GitHubResponseShapeError,
)
from .models import (
    FileFound,
    FileLookup,
    FileMissing,
    PublicKey,
    VariableFound,
    VariableLookup,
    VariableMissing,
)

__all__ = [
    "ArtifactStore",
    "FileFound",
    "FileLookup",
    "FileMissing",
    "GitHubAPIError",
    "GitHubConflictError",
    "GitHubError",
    "GitHubResponseShapeError",
    "GitHubRestClient",
    "GitHubRestConfig",
    "PublicKey",
    "VariableFound",
    "VariableLookup",
    "VariableMissing",
]
