"""Repository manifest models, loading, validation and schema export.

Load the manifest as reconciliation input::

    >>> from fleetsync.config import load_desired_repositories
    >>> repositories = load_desired_repositories("config/repositories.yaml")

"""

from __future__ import annotations

from .loader import (
    load_desired_repositories,
    load_manifest,
    to_desired_repository,
)
from .models import Manifest, RepositoryEntry
from .schema import build_manifest_schema, write_manifest_schema
from .validation import ConfigurationValidationError, validate_manifest

__all__ = [
    "ConfigurationValidationError",
    "Manifest",
    "RepositoryEntry",
    "build_manifest_schema",
    "load_desired_repositories",
    "load_manifest",
    "to_desired_repository",
    "validate_manifest",
    "write_manifest_schema",
]
