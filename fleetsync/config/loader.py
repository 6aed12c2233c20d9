"""YAML loading for the repository manifest."""

from __future__ import annotations

from pathlib import Path

import msgspec
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from fleetsync.common.slug import parse_repo_slug
from fleetsync.errors import ConfigurationMissingError
from fleetsync.sync.models import DesiredRepository

from .models import Manifest, RepositoryEntry
from .validation import ConfigurationValidationError, validate_manifest

YAML_VERSION = (1, 2)


def load_manifest(path: Path | str) -> Manifest:
    """Parse and validate a manifest file.

    Raises
    ------
    ConfigurationMissingError
        If ``path`` does not exist.
    ConfigurationValidationError
        If the file cannot be read, is not valid YAML, or violates the schema.

    """
    path_obj = Path(path)
    if not path_obj.is_file():
        raise ConfigurationMissingError(path_obj)

    try:
        loaded = _yaml().load(path_obj.read_text(encoding="utf-8"))
    except (OSError, YAMLError) as exc:
        raise ConfigurationValidationError([f"failed to parse YAML: {exc}"]) from exc

    # An empty file means "no repositories", same as an empty list.
    if loaded is None:
        return Manifest()

    try:
        manifest = msgspec.convert(_drop_nulls(loaded), type=Manifest)
    except msgspec.ValidationError as exc:
        issue = f"schema validation failed: {exc}"
        raise ConfigurationValidationError([issue]) from exc

    return validate_manifest(manifest)


def to_desired_repository(entry: RepositoryEntry) -> DesiredRepository:
    """Convert a validated manifest entry into reconciliation input."""
    owner, name = parse_repo_slug(entry.name)
    return DesiredRepository(
        owner=owner,
        name=name,
        branch=entry.branch,
        workflows=tuple(entry.workflows),
        runs_on=entry.runs_on,
    )


def load_desired_repositories(path: Path | str) -> list[DesiredRepository]:
    """Load the manifest at ``path`` as desired repositories in declared order."""
    manifest = load_manifest(path)
    return [to_desired_repository(entry) for entry in manifest.repositories]


def _drop_nulls(node: object) -> object:
    # A key written without a value means "use the default".
    if isinstance(node, dict):
        return {
            key: _drop_nulls(value)
            for key, value in node.items()
            if value is not None
        }
    if isinstance(node, list):
        return [_drop_nulls(item) for item in node]
    return node


def _yaml() -> YAML:
    yaml = YAML(typ="safe")
    yaml.version = YAML_VERSION
    yaml.allow_duplicate_keys = False
    return yaml
