"""Unit tests for loading and validating the repository manifest."""

from __future__ import annotations

import json
import typing as typ

import pytest

from fleetsync.config import (
    ConfigurationValidationError,
    build_manifest_schema,
    load_desired_repositories,
    load_manifest,
    write_manifest_schema,
)
from fleetsync.config.schema import SCHEMA_ID
from fleetsync.errors import ConfigurationMissingError
from fleetsync.sync.models import DesiredRepository

if typ.TYPE_CHECKING:
    from pathlib import Path


def _write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "repositories.yaml"
    path.write_text(text, encoding="utf-8")
    return path


def test_loads_repositories_in_declared_order(tmp_path: Path) -> None:
    """Entries become desired repositories with defaults applied."""
    path = _write(
        tmp_path,
        """
repositories:
  - name: acme/widgets
    workflows: [ci, review]
    runsOn: ubuntu-latest
  - name: acme/gadgets
    branch: develop
""",
    )

    repos = load_desired_repositories(path)

    assert repos == [
        DesiredRepository(
            owner="acme",
            name="widgets",
            branch="main",
            workflows=("ci", "review"),
            runs_on="ubuntu-latest",
        ),
        DesiredRepository(owner="acme", name="gadgets", branch="develop"),
    ]


def test_missing_file_raises_configuration_missing(tmp_path: Path) -> None:
    """A manifest path that does not exist is fatal."""
    with pytest.raises(ConfigurationMissingError, match="not found"):
        load_manifest(tmp_path / "absent.yaml")


@pytest.mark.parametrize("text", ["", "repositories:\n", "repositories: []\n"])
def test_empty_manifest_has_no_repositories(tmp_path: Path, text: str) -> None:
    """An empty document, a null list and an empty list are equivalent."""
    assert load_manifest(_write(tmp_path, text)).repositories == []


def test_null_values_fall_back_to_defaults(tmp_path: Path) -> None:
    """Keys written without a value keep their defaults."""
    path = _write(
        tmp_path,
        """
repositories:
  - name: acme/widgets
    branch:
    workflows:
    runsOn:
""",
    )

    assert load_desired_repositories(path) == [
        DesiredRepository(owner="acme", name="widgets", branch="main")
    ]


def test_invalid_yaml_is_reported(tmp_path: Path) -> None:
    """Unparseable YAML raises a validation error."""
    path = _write(tmp_path, "repositories: [\n")

    with pytest.raises(ConfigurationValidationError, match="failed to parse YAML"):
        load_manifest(path)


def test_duplicate_yaml_keys_are_rejected(tmp_path: Path) -> None:
    """Repeated mapping keys are parse errors rather than silent overrides."""
    path = _write(
        tmp_path,
        """
repositories:
  - name: acme/widgets
    name: acme/gadgets
""",
    )

    with pytest.raises(ConfigurationValidationError, match="failed to parse YAML"):
        load_manifest(path)


@pytest.mark.parametrize(
    "text",
    [
        "repositories: acme/widgets\n",
        "repositories:\n  - branch: main\n",
        "repositories:\n  - name: acme/widgets\n    workflows: ci\n",
    ],
)
def test_schema_violations_are_reported(tmp_path: Path, text: str) -> None:
    """Wrong types and missing names fail schema validation."""
    with pytest.raises(ConfigurationValidationError, match="schema validation"):
        load_manifest(_write(tmp_path, text))


def test_semantic_issues_are_collected(tmp_path: Path) -> None:
    """Every invalid entry is reported, not only the first."""
    path = _write(
        tmp_path,
        """
repositories:
  - name: widgets
  - name: acme/gadgets
    branch: "feature x"
    workflows: [ci, ci, ../escape]
  - name: acme/tools
    runsOn: "  "
  - name: ACME/Gadgets
""",
    )

    with pytest.raises(ConfigurationValidationError) as excinfo:
        load_manifest(path)

    assert excinfo.value.issues == [
        "repositories[0].name must be 'owner/name', got 'widgets'",
        "repositories[1].branch must be a non-empty ref name",
        "repositories[1].workflows lists 'ci' more than once",
        "repositories[1].workflows has invalid identifier '../escape'",
        "repositories[2].runsOn must not be empty when set",
        "repositories[3].name 'ACME/Gadgets' duplicates repositories[1]",
    ]


def test_schema_declares_wire_names() -> None:
    """The generated schema uses the YAML spelling ``runsOn``."""
    schema = build_manifest_schema()

    assert schema["$id"] == SCHEMA_ID
    entry = schema["$defs"]["RepositoryEntry"]
    assert "runsOn" in entry["properties"]
    assert entry["required"] == ["name"]


def test_write_manifest_schema(tmp_path: Path) -> None:
    """The schema is written as JSON, creating parent directories."""
    out = tmp_path / "nested" / "schema.json"

    write_manifest_schema(out)

    assert json.loads(out.read_text(encoding="utf-8"))["$id"] == SCHEMA_ID
