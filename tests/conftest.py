"""Shared fixtures for unit and feature tests."""

from __future__ import annotations

import typing as typ

import pytest

from fleetsync.sync.models import DesiredRepository
from tests.helpers.fake_store import FakeArtifactStore

if typ.TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture
def store() -> FakeArtifactStore:
    """Return an empty in-memory artifact store."""
    return FakeArtifactStore()


@pytest.fixture
def widgets() -> DesiredRepository:
    """Return the ``acme/widgets`` repository with a single ``ci`` workflow."""
    return DesiredRepository(owner="acme", name="widgets", workflows=("ci",))


@pytest.fixture
def template_root(tmp_path: Path) -> Path:
    """Create a template directory with two workflows and two auxiliary files."""
    root = tmp_path / "templates"
    commands = root / ".github" / "commands"
    (commands / "nested").mkdir(parents=True)
    (root / "ci.yml").write_bytes(b"name: CI\n")
    (root / "review.yml").write_bytes(b"name: Review\n")
    (commands / "review.md").write_bytes(b"review prompt\n")
    (commands / "nested" / "fix.md").write_bytes(b"fix prompt\n")
    return root
