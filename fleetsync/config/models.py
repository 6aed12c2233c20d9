"""Typed repository manifest structures."""

from __future__ import annotations

import msgspec


class RepositoryEntry(msgspec.Struct, kw_only=True):
    """One managed repository in the manifest.

    Attributes
    ----------
    name : str
        GitHub ``owner/name`` slug.
    branch : str
        Branch that receives workflow files. Defaults to ``main``.
    workflows : list[str]
        Workflow-template identifiers to deploy, in order.
    runs_on : str, optional
        Runtime-target label published as the ``RUNS_ON`` variable. Spelt
        ``runsOn`` in YAML.

    """

    name: str
    branch: str = "main"
    workflows: list[str] = msgspec.field(default_factory=list)
    runs_on: str | None = msgspec.field(default=None, name="runsOn")


class Manifest(msgspec.Struct, kw_only=True):
    """Root manifest document listing managed repositories."""

    repositories: list[RepositoryEntry] = msgspec.field(default_factory=list)
