"""Desired-state inputs and reconciliation outcomes."""

from __future__ import annotations

import dataclasses
import enum
import typing as typ

from fleetsync.common.slug import repo_slug

DEFAULT_BRANCH = "main"


@dataclasses.dataclass(frozen=True, slots=True)
class DesiredRepository:
    """Target repository and the artefacts it should carry.

    Built from the manifest once per run and never mutated afterwards.
    """

    owner: str
    name: str
    branch: str = DEFAULT_BRANCH
    workflows: tuple[str, ...] = ()
    runs_on: str | None = None

    @property
    def slug(self) -> str:
        """Return the ``owner/name`` identifier."""
        return repo_slug(self.owner, self.name)


@dataclasses.dataclass(frozen=True, slots=True)
class DesiredArtifact:
    """File content that should exist at ``path`` in a target repository."""

    path: str
    content: bytes


class OutcomeKind(enum.StrEnum):
    """Result tag for one reconciled file, secret or variable."""

    UNCHANGED = "unchanged"
    CREATED = "created"
    UPDATED = "updated"
    FAILED = "failed"


@dataclasses.dataclass(frozen=True, slots=True)
class ReconciliationOutcome:
    """Outcome of reconciling a single subject in one repository.

    ``subject`` is the file path for files and ``secret:<NAME>`` or
    ``variable:<NAME>`` for key-value settings. ``reason`` is only set for
    failures.
    """

    repo_slug: str
    subject: str
    kind: OutcomeKind
    reason: str | None = None

    @classmethod
    def failed(
        cls, repo_slug: str, subject: str, reason: str
    ) -> ReconciliationOutcome:
        """Build a ``failed`` outcome carrying ``reason``."""
        return cls(repo_slug, subject, OutcomeKind.FAILED, reason)

    def describe(self) -> str:
        """Return the one-line human-readable status."""
        if self.kind is OutcomeKind.FAILED:
            return f"{self.subject}: failed ({self.reason})"
        return f"{self.subject}: {self.kind}"


def secret_subject(name: str) -> str:
    """Return the outcome subject used for a repository secret."""
    return f"secret:{name}"


def variable_subject(name: str) -> str:
    """Return the outcome subject used for a repository variable."""
    return f"variable:{name}"


@dataclasses.dataclass(slots=True)
class RepositorySyncReport:
    """Ordered outcomes for one repository in a run."""

    repo_slug: str
    outcomes: list[ReconciliationOutcome] = dataclasses.field(default_factory=list)

    def add(self, outcome: ReconciliationOutcome) -> ReconciliationOutcome:
        """Append ``outcome`` and return it for chaining into log calls."""
        self.outcomes.append(outcome)
        return outcome

    def count(self, kind: OutcomeKind) -> int:
        """Return how many outcomes carry ``kind``."""
        return sum(1 for outcome in self.outcomes if outcome.kind is kind)

    @property
    def has_failures(self) -> bool:
        """Return True when any outcome failed."""
        return any(outcome.kind is OutcomeKind.FAILED for outcome in self.outcomes)

    def counts(self) -> dict[OutcomeKind, int]:
        """Return per-kind totals in declaration order of ``OutcomeKind``."""
        return {kind: self.count(kind) for kind in OutcomeKind}


@dataclasses.dataclass(slots=True)
class BatchSyncReport:
    """Aggregated outcomes for every repository processed in a run."""

    repositories: list[RepositorySyncReport] = dataclasses.field(
        default_factory=list
    )

    @property
    def has_failures(self) -> bool:
        """Return True when any repository recorded a failure."""
        return any(report.has_failures for report in self.repositories)

    def outcomes(self) -> typ.Iterator[ReconciliationOutcome]:
        """Yield every outcome in processing order."""
        for report in self.repositories:
            yield from report.outcomes

    def totals(self) -> dict[OutcomeKind, int]:
        """Return per-kind totals across all repositories."""
        totals = dict.fromkeys(OutcomeKind, 0)
        for outcome in self.outcomes():
            totals[outcome.kind] += 1
        return totals

    def render(self) -> str:
        """Render the per-repository report printed at the end of a run."""
        lines: list[str] = []
        for report in self.repositories:
            lines.append(report.repo_slug)
            if not report.outcomes:
                lines.append("  (nothing to reconcile)")
            lines.extend(f"  {outcome.describe()}" for outcome in report.outcomes)
        totals = self.totals()
        lines.append(
            ", ".join(f"{totals[kind]} {kind}" for kind in OutcomeKind)
        )
        return "\n".join(lines)
