"""Batch drivers that walk the manifest one repository at a time.

Repositories are processed sequentially in declaration order and, within a
repository, one subject at a time. Each subject is its own failure boundary:
a failed variable does not stop the workflow files of the same repository,
and a failed repository does not stop the next one.
"""

from __future__ import annotations

import typing as typ

from fleetsync.sealing import seal_secret

from .files import FileReconciler
from .keyvalue import SecretReconciler, VariableReconciler
from .models import BatchSyncReport, ReconciliationOutcome, RepositorySyncReport
from .observability import SyncEventLogger, failure_reason

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from fleetsync.github.client import ArtifactStore
    from fleetsync.sealing import SecretSealer
    from fleetsync.templates import TemplateLibrary

    from .models import DesiredRepository

AUXILIARY_SUBJECT = ".github/commands"


class _BatchDriver:
    run_kind: typ.ClassVar[str]

    def __init__(self, *, events: SyncEventLogger | None = None) -> None:
        self._events = events or SyncEventLogger()

    def _record(
        self, report: RepositorySyncReport, outcome: ReconciliationOutcome
    ) -> None:
        report.add(outcome)
        self._events.log_outcome(outcome)

    async def _run(
        self,
        repositories: cabc.Sequence[DesiredRepository],
        sync_one: cabc.Callable[
            [DesiredRepository, RepositorySyncReport], cabc.Awaitable[None]
        ],
    ) -> BatchSyncReport:
        batch = BatchSyncReport()
        self._events.log_run_started(
            run_kind=self.run_kind, repository_count=len(repositories)
        )
        for repo in repositories:
            report = RepositorySyncReport(repo_slug=repo.slug)
            self._events.log_repository_started(
                repo_slug=repo.slug, branch=repo.branch
            )
            await sync_one(repo, report)
            self._events.log_repository_completed(report)
            batch.repositories.append(report)
        self._events.log_run_completed(run_kind=self.run_kind, report=batch)
        return batch


class WorkflowSyncDriver(_BatchDriver):
    """Deploy workflow templates, auxiliary files and the runtime-target variable."""

    run_kind = "workflows"

    def __init__(
        self,
        store: ArtifactStore,
        templates: TemplateLibrary,
        *,
        runs_on_variable: str = "RUNS_ON",
        events: SyncEventLogger | None = None,
    ) -> None:
        """Bind the driver to a store and a template library."""
        super().__init__(events=events)
        self._templates = templates
        self._runs_on_variable = runs_on_variable
        self._files = FileReconciler(store)
        self._variables = VariableReconciler(store)

    async def run(
        self, repositories: cabc.Sequence[DesiredRepository]
    ) -> BatchSyncReport:
        """Reconcile every repository and return the aggregated report."""
        return await self._run(repositories, self._sync_repository)

    async def sync_repository(self, repo: DesiredRepository) -> RepositorySyncReport:
        """Reconcile a single repository outside a batch run."""
        report = RepositorySyncReport(repo_slug=repo.slug)
        await self._sync_repository(repo, report)
        return report

    async def _sync_repository(
        self, repo: DesiredRepository, report: RepositorySyncReport
    ) -> None:
        if repo.runs_on is not None:
            self._record(
                report,
                await self._variables.reconcile_variable(
                    repo, self._runs_on_variable, repo.runs_on
                ),
            )

        if not repo.workflows:
            self._events.log_no_workflows(repo_slug=repo.slug)
            return

        for workflow in repo.workflows:
            await self._sync_workflow(repo, workflow, report)

    async def _sync_workflow(
        self, repo: DesiredRepository, workflow: str, report: RepositorySyncReport
    ) -> None:
        try:
            artifact = self._templates.workflow_artifact(workflow)
        except OSError as exc:
            destination = self._templates.destination(workflow)
            self._record(
                report,
                ReconciliationOutcome.failed(
                    repo.slug, destination, failure_reason(exc)
                ),
            )
        else:
            self._record(report, await self._files.reconcile_artifact(repo, artifact))

        try:
            auxiliary = list(self._templates.auxiliary_files())
        except OSError as exc:
            self._record(
                report,
                ReconciliationOutcome.failed(
                    repo.slug, AUXILIARY_SUBJECT, failure_reason(exc)
                ),
            )
            return

        for entry in auxiliary:
            try:
                artifact = entry.load()
            except OSError as exc:
                self._record(
                    report,
                    ReconciliationOutcome.failed(
                        repo.slug, entry.destination, failure_reason(exc)
                    ),
                )
                continue
            self._record(report, await self._files.reconcile_artifact(repo, artifact))


class SecretDistributionDriver(_BatchDriver):
    """Distribute one secret value to every repository."""

    run_kind = "secrets"

    def __init__(
        self,
        store: ArtifactStore,
        *,
        sealer: SecretSealer = seal_secret,
        events: SyncEventLogger | None = None,
    ) -> None:
        """Bind the driver to a store and sealing function."""
        super().__init__(events=events)
        self._secrets = SecretReconciler(store, sealer=sealer)

    async def run(
        self,
        repositories: cabc.Sequence[DesiredRepository],
        name: str,
        value: str,
    ) -> BatchSyncReport:
        """Write secret ``name`` to every repository."""

        async def _sync_one(
            repo: DesiredRepository, report: RepositorySyncReport
        ) -> None:
            self._record(
                report, await self._secrets.reconcile_secret(repo, name, value)
            )

        return await self._run(repositories, _sync_one)
