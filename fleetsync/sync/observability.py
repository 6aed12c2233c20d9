"""Structured log events and failure classification for sync runs.

Every reconciled subject produces one ``sync.artifact.<kind>`` line, so the
log stream doubles as the per-repository status report. Failures are logged
at ERROR and carry an :class:`ErrorCategory`.
"""

from __future__ import annotations

import enum
import typing as typ

import httpx

from fleetsync.github.errors import (
    GitHubAPIError,
    GitHubConflictError,
    GitHubError,
    GitHubResponseShapeError,
)
from fleetsync.logging import get_logger, log_error, log_info, log_warning
from fleetsync.sealing import SecretSealingError

from .models import OutcomeKind

if typ.TYPE_CHECKING:
    from .models import BatchSyncReport, ReconciliationOutcome, RepositorySyncReport

logger = get_logger(__name__)

# Errors that fail a single artefact without stopping the batch.
RECOVERABLE_ERRORS: tuple[type[Exception], ...] = (
    GitHubError,
    httpx.HTTPError,
    SecretSealingError,
    OSError,
)

_HTTP_SERVER_ERROR_THRESHOLD = 500


class SyncEventType(enum.StrEnum):
    """Structured log event types for sync runs."""

    RUN_STARTED = "sync.run.started"
    RUN_COMPLETED = "sync.run.completed"
    RUN_EMPTY = "sync.run.empty"
    REPOSITORY_STARTED = "sync.repository.started"
    REPOSITORY_NO_WORKFLOWS = "sync.repository.no_workflows"
    REPOSITORY_COMPLETED = "sync.repository.completed"
    ARTIFACT_UNCHANGED = "sync.artifact.unchanged"
    ARTIFACT_CREATED = "sync.artifact.created"
    ARTIFACT_UPDATED = "sync.artifact.updated"
    ARTIFACT_FAILED = "sync.artifact.failed"


_OUTCOME_EVENTS: dict[OutcomeKind, SyncEventType] = {
    OutcomeKind.UNCHANGED: SyncEventType.ARTIFACT_UNCHANGED,
    OutcomeKind.CREATED: SyncEventType.ARTIFACT_CREATED,
    OutcomeKind.UPDATED: SyncEventType.ARTIFACT_UPDATED,
    OutcomeKind.FAILED: SyncEventType.ARTIFACT_FAILED,
}


class ErrorCategory(enum.StrEnum):
    """Failure categories used as the prefix of ``failed`` reasons."""

    CONFLICT = "conflict"
    CLIENT_ERROR = "client_error"
    SERVER_ERROR = "server_error"
    SCHEMA_DRIFT = "schema_drift"
    TRANSPORT = "transport"
    ENCRYPTION = "encryption"
    LOCAL_IO = "local_io"
    UNKNOWN = "unknown"


_EXCEPTION_CATEGORY_MAP: tuple[tuple[type[BaseException], ErrorCategory], ...] = (
    (GitHubConflictError, ErrorCategory.CONFLICT),
    (GitHubResponseShapeError, ErrorCategory.SCHEMA_DRIFT),
    (httpx.HTTPError, ErrorCategory.TRANSPORT),
    (SecretSealingError, ErrorCategory.ENCRYPTION),
    (OSError, ErrorCategory.LOCAL_IO),
)


def categorize_error(exc: BaseException) -> ErrorCategory:
    """Return the failure category for ``exc``."""
    for exc_type, category in _EXCEPTION_CATEGORY_MAP:
        if isinstance(exc, exc_type):
            return category

    if isinstance(exc, GitHubAPIError):
        if (
            exc.status_code is not None
            and exc.status_code >= _HTTP_SERVER_ERROR_THRESHOLD
        ):
            return ErrorCategory.SERVER_ERROR
        return ErrorCategory.CLIENT_ERROR

    return ErrorCategory.UNKNOWN


def failure_reason(exc: BaseException) -> str:
    """Return the ``failed`` reason text for ``exc``."""
    detail = str(exc) or type(exc).__name__
    return f"{categorize_error(exc)}: {detail}"


class SyncEventLogger:
    """Emit sync lifecycle and per-artefact events via femtologging."""

    def log_run_started(self, *, run_kind: str, repository_count: int) -> None:
        """Log the start of a batch run."""
        log_info(
            logger,
            "[%s] run_kind=%s repositories=%d",
            SyncEventType.RUN_STARTED,
            run_kind,
            repository_count,
        )

    def log_run_empty(self, *, run_kind: str, source: str) -> None:
        """Log that the manifest declared no repositories."""
        log_warning(
            logger,
            "[%s] run_kind=%s source=%s no repositories declared",
            SyncEventType.RUN_EMPTY,
            run_kind,
            source,
        )

    def log_repository_started(self, *, repo_slug: str, branch: str) -> None:
        """Log the start of one repository's reconciliation."""
        log_info(
            logger,
            "[%s] repo_slug=%s branch=%s",
            SyncEventType.REPOSITORY_STARTED,
            repo_slug,
            branch,
        )

    def log_no_workflows(self, *, repo_slug: str) -> None:
        """Log a repository that declares no workflow templates."""
        log_warning(
            logger,
            "[%s] repo_slug=%s",
            SyncEventType.REPOSITORY_NO_WORKFLOWS,
            repo_slug,
        )

    def log_outcome(self, outcome: ReconciliationOutcome) -> None:
        """Log one reconciliation outcome; failures go out at ERROR."""
        event = _OUTCOME_EVENTS[outcome.kind]
        if outcome.kind is OutcomeKind.FAILED:
            log_error(
                logger,
                "[%s] repo_slug=%s subject=%s reason=%s",
                event,
                outcome.repo_slug,
                outcome.subject,
                outcome.reason,
            )
            return
        log_info(
            logger,
            "[%s] repo_slug=%s subject=%s",
            event,
            outcome.repo_slug,
            outcome.subject,
        )

    def log_repository_completed(self, report: RepositorySyncReport) -> None:
        """Log per-kind totals for one repository."""
        counts = report.counts()
        log_info(
            logger,
            "[%s] repo_slug=%s unchanged=%d created=%d updated=%d failed=%d",
            SyncEventType.REPOSITORY_COMPLETED,
            report.repo_slug,
            counts[OutcomeKind.UNCHANGED],
            counts[OutcomeKind.CREATED],
            counts[OutcomeKind.UPDATED],
            counts[OutcomeKind.FAILED],
        )

    def log_run_completed(self, *, run_kind: str, report: BatchSyncReport) -> None:
        """Log run totals; a run with failures is logged at WARNING."""
        totals = report.totals()
        log = log_warning if report.has_failures else log_info
        log(
            logger,
            "[%s] run_kind=%s repositories=%d unchanged=%d created=%d "
            "updated=%d failed=%d",
            SyncEventType.RUN_COMPLETED,
            run_kind,
            len(report.repositories),
            totals[OutcomeKind.UNCHANGED],
            totals[OutcomeKind.CREATED],
            totals[OutcomeKind.UPDATED],
            totals[OutcomeKind.FAILED],
        )
