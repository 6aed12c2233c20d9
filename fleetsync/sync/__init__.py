"""Reconciliation engine: desired state in, minimal remote writes out.

Sync workflow templates for a set of repositories::

    >>> from fleetsync.sync import WorkflowSyncDriver
    >>> driver = WorkflowSyncDriver(store, TemplateLibrary("templates"))
    >>> report = await driver.run(repositories)
    >>> print(report.render())

"""

from __future__ import annotations

from .driver import SecretDistributionDriver, WorkflowSyncDriver
from .files import FileReconciler
from .keyvalue import SecretReconciler, VariableReconciler
from .models import (
    BatchSyncReport,
    DesiredArtifact,
    DesiredRepository,
    OutcomeKind,
    ReconciliationOutcome,
    RepositorySyncReport,
)
from .observability import ErrorCategory, SyncEventLogger, categorize_error

__all__ = [
    "BatchSyncReport",
    "DesiredArtifact",
    "DesiredRepository",
    "ErrorCategory",
    "FileReconciler",
    "OutcomeKind",
    "ReconciliationOutcome",
    "RepositorySyncReport",
    "SecretDistributionDriver",
    "SecretReconciler",
    "SyncEventLogger",
    "VariableReconciler",
    "WorkflowSyncDriver",
    "categorize_error",
]
