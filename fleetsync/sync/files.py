"""Idempotent reconciliation of one file in one repository.

The remote file is read first; an identical file is left alone, a different
one is updated with the blob SHA from that same read, and a missing one is
created without a SHA. Recoverable errors become a ``failed`` outcome for the
file instead of propagating.
"""

from __future__ import annotations

import typing as typ
from pathlib import PurePosixPath

from fleetsync.github.models import FileMissing

from .models import OutcomeKind, ReconciliationOutcome
from .observability import RECOVERABLE_ERRORS, failure_reason

if typ.TYPE_CHECKING:
    from fleetsync.github.client import ArtifactStore

    from .models import DesiredArtifact, DesiredRepository


def create_message(path: str) -> str:
    """Return the commit message used when adding ``path``."""
    return f"Add workflow: {PurePosixPath(path).name}"


def update_message(path: str) -> str:
    """Return the commit message used when replacing ``path``."""
    return f"Update workflow: {PurePosixPath(path).name}"


class FileReconciler:
    """Converge a single remote file onto the desired bytes."""

    def __init__(self, store: ArtifactStore) -> None:
        """Reconcile against ``store``."""
        self._store = store

    async def reconcile_file(
        self,
        repo: DesiredRepository,
        branch: str,
        path: str,
        desired: bytes,
    ) -> ReconciliationOutcome:
        """Create, update or skip ``path`` on ``branch`` so it holds ``desired``."""
        try:
            kind = await self._converge(repo, branch, path, desired)
        except RECOVERABLE_ERRORS as exc:
            return ReconciliationOutcome.failed(repo.slug, path, failure_reason(exc))
        return ReconciliationOutcome(repo.slug, path, kind)

    async def reconcile_artifact(
        self, repo: DesiredRepository, artifact: DesiredArtifact
    ) -> ReconciliationOutcome:
        """Reconcile ``artifact`` on the repository's configured branch."""
        return await self.reconcile_file(
            repo, repo.branch, artifact.path, artifact.content
        )

    async def _converge(
        self,
        repo: DesiredRepository,
        branch: str,
        path: str,
        desired: bytes,
    ) -> OutcomeKind:
        current = await self._store.get_file(repo, path, branch=branch)

        if isinstance(current, FileMissing):
            await self._store.put_file(
                repo, path, desired, branch=branch, message=create_message(path)
            )
            return OutcomeKind.CREATED

        # Byte equality only; no whitespace or YAML normalisation.
        if current.content == desired:
            return OutcomeKind.UNCHANGED

        await self._store.put_file(
            repo,
            path,
            desired,
            branch=branch,
            message=update_message(path),
            sha=current.sha,
        )
        return OutcomeKind.UPDATED
