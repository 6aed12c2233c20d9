"""Reconciliation of Actions secrets and variables.

Secrets are write-only on GitHub, so every reconciliation seals the value
under the repository's current public key and upserts it. Variables are read
first to choose between create and update; an existing variable is always
rewritten, even when its value already matches.
"""

from __future__ import annotations

import typing as typ

from fleetsync.github.models import VariableMissing
from fleetsync.sealing import seal_secret

from .models import (
    OutcomeKind,
    ReconciliationOutcome,
    secret_subject,
    variable_subject,
)
from .observability import RECOVERABLE_ERRORS, failure_reason

if typ.TYPE_CHECKING:
    from fleetsync.github.client import ArtifactStore
    from fleetsync.sealing import SecretSealer

    from .models import DesiredRepository


class SecretReconciler:
    """Upsert sealed secrets."""

    def __init__(
        self, store: ArtifactStore, *, sealer: SecretSealer = seal_secret
    ) -> None:
        """Reconcile against ``store``, sealing values with ``sealer``."""
        self._store = store
        self._sealer = sealer

    async def reconcile_secret(
        self, repo: DesiredRepository, name: str, value: str
    ) -> ReconciliationOutcome:
        """Seal ``value`` and write it as secret ``name``.

        The outcome is ``created`` when GitHub reports a new secret and
        ``updated`` otherwise; ``unchanged`` is never produced.
        """
        subject = secret_subject(name)
        try:
            public_key = await self._store.get_public_key(repo)
            encrypted_value = self._sealer(public_key.key, value)
            created = await self._store.put_secret(
                repo,
                name,
                encrypted_value=encrypted_value,
                key_id=public_key.key_id,
            )
        except RECOVERABLE_ERRORS as exc:
            return ReconciliationOutcome.failed(
                repo.slug, subject, failure_reason(exc)
            )
        kind = OutcomeKind.CREATED if created else OutcomeKind.UPDATED
        return ReconciliationOutcome(repo.slug, subject, kind)


class VariableReconciler:
    """Create or overwrite plaintext repository variables."""

    def __init__(self, store: ArtifactStore) -> None:
        """Reconcile against ``store``."""
        self._store = store

    async def reconcile_variable(
        self, repo: DesiredRepository, name: str, value: str
    ) -> ReconciliationOutcome:
        """Set variable ``name`` to ``value``, creating it when absent."""
        subject = variable_subject(name)
        try:
            current = await self._store.get_variable(repo, name)
            if isinstance(current, VariableMissing):
                await self._store.create_variable(repo, name, value)
                kind = OutcomeKind.CREATED
            else:
                await self._store.update_variable(repo, name, value)
                kind = OutcomeKind.UPDATED
        except RECOVERABLE_ERRORS as exc:
            return ReconciliationOutcome.failed(
                repo.slug, subject, failure_reason(exc)
            )
        return ReconciliationOutcome(repo.slug, subject, kind)
