"""Command-line entry points for workflow sync and secret distribution.

Usage::

    fleetsync sync-workflows --config config/repositories.yaml
    fleetsync set-secrets --secret-name GEMINI_API_KEY
    fleetsync lint config/repositories.yaml --schema-out schema.json

Credentials come from the environment (``GITHUB_TOKEN`` and, for
``set-secrets``, the variable named by ``--secret-name``); a ``.env`` file in
the working directory is loaded first without overriding existing variables.

Exit codes: 0 on success, 1 when the run could not start (missing manifest,
invalid manifest, missing credential), 2 when the run finished with failed
outcomes and partial failure is not allowed.
"""

from __future__ import annotations

import asyncio
import dataclasses
import sys
import typing as typ
from pathlib import Path

from cyclopts import App, Parameter
from dotenv import load_dotenv

from fleetsync import __version__
from fleetsync.config import (
    ConfigurationValidationError,
    load_desired_repositories,
    load_manifest,
    write_manifest_schema,
)
from fleetsync.errors import FatalRunError
from fleetsync.github import GitHubRestClient, GitHubRestConfig
from fleetsync.logging import configure_logging, get_logger, log_warning
from fleetsync.settings import (
    DEFAULT_CONFIG_PATH,
    DEFAULT_TEMPLATES_DIR,
    RunSettings,
    read_secret_value,
)
from fleetsync.sync import (
    BatchSyncReport,
    SecretDistributionDriver,
    SyncEventLogger,
    WorkflowSyncDriver,
)
from fleetsync.templates import TemplateLibrary

if typ.TYPE_CHECKING:
    import httpx

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_FATAL = 1
EXIT_PARTIAL_FAILURE = 2

app = App(
    name="fleetsync",
    help="Distribute workflow templates, secrets and variables to GitHub repositories",
    version=__version__,
)


async def run_workflow_sync(
    settings: RunSettings,
    *,
    http_client: httpx.AsyncClient | None = None,
) -> BatchSyncReport:
    """Load the manifest and deploy workflow templates to every repository.

    Raises
    ------
    CredentialMissingError
        If ``GITHUB_TOKEN`` is not set.
    ConfigurationMissingError
        If the manifest does not exist.
    ConfigurationValidationError
        If the manifest is invalid.

    """
    github_config = GitHubRestConfig.from_env(timeout_s=settings.timeout_s)
    repositories = load_desired_repositories(settings.config_path)
    events = SyncEventLogger()
    if not repositories:
        events.log_run_empty(
            run_kind=WorkflowSyncDriver.run_kind, source=str(settings.config_path)
        )
        return BatchSyncReport()

    client = GitHubRestClient(github_config, http_client=http_client)
    try:
        driver = WorkflowSyncDriver(
            client,
            TemplateLibrary(settings.templates_dir),
            runs_on_variable=settings.runs_on_variable,
            events=events,
        )
        return await driver.run(repositories)
    finally:
        await client.aclose()


async def run_secret_distribution(
    settings: RunSettings,
    *,
    http_client: httpx.AsyncClient | None = None,
) -> BatchSyncReport:
    """Load the manifest and write the configured secret to every repository.

    Raises
    ------
    CredentialMissingError
        If ``GITHUB_TOKEN`` or the secret value is not set.
    ConfigurationMissingError
        If the manifest does not exist.
    ConfigurationValidationError
        If the manifest is invalid.

    """
    github_config = GitHubRestConfig.from_env(timeout_s=settings.timeout_s)
    secret_value = read_secret_value(settings.secret_name)
    repositories = load_desired_repositories(settings.config_path)
    events = SyncEventLogger()
    if not repositories:
        events.log_run_empty(
            run_kind=SecretDistributionDriver.run_kind,
            source=str(settings.config_path),
        )
        return BatchSyncReport()

    client = GitHubRestClient(github_config, http_client=http_client)
    try:
        driver = SecretDistributionDriver(client, events=events)
        return await driver.run(repositories, settings.secret_name, secret_value)
    finally:
        await client.aclose()


def _configure(log_level: str) -> None:
    normalized, invalid = configure_logging(log_level)
    if invalid:
        log_warning(
            logger, "Invalid log level %r; falling back to %s", log_level, normalized
        )


def _report_fatal(exc: Exception) -> int:
    if isinstance(exc, ConfigurationValidationError):
        print("Error: repository manifest is invalid:", file=sys.stderr)
        for issue in exc.issues:
            print(f"  - {issue}", file=sys.stderr)
    else:
        print(f"Error: {exc}", file=sys.stderr)
    return EXIT_FATAL


def _finish(report: BatchSyncReport, *, fail_on_partial: bool) -> int:
    if report.repositories:
        print(report.render())
    if report.has_failures and fail_on_partial:
        return EXIT_PARTIAL_FAILURE
    return EXIT_OK


def _settings(
    config: Path, templates: Path, *, allow_partial_failure: bool
) -> RunSettings:
    base = RunSettings.from_env()
    return dataclasses.replace(
        base,
        config_path=config,
        templates_dir=templates,
        fail_on_partial=base.fail_on_partial and not allow_partial_failure,
    )


@app.command
def sync_workflows(
    *,
    config: typ.Annotated[
        Path, Parameter(env_var="FLEETSYNC_CONFIG_PATH")
    ] = DEFAULT_CONFIG_PATH,
    templates: typ.Annotated[
        Path, Parameter(env_var="FLEETSYNC_TEMPLATES_DIR")
    ] = DEFAULT_TEMPLATES_DIR,
    log_level: typ.Annotated[str, Parameter(env_var="FLEETSYNC_LOG_LEVEL")] = "INFO",
    allow_partial_failure: bool = False,
) -> int:
    """Deploy workflow templates and the RUNS_ON variable to every repository.

    Parameters
    ----------
    config
        Repository manifest to load.
    templates
        Directory holding ``<workflow>.yml`` templates and ``.github/commands``.
    log_level
        femtologging level for the event stream.
    allow_partial_failure
        Exit 0 even when some files or variables failed.

    """
    _configure(log_level)
    try:
        settings = _settings(
            config, templates, allow_partial_failure=allow_partial_failure
        )
        report = asyncio.run(run_workflow_sync(settings))
    except (FatalRunError, ValueError) as exc:
        # ValueError covers an invalid manifest and malformed FLEETSYNC_* values.
        return _report_fatal(exc)
    return _finish(report, fail_on_partial=settings.fail_on_partial)


@app.command
def set_secrets(
    *,
    config: typ.Annotated[
        Path, Parameter(env_var="FLEETSYNC_CONFIG_PATH")
    ] = DEFAULT_CONFIG_PATH,
    secret_name: typ.Annotated[
        str | None, Parameter(env_var="FLEETSYNC_SECRET_NAME")
    ] = None,
    log_level: typ.Annotated[str, Parameter(env_var="FLEETSYNC_LOG_LEVEL")] = "INFO",
    allow_partial_failure: bool = False,
) -> int:
    """Seal and write one Actions secret to every repository.

    Parameters
    ----------
    config
        Repository manifest to load.
    secret_name
        Secret to distribute; its value is read from the environment variable
        of the same name. Defaults to ``GEMINI_API_KEY``.
    log_level
        femtologging level for the event stream.
    allow_partial_failure
        Exit 0 even when some repositories failed.

    """
    _configure(log_level)
    try:
        settings = _settings(
            config, DEFAULT_TEMPLATES_DIR, allow_partial_failure=allow_partial_failure
        )
        if secret_name:
            settings = dataclasses.replace(settings, secret_name=secret_name)
        report = asyncio.run(run_secret_distribution(settings))
    except (FatalRunError, ValueError) as exc:
        return _report_fatal(exc)
    return _finish(report, fail_on_partial=settings.fail_on_partial)


@app.command
def lint(
    manifest: Path = DEFAULT_CONFIG_PATH,
    *,
    schema_out: Path | None = None,
) -> int:
    """Validate a repository manifest without contacting GitHub.

    Parameters
    ----------
    manifest
        Repository manifest to validate.
    schema_out
        Optional path to write the manifest JSON Schema to.

    """
    try:
        loaded = load_manifest(manifest)
    except (FatalRunError, ConfigurationValidationError) as exc:
        return _report_fatal(exc)

    if schema_out is not None:
        try:
            write_manifest_schema(schema_out)
        except OSError as exc:
            return _report_fatal(exc)

    workflows = sum(len(entry.workflows) for entry in loaded.repositories)
    print(
        f"manifest {manifest} is valid "
        f"({len(loaded.repositories)} repositories / {workflows} workflows)"
    )
    return EXIT_OK


def main() -> int:
    """Entry point for the ``fleetsync`` console script."""
    load_dotenv(override=False)
    return app()


if __name__ == "__main__":
    sys.exit(main())
