"""Run settings assembled once at process entry.

Drivers and reconcilers receive a :class:`RunSettings` instance explicitly;
nothing below the CLI reads the environment.

>>> settings = RunSettings()
>>> settings.secret_name
'GEMINI_API_KEY'

"""

from __future__ import annotations

import dataclasses as dc
import os
from pathlib import Path

from fleetsync.errors import CredentialMissingError

DEFAULT_CONFIG_PATH = Path("config/repositories.yaml")
DEFAULT_TEMPLATES_DIR = Path("templates")
DEFAULT_SECRET_NAME = "GEMINI_API_KEY"  # noqa: S105 - secret name, not a value
DEFAULT_RUNS_ON_VARIABLE = "RUNS_ON"
DEFAULT_TIMEOUT_S = 20.0

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off"})


@dc.dataclass(frozen=True, slots=True)
class RunSettings:
    """Configuration for a single sync or secret-distribution run.

    Attributes
    ----------
    config_path
        Repository manifest to load.
    templates_dir
        Root of the workflow templates; auxiliary files live under
        ``.github/commands`` inside it.
    secret_name
        Secret distributed by ``set-secrets``. Its plaintext is read from the
        environment variable of the same name.
    runs_on_variable
        Repository variable that carries each repository's ``runsOn`` label.
    timeout_s
        Per-request HTTP timeout in seconds.
    fail_on_partial
        Whether a run that finished with failed outcomes exits non-zero.

    """

    config_path: Path = DEFAULT_CONFIG_PATH
    templates_dir: Path = DEFAULT_TEMPLATES_DIR
    secret_name: str = DEFAULT_SECRET_NAME
    runs_on_variable: str = DEFAULT_RUNS_ON_VARIABLE
    timeout_s: float = DEFAULT_TIMEOUT_S
    fail_on_partial: bool = True

    @staticmethod
    def _parse_positive_float(env_var: str, default: float) -> float:
        raw = os.environ.get(env_var, "")
        if not raw.strip():
            return default
        try:
            value = float(raw)
        except ValueError as exc:
            msg = f"{env_var} must be a number, got: {raw!r}"
            raise ValueError(msg) from exc
        if value <= 0:
            msg = f"{env_var} must be positive, got: {value}"
            raise ValueError(msg)
        return value

    @staticmethod
    def _parse_bool(env_var: str, *, default: bool) -> bool:
        raw = os.environ.get(env_var, "").strip().lower()
        if not raw:
            return default
        if raw in _TRUE_VALUES:
            return True
        if raw in _FALSE_VALUES:
            return False
        msg = f"{env_var} must be a boolean, got: {raw!r}"
        raise ValueError(msg)

    @staticmethod
    def _read_str(env_var: str, default: str) -> str:
        raw = os.environ.get(env_var, "").strip()
        return raw or default

    @classmethod
    def from_env(cls) -> RunSettings:
        """Create settings from ``FLEETSYNC_*`` environment variables.

        Reads ``FLEETSYNC_CONFIG_PATH``, ``FLEETSYNC_TEMPLATES_DIR``,
        ``FLEETSYNC_SECRET_NAME``, ``FLEETSYNC_RUNS_ON_VARIABLE``,
        ``FLEETSYNC_HTTP_TIMEOUT_S`` and ``FLEETSYNC_FAIL_ON_PARTIAL``; unset
        or blank variables keep the defaults.

        Raises
        ------
        ValueError
            If the timeout is not a positive number or the partial-failure
            flag is not a recognised boolean.

        """
        return cls(
            config_path=Path(
                cls._read_str("FLEETSYNC_CONFIG_PATH", str(DEFAULT_CONFIG_PATH))
            ),
            templates_dir=Path(
                cls._read_str("FLEETSYNC_TEMPLATES_DIR", str(DEFAULT_TEMPLATES_DIR))
            ),
            secret_name=cls._read_str("FLEETSYNC_SECRET_NAME", DEFAULT_SECRET_NAME),
            runs_on_variable=cls._read_str(
                "FLEETSYNC_RUNS_ON_VARIABLE", DEFAULT_RUNS_ON_VARIABLE
            ),
            timeout_s=cls._parse_positive_float(
                "FLEETSYNC_HTTP_TIMEOUT_S", DEFAULT_TIMEOUT_S
            ),
            fail_on_partial=cls._parse_bool(
                "FLEETSYNC_FAIL_ON_PARTIAL", default=True
            ),
        )


def read_secret_value(secret_name: str) -> str:
    """Return the plaintext for ``secret_name`` from the environment.

    Raises
    ------
    CredentialMissingError
        If the variable is unset or blank.

    """
    value = os.environ.get(secret_name, "")
    if not value.strip():
        raise CredentialMissingError(secret_name)
    return value
