"""Errors that abort a run before any repository is touched."""

from __future__ import annotations

from pathlib import Path


class FatalRunError(RuntimeError):
    """Base class for errors that stop the whole run with a non-zero exit."""


class ConfigurationMissingError(FatalRunError):
    """Raised when the repository manifest cannot be found."""

    def __init__(self, path: Path | str) -> None:
        """Initialise with the manifest path that was looked up."""
        self.path = Path(path)
        super().__init__(f"Repository manifest not found: {self.path}")


class CredentialMissingError(FatalRunError):
    """Raised when a required credential is absent from the environment."""

    def __init__(self, env_var: str) -> None:
        """Initialise with the name of the missing environment variable."""
        self.env_var = env_var
        super().__init__(f"{env_var} environment variable is not set")
