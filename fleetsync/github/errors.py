"""Errors raised by the GitHub REST client."""

from __future__ import annotations


class GitHubError(RuntimeError):
    """Base class for recoverable GitHub failures scoped to one artefact."""


class GitHubAPIError(GitHubError):
    """Raised when GitHub answers with a non-2xx status."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        """Initialise with a message and optional HTTP status code."""
        self.status_code = status_code
        super().__init__(message)

    @classmethod
    def http_error(
        cls, method: str, path: str, status_code: int, detail: str = ""
    ) -> GitHubAPIError:
        """Return an error for a non-2xx response to ``method path``."""
        message = f"GitHub API {method} {path} returned HTTP {status_code}"
        if detail:
            message = f"{message}: {detail}"
        return cls(message, status_code=status_code)


class GitHubConflictError(GitHubAPIError):
    """Raised when a file write is rejected because the stored revision moved."""

    @classmethod
    def stale_revision(
        cls, path: str, status_code: int, detail: str = ""
    ) -> GitHubConflictError:
        """Return an error for a rejected create or update of ``path``."""
        message = f"GitHub rejected write to {path} (HTTP {status_code})"
        if detail:
            message = f"{message}: {detail}"
        return cls(message, status_code=status_code)


class GitHubResponseShapeError(GitHubError):
    """Raised when a GitHub response body does not have the expected shape."""

    @classmethod
    def undecodable(cls, what: str, detail: object) -> GitHubResponseShapeError:
        """Return an error for a body that failed to decode as ``what``."""
        return cls(f"GitHub response for {what} could not be decoded: {detail}")

    @classmethod
    def unexpected(cls, what: str, detail: str) -> GitHubResponseShapeError:
        """Return an error for a decoded body with unusable values."""
        return cls(f"GitHub response for {what} is unusable: {detail}")
