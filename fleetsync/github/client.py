"""GitHub REST client for repository contents, Actions secrets and variables."""

from __future__ import annotations

import base64
import binascii
import dataclasses
import os
import typing as typ
from urllib.parse import quote

import httpx
import msgspec

from fleetsync import __version__
from fleetsync.errors import CredentialMissingError

from .errors import GitHubAPIError, GitHubConflictError, GitHubResponseShapeError
from .models import (
    ContentPayload,
    ErrorPayload,
    FileFound,
    FileMissing,
    PublicKey,
    PublicKeyPayload,
    VariableFound,
    VariableMissing,
    VariablePayload,
)

if typ.TYPE_CHECKING:
    from fleetsync.sync.models import DesiredRepository

    from .models import FileLookup, VariableLookup

TOKEN_ENV_VAR = "GITHUB_TOKEN"  # noqa: S105 - environment variable name
API_VERSION = "2022-11-28"

_HTTP_NOT_FOUND = 404
_HTTP_CONFLICT = 409
_HTTP_UNPROCESSABLE = 422
_HTTP_CREATED = 201
_HTTP_ERROR_STATUS_THRESHOLD = 400


class ArtifactStore(typ.Protocol):
    """Remote store holding workflow files, secrets and variables."""

    async def get_file(
        self, repo: DesiredRepository, path: str, *, branch: str
    ) -> FileLookup:
        """Return the file at ``path`` on ``branch`` or a missing marker."""
        ...

    async def put_file(  # noqa: PLR0913
        self,
        repo: DesiredRepository,
        path: str,
        content: bytes,
        *,
        branch: str,
        message: str,
        sha: str | None = None,
    ) -> None:
        """Create ``path`` when ``sha`` is None, otherwise update that revision."""
        ...

    async def get_public_key(self, repo: DesiredRepository) -> PublicKey:
        """Return the key used to seal secrets for ``repo``."""
        ...

    async def put_secret(
        self, repo: DesiredRepository, name: str, *, encrypted_value: str, key_id: str
    ) -> bool:
        """Upsert a sealed secret, returning True when it was newly created."""
        ...

    async def get_variable(self, repo: DesiredRepository, name: str) -> VariableLookup:
        """Return the variable ``name`` or a missing marker."""
        ...

    async def create_variable(
        self, repo: DesiredRepository, name: str, value: str
    ) -> None:
        """Create a new repository variable."""
        ...

    async def update_variable(
        self, repo: DesiredRepository, name: str, value: str
    ) -> None:
        """Overwrite an existing repository variable."""
        ...


@dataclasses.dataclass(frozen=True, slots=True)
class GitHubRestConfig:
    """Configuration for the GitHub REST API client."""

    token: str
    api_url: str = "https://api.github.com"
    timeout_s: float = 20.0
    user_agent: str = f"fleetsync/{__version__}"

    @classmethod
    def from_env(cls, *, timeout_s: float = 20.0) -> GitHubRestConfig:
        """Build configuration from the ``GITHUB_TOKEN`` environment variable."""
        token = os.environ.get(TOKEN_ENV_VAR, "").strip()
        if not token:
            raise CredentialMissingError(TOKEN_ENV_VAR)
        return cls(token=token, timeout_s=timeout_s)


def _repo_path(repo: DesiredRepository) -> str:
    return f"/repos/{quote(repo.owner, safe='')}/{quote(repo.name, safe='')}"


T = typ.TypeVar("T")


def _decode(response: httpx.Response, type_: type[T], *, what: str) -> T:
    try:
        return msgspec.json.decode(response.content, type=type_)
    except (msgspec.DecodeError, msgspec.ValidationError) as exc:
        raise GitHubResponseShapeError.undecodable(what, exc) from exc


def _error_detail(response: httpx.Response) -> str:
    try:
        return msgspec.json.decode(response.content, type=ErrorPayload).message
    except (msgspec.DecodeError, msgspec.ValidationError):
        return ""


def _file_from_payload(payload: ContentPayload, path: str) -> FileFound:
    if payload.type != "file":
        raise GitHubResponseShapeError.unexpected(path, f"type is {payload.type!r}")
    if payload.encoding != "base64":
        raise GitHubResponseShapeError.unexpected(
            path, f"content encoding is {payload.encoding!r}"
        )
    try:
        # GitHub wraps the base64 body at 60 columns; b64decode drops the newlines.
        content = base64.b64decode(payload.content)
    except binascii.Error as exc:
        raise GitHubResponseShapeError.undecodable(path, exc) from exc
    return FileFound(content=content, sha=payload.sha)


class GitHubRestClient:
    """httpx implementation of :class:`ArtifactStore`.

    Every method issues exactly one request. A 404 on a lookup becomes a
    missing marker; other non-2xx statuses raise :class:`GitHubAPIError`.
    """

    def __init__(
        self,
        config: GitHubRestConfig,
        *,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialise the client, creating an owned httpx client if none is given."""
        if not config.token.strip():
            raise CredentialMissingError(TOKEN_ENV_VAR)

        self._config = config
        self._headers = {
            "Authorization": f"Bearer {config.token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": API_VERSION,
            "User-Agent": config.user_agent,
        }
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=config.timeout_s)

    async def aclose(self) -> None:
        """Close any owned HTTP resources."""
        if self._owns_client:
            await self._client.aclose()

    async def get_file(
        self, repo: DesiredRepository, path: str, *, branch: str
    ) -> FileLookup:
        """Fetch ``path`` on ``branch`` and decode its content."""
        endpoint = f"{_repo_path(repo)}/contents/{quote(path, safe='/')}"
        response = await self._request("GET", endpoint, params={"ref": branch})
        if response.status_code == _HTTP_NOT_FOUND:
            return FileMissing()
        self._raise_for_status("GET", endpoint, response)
        payload = _decode(response, ContentPayload, what=path)
        return _file_from_payload(payload, path)

    async def put_file(  # noqa: PLR0913
        self,
        repo: DesiredRepository,
        path: str,
        content: bytes,
        *,
        branch: str,
        message: str,
        sha: str | None = None,
    ) -> None:
        """Create or update ``path``; a ``sha`` selects the update form."""
        endpoint = f"{_repo_path(repo)}/contents/{quote(path, safe='/')}"
        body: dict[str, str] = {
            "message": message,
            "content": base64.b64encode(content).decode("ascii"),
            "branch": branch,
        }
        if sha is not None:
            body["sha"] = sha
        response = await self._request("PUT", endpoint, json=body)
        if response.status_code in {_HTTP_CONFLICT, _HTTP_UNPROCESSABLE}:
            raise GitHubConflictError.stale_revision(
                path, response.status_code, _error_detail(response)
            )
        self._raise_for_status("PUT", endpoint, response)

    async def get_public_key(self, repo: DesiredRepository) -> PublicKey:
        """Fetch the Actions secrets public key for ``repo``."""
        endpoint = f"{_repo_path(repo)}/actions/secrets/public-key"
        response = await self._request("GET", endpoint)
        self._raise_for_status("GET", endpoint, response)
        payload = _decode(response, PublicKeyPayload, what="secrets public key")
        return PublicKey(key_id=payload.key_id, key=payload.key)

    async def put_secret(
        self, repo: DesiredRepository, name: str, *, encrypted_value: str, key_id: str
    ) -> bool:
        """Upsert a sealed Actions secret."""
        endpoint = f"{_repo_path(repo)}/actions/secrets/{quote(name, safe='')}"
        response = await self._request(
            "PUT",
            endpoint,
            json={"encrypted_value": encrypted_value, "key_id": key_id},
        )
        self._raise_for_status("PUT", endpoint, response)
        return response.status_code == _HTTP_CREATED

    async def get_variable(self, repo: DesiredRepository, name: str) -> VariableLookup:
        """Fetch the Actions variable ``name``."""
        endpoint = f"{_repo_path(repo)}/actions/variables/{quote(name, safe='')}"
        response = await self._request("GET", endpoint)
        if response.status_code == _HTTP_NOT_FOUND:
            return VariableMissing()
        self._raise_for_status("GET", endpoint, response)
        payload = _decode(response, VariablePayload, what=f"variable {name}")
        return VariableFound(name=payload.name, value=payload.value)

    async def create_variable(
        self, repo: DesiredRepository, name: str, value: str
    ) -> None:
        """Create the Actions variable ``name``."""
        endpoint = f"{_repo_path(repo)}/actions/variables"
        response = await self._request(
            "POST", endpoint, json={"name": name, "value": value}
        )
        self._raise_for_status("POST", endpoint, response)

    async def update_variable(
        self, repo: DesiredRepository, name: str, value: str
    ) -> None:
        """Overwrite the value of the Actions variable ``name``."""
        endpoint = f"{_repo_path(repo)}/actions/variables/{quote(name, safe='')}"
        response = await self._request(
            "PATCH", endpoint, json={"name": name, "value": value}
        )
        self._raise_for_status("PATCH", endpoint, response)

    async def _request(
        self,
        method: str,
        endpoint: str,
        *,
        params: dict[str, str] | None = None,
        json: dict[str, str] | None = None,
    ) -> httpx.Response:
        return await self._client.request(
            method,
            f"{self._config.api_url}{endpoint}",
            params=params,
            json=json,
            headers=self._headers,
        )

    @staticmethod
    def _raise_for_status(
        method: str, endpoint: str, response: httpx.Response
    ) -> None:
        if response.status_code >= _HTTP_ERROR_STATUS_THRESHOLD:
            raise GitHubAPIError.http_error(
                method, endpoint, response.status_code, _error_detail(response)
            )
