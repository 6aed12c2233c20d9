"""httpx MockTransport handler emulating the GitHub REST endpoints in use."""

from __future__ import annotations

import base64
import json
import re

import httpx

_REPO = r"^/repos/(?P<repo>[^/]+/[^/]+)"
_CONTENTS = re.compile(_REPO + r"/contents/(?P<path>.+)$")
_VARIABLE = re.compile(_REPO + r"/actions/variables/(?P<name>[^/]+)$")
_VARIABLES = re.compile(_REPO + r"/actions/variables$")
_PUBLIC_KEY = re.compile(_REPO + r"/actions/secrets/public-key$")
_SECRET = re.compile(_REPO + r"/actions/secrets/(?P<name>[^/]+)$")


class FakeGitHub:
    """Serve contents, variables and secrets from in-memory dictionaries.

    Use :meth:`transport` with ``httpx.AsyncClient``. ``files`` is keyed by
    ``(repo_slug, branch, path)``; ``errors`` maps ``(method, url_path)`` to a
    status code returned instead of handling the request.
    """

    def __init__(self, public_key: str = "") -> None:
        """Start with no files, variables or secrets."""
        self.files: dict[tuple[str, str, str], tuple[bytes, str]] = {}
        self.variables: dict[tuple[str, str], str] = {}
        self.secrets: dict[tuple[str, str], dict[str, str]] = {}
        self.public_key = public_key
        self.errors: dict[tuple[str, str], int] = {}
        self.requests: list[httpx.Request] = []
        self._revision = 0

    def transport(self) -> httpx.MockTransport:
        """Return a transport routing requests to this fake."""
        return httpx.MockTransport(self._handle)

    @property
    def writes(self) -> list[httpx.Request]:
        """Return every mutating request received."""
        return [r for r in self.requests if r.method in {"PUT", "POST", "PATCH"}]

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        status = self.errors.get((request.method, path))
        if status is not None:
            return httpx.Response(status, json={"message": "injected failure"})

        if match := _CONTENTS.match(path):
            return self._contents(request, match["repo"], match["path"])
        if match := _VARIABLES.match(path):
            body = json.loads(request.content)
            self.variables[(match["repo"], body["name"])] = body["value"]
            return httpx.Response(201)
        if match := _PUBLIC_KEY.match(path):
            return httpx.Response(200, json={"key_id": "k1", "key": self.public_key})
        if match := _VARIABLE.match(path):
            return self._variable(request, match["repo"], match["name"])
        if match := _SECRET.match(path):
            key = (match["repo"], match["name"])
            created = key not in self.secrets
            self.secrets[key] = json.loads(request.content)
            return httpx.Response(201 if created else 204)
        return httpx.Response(404, json={"message": "Not Found"})

    def _contents(self, request: httpx.Request, repo: str, path: str) -> httpx.Response:
        if request.method == "GET":
            stored = self.files.get((repo, request.url.params["ref"], path))
            if stored is None:
                return httpx.Response(404, json={"message": "Not Found"})
            content, sha = stored
            return httpx.Response(
                200,
                json={
                    "type": "file",
                    "sha": sha,
                    "encoding": "base64",
                    "content": base64.b64encode(content).decode("ascii"),
                },
            )

        body = json.loads(request.content)
        key = (repo, body["branch"], path)
        existing = self.files.get(key)
        if existing is not None and body.get("sha") != existing[1]:
            return httpx.Response(409, json={"message": "sha mismatch"})
        self._revision += 1
        self.files[key] = (base64.b64decode(body["content"]), f"sha-{self._revision}")
        return httpx.Response(200 if existing else 201, json={"content": {}})

    def _variable(self, request: httpx.Request, repo: str, name: str) -> httpx.Response:
        key = (repo, name)
        if request.method == "GET":
            if key not in self.variables:
                return httpx.Response(404, json={"message": "Not Found"})
            value = self.variables[key]
            return httpx.Response(200, json={"name": name, "value": value})
        self.variables[key] = json.loads(request.content)["value"]
        return httpx.Response(204)
