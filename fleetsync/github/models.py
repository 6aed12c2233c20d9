"""Typed GitHub REST payloads and lookup results."""

from __future__ import annotations

import dataclasses
import typing as typ

import msgspec


class ContentPayload(msgspec.Struct):
    """Subset of the ``GET /contents/{path}`` body for a single file."""

    sha: str
    type: str = "file"
    content: str = ""
    encoding: str = "base64"


class PublicKeyPayload(msgspec.Struct):
    """Body of ``GET /actions/secrets/public-key``."""

    key_id: str
    key: str


class VariablePayload(msgspec.Struct):
    """Body of ``GET /actions/variables/{name}``."""

    name: str
    value: str


class ErrorPayload(msgspec.Struct):
    """Error body GitHub sends alongside 4xx/5xx responses."""

    message: str = ""


@dataclasses.dataclass(frozen=True, slots=True)
class FileFound:
    """File present on the branch, with decoded bytes and its blob SHA."""

    content: bytes
    sha: str


@dataclasses.dataclass(frozen=True, slots=True)
class FileMissing:
    """No file exists at the looked-up path on the branch."""


FileLookup: typ.TypeAlias = "FileFound | FileMissing"


@dataclasses.dataclass(frozen=True, slots=True)
class VariableFound:
    """Repository variable present with its current value."""

    name: str
    value: str


@dataclasses.dataclass(frozen=True, slots=True)
class VariableMissing:
    """No repository variable exists under the looked-up name."""


VariableLookup: typ.TypeAlias = "VariableFound | VariableMissing"


@dataclasses.dataclass(frozen=True, slots=True)
class PublicKey:
    """Repository public key used to seal Actions secrets."""

    key_id: str
    key: str
