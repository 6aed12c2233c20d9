"""JSON Schema generation for the repository manifest."""

from __future__ import annotations

import json
import typing as typ
from pathlib import Path  # noqa: TC003

import msgspec

from .models import Manifest

SCHEMA_ID = "https://fleetsync.example/schemas/repositories.json"


def build_manifest_schema() -> dict[str, typ.Any]:
    """Return the manifest JSON Schema with ``$id`` set to ``SCHEMA_ID``."""
    schema = msgspec.json.schema(Manifest)
    schema["$id"] = SCHEMA_ID
    return schema


def write_manifest_schema(path: Path) -> Path:
    """Write the manifest JSON Schema to ``path``, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(build_manifest_schema(), indent=2), encoding="utf-8")
    return path
