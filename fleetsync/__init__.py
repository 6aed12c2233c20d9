"""fleetsync: keep CI workflow templates, secrets and variables in sync.

A single manifest lists the managed GitHub repositories. ``fleetsync``
reconciles each of them against the local templates, writing only what
differs, and reports a per-file, per-setting outcome.
"""

from __future__ import annotations

__version__ = "0.1.0"

__all__ = ["__version__"]
