"""Unit tests for repository slug utility."""

from __future__ import annotations

import pytest

from fleetsync.common.slug import parse_repo_slug, repo_slug


def test_repo_slug_combines_owner_and_name() -> None:
    """repo_slug returns owner/name format."""
    assert repo_slug("acme", "widgets") == "acme/widgets"


def test_parse_repo_slug_splits_owner_and_name() -> None:
    """parse_repo_slug returns (owner, name) for valid slugs."""
    assert parse_repo_slug("Acme-Org/widget_tools") == ("Acme-Org", "widget_tools")


@pytest.mark.parametrize(
    "slug",
    ["", "/", "widgets", "acme/widgets/extra", "acme/", "/widgets", "acme//widgets"],
)
def test_parse_repo_slug_rejects_invalid_slugs(slug: str) -> None:
    """parse_repo_slug raises ValueError for invalid slugs."""
    with pytest.raises(ValueError, match="Invalid repository slug"):
        parse_repo_slug(slug)
