"""Unit tests for femtologging integration helpers."""

from __future__ import annotations

import pytest

from fleetsync.logging import (
    configure_logging,
    log_error,
    log_info,
    log_warning,
    normalize_log_level,
)


class _FakeLogger:
    """Collects log calls for assertions."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, str, object | None, bool]] = []

    def log(
        self,
        level: str,
        message: str,
        /,
        *,
        exc_info: object | None = None,
        stack_info: bool = False,
    ) -> str:
        self.calls.append((level, message, exc_info, stack_info))
        return message


@pytest.mark.parametrize(
    ("raw", "expected", "invalid"),
    [
        ("warning", "WARNING", False),
        (" debug ", "DEBUG", False),
        (None, "INFO", True),
        ("", "INFO", True),
        ("loud", "INFO", True),
    ],
)
def test_normalize_log_level(raw: str | None, expected: str, *, invalid: bool) -> None:
    """Known names are upper-cased; anything else falls back to INFO."""
    assert normalize_log_level(raw) == (expected, invalid)


def test_log_info_formats_message() -> None:
    """Arguments are interpolated with percent formatting."""
    logger = _FakeLogger()

    log_info(logger, "synced %s (%d)", "acme/widgets", 3)

    assert logger.calls == [("INFO", "synced acme/widgets (3)", None, False)]


def test_literal_percent_without_args_is_preserved() -> None:
    """Templates without arguments are passed through untouched."""
    logger = _FakeLogger()

    log_warning(logger, "100% done")

    assert logger.calls == [("WARNING", "100% done", None, False)]


def test_log_error_forwards_exc_info() -> None:
    """Exception payloads reach the logger."""
    logger = _FakeLogger()
    exc = ValueError("boom")

    log_error(logger, "failed: %s", "x", exc_info=exc)

    assert logger.calls == [
        ("ERROR", "failed: x", exc, False),
    ]


def test_configure_logging(monkeypatch: pytest.MonkeyPatch) -> None:
    """configure_logging passes the normalised level to basicConfig."""
    captured: dict[str, object] = {}

    def fake_basic_config(**kwargs: object) -> None:
        captured.update(kwargs)

    monkeypatch.setattr("fleetsync.logging.basicConfig", fake_basic_config)

    assert configure_logging("nope") == ("INFO", True)
    assert captured == {"level": "INFO", "force": False}
