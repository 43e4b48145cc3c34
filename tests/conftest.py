"""Shared fixtures for the mbox-ingest test suite."""

from pathlib import Path
from typing import Callable

import pytest

from mbox_ingest.config.settings import get_settings

SETTINGS_ENV = (
    "MBOX_INGEST_MBOX_FILES",
    "MBOX_INGEST_ENCODING",
    "MBOX_INGEST_ENCODING_ERRORS",
    "MBOX_INGEST_DATABASE_URL",
    "MBOX_INGEST_LOG_LEVEL",
)

TWO_MESSAGES = (
    "From a@x 01234567890123456789012extra\n"
    "Subject: hi\n"
    "\n"
    "hello\n"
    "\n"
    "From b@y 01234567890123456789012\n"
    "Subject: bye\n"
    "\n"
    "world\n"
)


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Run every test in an empty directory with no settings in the environment."""
    for name in SETTINGS_ENV:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def write_mbox(tmp_path: Path) -> Callable[..., Path]:
    """Write mbox text to a file under tmp_path and return its path."""

    def _write(text: str, name: str = "archive.mbox") -> Path:
        path = tmp_path / name
        path.write_text(text, encoding="utf-8", newline="")
        return path

    return _write


@pytest.fixture
def two_messages() -> str:
    return TWO_MESSAGES
