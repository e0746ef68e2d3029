from __future__ import annotations

from typing import List

import pytest

from panel.services.database import DatabaseConnectionError


SETTINGS_ENV_KEYS = (
    "DB_CONNECTION",
    "DB_HOST",
    "DB_PORT",
    "DB_DATABASE",
    "DB_USERNAME",
    "DB_PASSWORD",
    "DB_PROBE_TIMEOUT_S",
    "HOST",
    "PORT",
    "RELOAD",
    "WORKERS",
    "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def _clean_settings_env(monkeypatch):
    for key in SETTINGS_ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


class ScriptedInput:
    """Replays canned answers and records every prompt shown."""

    def __init__(self, *answers: str, log: List[str] | None = None):
        self.answers = list(answers)
        self.prompts: List[str] = []
        self.log = log if log is not None else []

    def __call__(self, prompt: str) -> str:
        self.prompts.append(prompt)
        self.log.append(prompt)
        if not self.answers:
            raise AssertionError(f"unexpected prompt: {prompt!r}")
        return self.answers.pop(0)


class FakeProber:
    def __init__(self, failures: int = 0, message: str = "Connection refused"):
        self.failures = failures
        self.message = message
        self.probed = []
        self.disconnects = 0

    def probe(self, profile) -> None:
        self.probed.append(profile.model_copy())
        if len(self.probed) <= self.failures:
            raise DatabaseConnectionError(profile.driver, self.message)

    def disconnect(self) -> None:
        self.disconnects += 1


@pytest.fixture
def env_file(tmp_path):
    path = tmp_path / ".env"
    path.write_text("APP_NAME=Panel\n", encoding="utf-8")
    return path
