"""Conftest for s3cache tests."""

import os

import pytest

RUNNER_PREFIXES = ("INPUT_", "STATE_", "AWS_", "GITHUB_", "S3CACHE_")


@pytest.fixture(autouse=True)
def clean_runner_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove runner and AWS variables so each test starts from a bare environment."""
    for name in list(os.environ):
        if name.startswith(RUNNER_PREFIXES):
            monkeypatch.delenv(name)
    monkeypatch.delenv("RUNNER_DEBUG", raising=False)
