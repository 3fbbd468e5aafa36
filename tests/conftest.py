from __future__ import annotations

from typing import Any, Dict

import pytest

from vuln_check.config import ScanConfig

ENV_VARS = (
    "GITHUB_TOKEN",
    "GITHUB_ORGANIZATION",
    "GITHUB_REPO_FILTER",
    "GITHUB_PAGE_SIZE",
    "GITHUB_EXEMPT_TOPIC",
    "GITHUB_TOPIC_EXEMPTION",
    "GITHUB_INCLUDE_FORKS",
    "GITHUB_GRAPHQL_URL",
    "GITHUB_TIMEOUT",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    # Keep a developer's .env out of the tests.
    monkeypatch.setattr("vuln_check.config.load_dotenv", lambda *a, **k: False)
    yield


@pytest.fixture
def config() -> ScanConfig:
    return ScanConfig(token="t0ken", organization="acme")


@pytest.fixture
def make_config():
    def _make(**overrides: Any) -> ScanConfig:
        values: Dict[str, Any] = {"token": "t0ken", "organization": "acme"}
        values.update(overrides)
        return ScanConfig(**values)

    return _make
