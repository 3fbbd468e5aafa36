import pytest

from vuln_check.config import DEFAULT_EXEMPT_TOPIC, GITHUB_GRAPHQL_URL, ScanConfig
from vuln_check.errors import UsageError


def test_defaults():
    config = ScanConfig(token="t0ken", organization="acme")
    assert config.page_size == 100
    assert config.supports_topic_exemption is True
    assert config.exempt_topic == DEFAULT_EXEMPT_TOPIC == "govpress"
    assert config.include_forks is True
    assert config.filter_pattern is None
    assert config.api_url == GITHUB_GRAPHQL_URL
    assert config.timeout == 30.0


def test_config_is_frozen():
    config = ScanConfig(token="t0ken", organization="acme")
    with pytest.raises(Exception):
        config.organization = "other"


@pytest.mark.parametrize(
    "kwargs, message",
    [
        ({"token": "", "organization": "acme"}, "access token"),
        ({"token": "t0ken", "organization": "  "}, "organization name"),
        ({"token": "t0ken", "organization": "acme", "page_size": 50}, "Page size"),
        ({"token": "t0ken", "organization": "acme", "timeout": 0}, "Timeout"),
        ({"token": "t0ken", "organization": "acme", "filter_pattern": "[a-"}, "Invalid filter pattern"),
    ],
)
def test_invalid_values_are_usage_errors(kwargs, message):
    with pytest.raises(UsageError, match=message):
        ScanConfig(**kwargs)


def test_from_env_reads_environment(monkeypatch):
    monkeypatch.setenv("GITHUB_TOKEN", "env-token")
    monkeypatch.setenv("GITHUB_ORGANIZATION", "env-org")
    monkeypatch.setenv("GITHUB_REPO_FILTER", "^https://github.com/env-org/api-")
    monkeypatch.setenv("GITHUB_PAGE_SIZE", "25")
    monkeypatch.setenv("GITHUB_EXEMPT_TOPIC", "skip-me")
    monkeypatch.setenv("GITHUB_TOPIC_EXEMPTION", "false")
    monkeypatch.setenv("GITHUB_INCLUDE_FORKS", "0")
    monkeypatch.setenv("GITHUB_TIMEOUT", "12")

    config = ScanConfig.from_env()

    assert config.token == "env-token"
    assert config.organization == "env-org"
    assert config.filter_pattern == "^https://github.com/env-org/api-"
    assert config.page_size == 25
    assert config.exempt_topic == "skip-me"
    assert config.supports_topic_exemption is False
    assert config.include_forks is False
    assert config.timeout == 12.0


def test_explicit_values_win_over_environment(monkeypatch):
    monkeypatch.setenv("GITHUB_TOKEN", "env-token")
    monkeypatch.setenv("GITHUB_ORGANIZATION", "env-org")

    config = ScanConfig.from_env(token="cli-token", organization="cli-org")

    assert config.token == "cli-token"
    assert config.organization == "cli-org"


def test_from_env_bad_page_size(monkeypatch):
    monkeypatch.setenv("GITHUB_PAGE_SIZE", "lots")
    with pytest.raises(UsageError, match="GITHUB_PAGE_SIZE"):
        ScanConfig.from_env(token="t0ken", organization="acme")


def test_from_env_loads_dotenv(monkeypatch):
    calls = []
    monkeypatch.setattr("vuln_check.config.load_dotenv", lambda *a, **k: calls.append(1) or True)
    ScanConfig.from_env(token="t0ken", organization="acme")
    assert calls == [1]


def test_explicit_empty_filter_overrides_environment(monkeypatch):
    monkeypatch.setenv("GITHUB_REPO_FILTER", "api-")
    config = ScanConfig.from_env(token="t0ken", organization="acme", filter_pattern="")
    assert config.filter_pattern == ""


def test_filter_taken_from_environment_when_not_given(monkeypatch):
    monkeypatch.setenv("GITHUB_REPO_FILTER", "api-")
    assert ScanConfig.from_env(token="t0ken", organization="acme").filter_pattern == "api-"
