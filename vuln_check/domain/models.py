from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, FrozenSet, List, Mapping, Optional, Tuple

from ..errors import UpstreamError

GITHUB_WEB_URL = "https://github.com"


@dataclass(frozen=True)
class PageRequest:
    cursor: Optional[str]
    page_size: int


@dataclass(frozen=True)
class PageInfo:
    end_cursor: Optional[str]
    has_next_page: bool


@dataclass(frozen=True)
class Alert:
    """One Dependabot vulnerability alert on a repository."""

    package_name: str
    affected_range: str
    fixed_in_version: Optional[str]
    summary: str
    dismissed_at: Optional[datetime] = None

    @property
    def dismissed(self) -> bool:
        return self.dismissed_at is not None


@dataclass(frozen=True)
class Repository:
    full_name: str
    topics: FrozenSet[str] = field(default_factory=frozenset)
    alerts: Tuple[Alert, ...] = ()

    @property
    def url(self) -> str:
        return f"{GITHUB_WEB_URL}/{self.full_name}"

    @property
    def has_undismissed_alerts(self) -> bool:
        return any(not a.dismissed for a in self.alerts)


@dataclass(frozen=True)
class RepositoryPage:
    repositories: List[Repository]
    page_info: PageInfo


@dataclass(frozen=True)
class ScanResult:
    vulnerable_repos: Tuple[Repository, ...] = ()
    repositories_scanned: int = 0

    @property
    def total_alerts(self) -> int:
        # Every alert of a qualifying repository counts, dismissed ones included.
        return sum(len(r.alerts) for r in self.vulnerable_repos)

    @property
    def total_repos(self) -> int:
        return len(self.vulnerable_repos)

    @property
    def ok(self) -> bool:
        return not self.vulnerable_repos


# ---------------------------------------------------------------------------
# Strict parsing of GraphQL payloads
# ---------------------------------------------------------------------------


def _require(obj: Any, key: str, where: str) -> Any:
    if not isinstance(obj, Mapping):
        raise UpstreamError(f"Malformed response: expected an object at {where}")
    if key not in obj or obj[key] is None:
        raise UpstreamError(f"Malformed response: missing '{key}' at {where}")
    return obj[key]


def _require_str(obj: Any, key: str, where: str) -> str:
    value = _require(obj, key, where)
    if not isinstance(value, str):
        raise UpstreamError(f"Malformed response: '{key}' at {where} is not a string")
    return value


def _require_list(obj: Any, key: str, where: str) -> list:
    value = _require(obj, key, where)
    if not isinstance(value, list):
        raise UpstreamError(f"Malformed response: '{key}' at {where} is not a list")
    return value


def _parse_timestamp(value: str, where: str) -> datetime:
    # GitHub uses 'Z' for UTC. datetime.fromisoformat expects '+00:00'.
    text = value[:-1] + "+00:00" if value.endswith("Z") else value
    try:
        return datetime.fromisoformat(text)
    except ValueError as exc:
        raise UpstreamError(f"Malformed response: bad timestamp {value!r} at {where}") from exc


def parse_alert(node: Any, where: str) -> Alert:
    vulnerability = _require(node, "securityVulnerability", where)
    advisory = _require(node, "securityAdvisory", where)

    package = _require(vulnerability, "package", f"{where}.securityVulnerability")
    patched = vulnerability.get("firstPatchedVersion") if isinstance(vulnerability, Mapping) else None
    fixed_in = None
    if patched is not None:
        fixed_in = _require_str(patched, "identifier", f"{where}.firstPatchedVersion")

    dismissed_raw = node.get("dismissedAt")
    dismissed_at = _parse_timestamp(dismissed_raw, f"{where}.dismissedAt") if dismissed_raw else None

    return Alert(
        package_name=_require_str(package, "name", f"{where}.package"),
        affected_range=_require_str(vulnerability, "vulnerableVersionRange", f"{where}.securityVulnerability"),
        fixed_in_version=fixed_in,
        summary=_require_str(advisory, "summary", f"{where}.securityAdvisory"),
        dismissed_at=dismissed_at,
    )


def parse_repository(node: Any, where: str, with_topics: bool = False) -> Repository:
    full_name = _require_str(node, "nameWithOwner", where)
    where = f"{where}({full_name})"

    alerts_conn = _require(node, "vulnerabilityAlerts", where)
    alert_nodes = _require_list(alerts_conn, "nodes", f"{where}.vulnerabilityAlerts")
    alerts = tuple(
        parse_alert(a, f"{where}.vulnerabilityAlerts[{i}]") for i, a in enumerate(alert_nodes)
    )

    # Required when the topics variant of the query was sent.
    topics: FrozenSet[str] = frozenset()
    if with_topics:
        topics_conn = _require(node, "repositoryTopics", where)
    else:
        topics_conn = node.get("repositoryTopics")
    if topics_conn is not None:
        topic_nodes = _require_list(topics_conn, "nodes", f"{where}.repositoryTopics")
        topics = frozenset(
            _require_str(_require(t, "topic", f"{where}.repositoryTopics[{i}]"), "name", f"{where}.topic")
            for i, t in enumerate(topic_nodes)
        )

    return Repository(full_name=full_name, topics=topics, alerts=alerts)


def parse_repository_page(
    payload: Mapping[str, Any],
    organization: str,
    with_topics: bool = False,
) -> RepositoryPage:
    data = _require(payload, "data", "response")
    if not isinstance(data, Mapping):
        raise UpstreamError("Malformed response: 'data' is not an object")
    org = data.get("organization")
    if org is None:
        raise UpstreamError(f"Organization '{organization}' not found or not accessible with this token")

    repos = _require(org, "repositories", "data.organization")
    page_info_raw = _require(repos, "pageInfo", "data.organization.repositories")
    has_next = _require(page_info_raw, "hasNextPage", "pageInfo")
    if not isinstance(has_next, bool):
        raise UpstreamError("Malformed response: 'hasNextPage' is not a boolean")
    end_cursor = page_info_raw.get("endCursor")
    if has_next and not end_cursor:
        raise UpstreamError("Malformed response: 'hasNextPage' is true but 'endCursor' is missing")

    nodes = _require_list(repos, "nodes", "data.organization.repositories")
    repositories = [parse_repository(n, f"repositories[{i}]", with_topics) for i, n in enumerate(nodes)]

    return RepositoryPage(
        repositories=repositories,
        page_info=PageInfo(end_cursor=end_cursor, has_next_page=has_next),
    )
