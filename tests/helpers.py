from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence


def alert_node(
    package: str = "lodash",
    vulnerable_range: str = "< 4.17.21",
    fixed_in: Optional[str] = "4.17.21",
    summary: str = "Prototype pollution",
    dismissed_at: Optional[str] = None,
) -> Dict[str, Any]:
    return {
        "dismissedAt": dismissed_at,
        "securityAdvisory": {"summary": summary},
        "securityVulnerability": {
            "firstPatchedVersion": {"identifier": fixed_in} if fixed_in is not None else None,
            "package": {"name": package},
            "vulnerableVersionRange": vulnerable_range,
        },
    }


def dismissed_alert_node(**kwargs: Any) -> Dict[str, Any]:
    kwargs.setdefault("dismissed_at", "2024-03-01T12:00:00Z")
    return alert_node(**kwargs)


def repo_node(
    name: str,
    alerts: Sequence[Dict[str, Any]] = (),
    topics: Optional[Sequence[str]] = (),
) -> Dict[str, Any]:
    """Pass topics=None to leave repositoryTopics out, as the no-topics query does."""
    node: Dict[str, Any] = {
        "nameWithOwner": name,
        "vulnerabilityAlerts": {"nodes": list(alerts)},
    }
    if topics is not None:
        node["repositoryTopics"] = {"nodes": [{"topic": {"name": t}} for t in topics]}
    return node


def page_payload(
    nodes: Sequence[Dict[str, Any]],
    end_cursor: Optional[str] = None,
    has_next: bool = False,
) -> Dict[str, Any]:
    return {
        "data": {
            "organization": {
                "repositories": {
                    "pageInfo": {"endCursor": end_cursor, "hasNextPage": has_next},
                    "nodes": list(nodes),
                }
            }
        }
    }


def paginate(pages: Sequence[Sequence[Dict[str, Any]]]) -> List[Dict[str, Any]]:
    """Chain node batches into payloads with cursors c1, c2, ..."""
    payloads = []
    for i, nodes in enumerate(pages, start=1):
        last = i == len(pages)
        payloads.append(page_payload(nodes, end_cursor=f"c{i}", has_next=not last))
    return payloads


class FakeGitHub:
    """Replays canned GraphQL responses and records every call."""

    def __init__(self, responses: Sequence[Any]):
        self.responses = list(responses)
        self.calls: List[Dict[str, Any]] = []
        self.closed = False

    def graphql(self, query: str, variables: Dict[str, Any]) -> Dict[str, Any]:
        self.calls.append({"query": query, "variables": dict(variables)})
        if not self.responses:
            raise AssertionError("unexpected extra request")
        response = self.responses.pop(0)
        if isinstance(response, BaseException):
            raise response
        return response

    def close(self) -> None:
        self.closed = True


