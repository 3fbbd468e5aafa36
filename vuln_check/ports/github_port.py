from __future__ import annotations

from typing import Any, Dict, Protocol


class GitHubPort(Protocol):
    """Port used by the scanner to talk to GitHub.

    Keeps the scanner independent of the HTTP client so tests can hand it a
    fake that replays canned GraphQL payloads.
    """

    def graphql(self, query: str, variables: Dict[str, Any]) -> Dict[str, Any]:
        ...
