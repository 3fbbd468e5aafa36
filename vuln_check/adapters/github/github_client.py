from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import Any, Dict

import requests
from requests import Response
from requests.exceptions import RequestException
from requests.exceptions import Timeout as RequestsTimeout

from ...config import DEFAULT_TIMEOUT, GITHUB_GRAPHQL_URL, ScanConfig
from ...errors import UpstreamError

logger = logging.getLogger(__name__)

# Dependabot vulnerability alerts were served behind this preview media type.
VIXEN_PREVIEW = "application/vnd.github.vixen-preview+json"


@dataclass
class GitHubClient:
    """Small helper around the GitHub GraphQL endpoint.

    Every failure surfaces as UpstreamError. There is no retry: one failed
    request fails the whole check.
    """

    token: str

    graphql_url: str = GITHUB_GRAPHQL_URL
    timeout: float = DEFAULT_TIMEOUT

    _session: requests.Session = field(default_factory=requests.Session, init=False, repr=False)

    def __post_init__(self) -> None:
        if not self.token:
            raise ValueError("token is required")

    @classmethod
    def from_config(cls, config: ScanConfig) -> "GitHubClient":
        return cls(token=config.token, graphql_url=config.api_url, timeout=config.timeout)

    @property
    def graphql_headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.token}",
            "Accept": VIXEN_PREVIEW,
            "Content-Type": "application/json",
            "User-Agent": "check-github-vulnerabilities",
        }

    def graphql(self, query: str, variables: Dict[str, Any]) -> Dict[str, Any]:
        resp = self._post(json={"query": query, "variables": variables})

        try:
            payload = resp.json()
        except ValueError as exc:
            raise UpstreamError(
                f"GitHub returned a non-JSON response: {exc}", status_code=resp.status_code
            ) from exc

        if not isinstance(payload, dict):
            raise UpstreamError("GitHub returned an unexpected response body", status_code=resp.status_code)

        errors = payload.get("errors")
        if errors:
            messages = "; ".join(
                str(e.get("message", e)) if isinstance(e, dict) else str(e) for e in errors
            )
            raise UpstreamError(f"GraphQL errors: {messages}", status_code=resp.status_code)

        return payload

    def _post(self, *, json: Dict[str, Any]) -> Response:
        try:
            resp = self._session.post(
                self.graphql_url,
                headers=self.graphql_headers,
                json=json,
                timeout=self.timeout,
            )
        except RequestsTimeout as exc:
            raise UpstreamError(f"Request to {self.graphql_url} timed out after {self.timeout}s") from exc
        except RequestException as exc:
            raise UpstreamError(f"Request to {self.graphql_url} failed: {exc}") from exc

        logger.debug("POST %s -> %s", self.graphql_url, resp.status_code)

        if resp.status_code == 401:
            raise UpstreamError("GitHub rejected the access token (401 Unauthorized)", status_code=401)

        if resp.status_code in (403, 429) and resp.headers.get("X-RateLimit-Remaining") == "0":
            reset = resp.headers.get("X-RateLimit-Reset", "unknown")
            raise UpstreamError(
                f"GitHub API rate limit exceeded (resets at {reset})", status_code=resp.status_code
            )

        try:
            resp.raise_for_status()
        except requests.HTTPError as exc:
            raise UpstreamError(str(exc), status_code=resp.status_code) from exc

        return resp

    def close(self) -> None:
        self._session.close()

    def __enter__(self) -> "GitHubClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
