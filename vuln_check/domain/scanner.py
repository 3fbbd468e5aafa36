from __future__ import annotations

import logging
import re
from typing import List, Optional, Sequence

from ..adapters.github.queries import repositories_query
from ..config import ScanConfig
from ..errors import UsageError
from ..ports.github_port import GitHubPort
from .models import PageRequest, Repository, RepositoryPage, ScanResult, parse_repository_page

logger = logging.getLogger(__name__)


class VulnerabilityScanner:
    """Finds the repositories of an organization with open Dependabot alerts.

    Pagination is sequential and exhaustive: either every page is read or the
    scan fails with UpstreamError. Only the first 100 alerts of a repository
    are ever seen.
    """

    def __init__(self, client: GitHubPort, config: ScanConfig) -> None:
        self.client = client
        self.config = config

    def _variables(self, org: str, request: PageRequest) -> dict:
        return {
            "login": org,
            "first": request.page_size,
            "after": request.cursor,
            "isFork": None if self.config.include_forks else False,
        }

    def fetch_page(self, org: str, request: PageRequest) -> RepositoryPage:
        payload = self.client.graphql(
            repositories_query(self.config.supports_topic_exemption),
            self._variables(org, request),
        )
        return parse_repository_page(payload, org, with_topics=self.config.supports_topic_exemption)

    def fetch_all_repositories(self, org: str) -> List[Repository]:
        repos: List[Repository] = []
        cursor: Optional[str] = None
        page_number = 0

        while True:
            page_number += 1
            page = self.fetch_page(org, PageRequest(cursor=cursor, page_size=self.config.page_size))
            repos.extend(page.repositories)

            logger.debug(
                "page %d: %d repositories (has_next=%s)",
                page_number,
                len(page.repositories),
                page.page_info.has_next_page,
            )

            if not page.page_info.has_next_page:
                break

            cursor = page.page_info.end_cursor

        logger.info("fetched %d repositories of %s in %d page(s)", len(repos), org, page_number)
        return repos

    def is_exempt(self, repo: Repository) -> bool:
        return self.config.supports_topic_exemption and self.config.exempt_topic in repo.topics

    def select_vulnerable(
        self,
        repos: Sequence[Repository],
        filter_pattern: Optional[str] = None,
    ) -> ScanResult:
        """Keep repositories with at least one undismissed alert.

        Qualifying repositories keep their full alert list, dismissed alerts
        included. When a filter pattern is given it is searched for in the
        repository URL; non-matching repositories are dropped entirely.
        """

        pattern = filter_pattern if filter_pattern is not None else self.config.filter_pattern
        try:
            regex = re.compile(pattern) if pattern else None
        except re.error as exc:
            raise UsageError(f"Invalid filter pattern {pattern!r}: {exc}") from exc

        selected: List[Repository] = []
        for repo in repos:
            if not repo.alerts:
                continue
            if not repo.has_undismissed_alerts:
                continue
            if self.is_exempt(repo):
                logger.debug("skipping %s: exempt via topic %r", repo.full_name, self.config.exempt_topic)
                continue
            if regex is not None and not regex.search(repo.url):
                continue
            selected.append(repo)

        return ScanResult(vulnerable_repos=tuple(selected), repositories_scanned=len(repos))

    def scan(self, org: Optional[str] = None) -> ScanResult:
        return self.select_vulnerable(self.fetch_all_repositories(org or self.config.organization))
