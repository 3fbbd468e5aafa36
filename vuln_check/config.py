from __future__ import annotations

import os
import re
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from .errors import UsageError

GITHUB_GRAPHQL_URL = "https://api.github.com/graphql"

PAGE_SIZES = (25, 100)
DEFAULT_PAGE_SIZE = 100
DEFAULT_EXEMPT_TOPIC = "govpress"
DEFAULT_TIMEOUT = 30.0


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class ScanConfig:
    """Everything one check run needs. Built once at startup and passed around."""

    token: str
    organization: str
    filter_pattern: Optional[str] = None

    page_size: int = DEFAULT_PAGE_SIZE
    supports_topic_exemption: bool = True
    exempt_topic: str = DEFAULT_EXEMPT_TOPIC
    include_forks: bool = True

    api_url: str = GITHUB_GRAPHQL_URL
    timeout: float = DEFAULT_TIMEOUT

    def __post_init__(self) -> None:
        if not (self.token or "").strip():
            raise UsageError("Missing GitHub personal access token")
        if not (self.organization or "").strip():
            raise UsageError("Missing GitHub organization name")
        if self.page_size not in PAGE_SIZES:
            raise UsageError(f"Page size must be one of {PAGE_SIZES}, got {self.page_size}")
        if self.timeout <= 0:
            raise UsageError(f"Timeout must be positive, got {self.timeout}")
        if self.filter_pattern is not None:
            try:
                re.compile(self.filter_pattern)
            except re.error as exc:
                raise UsageError(f"Invalid filter pattern {self.filter_pattern!r}: {exc}") from exc

    @classmethod
    def from_env(
        cls,
        *,
        token: Optional[str] = None,
        organization: Optional[str] = None,
        filter_pattern: Optional[str] = None,
        page_size: Optional[int] = None,
        supports_topic_exemption: Optional[bool] = None,
        exempt_topic: Optional[str] = None,
        include_forks: Optional[bool] = None,
        api_url: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> "ScanConfig":
        """Merge explicit values over the environment (and a .env file, if any)."""

        load_dotenv()

        if page_size is None:
            raw = os.getenv("GITHUB_PAGE_SIZE")
            try:
                page_size = int(raw) if raw else DEFAULT_PAGE_SIZE
            except ValueError as exc:
                raise UsageError(f"GITHUB_PAGE_SIZE must be an integer, got {raw!r}") from exc

        if timeout is None:
            raw = os.getenv("GITHUB_TIMEOUT")
            try:
                timeout = float(raw) if raw else DEFAULT_TIMEOUT
            except ValueError as exc:
                raise UsageError(f"GITHUB_TIMEOUT must be a number, got {raw!r}") from exc

        return cls(
            token=(token or os.getenv("GITHUB_TOKEN") or "").strip(),
            organization=(organization or os.getenv("GITHUB_ORGANIZATION") or "").strip(),
            filter_pattern=(
                filter_pattern if filter_pattern is not None else os.getenv("GITHUB_REPO_FILTER") or None
            ),
            page_size=page_size,
            supports_topic_exemption=(
                supports_topic_exemption
                if supports_topic_exemption is not None
                else _env_flag("GITHUB_TOPIC_EXEMPTION", True)
            ),
            exempt_topic=exempt_topic or os.getenv("GITHUB_EXEMPT_TOPIC") or DEFAULT_EXEMPT_TOPIC,
            include_forks=(
                include_forks if include_forks is not None else _env_flag("GITHUB_INCLUDE_FORKS", True)
            ),
            api_url=api_url or os.getenv("GITHUB_GRAPHQL_URL") or GITHUB_GRAPHQL_URL,
            timeout=timeout,
        )
