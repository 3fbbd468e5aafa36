from __future__ import annotations

from typing import Optional


class VulnCheckError(Exception):
    """Base class for errors the check reports as UNKNOWN."""


class UsageError(VulnCheckError):
    """Invocation is missing or has invalid parameters. Raised before any request."""


class UpstreamError(VulnCheckError):
    """The GitHub API could not deliver a complete, well-formed answer.

    Covers transport failures, timeouts, non-2xx responses, GraphQL errors and
    responses that do not match the expected schema. Always fatal for the scan.
    """

    def __init__(self, message: str, *, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code
