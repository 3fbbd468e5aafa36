from .config import ScanConfig
from .errors import UpstreamError, UsageError, VulnCheckError
from .domain.models import Alert, PageInfo, PageRequest, Repository, RepositoryPage, ScanResult
from .domain.scanner import VulnerabilityScanner
from .adapters.github.github_client import GitHubClient
from .app.check_service import CheckOutcome, CheckService
from .app.report import format_report, status_line

__all__ = [
    "ScanConfig",
    "UpstreamError",
    "UsageError",
    "VulnCheckError",
    "Alert",
    "PageInfo",
    "PageRequest",
    "Repository",
    "RepositoryPage",
    "ScanResult",
    "VulnerabilityScanner",
    "GitHubClient",
    "CheckOutcome",
    "CheckService",
    "format_report",
    "status_line",
]
