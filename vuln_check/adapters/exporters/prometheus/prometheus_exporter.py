from __future__ import annotations

import logging
from typing import Optional

from prometheus_client import CollectorRegistry, Gauge, write_to_textfile

from ....domain.models import ScanResult

logger = logging.getLogger(__name__)


class ScanMetricsExporter:
    def __init__(self, organization: str, registry: Optional[CollectorRegistry] = None):
        self.organization = organization
        self.registry = registry or CollectorRegistry()

        self.vulnerable_repos = Gauge(
            "github_org_vulnerable_repos",
            "Repositories with at least one undismissed vulnerability alert",
            ["organization"],
            registry=self.registry,
        )

        self.vulnerability_alerts = Gauge(
            "github_org_vulnerability_alerts",
            "Vulnerability alerts on vulnerable repositories",
            ["organization"],
            registry=self.registry,
        )

        self.repositories_scanned = Gauge(
            "github_org_repositories_scanned",
            "Repositories fetched during the last scan",
            ["organization"],
            registry=self.registry,
        )

        self.scan_success = Gauge(
            "github_org_scan_success",
            "1 if the last scan read every page, 0 if it failed",
            ["organization"],
            registry=self.registry,
        )

    def update(self, result: ScanResult) -> None:
        self.vulnerable_repos.labels(self.organization).set(result.total_repos)
        self.vulnerability_alerts.labels(self.organization).set(result.total_alerts)
        self.repositories_scanned.labels(self.organization).set(result.repositories_scanned)
        self.scan_success.labels(self.organization).set(1)

    def mark_failed(self) -> None:
        # Counts from a failed scan would be partial; only the failure is exported.
        self.scan_success.labels(self.organization).set(0)

    def write(self, path: str) -> None:
        """Write the gauges for node_exporter's textfile collector."""
        write_to_textfile(path, self.registry)
        logger.info("wrote scan metrics to %s", path)
