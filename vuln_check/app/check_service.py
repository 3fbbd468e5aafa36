from __future__ import annotations

import logging
import traceback
from dataclasses import dataclass
from typing import Callable, Optional

from ..adapters.exporters.prometheus.prometheus_exporter import ScanMetricsExporter
from ..adapters.github.github_client import GitHubClient
from ..config import ScanConfig
from ..domain.scanner import VulnerabilityScanner
from ..errors import UpstreamError, VulnCheckError
from ..ports.github_port import GitHubPort
from .report import EXIT_UNKNOWN, exit_code, format_report, format_unknown

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CheckOutcome:
    output: str
    exit_code: int


class CheckService:
    """
    Runs one scan and turns it into monitoring output plus an exit code
    """

    def __init__(
        self,
        config: ScanConfig,
        client_factory: Optional[Callable[[ScanConfig], GitHubPort]] = None,
        metrics_textfile: Optional[str] = None,
    ) -> None:
        self.config = config
        self.client_factory = client_factory or GitHubClient.from_config
        self.metrics_textfile = metrics_textfile

    def run(self) -> CheckOutcome:
        exporter = ScanMetricsExporter(self.config.organization) if self.metrics_textfile else None

        try:
            client = self.client_factory(self.config)
            try:
                result = VulnerabilityScanner(client, self.config).scan()
            finally:
                close = getattr(client, "close", None)
                if close is not None:
                    close()
        except UpstreamError as e:
            logger.debug("scan of %s failed: %s", self.config.organization, e)
            self._export_failure(exporter)
            cause = f"caused by: {e.__cause__!r}" if e.__cause__ is not None else ""
            return CheckOutcome(format_unknown(str(e), cause), EXIT_UNKNOWN)
        except VulnCheckError as e:
            self._export_failure(exporter)
            return CheckOutcome(format_unknown(str(e)), EXIT_UNKNOWN)
        except Exception as e:
            logger.debug("unexpected failure while scanning %s", self.config.organization, exc_info=True)
            self._export_failure(exporter)
            return CheckOutcome(format_unknown(str(e), traceback.format_exc()), EXIT_UNKNOWN)

        logger.info(
            "%s: %d vulnerable repos, %d alerts",
            self.config.organization,
            result.total_repos,
            result.total_alerts,
        )

        if exporter is not None:
            exporter.update(result)
            self._write(exporter)

        return CheckOutcome(format_report(result), exit_code(result))

    def _export_failure(self, exporter: Optional[ScanMetricsExporter]) -> None:
        if exporter is None:
            return
        exporter.mark_failed()
        self._write(exporter)

    def _write(self, exporter: ScanMetricsExporter) -> None:
        try:
            exporter.write(self.metrics_textfile)
        except OSError as e:
            logger.error("could not write metrics to %s: %s", self.metrics_textfile, e)
