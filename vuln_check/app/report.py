from __future__ import annotations

from typing import List

from ..domain.models import ScanResult

EXIT_OK = 0
EXIT_WARNING = 1
EXIT_UNKNOWN = 3

OK_STATUS = "OK: No vulnerabilities"


def status_line(result: ScanResult) -> str:
    if result.ok:
        return OK_STATUS
    return f"WARNING: {result.total_alerts} vulnerabilities in {result.total_repos} repos"


def format_report(result: ScanResult) -> str:
    """Render the status line followed by one block per vulnerable repository."""

    lines: List[str] = [status_line(result)]

    for repo in result.vulnerable_repos:
        lines.append(repo.url)
        for alert in repo.alerts:
            lines.append(f"  {alert.package_name} ({alert.affected_range})")
            lines.append(f"  Fixed in: {alert.fixed_in_version or ''}")
            lines.append(f"  Details: {alert.summary}")
            lines.append("")

    return "\n".join(lines)


def format_unknown(message: str, detail: str = "") -> str:
    text = f"UNKNOWN: {message}"
    if detail:
        text += f"\n{detail}"
    return text


def exit_code(result: ScanResult) -> int:
    return EXIT_OK if result.ok else EXIT_WARNING
