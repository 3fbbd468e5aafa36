from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from .app.check_service import CheckService
from .app.report import EXIT_UNKNOWN, format_unknown
from .config import PAGE_SIZES, ScanConfig
from .errors import UsageError


def setup_logging(verbose: bool = False) -> None:
    """Log to stderr, and only with -v; stdout carries the whole monitoring output."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.CRITICAL,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="check-github-vulnerabilities",
        description="Report open Dependabot vulnerability alerts across a GitHub organization",
    )
    parser.add_argument("-o", "--organization", help="The name of the GitHub organization (env: GITHUB_ORGANIZATION)")
    parser.add_argument("-t", "--token", help="A GitHub personal access token (env: GITHUB_TOKEN)")
    parser.add_argument("-f", "--filter", dest="filter_pattern", help="A regex to filter repository URLs")
    parser.add_argument(
        "--page-size",
        type=int,
        choices=PAGE_SIZES,
        help="Repositories requested per page (default: 100)",
    )
    parser.add_argument("--exempt-topic", help="Repository topic that opts a repository out (default: govpress)")
    parser.add_argument(
        "--no-topic-exemption",
        action="store_true",
        help="Do not fetch topics and do not exempt any repository",
    )
    parser.add_argument("--exclude-forks", action="store_true", help="Skip forked repositories")
    parser.add_argument("--timeout", type=float, help="Per-request timeout in seconds (default: 30)")
    parser.add_argument("--api-url", help="GraphQL endpoint (default: https://api.github.com/graphql)")
    parser.add_argument(
        "--prometheus-textfile",
        help="Also write the scan counts as Prometheus gauges to this file",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging on stderr")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(verbose=args.verbose)

    try:
        config = ScanConfig.from_env(
            token=args.token,
            organization=args.organization,
            filter_pattern=args.filter_pattern,
            page_size=args.page_size,
            supports_topic_exemption=False if args.no_topic_exemption else None,
            exempt_topic=args.exempt_topic,
            include_forks=False if args.exclude_forks else None,
            api_url=args.api_url,
            timeout=args.timeout,
        )
    except UsageError as e:
        print(format_unknown(f"{e} - usage: {parser.format_help()}"))
        return EXIT_UNKNOWN

    outcome = CheckService(config, metrics_textfile=args.prometheus_textfile).run()
    print(outcome.output)
    return outcome.exit_code


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
