"""
router-dashboard command line.

Usage:
    router-dashboard <command> [args]
"""

from __future__ import annotations

import argparse
import sys
from typing import Sequence

from router_dashboard import __version__
from router_dashboard.cli import (
    check_grafana_command,
    generate_dashboard_command,
    list_queries_command,
    push_dashboard_command,
)
from router_dashboard.config import get_settings
from router_dashboard.core.errors import main_with_error_handling
from router_dashboard.logging import bind_context, configure_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="router-dashboard",
        description="Generate the Router Monitor Grafana dashboard",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--log-level", help="Log level (default: ROUTER_DASHBOARD_LOG_LEVEL or INFO)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate_parser = subparsers.add_parser("generate", help="Generate the dashboard JSON file")
    generate_parser.add_argument("--output", "-o", help="Output file path (default: router-monitor-dashboard.json)")
    generate_parser.add_argument("--dry-run", action="store_true", help="Print dashboard JSON without writing file")
    generate_parser.add_argument("--push", action="store_true", help="Upload the dashboard to Grafana after writing")
    generate_parser.add_argument("--grafana-url", help="Grafana base URL for --push (or ROUTER_DASHBOARD_GRAFANA_URL)")

    push_parser = subparsers.add_parser("push", help="Upload an existing dashboard JSON file to Grafana")
    push_parser.add_argument("dashboard_file", help="Path to dashboard JSON")
    push_parser.add_argument("--grafana-url", help="Grafana base URL (or ROUTER_DASHBOARD_GRAFANA_URL)")

    check_parser = subparsers.add_parser("check-grafana", help="Check that Grafana is reachable")
    check_parser.add_argument("--grafana-url", help="Grafana base URL (or ROUTER_DASHBOARD_GRAFANA_URL)")

    subparsers.add_parser("queries", help="Print the network traffic PromQL queries")

    return parser


@main_with_error_handling()
def setup_logging(level: str | None = None) -> int:
    """Configure logging from --log-level or ROUTER_DASHBOARD_LOG_LEVEL."""
    configure_logging(level or get_settings().log_level)
    return 0


def run(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    exit_code = setup_logging(args.log_level)
    if exit_code:
        return exit_code
    log = bind_context(command=args.command)
    log.debug("command_started")

    if args.command == "generate":
        return generate_dashboard_command(
            output=args.output,
            dry_run=args.dry_run,
            push=args.push,
            grafana_url=args.grafana_url,
        )

    if args.command == "push":
        return push_dashboard_command(args.dashboard_file, grafana_url=args.grafana_url)

    if args.command == "check-grafana":
        return check_grafana_command(grafana_url=args.grafana_url)

    return list_queries_command()


def main(argv: Sequence[str] | None = None) -> None:
    sys.exit(run(argv))


if __name__ == "__main__":
    main()
