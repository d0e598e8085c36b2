"""CLI commands for generating and publishing the dashboard."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

from router_dashboard.cli import ux
from router_dashboard.config import get_settings
from router_dashboard.core.errors import (
    ConfigurationError,
    ProviderError,
    ValidationError,
    main_with_error_handling,
)
from router_dashboard.dashboards.router_monitor import (
    DASHBOARD_UID,
    build_router_monitor_dashboard,
    traffic_queries,
)
from router_dashboard.dashboards.sdk_adapter import SDKAdapter
from router_dashboard.dashboards.writer import (
    post_dashboard,
    provider_from_settings,
    write_dashboard_and_post_to_grafana,
)


def _count_panels(panels: list[dict[str, Any]]) -> int:
    count = 0
    for panel in panels:
        if panel.get("type") == "row":
            count += len(panel.get("panels") or [])
        else:
            count += 1
    return count


@main_with_error_handling()
def generate_dashboard_command(
    output: Optional[str] = None,
    dry_run: bool = False,
    push: bool = False,
    grafana_url: Optional[str] = None,
) -> int:
    """Generate the Router Monitor dashboard.

    Args:
        output: Output file path (default: settings.output_file)
        dry_run: Print dashboard JSON without writing the file
        push: Upload to Grafana after writing; nothing is uploaded without it
        grafana_url: Grafana base URL for the upload, overrides ROUTER_DASHBOARD_GRAFANA_URL

    Returns:
        Exit code
    """
    if grafana_url and not push:
        raise ConfigurationError("--grafana-url is only used together with --push", {"url": grafana_url})

    settings = get_settings()
    dashboard = build_router_monitor_dashboard()

    if dry_run:
        print(SDKAdapter.serialize_dashboard(dashboard))
        return 0

    ux.header("Router Monitor: Generate Grafana Dashboard")

    provider = None
    if push:
        provider = provider_from_settings(settings, grafana_url)
        if provider is None:
            raise ConfigurationError(
                "Grafana URL not configured",
                {"hint": "set ROUTER_DASHBOARD_GRAFANA_URL or pass --grafana-url"},
            )

    data = SDKAdapter.to_dict(dashboard)
    ux.print_key_value(
        {
            "Title": data["title"],
            "UID": data["uid"],
            "Panels": str(_count_panels(data.get("panels", []))),
            "Variables": ", ".join(v["name"] for v in data["templating"]["list"]),
        }
    )

    result = write_dashboard_and_post_to_grafana(
        dashboard,
        output or settings.output_file,
        settings=settings,
        provider=provider,
        upload=push,
    )
    ux.success(f"Dashboard written to {result.path}")
    if result.posted:
        ux.success(f"Dashboard pushed to Grafana: {result.url}")
    return 0


@main_with_error_handling()
def push_dashboard_command(dashboard_file: str, grafana_url: Optional[str] = None) -> int:
    """Upload an existing dashboard JSON file to Grafana."""
    settings = get_settings()
    provider = provider_from_settings(settings, grafana_url)
    if provider is None:
        raise ConfigurationError("Grafana URL not configured", {"file": dashboard_file})

    path = Path(dashboard_file)
    try:
        data = json.loads(path.read_text())
    except FileNotFoundError as exc:
        raise ConfigurationError("Dashboard file not found", {"file": dashboard_file}) from exc
    except json.JSONDecodeError as exc:
        raise ValidationError(f"Dashboard file is not valid JSON: {exc}", {"file": dashboard_file}) from exc

    # Accept both a bare dashboard and a Grafana API payload.
    if isinstance(data, dict) and isinstance(data.get("dashboard"), dict):
        data = data["dashboard"]
    if not isinstance(data, dict):
        raise ValidationError("Dashboard JSON must be an object", {"file": dashboard_file})
    data.setdefault("uid", DASHBOARD_UID)

    url = post_dashboard(provider, data, settings.grafana_folder_uid)
    ux.success(f"Dashboard pushed to Grafana: {url}")
    return 0


@main_with_error_handling()
def check_grafana_command(grafana_url: Optional[str] = None) -> int:
    """Check that Grafana is reachable."""
    provider = provider_from_settings(get_settings(), grafana_url)
    if provider is None:
        raise ConfigurationError("Grafana URL not configured")

    health = provider.health_check()
    if health.status != "healthy":
        raise ProviderError("Grafana unreachable", {"url": provider.base_url, "reason": health.details})

    ux.success(f"Grafana healthy at {provider.base_url} (version {health.details or 'unknown'})")
    return 0


@main_with_error_handling()
def list_queries_command() -> int:
    """Print the network traffic PromQL, one block per panel."""
    for title, expr in traffic_queries():
        ux.console.print(f"# {title}", style="bold", markup=False)
        ux.console.print(expr.strip(), markup=False, highlight=False, soft_wrap=True)
        ux.console.print()
    return 0
