"""Write a dashboard to disk and optionally upload it to Grafana."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import structlog
from grafana_foundation_sdk.models import dashboard as dashboard_models

from router_dashboard.config import Settings, get_settings
from router_dashboard.dashboards.sdk_adapter import SDKAdapter
from router_dashboard.providers.grafana import GrafanaProvider

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class WriteResult:
    path: Path
    posted: bool = False
    url: str | None = None


def provider_from_settings(settings: Settings, grafana_url: str | None = None) -> GrafanaProvider | None:
    url = grafana_url or settings.grafana_url
    if not url:
        return None
    return GrafanaProvider(
        url=url,
        token=settings.grafana_token,
        timeout=settings.http_timeout,
        org_id=settings.grafana_org_id,
    )


def post_dashboard(
    provider: GrafanaProvider,
    dashboard: dict[str, Any],
    folder_uid: str | None = None,
) -> str:
    """Upload dashboard JSON and return its Grafana URL."""
    uid = dashboard.get("uid") or ""
    response = provider.dashboard(uid).apply(
        {
            "dashboard": dashboard,
            "folderUid": folder_uid,
            "message": f"Generated {dashboard.get('title', uid)} dashboard",
        }
    )
    url = response.get("url")
    full_url = f"{provider.base_url}{url}" if url else provider.dashboard_url(uid)
    logger.info("dashboard_posted", uid=uid, url=full_url, version=response.get("version"))
    return full_url


def write_dashboard_and_post_to_grafana(
    dashboard: dashboard_models.Dashboard,
    filename: str | Path | None = None,
    *,
    settings: Settings | None = None,
    provider: GrafanaProvider | None = None,
    upload: bool = True,
) -> WriteResult:
    """
    Serialize ``dashboard`` to ``filename`` and POST it to Grafana.

    With ``upload=False`` the file is only written. Otherwise the upload
    happens when a provider is given or a Grafana URL is configured.
    Errors are not caught or retried.
    """
    settings = settings or get_settings()
    path = Path(filename or settings.output_file)

    json_str = SDKAdapter.serialize_dashboard(dashboard)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json_str + "\n")
    logger.info("dashboard_written", path=str(path), bytes=len(json_str) + 1)

    if not upload:
        logger.info("grafana_push_skipped", reason="upload not requested")
        return WriteResult(path=path)

    provider = provider or provider_from_settings(settings)
    if provider is None:
        logger.info("grafana_push_skipped", reason="no grafana url configured")
        return WriteResult(path=path)

    url = post_dashboard(provider, SDKAdapter.to_dict(dashboard), settings.grafana_folder_uid)
    return WriteResult(path=path, posted=True, url=url)
