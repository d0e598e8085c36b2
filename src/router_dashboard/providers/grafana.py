from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal

import httpx

from router_dashboard import __version__
from router_dashboard.core.errors import ProviderError

DEFAULT_USER_AGENT = f"router-dashboard/{__version__}"


class GrafanaProviderError(ProviderError):
    pass


@dataclass(frozen=True)
class ProviderHealth:
    status: Literal["healthy", "unreachable"]
    details: str | None = None


class GrafanaProvider:
    """Minimal Grafana HTTP API client: health check and dashboard upsert."""

    name = "grafana"

    def __init__(
        self,
        url: str,
        token: str | None = None,
        *,
        timeout: float = 30.0,
        org_id: int | None = None,
        user_agent: str = DEFAULT_USER_AGENT,
    ) -> None:
        self._base_url = url.rstrip("/")
        self._token = token
        self._timeout = timeout
        self._org_id = org_id
        self._user_agent = user_agent

    @property
    def base_url(self) -> str:
        return self._base_url

    def health_check(self) -> ProviderHealth:
        try:
            data = self._request("GET", "/api/health")
            return ProviderHealth(status="healthy", details=data.get("version"))
        except GrafanaProviderError as exc:
            return ProviderHealth(status="unreachable", details=exc.message)

    def dashboard(self, uid: str) -> "GrafanaDashboardResource":
        return GrafanaDashboardResource(self, uid)

    def dashboard_url(self, uid: str) -> str:
        return f"{self._base_url}/d/{uid}"

    def _request(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        url = f"{self._base_url}{path}"
        headers = kwargs.pop("headers", {}) or {}
        if self._token:
            headers.setdefault("Authorization", f"Bearer {self._token}")
        if self._org_id is not None:
            headers.setdefault("X-Grafana-Org-Id", str(self._org_id))
        headers.setdefault("Content-Type", "application/json")
        headers.setdefault("User-Agent", self._user_agent)

        try:
            with httpx.Client(timeout=self._timeout) as client:
                resp = client.request(method, url, headers=headers, **kwargs)
                resp.raise_for_status()
                return resp.json() if resp.content else {}
        except httpx.HTTPError as exc:
            raise GrafanaProviderError(str(exc), {"method": method, "path": path}) from exc


class GrafanaDashboardResource:
    RESOURCE = "grafana_dashboard"

    def __init__(self, provider: GrafanaProvider, uid: str) -> None:
        self._p = provider
        self._uid = uid

    def apply(self, desired_state: dict[str, Any]) -> dict[str, Any]:
        """Create or overwrite the dashboard.

        ``desired_state`` holds the full ``dashboard`` JSON plus optional
        ``folderUid`` and ``message``.
        """
        payload: dict[str, Any] = {
            "dashboard": desired_state["dashboard"],
            "overwrite": True,
            "message": desired_state.get("message") or f"Updated {self._uid}",
        }
        if desired_state.get("folderUid"):
            payload["folderUid"] = desired_state["folderUid"]
        return self._p._request("POST", "/api/dashboards/db", json=payload)


__all__ = [
    "GrafanaProvider",
    "GrafanaProviderError",
    "GrafanaDashboardResource",
    "ProviderHealth",
]
