from router_dashboard.providers.grafana import GrafanaProvider, GrafanaProviderError

__all__ = ["GrafanaProvider", "GrafanaProviderError"]
