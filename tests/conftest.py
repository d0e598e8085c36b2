"""Root test configuration."""

import logging

import pytest
import structlog

from router_dashboard.config import get_settings


def pytest_configure(config):
    """Configure structlog for tests to suppress debug/info output."""
    logging.basicConfig(level=logging.WARNING, force=True)
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.processors.add_log_level,
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch, tmp_path):
    """Isolate tests from ROUTER_DASHBOARD_* variables and any local .env file."""
    for name in (
        "GRAFANA_URL",
        "GRAFANA_TOKEN",
        "GRAFANA_ORG_ID",
        "GRAFANA_FOLDER_UID",
        "OUTPUT_FILE",
        "HTTP_TIMEOUT",
        "LOG_LEVEL",
    ):
        monkeypatch.delenv(f"ROUTER_DASHBOARD_{name}", raising=False)
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
