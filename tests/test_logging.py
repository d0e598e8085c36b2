"""Tests for logging configuration."""

import logging

import pytest
import structlog

from router_dashboard import __version__
from router_dashboard.core.errors import ConfigurationError, ExitCode
from router_dashboard.logging import APP_NAME, bind_context, configure_logging, resolve_log_level


@pytest.fixture(autouse=True)
def clean_contextvars():
    structlog.contextvars.clear_contextvars()
    yield
    structlog.contextvars.clear_contextvars()


class TestResolveLogLevel:
    @pytest.mark.parametrize(
        "level,expected",
        [("DEBUG", logging.DEBUG), ("info", logging.INFO), (" Warning ", logging.WARNING), (40, 40)],
    )
    def test_known_levels(self, level, expected):
        assert resolve_log_level(level) == expected

    def test_unknown_level(self):
        with pytest.raises(ConfigurationError) as exc_info:
            resolve_log_level("verbose")

        assert exc_info.value.exit_code == ExitCode.CONFIG_ERROR
        assert "DEBUG" in exc_info.value.details["choices"]


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_returns_numeric_level(self):
        assert configure_logging("warning") == logging.WARNING
        assert logging.getLogger().level == logging.WARNING

    def test_binds_app_context(self):
        configure_logging("WARNING")

        context = structlog.contextvars.get_contextvars()
        assert context["app"] == APP_NAME
        assert context["version"] == __version__

    def test_bind_context_adds_fields(self):
        configure_logging("WARNING")
        bind_context(command="generate")

        context = structlog.contextvars.get_contextvars()
        assert context["command"] == "generate"
        assert context["app"] == APP_NAME

    def test_reconfigure_resets_context(self):
        configure_logging("WARNING")
        bind_context(command="generate")
        configure_logging("WARNING")

        assert "command" not in structlog.contextvars.get_contextvars()
