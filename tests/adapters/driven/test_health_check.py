"""Tests for health check validator."""
from unittest.mock import patch

from oneshot_rpc.adapters.driven.config.health_check import main

__all__ = []


def test_health_check_success() -> None:
    """Health check should return 0 when configuration loads successfully."""
    with (
        patch("oneshot_rpc.adapters.driven.config.health_check.configure_logs"),
        patch("oneshot_rpc.adapters.driven.config.health_check.load_settings") as mock_load,
    ):
        mock_load.return_value = None
        result = main()

    assert result == 0


def test_health_check_failure_on_config_error() -> None:
    """Health check should return 1 when configuration fails to load."""
    with (
        patch("oneshot_rpc.adapters.driven.config.health_check.configure_logs"),
        patch("oneshot_rpc.adapters.driven.config.health_check.load_settings") as mock_load,
    ):
        mock_load.side_effect = RuntimeError("Missing required environment variable: RPC_HOST")
        result = main()

    assert result == 1
