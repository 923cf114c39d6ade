"""Healthcheck validator for container orchestration."""

import logging

from oneshot_rpc.adapters.driven.config.settings import load_settings
from oneshot_rpc.adapters.driven.logging.logging_config import configure_logs

__all__ = ["main"]

logger = logging.getLogger(__name__)


def main() -> int:
    """Check that the call configuration is usable.

    Validates:
    - RPC_HOST and RPC_API are set.
    - Optional variables parse (timeout, params, headers).

    Returns:
        0 if healthy, 1 if unhealthy.
    """
    configure_logs()

    try:
        _ = load_settings()
    except Exception as exc:
        logger.error(f"RPC healthcheck FAILED: {exc}")
        return 1

    logger.info("RPC healthcheck OK")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
