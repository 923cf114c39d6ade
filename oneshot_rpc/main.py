"""Application entrypoint: issue one configured RPC and print its payload."""

import asyncio
import json
import logging
from typing import Any

from oneshot_rpc.adapters.driven.config.settings import load_settings
from oneshot_rpc.adapters.driven.http.client import HttpClient
from oneshot_rpc.adapters.driven.logging.logging_config import configure_logs
from oneshot_rpc.adapters.driving.signals import make_cancel_on_sigterm
from oneshot_rpc.core.codecs import form_url_encode_serialize, multipart_serialize
from oneshot_rpc.core.errors import RpcError
from oneshot_rpc.core.rpc import Rpc, create_rpc_factory
from oneshot_rpc.ports.settings import SettingsPort

__all__ = ["main", "run_rpc"]

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_RPC_FAILED = 1
EXIT_CONFIG_ERROR = 2


async def main() -> int:
    """Run a single RPC described by the environment.

    Startup sequence:
    1. Configure logging.
    2. Load and validate configuration.
    3. Open the HTTP transport and build the Rpc.
    4. Route SIGTERM/SIGINT to Rpc.cancel.
    5. Execute and print the payload as JSON.

    Returns:
        Process exit code.
    """
    configure_logs()

    try:
        config = load_settings()
    except (RuntimeError, ValueError) as exc:
        logger.error(
            "Configuration error: %s\n"
            "Hint: check RPC_HOST, RPC_API, RPC_METHOD, RPC_TIMEOUT_MS, "
            "and that RPC_PARAMS/RPC_HEADERS are JSON objects of strings.",
            exc,
        )
        return EXIT_CONFIG_ERROR

    settings_port = SettingsPort(
        host=config.host,
        api=config.api,
        method=config.method,
        timeout_ms=config.timeout_ms,
        params=config.params,
        headers=config.headers,
        multipart=config.multipart,
    )

    async with HttpClient() as http:
        factory = create_rpc_factory(settings_port.host, http.send)
        rpc = factory.create_rpc(settings_port.api, settings_port.params, settings_port.headers)
        make_cancel_on_sigterm(rpc.cancel)

        try:
            payload = await run_rpc(rpc, settings_port)
        except RpcError as e:
            logger.error(f"RPC failed: code={e.code} message={e.message}")
            if e.data is not None:
                logger.debug(f"Server envelope: {e.data}")
            return EXIT_RPC_FAILED

    print(json.dumps(payload, ensure_ascii=False))
    return EXIT_OK


async def run_rpc(rpc: Rpc, settings_port: SettingsPort) -> Any:
    """Execute ``rpc`` with the method, timeout and encoding from settings.

    Args:
        rpc: Idle Rpc to execute.
        settings_port: Runtime settings.

    Returns:
        The deserialized payload.

    Raises:
        RpcError: If the call fails.
    """
    if settings_port.method == "POST":
        serialize = multipart_serialize if settings_port.multipart else form_url_encode_serialize
        return await rpc.post(settings_port.timeout_ms, serialize)
    return await rpc.get(settings_port.timeout_ms)


if __name__ == "__main__":
    try:
        raise SystemExit(asyncio.run(main()))
    except KeyboardInterrupt:
        logging.getLogger(__name__).info("Shutdown requested by user (Ctrl+C).")
