"""Signal handling for canceling an in-flight call."""

import asyncio
import logging
import signal
from collections.abc import Callable

__all__ = ["make_cancel_on_sigterm"]

logger = logging.getLogger(__name__)


def make_cancel_on_sigterm(cancel_fn: Callable[[], None]) -> Callable[[], bool]:
    """Route SIGTERM/SIGINT to ``cancel_fn``.

    The first signal calls ``cancel_fn``; later ones are ignored. Cancellation
    is advisory, so the pending call still settles, as CANCELED.

    Args:
        cancel_fn: Typically ``Rpc.cancel``.

    Returns:
        Callable that returns True once a signal has been received.
    """
    received = asyncio.Event()
    loop = asyncio.get_running_loop()

    def handle_signal() -> None:
        if received.is_set():
            return
        logger.info("Termination signal received, canceling request...")
        received.set()
        cancel_fn()

    for sig in (signal.SIGTERM, signal.SIGINT):
        loop.add_signal_handler(sig, handle_signal)

    return received.is_set
