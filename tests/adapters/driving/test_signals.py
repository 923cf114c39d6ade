"""Tests for signal-driven cancellation."""

import asyncio
import os
import signal
from unittest.mock import Mock

import pytest

from oneshot_rpc.adapters.driving.signals import make_cancel_on_sigterm

__all__ = []


@pytest.mark.asyncio
async def test_sigterm_calls_cancel_once() -> None:
    """SIGTERM should call the cancel function exactly once."""
    cancel = Mock()
    received = make_cancel_on_sigterm(cancel)

    assert received() is False

    os.kill(os.getpid(), signal.SIGTERM)
    await asyncio.sleep(0.1)
    os.kill(os.getpid(), signal.SIGTERM)
    await asyncio.sleep(0.1)

    assert received() is True
    cancel.assert_called_once_with()
