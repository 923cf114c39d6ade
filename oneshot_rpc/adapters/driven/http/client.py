"""HTTP transport adapter backed by aiohttp."""

import json
import logging
from dataclasses import dataclass
from types import TracebackType
from typing import Any

import aiohttp

from oneshot_rpc.ports.transport import TransportRequest

__all__ = ["HttpClient", "HttpResponse"]

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class HttpResponse:
    """Fully read HTTP response.

    The body is read before the connection is released, so decoding it
    later never touches the network.

    Attributes:
        status: HTTP status code.
        status_text: Reason phrase, empty if the server sent none.
        body: Raw response body.
    """

    status: int
    status_text: str
    body: bytes

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    async def text(self) -> str:
        return self.body.decode("utf-8")

    async def json(self) -> Any:
        """Decode the body as JSON.

        Raises:
            ValueError: If the body is not valid UTF-8 JSON.
        """
        return json.loads(self.body)


class HttpClient:
    """Transport that sends one TransportRequest per call.

    Features:
    - Context manager owning the aiohttp session.
    - Reads and releases every response before returning it.

    No retries: retry policy belongs to the caller.
    """

    def __init__(self) -> None:
        self.session: aiohttp.ClientSession | None = None

    async def __aenter__(self) -> "HttpClient":
        """Enter async context manager (start session).

        Returns:
            Self for use in async with statement.
        """
        self.session = aiohttp.ClientSession()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        """Exit async context manager (close session)."""
        if self.session:
            await self.session.close()

    async def send(self, req: TransportRequest) -> HttpResponse:
        """Send a request and read its response.

        Args:
            req: Wire request built by the Rpc.

        Returns:
            The read response, whatever its status.

        Raises:
            RuntimeError: If session not initialized.
            aiohttp exceptions: Network errors.
        """
        if self.session is None:
            raise RuntimeError("Session not initialized; use 'async with' context manager")

        async with self.session.request(
            req.method, req.url, headers=dict(req.headers), data=req.body
        ) as resp:
            body = await resp.read()

        logger.debug(f"{req.method} {req.url} -> {resp.status} ({len(body)} bytes)")
        return HttpResponse(status=resp.status, status_text=resp.reason or "", body=body)
