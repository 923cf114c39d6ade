"""Transport port definition (interface and DTO)."""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol

__all__ = ["Transport", "TransportRequest", "TransportResponse"]


@dataclass(slots=True, frozen=True)
class TransportRequest:
    """Wire-level request handed to the transport.

    Decouples the execution controller from the HTTP library.

    Attributes:
        method: HTTP method, "GET" or "POST".
        url: Absolute URL, including the query string for GET.
        headers: Request headers.
        body: Encoded body (text or a multipart writer); None for GET.
    """

    method: str
    url: str
    headers: Mapping[str, str] = field(default_factory=dict)
    body: Any = None


class TransportResponse(Protocol):
    """Response returned by a transport.

    Only the status line and a suspending body decode are exposed.
    """

    @property
    def ok(self) -> bool:
        """True when the status is 2xx."""
        ...

    @property
    def status(self) -> int: ...

    @property
    def status_text(self) -> str: ...

    async def json(self) -> Any:
        """Decode the body as JSON.

        Raises:
            ValueError: If the body is not valid JSON.
        """
        ...


Transport = Callable[[TransportRequest], Awaitable[TransportResponse]]
