"""Request descriptor and codec contracts."""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from oneshot_rpc.ports.transport import TransportResponse

__all__ = ["Deserializer", "RequestBody", "RequestDescriptor", "Serializer"]


@dataclass(slots=True, frozen=True)
class RequestDescriptor:
    """Immutable description of one logical request.

    The mappings are copied into read-only views at construction, so the
    caller mutating its own dicts afterwards has no effect.

    Attributes:
        host: Scheme and authority, e.g. "http://api.example.com".
        api: Path appended to host, e.g. "/v1/user".
        params: Request parameters.
        headers: Caller-supplied headers.
    """

    host: str
    api: str
    params: Mapping[str, str] = field(default_factory=dict)
    headers: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "params", MappingProxyType(dict(self.params)))
        object.__setattr__(self, "headers", MappingProxyType(dict(self.headers)))

    @property
    def url(self) -> str:
        return f"{self.host}{self.api}"


@dataclass(slots=True, frozen=True)
class RequestBody:
    """Serializer output.

    Attributes:
        content_type: Value for the Content-Type header.
        body: Encoded parameters.
    """

    content_type: str
    body: Any


Serializer = Callable[[Mapping[str, str]], RequestBody]
Deserializer = Callable[[TransportResponse], Awaitable[Any]]
