"""Settings port definition (DTO)."""

from dataclasses import dataclass, field

__all__ = ["SettingsPort"]


@dataclass
class SettingsPort:
    """Runtime settings for a single call.

    Decouples the entrypoint from concrete configuration sources.

    Attributes:
        host: Server the call is bound to.
        api: Path of the endpoint.
        method: "GET" or "POST".
        timeout_ms: Milliseconds before the call settles as timed out.
        params: Request parameters.
        headers: Extra request headers.
        multipart: Encode POST parameters as multipart/form-data.
    """

    host: str
    api: str
    method: str = "GET"
    timeout_ms: int = 60_000
    params: dict[str, str] = field(default_factory=dict)
    headers: dict[str, str] = field(default_factory=dict)
    multipart: bool = False
