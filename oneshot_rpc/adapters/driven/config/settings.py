"""Configuration loading from environment variables."""

import logging
import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field, HttpUrl, TypeAdapter, ValidationError, field_validator

from oneshot_rpc.core.rpc import DEFAULT_TIMEOUT_MS

__all__ = ["Settings", "load_settings"]

load_dotenv()

logger = logging.getLogger(__name__)
_http_url_adapter = TypeAdapter(HttpUrl)
_string_map_adapter = TypeAdapter(dict[str, str])

_TRUTHY = ("1", "true", "yes", "on")


class Settings(BaseModel):
    """Configuration of the single call issued by the CLI.

    Attributes:
        host: Server base URL (scheme and authority).
        api: Endpoint path appended to host.
        method: GET or POST.
        timeout_ms: Milliseconds before the call times out.
        params: Request parameters.
        headers: Extra request headers.
        multipart: Send POST parameters as multipart/form-data.
    """

    host: str = Field(..., description="Server base URL, e.g. http://api.example.com")
    api: str = Field(..., min_length=1, description="Endpoint path appended to host.")
    method: str = Field(default="GET", description="GET or POST.")
    timeout_ms: int = Field(default=DEFAULT_TIMEOUT_MS, gt=0, description="Call timeout in ms.")
    params: dict[str, str] = Field(default_factory=dict, description="Request parameters.")
    headers: dict[str, str] = Field(default_factory=dict, description="Extra request headers.")
    multipart: bool = Field(default=False, description="Multipart POST body.")

    @field_validator("host")
    @classmethod
    def validate_host(cls, v: str) -> str:
        """Validate that host is an http(s) URL.

        Args:
            v: Host URL to validate.

        Returns:
            The URL without a trailing slash.

        Raises:
            ValueError: If URL is invalid or not http(s).
        """
        try:
            url = _http_url_adapter.validate_python(v)
            if url.scheme not in ("http", "https"):
                raise ValueError("Only http:// and https:// hosts allowed")
        except Exception as e:
            raise ValueError(f"Invalid host: {e}") from e
        return v.rstrip("/")

    @field_validator("method", mode="before")
    @classmethod
    def validate_method(cls, v: str) -> str:
        """Normalize method case and restrict it to GET/POST.

        Raises:
            ValueError: If method is neither GET nor POST.
        """
        method = str(v).upper()
        if method not in ("GET", "POST"):
            raise ValueError(f"Unsupported method: {v}")
        return method


def _parse_string_map(name: str) -> dict[str, str]:
    raw = os.getenv(name)
    if not raw:
        return {}
    try:
        return _string_map_adapter.validate_json(raw)
    except ValidationError as e:
        raise ValueError(f"{name} must be a JSON object of strings: {e}") from e


def load_settings() -> Settings:
    """Load and validate settings from the environment.

    Required environment variables:
    - RPC_HOST: http(s) base URL of the server.
    - RPC_API: Endpoint path.

    Optional:
    - RPC_METHOD: GET (default) or POST.
    - RPC_TIMEOUT_MS: Positive integer, default 60000.
    - RPC_PARAMS / RPC_HEADERS: JSON objects of string values.
    - RPC_MULTIPART: Truthy to send POST parameters as multipart.

    Returns:
        Validated Settings object.

    Raises:
        RuntimeError: If required env vars missing or timeout invalid.
        ValueError: If configuration is invalid.
    """
    try:
        host = os.environ["RPC_HOST"]
        api = os.environ["RPC_API"]
    except KeyError as e:
        raise RuntimeError(f"Missing required environment variable: {e.args[0]}") from e

    timeout_raw = os.getenv("RPC_TIMEOUT_MS", str(DEFAULT_TIMEOUT_MS))
    try:
        timeout_ms = int(timeout_raw)
        if timeout_ms <= 0:
            raise ValueError("Must be positive")
    except ValueError as e:
        raise RuntimeError(f"RPC_TIMEOUT_MS must be a positive integer (got: {timeout_raw})") from e

    settings = Settings(
        host=host,
        api=api,
        method=os.getenv("RPC_METHOD", "GET"),
        timeout_ms=timeout_ms,
        params=_parse_string_map("RPC_PARAMS"),
        headers=_parse_string_map("RPC_HEADERS"),
        multipart=os.getenv("RPC_MULTIPART", "").strip().lower() in _TRUTHY,
    )

    logger.info(
        f"RPC configured: {settings.method} {settings.host}{settings.api}, "
        f"timeout={settings.timeout_ms}ms, "
        f"params={len(settings.params)}, headers={len(settings.headers)}, "
        f"multipart={settings.multipart}"
    )

    return settings
