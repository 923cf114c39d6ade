"""Default parameter serializers and response deserializer."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any
from urllib.parse import quote

import aiohttp
from pydantic import BaseModel, field_validator

from oneshot_rpc.core.errors import RpcError, RpcErrorCode
from oneshot_rpc.ports.request import RequestBody
from oneshot_rpc.ports.transport import TransportResponse

__all__ = [
    "FORM_URL_ENCODED",
    "RpcEnvelope",
    "form_url_encode_serialize",
    "multipart_serialize",
    "response_json_deserialize",
]

logger = logging.getLogger(__name__)

FORM_URL_ENCODED = "application/x-www-form-urlencoded"

# Characters a URI component leaves unescaped besides letters and digits
_URI_COMPONENT_SAFE = "-_.!~*'()"


class RpcEnvelope(BaseModel):
    """Server response wrapper; ``errno == 0`` is the only success."""

    errno: int
    errmsg: Any = None
    data: Any = None

    @field_validator("errno", mode="before")
    @classmethod
    def validate_errno(cls, v: Any) -> int:
        """Accept integral JSON numbers only (7 or 7.0, not true or "7").

        Raises:
            ValueError: If errno is not an integral number.
        """
        if isinstance(v, bool) or not isinstance(v, (int, float)):
            raise ValueError(f"errno must be an integer, got {v!r}")
        if isinstance(v, float) and not v.is_integer():
            raise ValueError(f"errno must be an integer, got {v!r}")
        return int(v)


def form_url_encode_serialize(params: Mapping[str, str]) -> RequestBody:
    """Encode parameters as ``key=value`` pairs joined with ``&``.

    Values are percent-escaped as URI components; keys are emitted as-is.

    Args:
        params: Parameters to encode.

    Returns:
        Urlencoded text body.
    """
    pairs = [f"{key}={quote(value, safe=_URI_COMPONENT_SAFE)}" for key, value in params.items()]
    return RequestBody(content_type=FORM_URL_ENCODED, body="&".join(pairs))


def multipart_serialize(params: Mapping[str, str]) -> RequestBody:
    """Encode parameters as multipart/form-data, one field per pair.

    Args:
        params: Parameters to encode.

    Returns:
        Multipart writer body; the content type carries its boundary.
    """
    writer = aiohttp.MultipartWriter("form-data")
    for key, value in params.items():
        part = writer.append(value)
        part.set_content_disposition("form-data", name=key)
    return RequestBody(content_type=writer.content_type, body=writer)


async def response_json_deserialize(response: TransportResponse) -> Any:
    """Decode a JSON envelope and unwrap its payload.

    Args:
        response: Successful transport response.

    Returns:
        The envelope's ``data``.

    Raises:
        RpcError: JSON_RESOLVE if the body is not a valid envelope, or the
            envelope's errno and errmsg when errno is non-zero.
    """
    try:
        raw = await response.json()
        envelope = RpcEnvelope.model_validate(raw)
    except Exception as e:
        raise RpcError(RpcErrorCode.JSON_RESOLVE, f"parse error: {e}") from e

    if envelope.errno != 0:
        logger.debug(f"Server rejected call: errno={envelope.errno} errmsg={envelope.errmsg}")
        message = "" if envelope.errmsg is None else str(envelope.errmsg)
        raise RpcError(envelope.errno, message, raw)

    return envelope.data
