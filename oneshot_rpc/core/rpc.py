"""Single-use, cancelable RPC racing one transport call against a timeout."""

from __future__ import annotations

import asyncio
import enum
import logging
import time
from collections.abc import Mapping
from typing import Any

from oneshot_rpc.core.codecs import form_url_encode_serialize, response_json_deserialize
from oneshot_rpc.core.errors import RpcError, RpcErrorCode
from oneshot_rpc.ports.request import Deserializer, RequestDescriptor, Serializer
from oneshot_rpc.ports.transport import Transport, TransportRequest

__all__ = [
    "DEFAULT_ACCEPT",
    "DEFAULT_TIMEOUT_MS",
    "Rpc",
    "RpcFactory",
    "RpcState",
    "create_rpc_factory",
    "get_timestamp",
]

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_MS = 60_000
DEFAULT_ACCEPT = "application/json, text/plain, */*"

# Transport tasks whose outcome may already be discarded (timeout); kept
# referenced until they finish.
_in_flight: set[asyncio.Task[Any]] = set()


class RpcState(enum.Enum):
    """Lifecycle of an Rpc. Transitions only move forward."""

    IDLE = "idle"
    EXECUTING = "executing"
    SETTLED = "settled"


def get_timestamp() -> str:
    """Current Unix time in whole seconds, as sent in the ``timestamp`` param."""
    return str(round(time.time()))


class Rpc:
    """One request, executed at most once.

    Holds an immutable RequestDescriptor and the lifecycle of its single
    execution attempt. To issue the same request again, ``clone()`` it.

    Cancellation is advisory: ``cancel()`` never aborts an in-flight transport
    call. It is honoured before the call is issued and once more right after
    the transport settles, before the response is deserialized.
    """

    def __init__(
        self,
        host: str,
        api: str,
        params: Mapping[str, str] | None = None,
        headers: Mapping[str, str] | None = None,
        *,
        send: Transport,
    ) -> None:
        """Initialize an idle Rpc.

        Args:
            host: Server base, e.g. "http://api.example.com".
            api: Endpoint path.
            params: Request parameters.
            headers: Headers overriding the defaults.
            send: Transport used to issue the call.
        """
        self._descriptor = RequestDescriptor(host, api, params or {}, headers or {})
        self._send = send
        self._state = RpcState.IDLE
        self._canceled = False
        self._timer: asyncio.TimerHandle | None = None

    def __repr__(self) -> str:
        return f"Rpc({self._descriptor.url!r}, state={self._state.value}, canceled={self._canceled})"

    @property
    def descriptor(self) -> RequestDescriptor:
        return self._descriptor

    @property
    def state(self) -> RpcState:
        return self._state

    def cancel(self) -> None:
        """Mark the request canceled. Idempotent; allowed in any state."""
        if not self._canceled:
            logger.debug(f"Cancel requested for {self._descriptor.url} ({self._state.value})")
        self._canceled = True

    def is_canceled(self) -> bool:
        return self._canceled

    def is_executed(self) -> bool:
        return self._state is not RpcState.IDLE

    def clone(self) -> Rpc:
        """Return a fresh, idle, uncanceled Rpc for the same request."""
        d = self._descriptor
        return Rpc(d.host, d.api, d.params, d.headers, send=self._send)

    async def get(
        self,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
        deserialize: Deserializer = response_json_deserialize,
    ) -> Any:
        """Execute as GET, parameters urlencoded into the query string."""
        return await self.execute("GET", timeout_ms, form_url_encode_serialize, deserialize)

    async def post(
        self,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
        serialize: Serializer = form_url_encode_serialize,
        deserialize: Deserializer = response_json_deserialize,
    ) -> Any:
        """Execute as POST, parameters serialized into the body."""
        return await self.execute("POST", timeout_ms, serialize, deserialize)

    async def execute(
        self,
        method: str = "GET",
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
        serialize: Serializer = form_url_encode_serialize,
        deserialize: Deserializer = response_json_deserialize,
    ) -> Any:
        """Run the single permitted execution attempt.

        Args:
            method: "GET" or "POST".
            timeout_ms: Milliseconds before the outcome settles as TIMEOUT.
            serialize: Parameter encoder. For GET it must produce text.
            deserialize: Response decoder.

        Returns:
            The deserialized payload.

        Raises:
            RpcError: On every failure: EXECUTED, CANCELED, TIMEOUT,
                JSON_RESOLVE, UNKNOWN, an HTTP status or a server errno.
            asyncio.CancelledError: If the awaiting task itself is cancelled;
                the Rpc is then marked canceled.
        """
        # Check-and-set runs before the first suspension point.
        if self._state is not RpcState.IDLE:
            raise RpcError(RpcErrorCode.EXECUTED, "request already executed")
        self._state = RpcState.EXECUTING

        try:
            if self._canceled:
                raise RpcError(RpcErrorCode.CANCELED, "request canceled")

            try:
                request = self._build_request(method, serialize)
            except Exception as e:
                raise RpcError.from_exception(e) from e

            return await self._race(request, timeout_ms, deserialize)
        finally:
            self._state = RpcState.SETTLED

    def _build_request(self, method: str, serialize: Serializer) -> TransportRequest:
        """Merge defaults into the descriptor and encode it for the wire."""
        method = method.upper()
        params = {**self._descriptor.params, "timestamp": get_timestamp()}
        encoded = serialize(params)

        if method == "GET":
            if not isinstance(encoded.body, str):
                raise TypeError(
                    f"GET parameters must serialize to text, got {type(encoded.body).__name__}"
                )
            headers = {"Accept": DEFAULT_ACCEPT, **self._descriptor.headers}
            return TransportRequest("GET", f"{self._descriptor.url}?{encoded.body}", headers)

        if method == "POST":
            headers = {
                "Content-Type": encoded.content_type,
                "Accept": DEFAULT_ACCEPT,
                **self._descriptor.headers,
            }
            return TransportRequest("POST", self._descriptor.url, headers, encoded.body)

        raise ValueError(f"Unsupported method: {method}")

    async def _race(
        self,
        request: TransportRequest,
        timeout_ms: int,
        deserialize: Deserializer,
    ) -> Any:
        """Settle on the first of transport outcome or timeout."""
        loop = asyncio.get_running_loop()
        outcome: asyncio.Future[Any] = loop.create_future()

        self._timer = loop.call_later(timeout_ms / 1000, self._on_timeout, outcome, timeout_ms)
        call = loop.create_task(self._call(request, deserialize, outcome))
        _in_flight.add(call)
        call.add_done_callback(_in_flight.discard)
        call.add_done_callback(lambda task: self._on_call_done(outcome, task))

        logger.debug(f"{request.method} {request.url} (timeout={timeout_ms}ms)")
        try:
            return await outcome
        except asyncio.CancelledError:
            self.cancel()
            raise
        finally:
            self._clear_timer()

    async def _call(
        self,
        request: TransportRequest,
        deserialize: Deserializer,
        outcome: asyncio.Future[Any],
    ) -> Any:
        try:
            response = await self._send(request)
        finally:
            self._clear_timer()

        if outcome.done():
            logger.debug(f"Discarding late response for {request.url} ({response.status})")
            return None

        # Sole post-send cancellation checkpoint; a cancel arriving while the
        # body is being deserialized is recorded but not honoured.
        if self._canceled:
            raise RpcError(RpcErrorCode.CANCELED, "request canceled")

        if not response.ok:
            logger.warning(
                f"{request.method} {request.url} failed: {response.status} {response.status_text}"
            )
            raise RpcError(response.status, response.status_text)

        return await deserialize(response)

    def _on_timeout(self, outcome: asyncio.Future[Any], timeout_ms: int) -> None:
        if outcome.done():
            return
        logger.warning(f"{self._descriptor.url} timed out after {timeout_ms}ms")
        outcome.set_exception(RpcError(RpcErrorCode.TIMEOUT, "request timed out"))

    def _on_call_done(self, outcome: asyncio.Future[Any], task: asyncio.Task[Any]) -> None:
        if task.cancelled():
            if not outcome.done():
                outcome.set_exception(RpcError(RpcErrorCode.CANCELED, "request canceled"))
            return

        exc = task.exception()
        if outcome.done():
            if exc is not None:
                logger.debug(f"Discarding late failure for {self._descriptor.url}: {exc!r}")
            return

        if exc is None:
            outcome.set_result(task.result())
        else:
            outcome.set_exception(RpcError.from_exception(exc))

    def _clear_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()


class RpcFactory:
    """Creates Rpc instances bound to one host and one transport."""

    def __init__(self, host: str, send: Transport) -> None:
        self.host = host
        self.send = send

    def create_rpc(
        self,
        api: str,
        params: Mapping[str, str] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> Rpc:
        """Create an idle Rpc for ``api`` on the bound host.

        Args:
            api: Endpoint path.
            params: Request parameters.
            headers: Custom request headers.

        Returns:
            New Rpc.
        """
        return Rpc(self.host, api, params, headers, send=self.send)


def create_rpc_factory(host: str, send: Transport) -> RpcFactory:
    """Build an RpcFactory for ``host``.

    Args:
        host: Server base URL.
        send: Transport shared by every Rpc the factory creates.

    Returns:
        The factory.
    """
    return RpcFactory(host, send)
