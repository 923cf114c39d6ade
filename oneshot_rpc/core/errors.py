"""Error taxonomy shared by every failure path of an RPC."""

from __future__ import annotations

from enum import IntEnum
from typing import Any

__all__ = ["RpcError", "RpcErrorCode"]


class RpcErrorCode(IntEnum):
    """Codes reserved by the RPC layer.

    Negative so they never collide with HTTP statuses or server errno values,
    which travel in the same ``code`` field.
    """

    UNKNOWN = -1
    CANCELED = -2
    EXECUTED = -3
    TIMEOUT = -4
    JSON_RESOLVE = -5


class RpcError(Exception):
    """Uniform failure outcome of an RPC.

    Attributes:
        code: An RpcErrorCode, an HTTP status code or a server errno.
        message: Human-readable description.
        data: Raw server envelope for application errors, else None.
    """

    def __init__(self, code: int, message: str, data: Any = None) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.data = data

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"

    def __repr__(self) -> str:
        return f"RpcError(code={self.code!r}, message={self.message!r}, data={self.data!r})"

    @classmethod
    def from_exception(cls, exc: BaseException) -> RpcError:
        """Convert any exception into an RpcError.

        RpcError instances pass through untouched. Other exceptions keep an
        integer ``code`` and a ``data`` attribute when they carry one;
        otherwise the code is UNKNOWN.

        Args:
            exc: Exception raised while executing.

        Returns:
            The equivalent RpcError.
        """
        if isinstance(exc, RpcError):
            return exc

        code = getattr(exc, "code", None)
        if not isinstance(code, int) or isinstance(code, bool):
            code = RpcErrorCode.UNKNOWN
        return cls(code, str(exc) or type(exc).__name__, getattr(exc, "data", None))
