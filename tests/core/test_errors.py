"""Tests for the RPC error model."""

from oneshot_rpc.core.errors import RpcError, RpcErrorCode

__all__ = []


class CodedError(Exception):
    """Exception carrying a code and data like a server client might."""

    def __init__(self, message: str, code: object, data: object = None) -> None:
        super().__init__(message)
        self.code = code
        self.data = data


def test_reserved_codes_are_negative() -> None:
    """Reserved codes should never clash with HTTP statuses or errno values."""
    assert [c.value for c in RpcErrorCode] == [-1, -2, -3, -4, -5]


def test_rpc_error_fields_and_str() -> None:
    """RpcError should expose code, message and data."""
    err = RpcError(404, "Not Found")

    assert err.code == 404
    assert err.message == "Not Found"
    assert err.data is None
    assert str(err) == "[404] Not Found"
    assert err.args == ("Not Found",)


def test_from_exception_passes_rpc_error_through() -> None:
    """An RpcError should be returned unchanged."""
    err = RpcError(RpcErrorCode.TIMEOUT, "request timed out")

    assert RpcError.from_exception(err) is err


def test_from_exception_defaults_to_unknown() -> None:
    """Plain exceptions should map to UNKNOWN with their message."""
    err = RpcError.from_exception(ConnectionError("refused"))

    assert err.code == RpcErrorCode.UNKNOWN
    assert err.message == "refused"
    assert err.data is None


def test_from_exception_keeps_integer_code_and_data() -> None:
    """Exceptions with an integer code should keep it and their data."""
    err = RpcError.from_exception(CodedError("quota", 429, {"retry": 3}))

    assert err.code == 429
    assert err.data == {"retry": 3}


def test_from_exception_ignores_non_integer_code() -> None:
    """Non-integer codes (including booleans) should map to UNKNOWN."""
    assert RpcError.from_exception(CodedError("x", "E42")).code == RpcErrorCode.UNKNOWN
    assert RpcError.from_exception(CodedError("x", True)).code == RpcErrorCode.UNKNOWN


def test_from_exception_uses_type_name_for_empty_message() -> None:
    """Exceptions without a message should still produce one."""
    assert RpcError.from_exception(TimeoutError()).message == "TimeoutError"
