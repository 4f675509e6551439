"""Tests for failure values."""

from mcplink.failures import MalformedArguments, RpcFailure, TransportFailure


class TestTransportFailure:
    def test_timeout(self) -> None:
        failure = TransportFailure.timeout(0.05)
        assert failure.kind == "timeout"
        assert "0.05" in failure.message
        assert "timeout" in failure.describe().lower()

    def test_http_status(self) -> None:
        failure = TransportFailure.http_status(503, "Service Unavailable")
        assert failure.status_code == 503
        assert failure.message == "HTTP error: 503 Service Unavailable"
        assert failure.describe() == failure.message

    def test_http_status_hint(self) -> None:
        assert TransportFailure.http_status(404).describe().startswith("Not Found")

    def test_protocol_violation(self) -> None:
        failure = TransportFailure.protocol_violation("bad body")
        assert failure.describe() == "Protocol violation: bad body"

    def test_network(self) -> None:
        assert "refused" in TransportFailure.network("refused").describe()


class TestDisjointKinds:
    def test_kinds_differ(self) -> None:
        kinds = {
            TransportFailure.timeout(1).kind,
            RpcFailure(code=-32601, message="x").kind,
            MalformedArguments(tool_name="t", message="x").kind,
        }
        assert kinds == {"timeout", "rpc", "malformed_arguments"}

    def test_rpc_describe(self) -> None:
        assert RpcFailure(code=-32601, message="Method not found").describe() == (
            "MCP Error: Method not found (Code: -32601)"
        )
