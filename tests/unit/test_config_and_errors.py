"""
Test connection options and the error model.
"""

import pytest
from pydantic import ValidationError

from factom_client import (
    AckTimeout,
    ApiError,
    ConnectionOptions,
    ErrorKind,
    FactomError,
    InsufficientFees,
    InvalidAddress,
    InvalidArgument,
    RetryOptions,
    TransportError,
)
from factom_client.config import to_connection_options
from factom_client.runtime.errors import error_from_response


class TestConnectionOptions:
    """Test option defaults, aliases and validation."""

    def test_defaults(self):
        options = ConnectionOptions()

        assert options.host == "localhost"
        assert options.path == "/v2"
        assert options.debug_path == "/debug"
        assert options.protocol == "http"
        assert options.reject_unauthorized
        assert options.retry.retries == 3
        assert options.retry.max_attempts == 4
        assert options.base_url(8088) == "http://localhost:8088"
        assert not options.has_auth

    def test_camel_case_keys(self):
        """Test the keys used by node configuration files."""
        options = ConnectionOptions.model_validate({
            "host": "node.example",
            "port": 443,
            "protocol": "https",
            "debugPath": "/dbg",
            "rejectUnauthorized": False,
            "user": "admin",
            "password": "pw",
            "retry": {"retries": 1, "minTimeout": 0.1, "maxTimeout": 0.4},
        })

        assert options.base_url(8088) == "https://node.example:443"
        assert options.debug_path == "/dbg"
        assert not options.reject_unauthorized
        assert options.has_auth
        assert options.retry.min_timeout == 0.1
        assert options.retry.max_attempts == 2

    def test_snake_case_keys(self):
        options = ConnectionOptions(debug_path="x", reject_unauthorized=False)

        assert options.debug_path == "/x"
        assert not options.reject_unauthorized

    @pytest.mark.parametrize("data", [
        {"protocol": "ftp"},
        {"port": 0},
        {"port": 70000},
        {"timeout": -1},
        {"retry": {"retries": -1}},
    ])
    def test_invalid_options(self, data):
        with pytest.raises(ValidationError):
            ConnectionOptions.model_validate(data)

    def test_to_connection_options(self):
        options = ConnectionOptions(host="a")

        assert to_connection_options(options) is options
        assert to_connection_options(None) == ConnectionOptions()
        assert to_connection_options({"host": "b"}).host == "b"

    def test_retry_defaults(self):
        retry = RetryOptions()

        assert (retry.retries, retry.factor, retry.min_timeout, retry.max_timeout) == (3, 2.0, 0.5, 2.0)


class TestErrors:
    """Test error kinds and structured details."""

    def test_kinds(self):
        assert InvalidArgument("x").kind is ErrorKind.INVALID_ARGUMENT
        assert InvalidAddress("x").kind is ErrorKind.INVALID_ADDRESS
        assert InsufficientFees("x").kind is ErrorKind.INSUFFICIENT_FEES
        assert TransportError("x").kind is ErrorKind.TRANSPORT_ERROR

    def test_hierarchy(self):
        assert issubclass(InvalidAddress, InvalidArgument)
        assert issubclass(ApiError, TransportError)
        assert issubclass(AckTimeout, FactomError)

    def test_str_and_dict(self):
        cause = ValueError("boom")
        error = InvalidArgument("Bad input", details={"field": "amount"}, cause=cause)

        assert str(error) == "[InvalidArgument] Bad input | Details: {'field': 'amount'} | Caused by: boom"
        assert error.to_dict() == {
            "kind": "InvalidArgument",
            "message": "Bad input",
            "details": {"field": "amount"},
            "cause": "boom",
        }

    def test_ack_timeout(self):
        error = AckTimeout("entry-commit", "abcd", 60)

        assert error.kind is ErrorKind.ACK_TIMEOUT
        assert error.details == {"ack_type": "entry-commit", "hash": "abcd", "timeout": 60}
        assert "entry-commit" in error.message

    def test_repeated_commit_detection(self):
        assert ApiError("commit-entry", {}, -32011, "Repeated Commit").is_repeated_commit
        assert ApiError("commit-entry", {}, None, "Repeated Commit").is_repeated_commit
        assert not ApiError("commit-entry", {}, -32602, "Invalid params").is_repeated_commit

    def test_error_from_response(self):
        error = error_from_response(
            "entry", {"hash": "00"}, {"error": {"code": -32009, "message": "Missing Chain Head"}}, 200
        )

        assert isinstance(error, ApiError)
        assert error.code == -32009
        assert error.rpc_message == "Missing Chain Head"
        assert "entry" in error.message
        assert error_from_response("entry", None, {"result": {}}) is None

    def test_error_from_string_response(self):
        error = error_from_response("heights", None, {"error": "unavailable"})

        assert error.code is None
        assert error.rpc_message == "unavailable"
