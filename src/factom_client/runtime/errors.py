"""
Factom Error Model

Every failure raised by this package is a FactomError carrying an ErrorKind,
so callers can branch on the kind instead of matching message strings.
A repeated commit is the one node rejection the submission pipeline recovers
from; it is reported as a flag on the result, never raised to the caller.
"""

from __future__ import annotations
from typing import Optional, Dict, Any
from enum import Enum

from ..constants import REPEATED_COMMIT_CODE, REPEATED_COMMIT_MESSAGE


class ErrorKind(Enum):
    """Kinds of failure surfaced by the client."""

    INVALID_ARGUMENT = "InvalidArgument"
    INVALID_ADDRESS = "InvalidAddress"
    MISSING_CHAIN_ID = "MissingChainId"
    EMPTY_EXT_IDS = "EmptyExtIds"
    SIZE_LIMIT_EXCEEDED = "SizeLimitExceeded"
    INCONSISTENT_SIGNATURES = "InconsistentSignatures"
    INVALID_SIGNATURE = "InvalidSignature"
    UNSIGNED_TRANSACTION = "UnsignedTransaction"
    MISSING_FEE_PARAMETERS = "MissingFeeParameters"
    INSUFFICIENT_FEES = "InsufficientFees"
    INSUFFICIENT_FUNDS = "InsufficientFunds"
    REPEATED_COMMIT = "RepeatedCommit"
    ACK_TIMEOUT = "AckTimeout"
    TRANSPORT_ERROR = "TransportError"


class FactomError(Exception):
    """
    Base class for all Factom client errors.

    Provides structured error information: a kind, a message, optional
    details and the underlying cause.
    """

    default_kind = ErrorKind.INVALID_ARGUMENT

    def __init__(self, message: str, kind: Optional[ErrorKind] = None,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        """
        Initialize a Factom error.

        Args:
            message: Error message
            kind: Error kind, defaults to the class kind
            details: Additional error details
            cause: Underlying exception that caused this error
        """
        super().__init__(message)
        self.message = message
        self.kind = kind or self.default_kind
        self.details = details or {}
        self.cause = cause

    def __str__(self) -> str:
        """String representation of the error."""
        parts = [f"[{self.kind.value}] {self.message}"]
        if self.details:
            parts.append(f"Details: {self.details}")
        if self.cause:
            parts.append(f"Caused by: {self.cause}")
        return " | ".join(parts)

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary representation."""
        result = {
            "kind": self.kind.value,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        if self.cause:
            result["cause"] = str(self.cause)
        return result


class InvalidArgument(FactomError):
    """Malformed input or wrong object type."""

    default_kind = ErrorKind.INVALID_ARGUMENT


class InvalidAddress(InvalidArgument):
    """Address that does not decode, or of the wrong kind for the operation."""

    default_kind = ErrorKind.INVALID_ADDRESS


class MissingChainId(FactomError):
    """Entry marshalled before a chain id was assigned."""

    default_kind = ErrorKind.MISSING_CHAIN_ID


class EmptyExtIds(FactomError):
    """Chain id derivation from an Entry without external ids."""

    default_kind = ErrorKind.EMPTY_EXT_IDS


class SizeLimitExceeded(FactomError):
    """Entry payload or transaction above the protocol maximum."""

    default_kind = ErrorKind.SIZE_LIMIT_EXCEEDED


class InconsistentSignatures(FactomError):
    """Partial RCD/signature sets or count mismatches."""

    default_kind = ErrorKind.INCONSISTENT_SIGNATURES


class InvalidSignature(FactomError):
    """Externally supplied signature or RCD failing verification."""

    default_kind = ErrorKind.INVALID_SIGNATURE


class UnsignedTransaction(FactomError):
    """Operation requiring a signed transaction got an unsigned one."""

    default_kind = ErrorKind.UNSIGNED_TRANSACTION


class MissingFeeParameters(FactomError):
    """Fees of an unsigned transaction requested without signature sizing."""

    default_kind = ErrorKind.MISSING_FEE_PARAMETERS


class InsufficientFees(FactomError):
    """Required fee exceeds the fee paid by the transaction."""

    default_kind = ErrorKind.INSUFFICIENT_FEES


class InsufficientFunds(FactomError):
    """Input address balance lower than the amount it spends."""

    default_kind = ErrorKind.INSUFFICIENT_FUNDS


class AckTimeout(FactomError):
    """No terminal acknowledgment status within the deadline."""

    default_kind = ErrorKind.ACK_TIMEOUT

    def __init__(self, ack_type: str, hash: str, timeout: float):
        super().__init__(
            f"Acknowledgement of type [{ack_type}] timed out after {timeout}s for [{hash}]",
            details={"ack_type": ack_type, "hash": hash, "timeout": timeout},
        )
        self.ack_type = ack_type
        self.hash = hash
        self.timeout = timeout


class TransportError(FactomError):
    """Failure reaching the node (connection, HTTP status, malformed body)."""

    default_kind = ErrorKind.TRANSPORT_ERROR

    def __init__(self, message: str, status: Optional[int] = None,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, details=details, cause=cause)
        self.status = status


class ApiError(TransportError):
    """JSON-RPC error object returned by factomd or factom-walletd."""

    def __init__(self, method: str, params: Any, code: Optional[int], message: str,
                 data: Any = None, status: Optional[int] = None):
        text = f"API call to [{method}] "
        if isinstance(params, dict):
            text += f"with params {params} "
        text += f"got rejected: {message} (code: {code})"
        super().__init__(text, status=status, details={"code": code, "data": data} if data else {"code": code})
        self.method = method
        self.params = params
        self.code = code
        self.rpc_message = message
        self.data = data

    @property
    def is_repeated_commit(self) -> bool:
        """True when the node refused a commit it already holds."""
        return self.rpc_message == REPEATED_COMMIT_MESSAGE or self.code == REPEATED_COMMIT_CODE


def error_from_response(method: str, params: Any, response: Dict[str, Any],
                        status: Optional[int] = None) -> Optional[ApiError]:
    """
    Create an ApiError from a JSON-RPC response body.

    Args:
        method: RPC method that was called
        params: Parameters sent with the call
        response: Decoded JSON-RPC response
        status: HTTP status of the response

    Returns:
        ApiError instance or None if the response carries no error
    """
    error_data = response.get("error")
    if error_data is None:
        return None

    if isinstance(error_data, dict):
        return ApiError(
            method,
            params,
            error_data.get("code"),
            error_data.get("message", "Unknown error"),
            error_data.get("data"),
            status,
        )

    return ApiError(method, params, None, str(error_data), status=status)


__all__ = [
    "ErrorKind",
    "FactomError",
    "InvalidArgument",
    "InvalidAddress",
    "MissingChainId",
    "EmptyExtIds",
    "SizeLimitExceeded",
    "InconsistentSignatures",
    "InvalidSignature",
    "UnsignedTransaction",
    "MissingFeeParameters",
    "InsufficientFees",
    "InsufficientFunds",
    "AckTimeout",
    "TransportError",
    "ApiError",
    "error_from_response",
]
