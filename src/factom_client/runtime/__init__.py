"""Runtime helpers for the Factom client"""

from .errors import (
    ErrorKind,
    FactomError,
    TransportError,
    ApiError,
    error_from_response,
)

__all__ = [
    "ErrorKind",
    "FactomError",
    "TransportError",
    "ApiError",
    "error_from_response",
]
