"""
Error recovery components for the Factom client.

Provides the retry policies used by the RPC transport.
"""

from .retry import RetryPolicy, ExponentialBackoff

__all__ = [
    "RetryPolicy",
    "ExponentialBackoff",
]
