"""
Transport layer for the Factom client.

Async JSON-RPC clients for factomd and factom-walletd.
"""

from .rpc import BaseCli, FactomdCli, WalletdCli, DEBUG_API_CALLS

__all__ = [
    "BaseCli",
    "FactomdCli",
    "WalletdCli",
    "DEBUG_API_CALLS",
]
