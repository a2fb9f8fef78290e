from .mocks import MockNode, MockFactomd, MockWalletd, MockResponse, MockSession, rpc_result, rpc_error
from .vectors import CHAIN_COMMIT, CHAIN_REVEAL, ENTRY_COMMIT, ENTRY_REVEAL
from .factories import (
    EC_PRIVATE,
    EC_PUBLIC,
    EC_SEED_HEX,
    FCT_PRIVATE_1,
    FCT_PUBLIC_1,
    FCT_PRIVATE_2,
    FCT_PUBLIC_2,
    FCT_PUBLIC_3,
    TEST_CHAIN_ID,
    mk_entry,
    mk_chain,
    mk_transaction,
)

__all__ = [
    "MockNode",
    "MockFactomd",
    "MockWalletd",
    "MockResponse",
    "MockSession",
    "rpc_result",
    "rpc_error",
    "CHAIN_COMMIT",
    "CHAIN_REVEAL",
    "ENTRY_COMMIT",
    "ENTRY_REVEAL",
    "EC_PRIVATE",
    "EC_PUBLIC",
    "EC_SEED_HEX",
    "FCT_PRIVATE_1",
    "FCT_PUBLIC_1",
    "FCT_PRIVATE_2",
    "FCT_PUBLIC_2",
    "FCT_PUBLIC_3",
    "TEST_CHAIN_ID",
    "mk_entry",
    "mk_chain",
    "mk_transaction",
]
