"""
Factom Python Client

Builds Factom Entries, Chains and Factoid transactions byte-for-byte,
composes and signs their commits, and submits them to factomd with
acknowledgment tracking.
"""

from .addresses import (
    Address,
    AddressKind,
    parse_address,
    is_valid_address,
    is_valid_ec_address,
    is_valid_ec_public_address,
    is_valid_ec_private_address,
    is_valid_fct_address,
    is_valid_fct_public_address,
    is_valid_fct_private_address,
    is_valid_public_address,
    is_valid_private_address,
    get_public_address,
    address_to_key,
    address_to_rcd_hash,
    key_to_public_ec_address,
    key_to_private_ec_address,
    key_to_public_fct_address,
    key_to_private_fct_address,
    rcd_hash_to_public_fct_address,
)
from .entry import Entry, EntryBuilder, EntryBlockContext
from .chain import Chain, compute_chain_id
from .commit import (
    ComposedCommit,
    compose_commit,
    compose_entry_ledger,
    compose_chain_ledger,
    compose_entry_commit,
    compose_chain_commit,
    compose_entry_reveal,
    compose_chain_reveal,
    compose_entry,
    compose_chain,
    compute_entry_tx_id,
    compute_chain_tx_id,
)
from .transaction import Transaction, TransactionBuilder, TransactionAddress
from .ack import AckWaiter, wait_on_commit_ack, wait_on_reveal_ack, wait_on_factoid_transaction_ack
from .add import SubmissionPipeline, SubmissionState, CommitResult, RevealResult, AddResult
from .send import (
    send_transaction,
    get_entry_credit_rate,
    get_balance,
    create_factoid_transaction,
    create_entry_credit_purchase_transaction,
)
from .wallet import get_private_address
from .config import ConnectionOptions, RetryOptions
from .transport import FactomdCli, WalletdCli
from .client import FactomCli
from .runtime.errors import *

__version__ = "1.0.0"
__all__ = [
    "Address",
    "AddressKind",
    "parse_address",
    "is_valid_address",
    "is_valid_ec_address",
    "is_valid_ec_public_address",
    "is_valid_ec_private_address",
    "is_valid_fct_address",
    "is_valid_fct_public_address",
    "is_valid_fct_private_address",
    "is_valid_public_address",
    "is_valid_private_address",
    "get_public_address",
    "address_to_key",
    "address_to_rcd_hash",
    "key_to_public_ec_address",
    "key_to_private_ec_address",
    "key_to_public_fct_address",
    "key_to_private_fct_address",
    "rcd_hash_to_public_fct_address",
    "Entry",
    "EntryBuilder",
    "EntryBlockContext",
    "Chain",
    "compute_chain_id",
    "ComposedCommit",
    "compose_commit",
    "compose_entry_ledger",
    "compose_chain_ledger",
    "compose_entry_commit",
    "compose_chain_commit",
    "compose_entry_reveal",
    "compose_chain_reveal",
    "compose_entry",
    "compose_chain",
    "compute_entry_tx_id",
    "compute_chain_tx_id",
    "Transaction",
    "TransactionBuilder",
    "TransactionAddress",
    "AckWaiter",
    "wait_on_commit_ack",
    "wait_on_reveal_ack",
    "wait_on_factoid_transaction_ack",
    "SubmissionPipeline",
    "SubmissionState",
    "CommitResult",
    "RevealResult",
    "AddResult",
    "send_transaction",
    "get_entry_credit_rate",
    "get_balance",
    "create_factoid_transaction",
    "create_entry_credit_purchase_transaction",
    "get_private_address",
    "ConnectionOptions",
    "RetryOptions",
    "FactomdCli",
    "WalletdCli",
    "FactomCli",
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
]
