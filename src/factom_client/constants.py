"""
Factom protocol constants.
"""

# Entry Credits charged on top of the first entry cost when creating a chain
CHAIN_CREATION_COST = 10

# Maximum payload (content + ext ids + their length prefixes) of an Entry
MAX_ENTRY_PAYLOAD_SIZE = 10240

# Maximum size of a marshalled Factoid transaction
MAX_TRANSACTION_SIZE = 10240

# Entry header: version (1) + chain id (32) + ext ids size (2)
ENTRY_HEADER_SIZE = 35

# Payload bytes bought by one Entry Credit
ENTRY_CREDIT_CHUNK = 1024

ENTRY_VERSION = 0
COMMIT_VERSION = 0
TRANSACTION_VERSION = 2

ENTRY_COMMIT_LEDGER_SIZE = 40
CHAIN_COMMIT_LEDGER_SIZE = 104

RCD_TYPE_1 = 1
RCD_TYPE_1_SIZE = 33
SIGNATURE_SIZE = 64

NULL_HASH = "0" * 64

# 1 FCT = 10^8 factoshis
FACTOSHI_MULTIPLIER = 100_000_000

# Largest amount representable without loss in IEEE-754 doubles (2^53 - 1)
MAX_SAFE_AMOUNT = 9007199254740991

# Ack statuses reported by factomd that are not terminal
ACK_PENDING_STATUSES = frozenset({"Unknown", "NotConfirmed"})

DEFAULT_ACK_TIMEOUT = 60
ACK_POLL_INTERVAL = 0.5

REPEATED_COMMIT_MESSAGE = "Repeated Commit"
REPEATED_COMMIT_CODE = -32011
