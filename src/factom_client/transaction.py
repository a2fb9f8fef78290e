"""
Factoid transaction model.

Transactions are assembled with ``TransactionBuilder`` and frozen on
``build()``. Inputs given as private ``Fs`` addresses are signed at build
time; inputs given as public ``FA`` addresses take externally produced
``(rcd, signature)`` pairs, which are verified before the Transaction is
created. A Transaction is either fully signed or not signed at all.

Unsigned scope (``marshal_binary_sig``)::

    0x02 || timestamp(6, BE ms) || #inputs(1) || #fct_outputs(1) || #ec_outputs(1)
         || [VarInt_F(amount) || rcd_hash(32)]*  (inputs, fct outputs, ec outputs)

Signed wire format appends ``rcd || signature`` for every input.
"""

from __future__ import annotations
import time
from dataclasses import dataclass, field
from typing import Optional, List, Tuple, Dict, Any, Union

from .addresses import (
    Address,
    AddressKind,
    key_to_public_ec_address,
    parse_address,
    rcd1_from_public_key,
    rcd_hash_to_public_fct_address,
)
from .codec.hashes import sha256, sha256d
from .codec.reader import BinaryReader
from .codec.writer import BinaryWriter
from .constants import (
    ENTRY_CREDIT_CHUNK,
    MAX_SAFE_AMOUNT,
    MAX_TRANSACTION_SIZE,
    RCD_TYPE_1,
    RCD_TYPE_1_SIZE,
    SIGNATURE_SIZE,
    TRANSACTION_VERSION,
)
from .crypto.ed25519 import Ed25519KeyPair, verify_ed25519
from .entry import to_bytes
from .runtime.errors import (
    InconsistentSignatures,
    InvalidAddress,
    InvalidArgument,
    InvalidSignature,
    MissingFeeParameters,
    SizeLimitExceeded,
    UnsignedTransaction,
)

# RCD type 1 (33 bytes) + signature (64 bytes) per signed input
RCD_TYPE_1_SIGNATURE_LENGTH = RCD_TYPE_1_SIZE + SIGNATURE_SIZE

MAX_ADDRESSES_PER_SECTION = 0xFF


def validate_amount(amount: Any) -> int:
    """
    Check a Factoshi amount.

    Raises:
        InvalidArgument: Unless amount is a positive integer within 2^53 - 1
    """
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise InvalidArgument(f"Amount must be an integer number of Factoshis, got {amount!r}")
    if amount <= 0 or amount > MAX_SAFE_AMOUNT:
        raise InvalidArgument(f"Amount must be between 1 and {MAX_SAFE_AMOUNT} Factoshis, got {amount}")
    return amount


@dataclass(frozen=True)
class TransactionAddress:
    """
    Public address and amount of one transaction input or output.

    ``rcd_hash`` is the 32-byte key embedded in the address: the RCD hash
    of a Factoid address or the public key of an Entry Credit address.
    """

    address: str
    amount: int
    rcd_hash: bytes = field(repr=False)

    @classmethod
    def from_address(cls, address: Union[str, Address], amount: int) -> TransactionAddress:
        parsed = parse_address(address)
        if parsed.is_private:
            raise InvalidAddress(f"Transaction addresses must be public, got {parsed.text}")
        return cls(address=parsed.text, amount=amount, rcd_hash=parsed.key)

    def marshal_binary(self) -> bytes:
        writer = BinaryWriter()
        writer.var_int(self.amount)
        writer.bytes(self.rcd_hash)
        return writer.to_bytes()


def _verify_rcd(input_address: TransactionAddress, rcd: bytes) -> None:
    if len(rcd) != RCD_TYPE_1_SIZE or rcd[0] != RCD_TYPE_1:
        raise InvalidSignature(f"Only RCD type 1 is currently supported. Invalid RCD: {rcd.hex()}")
    if sha256d(rcd) != input_address.rcd_hash:
        raise InvalidSignature(
            f"RCD does not match the RCD hash from input address {input_address.address}"
        )


def _verify_signature(data: bytes, rcd: bytes, signature: bytes) -> None:
    if not verify_ed25519(rcd[1:], signature, data):
        raise InvalidSignature("Signature of Transaction is invalid")


@dataclass(frozen=True)
class Transaction:
    """
    Immutable Factoid transaction.

    ``rcds`` and ``signatures`` run parallel to ``inputs``; both are empty
    for an unsigned transaction.
    """

    timestamp: int
    inputs: Tuple[TransactionAddress, ...] = ()
    factoid_outputs: Tuple[TransactionAddress, ...] = ()
    entry_credit_outputs: Tuple[TransactionAddress, ...] = ()
    rcds: Tuple[bytes, ...] = ()
    signatures: Tuple[bytes, ...] = ()

    def __post_init__(self):
        if len(self.rcds) != len(self.signatures):
            raise InconsistentSignatures(
                f"The number of RCDs ({len(self.rcds)}) does not equal "
                f"the number of signatures ({len(self.signatures)})"
            )
        if self.signatures and len(self.signatures) != len(self.inputs):
            raise InconsistentSignatures("All inputs must be signed or none of them")

    @staticmethod
    def builder(transaction: Optional[Transaction] = None) -> TransactionBuilder:
        """Start a builder, optionally copying an existing Transaction without its signatures."""
        return TransactionBuilder(transaction)

    @property
    def total_inputs(self) -> int:
        return sum(i.amount for i in self.inputs)

    @property
    def total_factoid_outputs(self) -> int:
        return sum(o.amount for o in self.factoid_outputs)

    @property
    def total_entry_credit_outputs(self) -> int:
        return sum(o.amount for o in self.entry_credit_outputs)

    @property
    def total_outputs(self) -> int:
        return self.total_factoid_outputs + self.total_entry_credit_outputs

    @property
    def fees_paid(self) -> int:
        """Inputs minus outputs; 0 for a coinbase transaction (no inputs)."""
        if self.total_inputs == 0:
            return 0
        return self.total_inputs - self.total_outputs

    @property
    def id(self) -> str:
        """Transaction id: hex SHA-256 of the unsigned scope."""
        return sha256(self.marshal_binary_sig()).hex()

    def is_signed(self) -> bool:
        return len(self.signatures) != 0

    def marshal_binary_sig(self) -> bytes:
        """Serialize the part of the transaction covered by signatures."""
        writer = BinaryWriter()
        writer.u8(TRANSACTION_VERSION)
        writer.u48be(self.timestamp)
        writer.u8(len(self.inputs))
        writer.u8(len(self.factoid_outputs))
        writer.u8(len(self.entry_credit_outputs))
        for address in self.inputs + self.factoid_outputs + self.entry_credit_outputs:
            writer.bytes(address.marshal_binary())
        return writer.to_bytes()

    def marshal_binary(self) -> bytes:
        """
        Serialize the signed transaction.

        Raises:
            UnsignedTransaction: If the transaction carries no signatures
        """
        if not self.is_signed():
            raise UnsignedTransaction("Cannot marshal an unsigned Transaction")

        writer = BinaryWriter()
        writer.bytes(self.marshal_binary_sig())
        for rcd, signature in zip(self.rcds, self.signatures):
            writer.bytes(rcd)
            writer.bytes(signature)
        return writer.to_bytes()

    def compute_ec_required_fees(self, rcd_signature_length: Optional[int] = None,
                                 number_of_signatures: Optional[int] = None,
                                 rcd_type: Optional[int] = None) -> int:
        """
        Minimum fee of the transaction in Entry Credits.

        An unsigned transaction needs either ``rcd_signature_length`` and
        ``number_of_signatures``, or ``rcd_type=1`` to assume one RCD type 1
        signature per input.

        Args:
            rcd_signature_length: Total bytes of RCDs and signatures to expect
            number_of_signatures: Number of signatures to expect
            rcd_type: RCD type to assume for every input

        Returns:
            Fee in Entry Credits

        Raises:
            MissingFeeParameters: Unsigned transaction without sizing parameters
            SizeLimitExceeded: If the transaction exceeds the maximum size
        """
        if self.is_signed():
            size = len(self.marshal_binary())
            signatures = len(self.signatures)
        elif isinstance(rcd_signature_length, int) and isinstance(number_of_signatures, int):
            size = len(self.marshal_binary_sig()) + rcd_signature_length
            signatures = number_of_signatures
        elif rcd_type == RCD_TYPE_1:
            size = len(self.marshal_binary_sig()) + len(self.inputs) * RCD_TYPE_1_SIGNATURE_LENGTH
            signatures = len(self.inputs)
        else:
            raise MissingFeeParameters("Missing parameters to compute fees of unsigned transaction")

        if size > MAX_TRANSACTION_SIZE:
            raise SizeLimitExceeded(
                f"Transaction size is bigger than the maximum ({MAX_TRANSACTION_SIZE} bytes)",
                details={"size": size},
            )

        fee = (size + ENTRY_CREDIT_CHUNK - 1) // ENTRY_CREDIT_CHUNK
        fee += 10 * (len(self.factoid_outputs) + len(self.entry_credit_outputs))
        fee += signatures
        return fee

    def compute_required_fees(self, ec_rate: int, **opts) -> int:
        """Minimum fee in Factoshis at the given Entry Credit rate."""
        return self.compute_ec_required_fees(**opts) * ec_rate

    def validate_fees(self, ec_rate: int, **opts) -> bool:
        return self.compute_required_fees(ec_rate, **opts) <= self.fees_paid

    @classmethod
    def unmarshal_binary(cls, data: bytes) -> Transaction:
        """
        Decode a transaction from its signed or unsigned wire format.

        Raises:
            InvalidArgument: If the buffer is not a well-formed transaction
        """
        reader = BinaryReader(bytes(data))
        try:
            version = reader.u8()
            if version != TRANSACTION_VERSION:
                raise InvalidArgument(f"Unsupported transaction version {version}")
            timestamp = reader.u48be()
            counts = (reader.u8(), reader.u8(), reader.u8())

            def read_addresses(count, encode):
                addresses = []
                for _ in range(count):
                    amount = reader.var_int()
                    rcd_hash = reader.bytes(32)
                    addresses.append(TransactionAddress(encode(rcd_hash), amount, rcd_hash))
                return tuple(addresses)

            inputs = read_addresses(counts[0], rcd_hash_to_public_fct_address)
            factoid_outputs = read_addresses(counts[1], rcd_hash_to_public_fct_address)
            entry_credit_outputs = read_addresses(counts[2], key_to_public_ec_address)

            rcds, signatures = [], []
            if not reader.eof:
                for _ in inputs:
                    rcd_type = reader.u8()
                    if rcd_type != RCD_TYPE_1:
                        raise InvalidArgument(f"Unsupported RCD type {rcd_type}")
                    rcds.append(bytes([rcd_type]) + reader.bytes(32))
                    signatures.append(reader.bytes(SIGNATURE_SIZE))
            if not reader.eof:
                raise InvalidArgument("Trailing bytes after transaction")
        except IndexError as e:
            raise InvalidArgument("Truncated transaction data", cause=e) from e

        return cls(
            timestamp=timestamp,
            inputs=inputs,
            factoid_outputs=factoid_outputs,
            entry_credit_outputs=entry_credit_outputs,
            rcds=tuple(rcds),
            signatures=tuple(signatures),
        )

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> Transaction:
        """Build a Transaction from a factomd ``transaction`` API result."""
        def addresses(items):
            return tuple(
                TransactionAddress.from_address(item["useraddress"], item["amount"])
                for item in items or []
            )

        signatures = [
            bytes.fromhex(signature)
            for block in data.get("sigblocks") or []
            for signature in block.get("signatures") or []
        ]

        return cls(
            timestamp=data["millitimestamp"],
            inputs=addresses(data.get("inputs")),
            factoid_outputs=addresses(data.get("outputs")),
            entry_credit_outputs=addresses(data.get("outecs")),
            rcds=tuple(bytes.fromhex(rcd) for rcd in data.get("rcds") or []),
            signatures=tuple(signatures),
        )

    def to_dict(self) -> Dict[str, Any]:
        def addresses(items):
            return [{"address": a.address, "amount": a.amount} for a in items]

        return {
            "id": self.id,
            "timestamp": self.timestamp,
            "inputs": addresses(self.inputs),
            "factoidOutputs": addresses(self.factoid_outputs),
            "entryCreditOutputs": addresses(self.entry_credit_outputs),
            "feesPaid": self.fees_paid,
            "rcds": [rcd.hex() for rcd in self.rcds],
            "signatures": [signature.hex() for signature in self.signatures],
        }


class TransactionBuilder:
    """
    Mutable builder producing immutable Transactions.

    Private input addresses are signed on ``build()``; public inputs take
    ``(rcd, signature)`` pairs through ``rcd_signature`` in input order.
    """

    def __init__(self, transaction: Optional[Transaction] = None):
        """
        Initialize builder.

        Args:
            transaction: Existing Transaction to copy, signatures excluded
        """
        if transaction is not None and not isinstance(transaction, Transaction):
            raise InvalidArgument("Argument must be an instance of Transaction")

        self._timestamp: Optional[int] = None
        self._inputs: List[TransactionAddress] = []
        self._factoid_outputs: List[TransactionAddress] = []
        self._entry_credit_outputs: List[TransactionAddress] = []
        self._keys: List[Optional[Ed25519KeyPair]] = []
        self._rcds: List[bytes] = []
        self._signatures: List[bytes] = []

        if transaction is not None:
            self._timestamp = transaction.timestamp
            self._inputs = list(transaction.inputs)
            self._factoid_outputs = list(transaction.factoid_outputs)
            self._entry_credit_outputs = list(transaction.entry_credit_outputs)
            self._keys = [None] * len(self._inputs)

    def input(self, fct_address: Union[str, Address], amount: int) -> TransactionBuilder:
        """
        Add an input.

        Args:
            fct_address: Private address (signed at build) or public address
            amount: Factoshis spent from the address
        """
        address = parse_address(fct_address)
        if not address.is_factoid:
            raise InvalidAddress(f"{address.text} is not a valid Factoid address")
        validate_amount(amount)

        key = address.key_pair() if address.is_private else None
        self._keys.append(key)
        self._inputs.append(TransactionAddress.from_address(address.public(), amount))
        return self

    def output(self, public_address: Union[str, Address], amount: int) -> TransactionBuilder:
        """
        Add a Factoid output or an Entry Credit purchase.

        Args:
            public_address: ``FA`` or ``EC`` public address
            amount: Factoshis sent to the address
        """
        address = parse_address(public_address)
        if not address.is_public:
            raise InvalidAddress(
                f"{address.text} is not a valid Factoid or Entry Credit public address"
            )
        validate_amount(amount)

        output = TransactionAddress.from_address(address, amount)
        if address.kind is AddressKind.FCT_PUBLIC:
            self._factoid_outputs.append(output)
        else:
            self._entry_credit_outputs.append(output)
        return self

    def rcd_signature(self, rcd: Union[bytes, str], signature: Union[bytes, str]) -> TransactionBuilder:
        """Supply the RCD and signature of the next public input."""
        self._rcds.append(to_bytes(rcd))
        self._signatures.append(to_bytes(signature))
        return self

    def timestamp(self, timestamp: int) -> TransactionBuilder:
        self._timestamp = timestamp
        return self

    def build(self) -> Transaction:
        """
        Sign and freeze the transaction.

        Raises:
            InconsistentSignatures: If only part of the inputs can be signed
                or the number of supplied signatures does not match
            InvalidSignature: If a supplied RCD or signature fails verification
            InvalidArgument: If outputs exceed inputs
        """
        timestamp = self._timestamp if self._timestamp is not None else int(time.time() * 1000)
        if isinstance(timestamp, bool) or not isinstance(timestamp, int) or timestamp < 0:
            raise InvalidArgument(f"Invalid timestamp {timestamp!r}")
        for section in (self._inputs, self._factoid_outputs, self._entry_credit_outputs):
            if len(section) > MAX_ADDRESSES_PER_SECTION:
                raise InvalidArgument(f"At most {MAX_ADDRESSES_PER_SECTION} addresses per section")

        unsigned = Transaction(
            timestamp=timestamp,
            inputs=tuple(self._inputs),
            factoid_outputs=tuple(self._factoid_outputs),
            entry_credit_outputs=tuple(self._entry_credit_outputs),
        )
        if unsigned.total_inputs and unsigned.total_outputs > unsigned.total_inputs:
            raise InvalidArgument(
                f"Total outputs ({unsigned.total_outputs}) exceed total inputs ({unsigned.total_inputs})"
            )

        public_inputs = [i for i, key in enumerate(self._keys) if key is None]
        if len(self._rcds) != len(self._signatures):
            raise InconsistentSignatures(
                f"The number of RCDs ({len(self._rcds)}) does not equal "
                f"the number of signatures ({len(self._signatures)})"
            )
        if len(public_inputs) == len(self._inputs) and not self._signatures:
            return unsigned
        if len(self._signatures) != len(public_inputs):
            raise InconsistentSignatures(
                f"{len(public_inputs)} public inputs need a supplied signature, "
                f"got {len(self._signatures)}"
            )

        data = unsigned.marshal_binary_sig()
        supplied = iter(zip(self._rcds, self._signatures))
        rcds, signatures = [], []
        for input_address, key in zip(self._inputs, self._keys):
            if key is not None:
                rcd = rcd1_from_public_key(key.public_key_bytes())
                signature = key.sign(data)
            else:
                rcd, signature = next(supplied)
                _verify_rcd(input_address, rcd)
                _verify_signature(data, rcd, signature)
            rcds.append(rcd)
            signatures.append(signature)

        return Transaction(
            timestamp=timestamp,
            inputs=unsigned.inputs,
            factoid_outputs=unsigned.factoid_outputs,
            entry_credit_outputs=unsigned.entry_credit_outputs,
            rcds=tuple(rcds),
            signatures=tuple(signatures),
        )


__all__ = [
    "Transaction",
    "TransactionAddress",
    "TransactionBuilder",
    "RCD_TYPE_1_SIGNATURE_LENGTH",
    "validate_amount",
]
