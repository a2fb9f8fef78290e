"""
Test Factoid transaction building, signing, fees and serialization.
"""

import pytest

from factom_client import (
    InconsistentSignatures,
    InvalidAddress,
    InvalidArgument,
    InvalidSignature,
    MissingFeeParameters,
    Transaction,
    UnsignedTransaction,
)
from factom_client.crypto import verify_ed25519

from helpers import (
    EC_PRIVATE,
    EC_PUBLIC,
    FCT_PRIVATE_1,
    FCT_PRIVATE_2,
    FCT_PUBLIC_1,
    FCT_PUBLIC_2,
    FCT_PUBLIC_3,
    mk_transaction,
)

TIMESTAMP = 1521693377958

MARSHAL_BINARY_SIG = (
    "0201624bfe45a602010186d6bf00ada661a0c8f36a31ee89054001f2b283f05fbcbb40076bc7a8a7e2fc6ec05c"
    "b6859fb1407e5a8f7716e9bed9db6289dfe9b9b2d8393ebbc68b9b0546df8e1145dd964c3382b19640d9548834"
    "81f3aa501f3f5d4f9e796bafe8aa01bfe89780771e733d6396f8fb9b82ee9b005d54e4b02234a10b542573645f"
    "7ba55650f25eb931985cddcf451df77594b5b6"
)
SIGNATURE_BLOCK = (
    "01a4a8befef8404ab4d68a0e65ed121190ffb60ad5c99f9c7d252fb99748f8258f8154d661fbc2a95a4451ee2a"
    "00d4f613f066741ffcd52c74466c349ae779f967431bcaa3047982c2172cab74386ee49e5986c053a1b7c1be4b"
    "39856bc370eb020137dc52975d81dc28c827fedeae5e0527027e766064179382854169a5aaf5256f624da47b57"
    "8221aee786d83f8aff3d37aeb585b421f7a243c8915a0779c8a18aa30283c0286aea07ecebdeb4c177dfd190f2"
    "398eebe63b96d939233a026e2503"
)


def unsigned_transaction():
    return (
        Transaction.builder()
        .timestamp(TIMESTAMP)
        .input(FCT_PUBLIC_1, 14000000)
        .input(FCT_PUBLIC_2, 11000000)
        .output(FCT_PUBLIC_3, 5000000)
        .output(EC_PUBLIC, 6000000)
        .build()
    )


def assert_transaction(tx):
    assert tx.timestamp == TIMESTAMP
    assert len(tx.inputs) == 2
    assert len(tx.factoid_outputs) == 1
    assert len(tx.entry_credit_outputs) == 1

    assert tx.total_inputs == 25000000
    assert tx.total_factoid_outputs == 5000000
    assert tx.total_entry_credit_outputs == 6000000
    assert tx.fees_paid == 14000000
    assert tx.marshal_binary_sig().hex() == MARSHAL_BINARY_SIG

    assert tx.inputs[0].address == FCT_PUBLIC_1
    assert tx.inputs[0].amount == 14000000
    assert tx.inputs[1].address == FCT_PUBLIC_2
    assert tx.inputs[1].amount == 11000000
    assert tx.factoid_outputs[0].address == FCT_PUBLIC_3
    assert tx.entry_credit_outputs[0].address == EC_PUBLIC


class TestTransactionBuilder:
    """Test signed and unsigned transaction building."""

    def test_signed_transaction(self):
        """Test signing with private input addresses."""
        tx = mk_transaction()

        assert_transaction(tx)
        assert len(tx.rcds) == 2
        assert len(tx.signatures) == 2
        assert tx.is_signed()
        assert tx.marshal_binary().hex() == MARSHAL_BINARY_SIG + SIGNATURE_BLOCK

        for rcd, signature in zip(tx.rcds, tx.signatures):
            assert verify_ed25519(rcd[1:], signature, tx.marshal_binary_sig())

    def test_signatures_fail_on_modified_data(self):
        """Test that changing any signed byte invalidates every signature."""
        tx = mk_transaction()
        data = tx.marshal_binary_sig()

        for i in range(len(data)):
            modified = bytearray(data)
            modified[i] ^= 0x01
            for rcd, signature in zip(tx.rcds, tx.signatures):
                assert not verify_ed25519(rcd[1:], signature, bytes(modified)), f"byte {i}"

    def test_unsigned_transaction(self):
        tx = unsigned_transaction()

        assert_transaction(tx)
        assert tx.rcds == ()
        assert tx.signatures == ()
        assert not tx.is_signed()

    def test_copy_without_signatures(self):
        tx = (
            Transaction.builder()
            .timestamp(TIMESTAMP)
            .input(FCT_PRIVATE_1, 14000000)
            .output(FCT_PUBLIC_3, 5000000)
            .output(EC_PUBLIC, 6000000)
            .build()
        )
        copy = Transaction.builder(tx).build()

        assert not copy.is_signed()
        assert copy.timestamp == TIMESTAMP
        assert copy.total_inputs == 14000000
        assert copy.total_factoid_outputs == 5000000
        assert copy.total_entry_credit_outputs == 6000000

    def test_manually_signed_copy(self):
        """Test supplying the RCD and signature of a public input."""
        tx = (
            Transaction.builder()
            .timestamp(TIMESTAMP)
            .input(FCT_PRIVATE_1, 14000000)
            .output(FCT_PUBLIC_3, 5000000)
            .output(EC_PUBLIC, 6000000)
            .build()
        )
        copy = Transaction.builder(tx).rcd_signature(tx.rcds[0], tx.signatures[0]).build()

        assert copy.marshal_binary() == tx.marshal_binary()

    def test_manual_signature_as_hex(self):
        tx = mk_transaction()
        copy = (
            Transaction.builder(tx)
            .rcd_signature(tx.rcds[0].hex(), tx.signatures[0].hex())
            .rcd_signature(tx.rcds[1].hex(), tx.signatures[1].hex())
            .build()
        )
        assert copy.marshal_binary() == tx.marshal_binary()

    def test_mixed_private_and_public_inputs(self):
        """Test that supplied signatures fill the public inputs in order."""
        tx = mk_transaction()
        mixed = (
            Transaction.builder()
            .timestamp(TIMESTAMP)
            .input(FCT_PRIVATE_1, 14000000)
            .input(FCT_PUBLIC_2, 11000000)
            .output(FCT_PUBLIC_3, 5000000)
            .output(EC_PUBLIC, 6000000)
            .rcd_signature(tx.rcds[1], tx.signatures[1])
            .build()
        )
        assert mixed.marshal_binary() == tx.marshal_binary()

    def test_rejects_swapped_signatures(self):
        tx = mk_transaction()
        builder = (
            Transaction.builder(tx)
            .rcd_signature(tx.rcds[1], tx.signatures[1])
            .rcd_signature(tx.rcds[0], tx.signatures[0])
        )
        with pytest.raises(InvalidSignature):
            builder.build()

    def test_rejects_bad_signature(self):
        tx = mk_transaction()
        builder = (
            Transaction.builder(tx)
            .rcd_signature(tx.rcds[0], tx.signatures[1])
            .rcd_signature(tx.rcds[1], tx.signatures[1])
        )
        with pytest.raises(InvalidSignature):
            builder.build()

    def test_rejects_partial_signatures(self):
        tx = mk_transaction()
        builder = Transaction.builder(tx).rcd_signature(tx.rcds[0], tx.signatures[0])
        with pytest.raises(InconsistentSignatures):
            builder.build()

    def test_rejects_outputs_greater_than_inputs(self):
        builder = (
            Transaction.builder()
            .timestamp(TIMESTAMP)
            .input(FCT_PRIVATE_1, 20)
            .output(FCT_PUBLIC_3, 20)
            .output(EC_PUBLIC, 20)
        )
        with pytest.raises(InvalidArgument):
            builder.build()

    def test_coinbase_transaction(self):
        """Test that a transaction without inputs pays no fees."""
        tx = Transaction.builder().timestamp(TIMESTAMP).output(FCT_PUBLIC_3, 20).build()

        assert tx.total_inputs == 0
        assert tx.fees_paid == 0

    @pytest.mark.parametrize("amount", [-1, 0, 2 ** 53, 1.5, "10", True])
    def test_rejects_invalid_amounts(self, amount):
        with pytest.raises(InvalidArgument):
            Transaction.builder().input(FCT_PRIVATE_1, amount)
        with pytest.raises(InvalidArgument):
            Transaction.builder().output(FCT_PUBLIC_3, amount)

    def test_rejects_wrong_address_kinds(self):
        with pytest.raises(InvalidAddress):
            Transaction.builder().input(EC_PRIVATE, 10)
        with pytest.raises(InvalidAddress):
            Transaction.builder().output(FCT_PRIVATE_2, 10)

    def test_transaction_is_immutable(self):
        tx = mk_transaction()
        with pytest.raises(AttributeError):
            tx.timestamp = 0


class TestTransactionFees:
    """Test fee computation."""

    def test_signed_fees(self):
        tx = mk_transaction()

        assert tx.compute_ec_required_fees() == 23
        assert tx.compute_required_fees(1000) == 23000
        assert tx.validate_fees(1000)
        assert not tx.validate_fees(1000000)

    def test_unsigned_fees_with_rcd_type(self):
        tx = unsigned_transaction()

        assert tx.compute_ec_required_fees(rcd_type=1) == 23
        assert tx.compute_required_fees(1000, rcd_type=1) == 23000

    def test_unsigned_fees_with_signature_sizing(self):
        tx = unsigned_transaction()
        opts = {"rcd_signature_length": 2 * (33 + 64), "number_of_signatures": 2}

        assert tx.compute_ec_required_fees(**opts) == 23
        assert tx.compute_required_fees(1000, **opts) == 23000

    def test_unsigned_fees_need_parameters(self):
        with pytest.raises(MissingFeeParameters):
            unsigned_transaction().compute_ec_required_fees()


class TestTransactionSerialization:
    """Test wire format and JSON conversions."""

    def test_unsigned_marshal_binary(self):
        with pytest.raises(UnsignedTransaction):
            unsigned_transaction().marshal_binary()

    def test_transaction_id(self):
        """Test that the id covers the unsigned scope only."""
        assert mk_transaction().id == unsigned_transaction().id
        assert len(mk_transaction().id) == 64

    def test_unmarshal_signed(self):
        tx = mk_transaction()
        decoded = Transaction.unmarshal_binary(tx.marshal_binary())

        assert decoded == tx
        assert decoded.marshal_binary() == tx.marshal_binary()

    def test_unmarshal_unsigned(self):
        tx = unsigned_transaction()
        assert Transaction.unmarshal_binary(tx.marshal_binary_sig()) == tx

    @pytest.mark.parametrize("data", [
        "03" + MARSHAL_BINARY_SIG[2:],
        MARSHAL_BINARY_SIG[:40],
        MARSHAL_BINARY_SIG + "01",
    ])
    def test_unmarshal_rejects_malformed(self, data):
        with pytest.raises(InvalidArgument):
            Transaction.unmarshal_binary(bytes.fromhex(data))

    def test_to_dict(self):
        tx = mk_transaction()
        data = tx.to_dict()

        assert data["id"] == tx.id
        assert data["feesPaid"] == 14000000
        assert data["inputs"][0] == {"address": FCT_PUBLIC_1, "amount": 14000000}
        assert data["entryCreditOutputs"] == [{"address": EC_PUBLIC, "amount": 6000000}]
        assert len(data["signatures"]) == 2

    def test_from_api(self):
        """Test decoding a factomd transaction result."""
        tx = mk_transaction()
        api_result = {
            "millitimestamp": TIMESTAMP,
            "inputs": [{"useraddress": a.address, "amount": a.amount} for a in tx.inputs],
            "outputs": [{"useraddress": a.address, "amount": a.amount} for a in tx.factoid_outputs],
            "outecs": [{"useraddress": a.address, "amount": a.amount} for a in tx.entry_credit_outputs],
            "rcds": [rcd.hex() for rcd in tx.rcds],
            "sigblocks": [{"signatures": [s.hex()]} for s in tx.signatures],
        }

        assert Transaction.from_api(api_result) == tx
