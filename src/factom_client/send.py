"""
Factoid transaction submission.

Before submitting, the fee paid by the transaction is checked against the
current Entry Credit rate and every input address is checked for funds.
"""

from __future__ import annotations
import logging
from typing import Optional, Union

from .addresses import Address, AddressKind, parse_address
from .ack import wait_on_factoid_transaction_ack
from .runtime.errors import InsufficientFees, InsufficientFunds, InvalidAddress, InvalidArgument
from .transaction import Transaction, validate_amount
from .wallet import get_private_address

logger = logging.getLogger(__name__)


async def get_entry_credit_rate(factomd) -> int:
    """Current number of Factoshis per Entry Credit."""
    result = await factomd.call("entry-credit-rate")
    return result["rate"]


async def get_balance(factomd, address: Union[str, Address]) -> int:
    """
    Balance of a public address.

    Returns:
        Factoshis for a Factoid address, Entry Credits for an EC address
    """
    parsed = parse_address(address).public()
    method = "entry-credit-balance" if parsed.kind is AddressKind.EC_PUBLIC else "factoid-balance"
    result = await factomd.call(method, {"address": parsed.text})
    return result["balance"]


async def validate_funds(factomd, public_fct_address: str, amount: int) -> None:
    """
    Raises:
        InsufficientFunds: If the address balance is lower than amount
    """
    balance = await get_balance(factomd, public_fct_address)
    if balance < amount:
        logger.warning(f"Insufficient funds on {public_fct_address}: {balance} < {amount}")
        raise InsufficientFunds(
            f"Address {public_fct_address} doesn't have sufficient funds (balance: {balance})",
            details={"address": public_fct_address, "balance": balance, "amount": amount},
        )


async def send_transaction(factomd, transaction: Transaction,
                           ack_timeout: Optional[float] = -1) -> str:
    """
    Submit a signed Factoid transaction.

    Args:
        factomd: factomd client
        transaction: Signed transaction
        ack_timeout: Seconds to wait on the transaction acknowledgment,
            negative (default) to not wait, None for 60

    Returns:
        Transaction id

    Raises:
        InvalidArgument: If transaction is not a Transaction
        UnsignedTransaction: If the transaction is not signed
        InsufficientFees: If the fee is below the required fee at the current EC rate
        InsufficientFunds: If an input address cannot cover its amount
    """
    if not isinstance(transaction, Transaction):
        raise InvalidArgument("Argument must be an instance of Transaction")
    data = transaction.marshal_binary()

    ec_rate = await get_entry_credit_rate(factomd)
    if not transaction.validate_fees(ec_rate):
        required = transaction.compute_required_fees(ec_rate)
        logger.warning(f"Insufficient fees for transaction {transaction.id}")
        raise InsufficientFees(
            f"Insufficient fees for the transaction (paid: {transaction.fees_paid}, "
            f"minimum required: {required}, current EC rate: {ec_rate})",
            details={"paid": transaction.fees_paid, "required": required, "ec_rate": ec_rate},
        )

    for transaction_input in transaction.inputs:
        await validate_funds(factomd, transaction_input.address, transaction_input.amount)

    result = await factomd.call("factoid-submit", {"transaction": data.hex()})
    tx_id = result["txid"]
    logger.info(f"Submitted Factoid transaction {tx_id}")

    await wait_on_factoid_transaction_ack(factomd, tx_id, ack_timeout)
    return tx_id


def _with_fees(origin_private: str, recipient: str, amount: int, ec_rate: int,
               fees: Optional[int]) -> Transaction:
    required = (
        Transaction.builder()
        .input(origin_private, amount)
        .output(recipient, amount)
        .build()
        .compute_required_fees(ec_rate)
    )

    if fees is not None:
        validate_amount(fees)
        if fees < required:
            raise InsufficientFees(
                f"Cannot set fees to {fees} factoshis because the minimum required fees are {required}"
            )
    final_fees = required if fees is None else fees

    return (
        Transaction.builder()
        .input(origin_private, amount + final_fees)
        .output(recipient, amount)
        .build()
    )


async def create_factoid_transaction(factomd, walletd, origin_address: Union[str, Address],
                                     recipient_address: Union[str, Address], amount: int,
                                     fees: Optional[int] = None) -> Transaction:
    """
    Build a signed transaction sending Factoids.

    Args:
        factomd: factomd client (EC rate)
        walletd: factom-walletd client (resolves a public origin address)
        origin_address: Factoid address paying amount and fees
        recipient_address: Public Factoid address
        amount: Factoshis to send
        fees: Fees in Factoshis, defaults to the minimum required

    Returns:
        Signed Transaction
    """
    origin_private = await get_private_address(walletd, origin_address)
    recipient = parse_address(recipient_address)
    if recipient.kind is not AddressKind.FCT_PUBLIC:
        raise InvalidAddress("Recipient address is not a valid Factoid public address")

    ec_rate = await get_entry_credit_rate(factomd)
    return _with_fees(origin_private, recipient.text, amount, ec_rate, fees)


async def create_entry_credit_purchase_transaction(factomd, walletd,
                                                   origin_address: Union[str, Address],
                                                   recipient_address: Union[str, Address],
                                                   ec_amount: int,
                                                   fees: Optional[int] = None) -> Transaction:
    """
    Build a signed transaction converting Factoids into Entry Credits.

    Args:
        ec_amount: Number of Entry Credits to buy
        fees: Fees in Factoshis, defaults to the minimum required

    Returns:
        Signed Transaction
    """
    origin_private = await get_private_address(walletd, origin_address)
    recipient = parse_address(recipient_address)
    if recipient.kind is not AddressKind.EC_PUBLIC:
        raise InvalidAddress("Recipient address is not a valid Entry Credit public address")

    ec_rate = await get_entry_credit_rate(factomd)
    return _with_fees(origin_private, recipient.text, ec_amount * ec_rate, ec_rate, fees)


__all__ = [
    "get_entry_credit_rate",
    "get_balance",
    "validate_funds",
    "send_transaction",
    "create_factoid_transaction",
    "create_entry_credit_purchase_transaction",
]
