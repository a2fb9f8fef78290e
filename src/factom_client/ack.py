"""
Acknowledgment polling.

``AckWaiter`` polls factomd's ``ack`` method until the status of a commit,
reveal or Factoid transaction leaves ``Unknown``/``NotConfirmed``, or the
timeout elapses. One poll is in flight at a time and nothing keeps running
once ``wait`` returns or raises; cancelling the awaiting task stops it.
"""

from __future__ import annotations
import asyncio
import logging
from typing import Optional, Union

from .constants import ACK_PENDING_STATUSES, ACK_POLL_INTERVAL, DEFAULT_ACK_TIMEOUT
from .runtime.errors import AckTimeout, InvalidArgument, TransportError

logger = logging.getLogger(__name__)

COMMIT_ACK_CHAIN_ID = "c"
FACTOID_ACK_CHAIN_ID = "f"


def _to_hex(value: Union[str, bytes]) -> str:
    return value.hex() if isinstance(value, (bytes, bytearray)) else value


class AckWaiter:
    """
    Polls the acknowledgment state of a hash until it is terminal.

    Args:
        factomd: Client exposing ``async call(method, params)``
        poll_interval: Seconds between two polls
    """

    def __init__(self, factomd, poll_interval: float = ACK_POLL_INTERVAL):
        self.factomd = factomd
        self.poll_interval = poll_interval

    async def wait(self, hash: Union[str, bytes], chain_id: Union[str, bytes],
                   field: Optional[str], timeout: Optional[float] = None,
                   ack_type: str = "ack") -> Optional[str]:
        """
        Wait until the acknowledgment status is terminal.

        Args:
            hash: Transaction id or entry hash to check
            chain_id: ``c`` for commits, ``f`` for Factoid transactions or
                the chain id of a revealed entry
            field: Sub-object of the ack response holding the status
                (``commitdata``, ``entrydata``) or None for a flat status
            timeout: Seconds to wait, None for the default of 60, negative
                to return immediately without polling
            ack_type: Label used in errors and logs

        Returns:
            Terminal status (e.g. ``TransactionACK``, ``DBlockConfirmed``),
            None when told not to wait

        Raises:
            InvalidArgument: If hash or chain id is missing
            AckTimeout: If no terminal status was seen in time
            TransportError: If an ack call failed
        """
        if not hash or not chain_id:
            raise InvalidArgument(
                f"Acknowledgement of type [{ack_type}]: hash or chain ID is missing"
            )

        timeout = DEFAULT_ACK_TIMEOUT if timeout is None else timeout
        if timeout < 0:
            return None

        params = {"hash": _to_hex(hash), "chainid": _to_hex(chain_id)}
        loop = asyncio.get_running_loop()
        start = loop.time()
        logger.debug(f"Waiting on [{ack_type}] acknowledgement of {params['hash']}")

        while True:
            response = await self.factomd.call("ack", params)
            status = self._status(response, field, ack_type)

            if status not in ACK_PENDING_STATUSES:
                logger.debug(f"[{ack_type}] {params['hash']} acknowledged: {status}")
                return status

            elapsed = loop.time() - start
            if elapsed >= timeout:
                logger.warning(f"[{ack_type}] {params['hash']} not acknowledged after {timeout}s")
                raise AckTimeout(ack_type, params["hash"], timeout)

            await asyncio.sleep(min(self.poll_interval, timeout - elapsed))

    @staticmethod
    def _status(response, field: Optional[str], ack_type: str) -> str:
        try:
            return response[field]["status"] if field else response["status"]
        except (KeyError, TypeError) as e:
            raise TransportError(
                f"Malformed [{ack_type}] acknowledgement response: {response}", cause=e
            ) from e


async def wait_on_commit_ack(factomd, tx_id: Union[str, bytes], timeout: Optional[float] = None,
                             poll_interval: float = ACK_POLL_INTERVAL) -> Optional[str]:
    """Wait on the acknowledgment of an entry or chain commit."""
    return await AckWaiter(factomd, poll_interval).wait(
        tx_id, COMMIT_ACK_CHAIN_ID, "commitdata", timeout, "entry-commit"
    )


async def wait_on_reveal_ack(factomd, entry_hash: Union[str, bytes], chain_id: Union[str, bytes],
                             timeout: Optional[float] = None,
                             poll_interval: float = ACK_POLL_INTERVAL) -> Optional[str]:
    """Wait on the acknowledgment of an entry or chain reveal."""
    return await AckWaiter(factomd, poll_interval).wait(
        entry_hash, chain_id, "entrydata", timeout, "entry-reveal"
    )


async def wait_on_factoid_transaction_ack(factomd, tx_id: Union[str, bytes],
                                          timeout: Optional[float] = None,
                                          poll_interval: float = ACK_POLL_INTERVAL) -> Optional[str]:
    """Wait on the acknowledgment of a Factoid transaction."""
    return await AckWaiter(factomd, poll_interval).wait(
        tx_id, FACTOID_ACK_CHAIN_ID, None, timeout, "factoid-transaction"
    )


__all__ = [
    "AckWaiter",
    "wait_on_commit_ack",
    "wait_on_reveal_ack",
    "wait_on_factoid_transaction_ack",
]
