"""
Commit and reveal submission of Entries and Chains.

A submission goes through ``COMPOSED -> COMMITTED -> REVEAL_PENDING ->
REVEALED``, or ends ``FAILED``. A node answering "Repeated Commit" means the
commit is already known: the commit step then succeeds with
``repeated_commit=True`` and no transaction id.

``add`` waits for the commit acknowledgment before revealing unless the
commit timeout is negative, in which case commit and reveal are sent
concurrently and may reach the node in any order. If either side fails the
other is cancelled; a request already written to the node is not recalled.
"""

from __future__ import annotations
import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Union

from .ack import AckWaiter, COMMIT_ACK_CHAIN_ID
from .addresses import Address
from .chain import Chain
from .commit import compose_commit, compose_ledger, compose_reveal
from .constants import ACK_POLL_INTERVAL
from .entry import Entry
from .runtime.errors import ApiError, InvalidArgument, MissingChainId

logger = logging.getLogger(__name__)

Submittable = Union[Entry, Chain]


class SubmissionState(Enum):
    """State of an Entry or Chain submission."""
    COMPOSED = "composed"
    COMMITTED = "committed"
    REVEAL_PENDING = "reveal_pending"
    REVEALED = "revealed"
    FAILED = "failed"


@dataclass
class CommitResult:
    """Result of a commit: no tx id when the commit was a repeat."""
    tx_id: Optional[str]
    repeated_commit: bool = False


@dataclass
class RevealResult:
    """Result of a reveal."""
    entry_hash: str
    chain_id: str


@dataclass
class AddResult:
    """Result of a full commit and reveal."""
    tx_id: Optional[str]
    repeated_commit: bool
    entry_hash: str
    chain_id: str
    state: SubmissionState = field(default=SubmissionState.REVEALED)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "txId": self.tx_id,
            "repeatedCommit": self.repeated_commit,
            "entryHash": self.entry_hash,
            "chainId": self.chain_id,
        }


def _kind(obj: Submittable) -> str:
    if isinstance(obj, Chain):
        return "chain"
    if isinstance(obj, Entry):
        if len(obj.chain_id) == 0:
            raise MissingChainId("Entry doesn't contain a chain id to add entry")
        return "entry"
    raise InvalidArgument("Argument must be an instance of Entry or Chain")


class SubmissionPipeline:
    """
    Submits Entries and Chains to factomd.

    Args:
        factomd: Client exposing ``async call(method, params)``
        poll_interval: Seconds between acknowledgment polls
    """

    def __init__(self, factomd, poll_interval: float = ACK_POLL_INTERVAL):
        self.factomd = factomd
        self.ack_waiter = AckWaiter(factomd, poll_interval)

    async def commit(self, obj: Submittable, ec_address: Union[str, Address],
                     ack_timeout: Optional[float] = None,
                     signature: Optional[bytes] = None) -> CommitResult:
        """
        Commit an Entry or a Chain.

        Args:
            obj: Entry (with chain id) or Chain
            ec_address: Private EC address, or public EC address with ``signature``
            ack_timeout: Seconds to wait on the commit acknowledgment,
                None for 60, negative to not wait
            signature: External signature of the commit ledger

        Returns:
            CommitResult

        Raises:
            ApiError: Any node rejection other than a repeated commit
            AckTimeout: If the commit was not acknowledged in time
        """
        kind = _kind(obj)
        message = compose_commit(compose_ledger(obj), ec_address, signature)
        return await self._send_commit(kind, message, ack_timeout)

    async def _send_commit(self, kind: str, message: bytes,
                           ack_timeout: Optional[float]) -> CommitResult:
        try:
            committed = await self.factomd.call(f"commit-{kind}", {"message": message.hex()})
        except ApiError as e:
            if not e.is_repeated_commit:
                raise
            logger.warning(f"Repeated commit of {kind}: {e.rpc_message}")
            return CommitResult(tx_id=None, repeated_commit=True)

        tx_id = committed["txid"]
        logger.debug(f"Committed {kind} in transaction {tx_id}")
        await self.ack_waiter.wait(
            tx_id, COMMIT_ACK_CHAIN_ID, "commitdata", ack_timeout, f"{kind}-commit"
        )
        return CommitResult(tx_id=tx_id)

    async def reveal(self, obj: Submittable, ack_timeout: Optional[float] = None) -> RevealResult:
        """
        Reveal an Entry or a Chain.

        Args:
            obj: Entry (with chain id) or Chain
            ack_timeout: Seconds to wait on the reveal acknowledgment,
                None for 60, negative to not wait

        Returns:
            RevealResult with the entry hash and chain id reported by the node
        """
        return await self._send_reveal(_kind(obj), compose_reveal(obj), ack_timeout)

    async def _send_reveal(self, kind: str, reveal: bytes,
                           ack_timeout: Optional[float]) -> RevealResult:
        revealed = await self.factomd.call(f"reveal-{kind}", {"entry": reveal.hex()})
        entry_hash, chain_id = revealed["entryhash"], revealed["chainid"]
        logger.debug(f"Revealed {kind} {entry_hash} in chain {chain_id}")

        await self.ack_waiter.wait(entry_hash, chain_id, "entrydata", ack_timeout, f"{kind}-reveal")
        return RevealResult(entry_hash=entry_hash, chain_id=chain_id)

    async def add(self, obj: Submittable, ec_address: Union[str, Address],
                  commit_timeout: Optional[float] = None,
                  reveal_timeout: Optional[float] = None,
                  signature: Optional[bytes] = None) -> AddResult:
        """
        Commit then reveal an Entry or a Chain.

        With a negative ``commit_timeout`` the reveal is sent concurrently
        with the commit and a failure of either cancels the other; otherwise
        it is sent once the commit is acknowledged.

        Args:
            obj: Entry (with chain id) or Chain
            ec_address: Private EC address, or public EC address with ``signature``
            commit_timeout: Seconds to wait on the commit acknowledgment
            reveal_timeout: Seconds to wait on the reveal acknowledgment
            signature: External signature of the commit ledger

        Returns:
            AddResult
        """
        kind = _kind(obj)
        message = compose_commit(compose_ledger(obj), ec_address, signature)
        reveal = compose_reveal(obj)
        state = SubmissionState.COMPOSED
        logger.debug(f"Adding {kind}: {state.value}")

        try:
            if commit_timeout is not None and commit_timeout < 0:
                tasks = [
                    asyncio.ensure_future(self._send_commit(kind, message, commit_timeout)),
                    asyncio.ensure_future(self._send_reveal(kind, reveal, reveal_timeout)),
                ]
                try:
                    committed, revealed = await asyncio.gather(*tasks)
                except BaseException:
                    for task in tasks:
                        task.cancel()
                    raise
            else:
                committed = await self._send_commit(kind, message, commit_timeout)
                logger.debug(f"Adding {kind}: {SubmissionState.COMMITTED.value}")
                state = SubmissionState.REVEAL_PENDING
                logger.debug(f"Adding {kind}: {state.value}")
                revealed = await self._send_reveal(kind, reveal, reveal_timeout)
        except Exception:
            logger.warning(f"Adding {kind}: {SubmissionState.FAILED.value} while {state.value}")
            raise

        return AddResult(
            tx_id=committed.tx_id,
            repeated_commit=committed.repeated_commit,
            entry_hash=revealed.entry_hash,
            chain_id=revealed.chain_id,
            state=SubmissionState.REVEALED,
        )

    async def add_all(self, objs: Iterable[Submittable], ec_address: Union[str, Address],
                      concurrency: int = 1, **opts) -> List[AddResult]:
        """
        Add several Entries or Chains with at most ``concurrency`` in flight.

        Every submission runs to completion; the first failure is then raised.

        Returns:
            Results in input order
        """
        if isinstance(concurrency, bool) or not isinstance(concurrency, int) or concurrency < 1:
            raise InvalidArgument(f"Concurrency must be a positive integer, got {concurrency!r}")

        objs = list(objs)
        for obj in objs:
            _kind(obj)

        semaphore = asyncio.Semaphore(concurrency)

        async def add_one(obj):
            async with semaphore:
                return await self.add(obj, ec_address, **opts)

        results = await asyncio.gather(*(add_one(obj) for obj in objs), return_exceptions=True)
        for result in results:
            if isinstance(result, BaseException):
                raise result
        return results

    async def add_entries(self, entries: Iterable[Entry], ec_address: Union[str, Address],
                          concurrency: int = 1, **opts) -> List[AddResult]:
        entries = list(entries)
        if not all(isinstance(e, Entry) for e in entries):
            raise InvalidArgument("All elements must be instances of Entry")
        return await self.add_all(entries, ec_address, concurrency, **opts)

    async def add_chains(self, chains: Iterable[Chain], ec_address: Union[str, Address],
                         concurrency: int = 1, **opts) -> List[AddResult]:
        chains = list(chains)
        if not all(isinstance(c, Chain) for c in chains):
            raise InvalidArgument("All elements must be instances of Chain")
        return await self.add_all(chains, ec_address, concurrency, **opts)


__all__ = [
    "SubmissionState",
    "CommitResult",
    "RevealResult",
    "AddResult",
    "SubmissionPipeline",
]
