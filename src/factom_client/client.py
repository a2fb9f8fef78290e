"""
High-level Factom client.

``FactomCli`` bundles a factomd client, a factom-walletd client and the
submission pipeline. Public Entry Credit addresses passed without an
external signature are resolved to their private form through the wallet.
"""

from __future__ import annotations
from typing import Optional, Dict, Any, Iterable, List, Union

from . import ack, send, wallet
from .add import AddResult, CommitResult, RevealResult, SubmissionPipeline, Submittable
from .addresses import Address, parse_address
from .chain import Chain
from .config import ConnectionOptions
from .constants import ACK_POLL_INTERVAL
from .entry import Entry
from .runtime.errors import InvalidAddress
from .transaction import Transaction
from .transport.rpc import FactomdCli, WalletdCli

Options = Union[None, ConnectionOptions, Dict[str, Any]]


class FactomCli:
    """
    Factom client.

    Example:
        ```python
        async with FactomCli(factomd={"host": "localhost"}) as cli:
            chain = Chain(Entry.builder().ext_id("my chain", "utf8").build())
            result = await cli.add(chain, "Es...")
        ```
    """

    def __init__(self, factomd: Options = None, walletd: Options = None,
                 poll_interval: float = ACK_POLL_INTERVAL,
                 factomd_cli: Optional[FactomdCli] = None,
                 walletd_cli: Optional[WalletdCli] = None):
        """
        Initialize the client.

        Args:
            factomd: Connection options of factomd
            walletd: Connection options of factom-walletd
            poll_interval: Seconds between acknowledgment polls
            factomd_cli: Ready-made factomd client (overrides ``factomd``)
            walletd_cli: Ready-made walletd client (overrides ``walletd``)
        """
        self.factomd = factomd_cli or FactomdCli(factomd)
        self.walletd = walletd_cli or WalletdCli(walletd)
        self.poll_interval = poll_interval
        self.pipeline = SubmissionPipeline(self.factomd, poll_interval)

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self):
        await self.factomd.close()
        await self.walletd.close()

    # Raw API

    async def factomd_api(self, method: str, params: Optional[Dict[str, Any]] = None, **kwargs) -> Any:
        """Direct call to the factomd API."""
        return await self.factomd.call(method, params, **kwargs)

    async def walletd_api(self, method: str, params: Optional[Dict[str, Any]] = None, **kwargs) -> Any:
        """Direct call to the factom-walletd API."""
        return await self.walletd.call(method, params, **kwargs)

    # Add

    async def _ec_address(self, ec_address: Union[str, Address], signature: Optional[bytes]) -> str:
        address = parse_address(ec_address)
        if not address.is_entry_credit:
            raise InvalidAddress(f"{address.text} is not a valid EC address")
        if signature is not None:
            return address.text
        return await wallet.get_private_address(self.walletd, address)

    async def commit(self, obj: Submittable, ec_address: Union[str, Address],
                     ack_timeout: Optional[float] = None,
                     signature: Optional[bytes] = None) -> CommitResult:
        ec = await self._ec_address(ec_address, signature)
        return await self.pipeline.commit(obj, ec, ack_timeout, signature)

    async def reveal(self, obj: Submittable, ack_timeout: Optional[float] = None) -> RevealResult:
        return await self.pipeline.reveal(obj, ack_timeout)

    async def add(self, obj: Submittable, ec_address: Union[str, Address],
                  commit_timeout: Optional[float] = None,
                  reveal_timeout: Optional[float] = None,
                  signature: Optional[bytes] = None) -> AddResult:
        """
        Commit and reveal an Entry or a Chain.

        Args:
            obj: Entry (with chain id) or Chain
            ec_address: EC address paying the write; a public one is resolved
                through walletd unless ``signature`` is given
            commit_timeout: Seconds to wait on the commit ack (negative: reveal concurrently)
            reveal_timeout: Seconds to wait on the reveal ack (negative: do not wait)
            signature: External signature of the commit ledger
        """
        ec = await self._ec_address(ec_address, signature)
        return await self.pipeline.add(obj, ec, commit_timeout, reveal_timeout, signature)

    async def add_chain(self, chain: Chain, ec_address: Union[str, Address], **opts) -> AddResult:
        return await self.add(chain, ec_address, **opts)

    async def add_entry(self, entry: Entry, ec_address: Union[str, Address], **opts) -> AddResult:
        return await self.add(entry, ec_address, **opts)

    async def add_chains(self, chains: Iterable[Chain], ec_address: Union[str, Address],
                         concurrency: int = 1, **opts) -> List[AddResult]:
        ec = await self._ec_address(ec_address, None)
        return await self.pipeline.add_chains(chains, ec, concurrency, **opts)

    async def add_entries(self, entries: Iterable[Entry], ec_address: Union[str, Address],
                          concurrency: int = 1, **opts) -> List[AddResult]:
        ec = await self._ec_address(ec_address, None)
        return await self.pipeline.add_entries(entries, ec, concurrency, **opts)

    # Ack

    async def wait_on_commit_ack(self, tx_id: str, timeout: Optional[float] = None) -> Optional[str]:
        return await ack.wait_on_commit_ack(self.factomd, tx_id, timeout, self.poll_interval)

    async def wait_on_reveal_ack(self, entry_hash: str, chain_id: str,
                                 timeout: Optional[float] = None) -> Optional[str]:
        return await ack.wait_on_reveal_ack(
            self.factomd, entry_hash, chain_id, timeout, self.poll_interval
        )

    async def wait_on_factoid_transaction_ack(self, tx_id: str,
                                              timeout: Optional[float] = None) -> Optional[str]:
        return await ack.wait_on_factoid_transaction_ack(
            self.factomd, tx_id, timeout, self.poll_interval
        )

    # Factoids and Entry Credits

    async def get_entry_credit_rate(self) -> int:
        return await send.get_entry_credit_rate(self.factomd)

    async def get_balance(self, address: Union[str, Address]) -> int:
        return await send.get_balance(self.factomd, address)

    async def get_private_address(self, address: Union[str, Address]) -> str:
        return await wallet.get_private_address(self.walletd, address)

    async def send_transaction(self, transaction: Transaction,
                               ack_timeout: Optional[float] = -1) -> str:
        return await send.send_transaction(self.factomd, transaction, ack_timeout)

    async def create_factoid_transaction(self, origin_address: Union[str, Address],
                                         recipient_address: Union[str, Address], amount: int,
                                         fees: Optional[int] = None) -> Transaction:
        return await send.create_factoid_transaction(
            self.factomd, self.walletd, origin_address, recipient_address, amount, fees
        )

    async def create_entry_credit_purchase_transaction(self, origin_address: Union[str, Address],
                                                       recipient_address: Union[str, Address],
                                                       ec_amount: int,
                                                       fees: Optional[int] = None) -> Transaction:
        return await send.create_entry_credit_purchase_transaction(
            self.factomd, self.walletd, origin_address, recipient_address, ec_amount, fees
        )


__all__ = ["FactomCli"]
