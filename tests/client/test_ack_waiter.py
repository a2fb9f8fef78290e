"""
Test acknowledgment polling of commits, reveals and Factoid transactions.
"""

import asyncio
import pytest
from unittest.mock import patch

from factom_client import (
    AckTimeout,
    AckWaiter,
    InvalidArgument,
    TransportError,
    wait_on_commit_ack,
    wait_on_factoid_transaction_ack,
    wait_on_reveal_ack,
)

TX_ID = "d6e9aa572959910d4a0712c0fd23025f5f1bf4fb74467d2677e10048dc441883"
CHAIN_ID = "954d5a49fd70d9b8bcdb35d252267829957f7ef7fa6c74f88419bdc5e82209f4"


class TestAckWaiter:
    """Test the polling loop."""

    @pytest.mark.asyncio
    async def test_commit_ack(self, factomd):
        """Test polling until the commit leaves the pending statuses."""
        factomd.ack_commit("Unknown", "NotConfirmed", "TransactionACK")

        status = await wait_on_commit_ack(factomd, TX_ID, 5, poll_interval=0.01)

        assert status == "TransactionACK"
        assert factomd.methods() == ["ack", "ack", "ack"]
        assert factomd.params_of("ack")[0] == {"hash": TX_ID, "chainid": "c"}

    @pytest.mark.asyncio
    async def test_reveal_ack(self, factomd):
        factomd.ack_reveal("DBlockConfirmed")

        status = await wait_on_reveal_ack(factomd, TX_ID, CHAIN_ID, 5, poll_interval=0.01)

        assert status == "DBlockConfirmed"
        assert factomd.params_of("ack") == [{"hash": TX_ID, "chainid": CHAIN_ID}]

    @pytest.mark.asyncio
    async def test_factoid_transaction_ack(self, factomd):
        """Test the flat status of Factoid transaction acks."""
        factomd.ack_factoid("NotConfirmed", "TransactionACK")

        status = await wait_on_factoid_transaction_ack(factomd, TX_ID, 5, poll_interval=0.01)

        assert status == "TransactionACK"
        assert factomd.params_of("ack")[0] == {"hash": TX_ID, "chainid": "f"}

    @pytest.mark.asyncio
    async def test_bytes_are_sent_as_hex(self, factomd):
        factomd.ack_reveal("TransactionACK")

        await wait_on_reveal_ack(factomd, bytes.fromhex(TX_ID), bytes.fromhex(CHAIN_ID), 5)

        assert factomd.params_of("ack") == [{"hash": TX_ID, "chainid": CHAIN_ID}]

    @pytest.mark.asyncio
    async def test_timeout(self, factomd):
        """Test that a pending status past the deadline raises AckTimeout."""
        factomd.ack_commit("Unknown")

        with pytest.raises(AckTimeout) as exc_info:
            await wait_on_commit_ack(factomd, TX_ID, 1)

        assert exc_info.value.hash == TX_ID
        assert exc_info.value.timeout == 1
        # Immediate poll, then one every 0.5s until the deadline
        assert 2 <= len(factomd.calls) <= 4

    @pytest.mark.asyncio
    async def test_zero_timeout_polls_once(self, factomd):
        factomd.ack_commit("Unknown")

        with pytest.raises(AckTimeout):
            await wait_on_commit_ack(factomd, TX_ID, 0)

        assert len(factomd.calls) == 1

    @pytest.mark.asyncio
    async def test_zero_timeout_terminal_status(self, factomd):
        factomd.ack_commit("TransactionACK")
        assert await wait_on_commit_ack(factomd, TX_ID, 0) == "TransactionACK"

    @pytest.mark.asyncio
    async def test_negative_timeout_does_not_poll(self, factomd):
        assert await wait_on_commit_ack(factomd, TX_ID, -1) is None
        assert factomd.calls == []

    @pytest.mark.asyncio
    async def test_default_timeout(self, factomd):
        """Test that no timeout means 60 seconds."""
        factomd.ack_commit("Unknown")
        waiter = AckWaiter(factomd, poll_interval=0.01)

        with patch("factom_client.ack.DEFAULT_ACK_TIMEOUT", 0.05):
            with pytest.raises(AckTimeout) as exc_info:
                await waiter.wait(TX_ID, "c", "commitdata")

        assert exc_info.value.timeout == 0.05

    @pytest.mark.asyncio
    @pytest.mark.parametrize("hash,chain_id", [("", "c"), (TX_ID, ""), (None, "c")])
    async def test_missing_arguments(self, factomd, hash, chain_id):
        with pytest.raises(InvalidArgument):
            await AckWaiter(factomd).wait(hash, chain_id, "commitdata")

    @pytest.mark.asyncio
    async def test_malformed_response(self, factomd):
        factomd.on("ack", {"unexpected": True})

        with pytest.raises(TransportError):
            await wait_on_commit_ack(factomd, TX_ID, 5)

    @pytest.mark.asyncio
    async def test_transport_error_propagates(self, factomd):
        factomd.on("ack", TransportError("connection refused"))

        with pytest.raises(TransportError):
            await wait_on_commit_ack(factomd, TX_ID, 5)

    @pytest.mark.asyncio
    async def test_cancellation_stops_polling(self, factomd):
        """Test that cancelling the waiting task leaves nothing running."""
        factomd.ack_commit("Unknown")
        task = asyncio.ensure_future(wait_on_commit_ack(factomd, TX_ID, 60, poll_interval=0.01))

        await asyncio.sleep(0.05)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        polls = len(factomd.calls)
        await asyncio.sleep(0.05)
        assert len(factomd.calls) == polls
