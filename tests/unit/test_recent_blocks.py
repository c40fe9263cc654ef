"""
tests/unit/test_recent_blocks.py - Recent-blocks window tests.
"""

import asyncio
import random
from unittest.mock import AsyncMock

import pytest

from core.exceptions import ConsistencyError, NotFoundError, TransportError
from core.models import BlockSummary
from explorer.recent_blocks import RecentBlocksFeed, RecentBlocksFetcher, window_heights


class TestWindowHeights:
    """Test height window computation."""

    def test_full_window(self):
        assert window_heights(100, 3) == [100, 99, 98]

    def test_window_of_one(self):
        assert window_heights(5, 1) == [5]

    def test_window_stops_at_genesis(self):
        """Near genesis the window is shorter and never negative."""
        assert window_heights(2, 10) == [2, 1, 0]

    def test_exact_fit_reaches_zero(self):
        assert window_heights(9, 10) == list(range(9, -1, -1))

    def test_negative_head_is_empty(self):
        assert window_heights(-1, 10) == []

    def test_zero_window_rejected(self):
        with pytest.raises(ValueError):
            window_heights(100, 0)


class TestFetchRecent:
    """Test RecentBlocksFetcher.fetch_recent."""

    @pytest.mark.asyncio
    async def test_example_window(self, fake_client):
        """fetch_recent(100, 3) -> heights 100, 99, 98 in that order."""
        fetcher = RecentBlocksFetcher(fake_client)

        blocks = await fetcher.fetch_recent(100, 3)

        assert [b.height for b in blocks] == [100, 99, 98]
        assert blocks[0].miner == "0xminer100"
        assert blocks[0].gas_used == 100_000

    @pytest.mark.asyncio
    @pytest.mark.parametrize("concurrent", [True, False])
    @pytest.mark.parametrize("latest,window", [(100, 10), (50, 1), (9, 10), (20, 21)])
    async def test_full_window_heights(self, fake_client, concurrent, latest, window):
        fetcher = RecentBlocksFetcher(fake_client, concurrent=concurrent)

        blocks = await fetcher.fetch_recent(latest, window)

        assert [b.height for b in blocks] == list(range(latest, latest - window, -1))

    @pytest.mark.asyncio
    @pytest.mark.parametrize("concurrent", [True, False])
    async def test_short_window_near_genesis(self, fake_client, concurrent):
        fetcher = RecentBlocksFetcher(fake_client, concurrent=concurrent)

        blocks = await fetcher.fetch_recent(3, 10)

        assert [b.height for b in blocks] == [3, 2, 1, 0]
        requested = [c.args[0] for c in fake_client.get_block.await_args_list]
        assert min(requested) == 0

    @pytest.mark.asyncio
    async def test_default_window_is_ten(self, fake_client):
        fetcher = RecentBlocksFetcher(fake_client)

        blocks = await fetcher.fetch_recent(100)

        assert len(blocks) == 10

    @pytest.mark.asyncio
    async def test_completion_order_does_not_change_result_order(self, fake_client):
        """Lookups finishing in random order still land at their own index."""
        delays = {h: random.random() / 100 for h in range(90, 101)}

        async def slow_block(height):
            await asyncio.sleep(delays[height])
            return BlockSummary(height=height, miner="0xm", gas_used=0)

        fake_client.get_block = AsyncMock(side_effect=slow_block)
        fetcher = RecentBlocksFetcher(fake_client, concurrent=True)

        blocks = await fetcher.fetch_recent(100, 10)

        assert [b.height for b in blocks] == list(range(100, 90, -1))

    @pytest.mark.asyncio
    @pytest.mark.parametrize("concurrent", [True, False])
    async def test_not_found_aborts_whole_fetch(self, fake_client, concurrent):
        async def get_block(height):
            if height == 98:
                raise NotFoundError(f"Block {height} not found")
            return BlockSummary(height=height, miner="0xm", gas_used=0)

        fake_client.get_block = AsyncMock(side_effect=get_block)
        fetcher = RecentBlocksFetcher(fake_client, concurrent=concurrent)

        with pytest.raises(NotFoundError):
            await fetcher.fetch_recent(100, 5)

    @pytest.mark.asyncio
    async def test_transport_error_propagates(self, fake_client):
        fake_client.get_block = AsyncMock(side_effect=TransportError("down"))
        fetcher = RecentBlocksFetcher(fake_client)

        with pytest.raises(TransportError):
            await fetcher.fetch_recent(100, 3)

    @pytest.mark.asyncio
    async def test_wrong_height_from_provider_is_inconsistent(self, fake_client):
        fake_client.get_block = AsyncMock(
            return_value=BlockSummary(height=1, miner="0xm", gas_used=0)
        )
        fetcher = RecentBlocksFetcher(fake_client)

        with pytest.raises(ConsistencyError):
            await fetcher.fetch_recent(100, 2)

    @pytest.mark.asyncio
    async def test_no_caching_between_calls(self, fake_client):
        fetcher = RecentBlocksFetcher(fake_client)

        await fetcher.fetch_recent(100, 3)
        await fetcher.fetch_recent(100, 3)

        assert fake_client.get_block.await_count == 6

    @pytest.mark.asyncio
    async def test_load_latest_uses_current_height(self, fake_client):
        fake_client.current_height = AsyncMock(return_value=42)
        fetcher = RecentBlocksFetcher(fake_client)

        blocks = await fetcher.load_latest(2)

        assert [b.height for b in blocks] == [42, 41]


class TestRecentBlocksFeed:
    """Test the home-view feed bound to a moving head."""

    @pytest.mark.asyncio
    async def test_same_head_does_not_refetch(self, fake_client):
        feed = RecentBlocksFeed(RecentBlocksFetcher(fake_client), window_size=3)

        await feed.update_head(100)
        await feed.update_head(100)

        assert fake_client.get_block.await_count == 3

    @pytest.mark.asyncio
    async def test_new_head_refetches_whole_window(self, fake_client):
        feed = RecentBlocksFeed(RecentBlocksFetcher(fake_client), window_size=3)

        await feed.update_head(99)
        blocks = await feed.update_head(100)

        assert [b.height for b in blocks] == [100, 99, 98]
        assert fake_client.get_block.await_count == 6

    @pytest.mark.asyncio
    async def test_refresh_refetches(self, fake_client):
        feed = RecentBlocksFeed(RecentBlocksFetcher(fake_client), window_size=2)

        await feed.update_head(100)
        await feed.refresh()

        assert fake_client.get_block.await_count == 4

    @pytest.mark.asyncio
    async def test_refresh_without_head_raises(self, fake_client):
        feed = RecentBlocksFeed(RecentBlocksFetcher(fake_client))

        with pytest.raises(ValueError):
            await feed.refresh()

    @pytest.mark.asyncio
    async def test_late_window_for_old_head_is_discarded(self, fake_client):
        release_old = asyncio.Event()

        async def get_block(height):
            if height <= 99:
                await release_old.wait()
            return BlockSummary(height=height, miner="0xm", gas_used=0)

        fake_client.get_block = AsyncMock(side_effect=get_block)
        feed = RecentBlocksFeed(RecentBlocksFetcher(fake_client), window_size=1)

        old = asyncio.create_task(feed.update_head(99))
        await asyncio.sleep(0)
        new_blocks = await feed.update_head(100)
        release_old.set()

        assert await old is None
        assert [b.height for b in new_blocks] == [100]
        assert [b.height for b in feed.blocks] == [100]
        assert feed.head == 100

    @pytest.mark.asyncio
    async def test_failed_window_shows_nothing(self, fake_client):
        fake_client.get_block = AsyncMock(side_effect=NotFoundError("missing"))
        feed = RecentBlocksFeed(RecentBlocksFetcher(fake_client), window_size=3)

        with pytest.raises(NotFoundError):
            await feed.update_head(100)

        assert feed.blocks is None
