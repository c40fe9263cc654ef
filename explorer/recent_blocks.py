"""
explorer/recent_blocks.py - Recent-blocks window for the home view.

Fetches `window_size` consecutive blocks by descending height starting at
the chain head.

RESULT CONTRACT:
- Heights are [latest, latest-1, ..., latest-window_size+1], no gaps, no
  duplicates, never negative (short window near genesis).
- Concurrent lookups write into their fixed index, so completion order
  never changes output order.
- Any failed lookup aborts the whole window: no partial list.
- Nothing is cached between calls.
"""

import asyncio

from chains.client import ChainClient
from core.constants import DEFAULT_WINDOW_SIZE
from core.exceptions import ConsistencyError, ExplorerError
from core.logging import get_logger
from core.models import BlockSummary
from explorer.gate import LatestInputGate

logger = get_logger(__name__)


def window_heights(latest_height: int, window_size: int) -> list[int]:
    """Heights in the window, descending, stopping before height -1."""
    if window_size < 1:
        raise ValueError(f"window_size must be >= 1, got {window_size}")
    return [latest_height - i for i in range(window_size) if latest_height - i >= 0]


class RecentBlocksFetcher:
    """Fetches and assembles a window of recent block summaries."""

    def __init__(self, client: ChainClient, concurrent: bool = True):
        self.client = client
        self.concurrent = concurrent

    async def fetch_recent(
        self,
        latest_height: int,
        window_size: int = DEFAULT_WINDOW_SIZE,
    ) -> list[BlockSummary]:
        """
        Fetch the window ending at latest_height.

        Raises:
            NotFoundError: If any height in the window is missing
            TransportError: If any lookup fails in transport
            ConsistencyError: If the provider answers with a different height
        """
        heights = window_heights(latest_height, window_size)
        if not heights:
            return []

        try:
            if self.concurrent:
                blocks = await self._fetch_concurrent(heights)
            else:
                blocks = [await self._fetch_one(h) for h in heights]
        except ExplorerError as e:
            logger.warning(
                f"Recent blocks fetch aborted: {e}",
                extra={"context": {"latest_height": latest_height, "window_size": window_size}},
            )
            raise

        logger.info(
            f"Fetched {len(blocks)} recent blocks from {latest_height}",
            extra={"context": {"latest_height": latest_height, "window_size": window_size}},
        )
        return blocks

    async def load_latest(self, window_size: int = DEFAULT_WINDOW_SIZE) -> list[BlockSummary]:
        """Fetch the window ending at the current chain head."""
        head = await self.client.current_height()
        return await self.fetch_recent(head, window_size)

    async def _fetch_one(self, height: int) -> BlockSummary:
        block = await self.client.get_block(height)
        if block.height != height:
            raise ConsistencyError(
                f"Requested block {height}, provider returned {block.height}",
                details={"requested": height, "returned": block.height},
            )
        return block

    async def _fetch_concurrent(self, heights: list[int]) -> list[BlockSummary]:
        results: list[BlockSummary | None] = [None] * len(heights)

        async def fetch_into(index: int, height: int) -> None:
            results[index] = await self._fetch_one(height)

        tasks = [
            asyncio.create_task(fetch_into(i, h))
            for i, h in enumerate(heights)
        ]
        try:
            await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

        return results  # type: ignore[return-value]


class RecentBlocksFeed:
    """
    Home-view binding of the fetcher to a moving chain head.

    Re-fetches only when the head changes or on refresh(); a fetch for a
    superseded head is discarded when it lands late.
    """

    def __init__(self, fetcher: RecentBlocksFetcher, window_size: int = DEFAULT_WINDOW_SIZE):
        self.fetcher = fetcher
        self.window_size = window_size
        self.blocks: list[BlockSummary] | None = None
        self._gate: LatestInputGate[int] = LatestInputGate()

    @property
    def head(self) -> int | None:
        return self._gate.latest

    async def update_head(self, head: int) -> list[BlockSummary] | None:
        """Show the window for `head`. Returns None if superseded meanwhile."""
        if head == self._gate.latest and self.blocks is not None:
            return self.blocks
        return await self._load(head)

    async def refresh(self) -> list[BlockSummary] | None:
        if self._gate.latest is None:
            raise ValueError("No chain head to refresh")
        return await self._load(self._gate.latest)

    async def _load(self, head: int) -> list[BlockSummary] | None:
        ticket = self._gate.issue(head)
        self.blocks = None
        try:
            blocks = await self.fetcher.fetch_recent(head, self.window_size)
        except ExplorerError:
            if not self._gate.is_current(ticket):
                logger.debug(f"Ignoring failure for superseded head {head}")
                return None
            raise

        if not self._gate.is_current(ticket):
            logger.debug(
                f"Discarding stale window for head {head}",
                extra={"context": {"current_head": self._gate.latest}},
            )
            return None

        self.blocks = blocks
        return blocks
