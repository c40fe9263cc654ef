"""
explorer/blocks.py - Block detail resolution.

resolve_block() is a single provider lookup; any failure is reported as
ResolutionError and no partial BlockDetail is ever produced. A missing
detail means "not yet available", never "zero transactions".
"""

from chains.client import ChainClient
from core.exceptions import ExplorerError, NotFoundError, ResolutionError
from core.logging import get_logger
from core.models import BlockDetail
from explorer.gate import LatestInputGate

logger = get_logger(__name__)


def parse_height(raw: str | int) -> int:
    """
    Parse a decimal block height from route input.

    Raises:
        ResolutionError: NOT_FOUND for non-numeric or negative input
    """
    if isinstance(raw, int) and not isinstance(raw, bool):
        height = raw
    else:
        text = str(raw).strip()
        if not text.isdecimal():
            raise ResolutionError.from_error(
                f"block {raw!r}",
                NotFoundError(f"Not a block height: {raw!r}", details={"input": raw}),
            )
        height = int(text)

    if height < 0:
        raise ResolutionError.from_error(
            f"block {raw!r}",
            NotFoundError(f"Negative block height: {height}", details={"input": raw}),
        )
    return height


class TransactionSetResolver:
    """Resolves a block height to the block and its ordered transactions."""

    def __init__(self, client: ChainClient):
        self.client = client
        self.detail: BlockDetail | None = None
        self._gate: LatestInputGate[int] = LatestInputGate()

    async def resolve_block(self, height: int | str) -> BlockDetail:
        """
        Fetch the block with full transaction bodies.

        Raises:
            ResolutionError: Carrying NOT_FOUND or TRANSPORT_ERROR
        """
        height = parse_height(height)
        try:
            detail = await self.client.get_block_with_transactions(height)
        except ExplorerError as e:
            logger.warning(
                f"Block {height} unavailable: {e}",
                extra={"context": {"height": height, "error_code": e.code.value}},
            )
            raise ResolutionError.from_error(f"block {height}", e) from e

        logger.debug(
            f"Resolved block {height} with {len(detail.transactions)} transactions",
            extra={"context": {"height": height}},
        )
        return detail

    async def navigate(self, height: int | str) -> BlockDetail | None:
        """
        Show block `height`, replacing the current detail.

        Returns None (and leaves `detail` alone) if a newer navigation
        started before this one finished.
        """
        ticket = self._gate.issue(height)
        self.detail = None
        try:
            detail = await self.resolve_block(height)
        except ResolutionError:
            if not self._gate.is_current(ticket):
                return None
            raise

        if not self._gate.is_current(ticket):
            logger.debug(f"Discarding stale block {height}")
            return None

        self.detail = detail
        return detail
