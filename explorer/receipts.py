"""
explorer/receipts.py - Transaction detail resolution.

MERGE CONTRACT:
- Receipt and transaction body are fetched for the same hash; both must
  complete before anything is produced.
- value and nonce come from the body, every other field from the receipt.
- Either lookup returning None -> result None ("not yet available",
  PENDING_OR_UNKNOWN). Never a partial or default-valued receipt.
- Hash mismatch between the two records -> ConsistencyError.

Re-fetching is explicit: ReceiptTracker fetches on hash change or
refresh(), not on every render.
"""

import asyncio

from chains.client import ChainClient
from core.constants import (
    DEFAULT_RECEIPT_POLL_ATTEMPTS,
    DEFAULT_RECEIPT_POLL_INTERVAL_SECONDS,
    ErrorCode,
)
from core.exceptions import ConsistencyError, ExplorerError, ResolutionError
from core.logging import get_logger
from core.models import RawReceipt, RawTransaction, TransactionReceipt
from explorer.gate import LatestInputGate

logger = get_logger(__name__)


def merge_receipt(receipt: RawReceipt, transaction: RawTransaction) -> TransactionReceipt:
    """Combine a receipt and its transaction body into the view model."""
    if receipt.hash.lower() != transaction.hash.lower():
        raise ConsistencyError(
            "Receipt and transaction hashes differ",
            details={"receipt_hash": receipt.hash, "transaction_hash": transaction.hash},
        )

    try:
        return TransactionReceipt(
            hash=receipt.hash,
            status=receipt.status,
            block_number=receipt.block_number,
            from_address=receipt.from_address,
            to_address=receipt.to_address,
            confirmations=receipt.confirmations,
            effective_gas_price=receipt.effective_gas_price,
            gas_used=receipt.gas_used,
            type=receipt.type,
            transaction_index=receipt.transaction_index,
            value=transaction.value,
            nonce=transaction.nonce,
        )
    except ValueError as e:
        raise ConsistencyError(
            f"Invalid receipt for {receipt.hash}: {e}",
            details={"hash": receipt.hash},
        ) from e


async def _gather_or_cancel(*coros):
    """Run lookups together; if one fails, cancel and drain the rest."""
    tasks = [asyncio.create_task(coro) for coro in coros]
    try:
        return await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise


class ReceiptResolver:
    """Resolves a transaction hash to its merged receipt view."""

    def __init__(self, client: ChainClient):
        self.client = client

    async def resolve_receipt(self, tx_hash: str) -> TransactionReceipt | None:
        """
        Returns:
            TransactionReceipt, or None while the transaction is pending/unknown

        Raises:
            ConsistencyError: Receipt and body disagree on hash
            ResolutionError: A lookup failed (TRANSPORT_ERROR etc.)
        """
        try:
            receipt, transaction = await _gather_or_cancel(
                self.client.get_transaction_receipt(tx_hash),
                self.client.get_transaction(tx_hash),
            )
        except ExplorerError as e:
            logger.warning(
                f"Transaction {tx_hash} unavailable: {e}",
                extra={"context": {"hash": tx_hash, "error_code": e.code.value}},
            )
            raise ResolutionError.from_error(f"transaction {tx_hash}", e) from e

        if receipt is None or transaction is None:
            logger.debug(
                f"Transaction {tx_hash} not yet available",
                extra={"context": {
                    "hash": tx_hash,
                    "status": ErrorCode.PENDING_OR_UNKNOWN.value,
                    "has_receipt": receipt is not None,
                    "has_transaction": transaction is not None,
                }},
            )
            return None

        try:
            return merge_receipt(receipt, transaction)
        except ConsistencyError as e:
            logger.error(
                f"Inconsistent records for {tx_hash}: {e}",
                extra={"context": e.details},
            )
            raise


async def wait_for_receipt(
    resolver: ReceiptResolver,
    tx_hash: str,
    interval_seconds: float = DEFAULT_RECEIPT_POLL_INTERVAL_SECONDS,
    attempts: int = DEFAULT_RECEIPT_POLL_ATTEMPTS,
) -> TransactionReceipt | None:
    """
    Poll until the transaction is mined or attempts run out.

    Returns None if it is still pending after the last attempt.
    """
    for attempt in range(1, attempts + 1):
        receipt = await resolver.resolve_receipt(tx_hash)
        if receipt is not None:
            return receipt
        if attempt < attempts:
            logger.debug(f"Receipt pending for {tx_hash}, attempt {attempt}/{attempts}")
            await asyncio.sleep(interval_seconds)
    return None


class ReceiptTracker:
    """
    Transaction view state bound to the hash being shown.

    watch() fetches only when the hash changes; refresh() re-fetches the
    current hash on request. A late answer for an old hash is dropped.
    """

    def __init__(self, resolver: ReceiptResolver):
        self.resolver = resolver
        self.receipt: TransactionReceipt | None = None
        self._gate: LatestInputGate[str] = LatestInputGate()
        self._resolved_hash: str | None = None

    @property
    def tx_hash(self) -> str | None:
        return self._gate.latest

    async def watch(self, tx_hash: str) -> TransactionReceipt | None:
        if tx_hash == self._gate.latest and self._resolved_hash == tx_hash:
            return self.receipt
        return await self._load(tx_hash)

    async def refresh(self) -> TransactionReceipt | None:
        if self._gate.latest is None:
            raise ValueError("No transaction hash to refresh")
        return await self._load(self._gate.latest)

    async def _load(self, tx_hash: str) -> TransactionReceipt | None:
        ticket = self._gate.issue(tx_hash)
        if self._resolved_hash != tx_hash:
            self.receipt = None
            self._resolved_hash = None

        try:
            receipt = await self.resolver.resolve_receipt(tx_hash)
        except ExplorerError:
            if not self._gate.is_current(ticket):
                return None
            raise

        if not self._gate.is_current(ticket):
            logger.debug(f"Discarding stale receipt for {tx_hash}")
            return None

        self.receipt = receipt
        # Pending results stay unresolved so the next watch() asks again
        self._resolved_hash = tx_hash if receipt is not None else None
        return receipt
