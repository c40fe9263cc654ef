"""
explorer/ - View-model assembly for the explorer views.

Modules:
- recent_blocks: recent-blocks window for the home view
- blocks: block detail with transactions
- receipts: merged transaction receipt
- accounts: balance and NFT holdings
- gate: last-input-wins ordering
"""

from explorer.accounts import AccountForm, AccountResolver, derive_nft_summary
from explorer.blocks import TransactionSetResolver, parse_height
from explorer.gate import LatestInputGate, Ticket
from explorer.receipts import (
    ReceiptResolver,
    ReceiptTracker,
    merge_receipt,
    wait_for_receipt,
)
from explorer.recent_blocks import RecentBlocksFeed, RecentBlocksFetcher, window_heights

__all__ = [
    # Home
    "RecentBlocksFeed",
    "RecentBlocksFetcher",
    "window_heights",
    # Blocks
    "TransactionSetResolver",
    "parse_height",
    # Transactions
    "ReceiptResolver",
    "ReceiptTracker",
    "merge_receipt",
    "wait_for_receipt",
    # Accounts
    "AccountForm",
    "AccountResolver",
    "derive_nft_summary",
    # Ordering
    "LatestInputGate",
    "Ticket",
]
