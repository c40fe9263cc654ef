"""
explorer/accounts.py - Account view resolution.

Balance and NFT holdings are fetched concurrently and degrade
independently:
- A failed lookup leaves only its own field absent (None) and records
  the error; the other field still shows.
- Errors go to the caller's error channel (on_error) and never raise.
- A new submission replaces the whole view; a late answer for an older
  submission is discarded.

AccountForm gates lookups to explicit commits (Enter or button click).
"""

import asyncio
from typing import Callable, Optional

from chains.client import ChainClient
from core.constants import (
    FALLBACK_NFT_THUMBNAIL,
    UNTITLED_NFT,
    AccountField,
    SubmitTrigger,
)
from core.exceptions import ExplorerError
from core.logging import get_logger
from core.models import AccountView, NftSummary, OwnedNft
from explorer.gate import LatestInputGate

logger = get_logger(__name__)

ErrorHandler = Callable[[AccountField, ExplorerError], None]


def derive_nft_summary(nft: OwnedNft) -> NftSummary:
    """Apply the Untitled / fallback-thumbnail display rules."""
    return NftSummary(
        title=nft.title or UNTITLED_NFT,
        thumbnail_url=nft.thumbnails[0] if nft.thumbnails else FALLBACK_NFT_THUMBNAIL,
    )


class AccountResolver:
    """Resolves an address to balance and NFT holdings."""

    def __init__(self, client: ChainClient, on_error: Optional[ErrorHandler] = None):
        self.client = client
        self.on_error = on_error
        self.view: AccountView | None = None
        self._gate: LatestInputGate[str] = LatestInputGate()

    async def resolve_account(self, address: str) -> AccountView | None:
        """
        Resolve `address` and make it the current view.

        Returns:
            The new AccountView, or None if a newer submission superseded
            this one before it finished (the current view is untouched).
        """
        ticket = self._gate.issue(address)

        balance, nfts = await asyncio.gather(
            self.client.get_balance(address),
            self.client.get_nfts_for_owner(address),
            return_exceptions=True,
        )

        if not self._gate.is_current(ticket):
            logger.debug(
                "Discarding stale account result",
                extra={"context": {"address": address, "current": self._gate.latest}},
            )
            return None

        view = AccountView(address=address)

        if isinstance(balance, BaseException):
            self._field_failed(view, AccountField.BALANCE, balance)
        else:
            view.balance = balance

        if isinstance(nfts, BaseException):
            self._field_failed(view, AccountField.NFTS, nfts)
        else:
            view.nfts = tuple(derive_nft_summary(nft) for nft in nfts)

        self.view = view
        logger.info(
            f"Resolved account {address}",
            extra={"context": {
                "address": address,
                "has_balance": view.balance is not None,
                "nft_count": None if view.nfts is None else len(view.nfts),
            }},
        )
        return view

    def _field_failed(self, view: AccountView, field: AccountField, error: BaseException) -> None:
        if not isinstance(error, ExplorerError):
            raise error

        view.errors[field] = error
        logger.warning(
            f"Account {field.value} unavailable: {error}",
            extra={"context": {"address": view.address, "error_code": error.code.value}},
        )
        if self.on_error is not None:
            self.on_error(field, error)


class AccountForm:
    """
    Address input gated to explicit submission.

    Typing only updates the pending text; Enter or the submit button
    hands it to the resolver.
    """

    def __init__(self, resolver: AccountResolver):
        self.resolver = resolver
        self.text = ""

    def on_change(self, text: str) -> None:
        self.text = text

    async def on_key(self, key: str) -> AccountView | None:
        if key != SubmitTrigger.ENTER_KEY.value:
            return None
        return await self.submit()

    async def on_click(self) -> AccountView | None:
        return await self.submit()

    async def submit(self) -> AccountView | None:
        address = self.text.strip()
        if not address:
            return None
        return await self.resolver.resolve_account(address)
