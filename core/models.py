# PATH: core/models.py
"""
Core data models for chainview.

All monetary and gas quantities are base-unit ints (wei). NO FLOATS.
Conversion to display units happens only in presentation
(core/format_units.py).

Absent vs zero:
  AccountView.balance / AccountView.nfts use None for "not fetched or
  failed". None is never coerced to 0 or an empty tuple.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from core.constants import AccountField
from core.exceptions import ExplorerError


# ============================================================================
# BLOCKS
# ============================================================================

@dataclass(frozen=True)
class BlockSummary:
    """One row of the recent-blocks feed."""
    height: int
    miner: str
    gas_used: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "height": self.height,
            "miner": self.miner,
            "gas_used": self.gas_used,
        }


@dataclass(frozen=True)
class TransactionSummary:
    """Transaction as listed inside a block."""
    hash: str
    block_number: int
    from_address: str
    to_address: Optional[str]
    value: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "hash": self.hash,
            "block_number": self.block_number,
            "from": self.from_address,
            "to": self.to_address,
            "value": self.value,
        }


@dataclass(frozen=True)
class BlockDetail:
    """
    Block with its transactions.

    transactions keep on-chain inclusion order exactly as returned by
    the provider.
    """
    height: int
    miner: str
    gas_used: int
    transactions: Tuple[TransactionSummary, ...] = ()

    @property
    def summary(self) -> BlockSummary:
        return BlockSummary(height=self.height, miner=self.miner, gas_used=self.gas_used)

    def to_dict(self) -> Dict[str, Any]:
        return {
            **self.summary.to_dict(),
            "transactions": [tx.to_dict() for tx in self.transactions],
        }


# ============================================================================
# TRANSACTIONS
# ============================================================================

@dataclass(frozen=True)
class RawReceipt:
    """Decoded eth_getTransactionReceipt result."""
    hash: str
    status: bool
    block_number: int
    from_address: str
    to_address: Optional[str]
    confirmations: int
    effective_gas_price: int
    gas_used: int
    type: int
    transaction_index: int


@dataclass(frozen=True)
class RawTransaction:
    """Decoded eth_getTransactionByHash result (mined transactions only)."""
    hash: str
    block_number: int
    from_address: str
    to_address: Optional[str]
    value: int
    nonce: int


@dataclass(frozen=True)
class TransactionReceipt:
    """Transaction detail view: receipt fields plus value/nonce from the body."""
    hash: str
    status: bool
    block_number: int
    from_address: str
    to_address: Optional[str]
    confirmations: int
    effective_gas_price: int
    gas_used: int
    type: int
    transaction_index: int
    value: int
    nonce: int

    def __post_init__(self):
        for name in ("confirmations", "transaction_index", "nonce"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be >= 0, got {getattr(self, name)}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "hash": self.hash,
            "status": self.status,
            "block_number": self.block_number,
            "from": self.from_address,
            "to": self.to_address,
            "confirmations": self.confirmations,
            "effective_gas_price": self.effective_gas_price,
            "gas_used": self.gas_used,
            "type": self.type,
            "transaction_index": self.transaction_index,
            "value": self.value,
            "nonce": self.nonce,
        }


# ============================================================================
# ACCOUNTS
# ============================================================================

@dataclass(frozen=True)
class OwnedNft:
    """Decoded NFT record from the provider's NFT API."""
    contract_address: str
    token_id: str
    title: Optional[str] = None
    thumbnails: Tuple[str, ...] = ()


@dataclass(frozen=True)
class NftSummary:
    """NFT as displayed on the account view."""
    title: str
    thumbnail_url: str

    def to_dict(self) -> Dict[str, Any]:
        return {"title": self.title, "thumbnail_url": self.thumbnail_url}


@dataclass
class AccountView:
    """
    Account view model.

    balance and nfts are independently optional; errors holds the
    failure of each field that could not be resolved.
    """
    address: str
    balance: Optional[int] = None
    nfts: Optional[Tuple[NftSummary, ...]] = None
    errors: Dict[AccountField, ExplorerError] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return self.balance is None and self.nfts is None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "address": self.address,
            "balance": self.balance,
            "nfts": None if self.nfts is None else [nft.to_dict() for nft in self.nfts],
            "errors": {f.value: str(err) for f, err in self.errors.items()},
        }
