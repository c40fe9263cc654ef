"""
core - Core utilities and models for chainview.

This package contains:
- models.py: View models (BlockSummary, BlockDetail, TransactionReceipt, AccountView)
- constants.py: Enums, defaults and display constants
- exceptions.py: Typed exceptions with error codes
- format_units.py: Base-unit display formatting (no float)
- logging.py: Structured JSON logging
"""

from core.constants import AccountField, ErrorCode, SubmitTrigger
from core.exceptions import (
    ConsistencyError,
    ExplorerError,
    InvalidAddressError,
    NotFoundError,
    ResolutionError,
    TransportError,
)
from core.format_units import format_ether, format_units, truncate_identifier
from core.logging import get_logger, setup_logging
from core.models import (
    AccountView,
    BlockDetail,
    BlockSummary,
    NftSummary,
    OwnedNft,
    RawReceipt,
    RawTransaction,
    TransactionReceipt,
    TransactionSummary,
)

__all__ = [
    # Constants
    "AccountField",
    "ErrorCode",
    "SubmitTrigger",
    # Exceptions
    "ConsistencyError",
    "ExplorerError",
    "InvalidAddressError",
    "NotFoundError",
    "ResolutionError",
    "TransportError",
    # Formatting
    "format_ether",
    "format_units",
    "truncate_identifier",
    # Models
    "AccountView",
    "BlockDetail",
    "BlockSummary",
    "NftSummary",
    "OwnedNft",
    "RawReceipt",
    "RawTransaction",
    "TransactionReceipt",
    "TransactionSummary",
    # Logging
    "get_logger",
    "setup_logging",
]
