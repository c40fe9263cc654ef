# PATH: core/constants.py
"""
Constants for chainview.

Contains enums, defaults, and fixed display values.
Provider endpoints and per-network settings live in config/explorer.yaml.
"""

import re
from enum import Enum
from typing import Final


# =============================================================================
# DEFAULTS
# =============================================================================

# Number of blocks shown on the home view
DEFAULT_WINDOW_SIZE: Final[int] = 10

# Provider request timeout
DEFAULT_TIMEOUT_SECONDS: Final[int] = 10

# NFT enumeration pages followed per owner (one page == original behaviour)
DEFAULT_MAX_NFT_PAGES: Final[int] = 1

# Receipt polling defaults for pending transactions
DEFAULT_RECEIPT_POLL_INTERVAL_SECONDS: Final[float] = 4.0
DEFAULT_RECEIPT_POLL_ATTEMPTS: Final[int] = 15

# Base unit -> display unit (wei -> ETH)
ETHER_DECIMALS: Final[int] = 18


# =============================================================================
# DISPLAY
# =============================================================================

UNTITLED_NFT: Final[str] = "Untitled"
FALLBACK_NFT_THUMBNAIL: Final[str] = "https://static.thenounproject.com/png/3918097-200.png"

# Characters of a hash kept before the ellipsis in list views
IDENTIFIER_DISPLAY_LENGTH: Final[int] = 18
IDENTIFIER_ELLIPSIS: Final[str] = "..."


# =============================================================================
# VALIDATION
# =============================================================================

ADDRESS_PATTERN = re.compile(r"^0x[0-9a-fA-F]{40}$")


class ErrorCode(str, Enum):
    """
    Error kinds surfaced to presentation.

    PENDING_OR_UNKNOWN is never raised; it labels a "try again later"
    result (receipt resolution returning None).
    """
    TRANSPORT_ERROR = "TRANSPORT_ERROR"
    NOT_FOUND = "NOT_FOUND"
    INVALID_ADDRESS = "INVALID_ADDRESS"
    PENDING_OR_UNKNOWN = "PENDING_OR_UNKNOWN"
    CONSISTENCY_ERROR = "CONSISTENCY_ERROR"


class AccountField(str, Enum):
    """Independently resolved fields of an account view."""
    BALANCE = "balance"
    NFTS = "nfts"


class SubmitTrigger(str, Enum):
    """User actions that commit an account address for lookup."""
    ENTER_KEY = "Enter"
    BUTTON_CLICK = "click"
