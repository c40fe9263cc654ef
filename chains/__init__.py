"""
chains/ - Blockchain interaction layer.

Modules:
- providers: JSON-RPC and NFT API transports with failover
- client: typed read-only chain client
"""

from chains.client import (
    ChainClient,
    create_chain_client,
    parse_quantity,
    to_hex_quantity,
    validate_address,
)
from chains.providers import (
    NftApiProvider,
    RPCProvider,
    RPCResponse,
    RPCStats,
)

__all__ = [
    # Providers
    "NftApiProvider",
    "RPCProvider",
    "RPCResponse",
    "RPCStats",
    # Client
    "ChainClient",
    "create_chain_client",
    "parse_quantity",
    "to_hex_quantity",
    "validate_address",
]
