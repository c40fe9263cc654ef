"""
chains/client.py - Typed read-only adapter over the chain-data provider.

Heights are decimal ints here and hex quantities on the wire; the
conversion happens only in this module.

Null semantics:
- get_block / get_block_with_transactions: null -> NotFoundError
- get_transaction_receipt / get_transaction: null -> None (unknown or pending)
- get_nfts_for_owner: no NFTs -> []
"""

import re
from typing import TYPE_CHECKING, Any

from chains.providers import NftApiProvider, RPCProvider
from core.constants import ADDRESS_PATTERN, DEFAULT_MAX_NFT_PAGES
from core.exceptions import InvalidAddressError, NotFoundError, TransportError
from core.logging import get_logger
from core.models import (
    BlockDetail,
    BlockSummary,
    OwnedNft,
    RawReceipt,
    RawTransaction,
    TransactionSummary,
)

if TYPE_CHECKING:
    from config import ExplorerConfig

logger = get_logger(__name__)

HEX_QUANTITY = re.compile(r"^0[xX][0-9a-fA-F]+$")
DECIMAL_QUANTITY = re.compile(r"^[0-9]+$")


# =============================================================================
# WIRE DECODING
# =============================================================================

def to_hex_quantity(value: int) -> str:
    """Encode a non-negative int as a JSON-RPC quantity."""
    return hex(value)


def parse_quantity(value: Any, field_name: str = "value") -> int:
    """
    Decode a JSON-RPC quantity.

    Accepts hex strings ("0x1a"), decimal strings and ints. Quantities are
    never negative.
    """
    if isinstance(value, int) and not isinstance(value, bool) and value >= 0:
        return value
    if isinstance(value, str):
        if HEX_QUANTITY.match(value):
            return int(value, 16)
        if DECIMAL_QUANTITY.match(value):
            return int(value)
    raise TransportError(
        f"Malformed quantity for {field_name}: {value!r}",
        details={"field": field_name},
    )


def _require(record: dict, key: str) -> Any:
    if key not in record or record[key] is None:
        raise TransportError(f"Provider record missing '{key}'", details={"keys": sorted(record)})
    return record[key]


def decode_transaction_summary(record: dict) -> TransactionSummary:
    return TransactionSummary(
        hash=_require(record, "hash"),
        block_number=parse_quantity(_require(record, "blockNumber"), "blockNumber"),
        from_address=_require(record, "from"),
        to_address=record.get("to"),
        value=parse_quantity(record.get("value", "0x0"), "value"),
    )


def decode_block(record: dict) -> BlockDetail:
    transactions = record.get("transactions") or []
    return BlockDetail(
        height=parse_quantity(_require(record, "number"), "number"),
        miner=_require(record, "miner"),
        gas_used=parse_quantity(_require(record, "gasUsed"), "gasUsed"),
        transactions=tuple(
            decode_transaction_summary(tx) for tx in transactions if isinstance(tx, dict)
        ),
    )


def decode_receipt(record: dict, head: int) -> RawReceipt:
    block_number = parse_quantity(_require(record, "blockNumber"), "blockNumber")
    return RawReceipt(
        hash=_require(record, "transactionHash"),
        status=parse_quantity(record.get("status", "0x0"), "status") == 1,
        block_number=block_number,
        from_address=_require(record, "from"),
        to_address=record.get("to"),
        confirmations=max(0, head - block_number + 1),
        effective_gas_price=parse_quantity(record.get("effectiveGasPrice", "0x0"), "effectiveGasPrice"),
        gas_used=parse_quantity(_require(record, "gasUsed"), "gasUsed"),
        type=parse_quantity(record.get("type", "0x0"), "type"),
        transaction_index=parse_quantity(_require(record, "transactionIndex"), "transactionIndex"),
    )


def decode_transaction(record: dict) -> RawTransaction:
    return RawTransaction(
        hash=_require(record, "hash"),
        block_number=parse_quantity(_require(record, "blockNumber"), "blockNumber"),
        from_address=_require(record, "from"),
        to_address=record.get("to"),
        value=parse_quantity(record.get("value", "0x0"), "value"),
        nonce=parse_quantity(_require(record, "nonce"), "nonce"),
    )


def decode_owned_nft(record: dict) -> OwnedNft:
    media = record.get("media") or []
    thumbnails = tuple(
        m["thumbnail"] for m in media
        if isinstance(m, dict) and m.get("thumbnail")
    )
    contract = record.get("contract") or {}
    token = record.get("id") or {}
    return OwnedNft(
        contract_address=contract.get("address", ""),
        token_id=str(token.get("tokenId", "")),
        title=record.get("title") or None,
        thumbnails=thumbnails,
    )


def validate_address(address: str) -> str:
    """Return the trimmed address or raise InvalidAddressError."""
    candidate = address.strip() if isinstance(address, str) else ""
    if not ADDRESS_PATTERN.match(candidate):
        raise InvalidAddressError(
            f"Invalid wallet address: {address!r}",
            details={"address": address},
        )
    return candidate


# =============================================================================
# CLIENT
# =============================================================================

class ChainClient:
    """
    Read-only chain client.

    Constructed explicitly and passed to resolvers so tests can
    substitute a fake.
    """

    def __init__(
        self,
        rpc: RPCProvider,
        nft_api: NftApiProvider,
        max_nft_pages: int = DEFAULT_MAX_NFT_PAGES,
    ):
        self.rpc = rpc
        self.nft_api = nft_api
        self.max_nft_pages = max(1, max_nft_pages)

    async def __aenter__(self) -> "ChainClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def close(self) -> None:
        logger.debug(
            "Provider stats",
            extra={"context": {
                "rpc": self.rpc.get_stats_summary(),
                "nft_api": self.nft_api.get_stats_summary(),
            }},
        )
        await self.rpc.close()
        await self.nft_api.close()

    async def current_height(self) -> int:
        """Latest known block height."""
        response = await self.rpc.call("eth_blockNumber")
        return parse_quantity(response.result, "blockNumber")

    async def _fetch_block(self, height: int, full_transactions: bool) -> BlockDetail:
        if height < 0:
            raise NotFoundError(f"Block {height} does not exist", details={"height": height})

        response = await self.rpc.call(
            "eth_getBlockByNumber",
            [to_hex_quantity(height), full_transactions],
        )
        if response.result is None:
            raise NotFoundError(f"Block {height} not found", details={"height": height})

        block = decode_block(response.result)
        logger.debug(
            f"Fetched block {block.height}",
            extra={"context": {"height": height, "latency_ms": response.latency_ms}},
        )
        return block

    async def get_block(self, height: int) -> BlockSummary:
        block = await self._fetch_block(height, full_transactions=False)
        return block.summary

    async def get_block_with_transactions(self, height: int) -> BlockDetail:
        return await self._fetch_block(height, full_transactions=True)

    async def get_transaction_receipt(self, tx_hash: str) -> RawReceipt | None:
        """Receipt with confirmations against the current head, or None if pending/unknown."""
        response = await self.rpc.call("eth_getTransactionReceipt", [tx_hash])
        if response.result is None:
            return None
        head = await self.current_height()
        return decode_receipt(response.result, head)

    async def get_transaction(self, tx_hash: str) -> RawTransaction | None:
        """Mined transaction body, or None if pending/unknown."""
        response = await self.rpc.call("eth_getTransactionByHash", [tx_hash])
        if response.result is None or response.result.get("blockNumber") is None:
            return None
        return decode_transaction(response.result)

    async def get_balance(self, address: str) -> int:
        address = validate_address(address)
        response = await self.rpc.call("eth_getBalance", [address, "latest"])
        return parse_quantity(response.result, "balance")

    async def get_nfts_for_owner(self, address: str) -> list[OwnedNft]:
        address = validate_address(address)

        nfts: list[OwnedNft] = []
        page_key: str | None = None
        for _ in range(self.max_nft_pages):
            params: dict[str, Any] = {"owner": address, "withMetadata": "true"}
            if page_key:
                params["pageKey"] = page_key

            response = await self.nft_api.get("getNFTs", params)
            body = response.result if isinstance(response.result, dict) else {}
            nfts.extend(
                decode_owned_nft(record)
                for record in body.get("ownedNfts") or []
                if isinstance(record, dict)
            )

            page_key = body.get("pageKey")
            if not page_key:
                break

        logger.debug(
            f"Fetched {len(nfts)} NFTs",
            extra={"context": {"address": address, "more_pages": bool(page_key)}},
        )
        return nfts


def create_chain_client(config: "ExplorerConfig", transport: Any = None) -> ChainClient:
    """Build a ChainClient with both transports from resolved configuration."""
    rpc = RPCProvider(
        config.rpc_urls,
        timeout_seconds=config.timeout_seconds,
        api_key=config.api_key,
        transport=transport,
    )
    nft_api = NftApiProvider(
        config.nft_api_urls,
        timeout_seconds=config.timeout_seconds,
        api_key=config.api_key,
        transport=transport,
    )
    return ChainClient(rpc, nft_api, max_nft_pages=config.max_nft_pages)
