"""
chains/providers.py - Provider transports with failover.

Provides reliable access to the chain-data provider with:
- JSON-RPC over HTTPS (RPCProvider)
- NFT REST API (NftApiProvider)
- Multiple endpoint failover
- Request timeout handling
- Latency tracking

Every httpx failure is converted to TransportError here, so nothing
above this module sees a raw transport exception.
"""

import os
import time
from dataclasses import dataclass
from typing import Any

import httpx

from core.constants import DEFAULT_TIMEOUT_SECONDS
from core.exceptions import InvalidAddressError, NotFoundError, TransportError
from core.logging import get_logger, log_lookup

logger = get_logger(__name__)

API_KEY_PLACEHOLDER = "${ALCHEMY_API_KEY}"

# JSON-RPC "invalid params": a malformed address for account methods,
# otherwise a malformed hash or height that cannot exist
RPC_INVALID_PARAMS = -32602
ADDRESS_METHODS = {"eth_getBalance": InvalidAddressError}


@dataclass
class RPCStats:
    """Statistics for a provider endpoint."""
    url: str
    total_requests: int = 0
    successful_requests: int = 0
    failed_requests: int = 0
    total_latency_ms: int = 0
    last_error: str | None = None
    last_success_ts: int | None = None

    @property
    def avg_latency_ms(self) -> int:
        if self.successful_requests == 0:
            return 0
        return self.total_latency_ms // self.successful_requests

    @property
    def success_rate(self) -> float:
        if self.total_requests == 0:
            return 0.0
        return self.successful_requests / self.total_requests


@dataclass
class RPCResponse:
    """Response from a provider call."""
    result: Any
    latency_ms: int
    endpoint_used: str


def resolve_api_key(urls: list[str], api_key: str | None = None) -> list[str]:
    """
    Substitute the provider key into URL templates.

    Templates that need a key are dropped when no key is available.
    """
    key = api_key if api_key is not None else os.getenv("ALCHEMY_API_KEY", "")
    resolved = []
    for url in urls:
        if API_KEY_PLACEHOLDER in url and not key:
            logger.warning(
                "Skipping endpoint that needs an API key",
                extra={"context": {"template": url}},
            )
            continue
        resolved.append(url.replace(API_KEY_PLACEHOLDER, key))
    return resolved


class _HttpEndpoints:
    """Shared client lifecycle and stats for provider transports."""

    def __init__(
        self,
        urls: list[str],
        timeout_seconds: int = DEFAULT_TIMEOUT_SECONDS,
        api_key: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.timeout_seconds = timeout_seconds
        self.urls = resolve_api_key(urls, api_key)
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

        self.stats: dict[str, RPCStats] = {
            url: RPCStats(url=url) for url in self.urls
        }

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout_seconds),
                limits=httpx.Limits(max_connections=10),
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    def _record_success(self, url: str, latency_ms: int) -> None:
        stats = self.stats[url]
        stats.successful_requests += 1
        stats.total_latency_ms += latency_ms
        stats.last_success_ts = int(time.time() * 1000)

    def _record_failure(self, url: str, error: str) -> None:
        stats = self.stats[url]
        stats.failed_requests += 1
        stats.last_error = error

    def get_stats_summary(self) -> dict:
        """Get statistics summary for all endpoints."""
        return {
            url: {
                "total_requests": s.total_requests,
                "success_rate": round(s.success_rate, 3),
                "avg_latency_ms": s.avg_latency_ms,
                "last_error": s.last_error,
            }
            for url, s in self.stats.items()
        }


class RPCProvider(_HttpEndpoints):
    """
    JSON-RPC provider with failover support.

    Tries multiple endpoints in order until one succeeds.
    Tracks statistics per endpoint for monitoring.
    """

    def __init__(
        self,
        rpc_urls: list[str],
        timeout_seconds: int = DEFAULT_TIMEOUT_SECONDS,
        api_key: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        super().__init__(rpc_urls, timeout_seconds, api_key, transport)
        self._request_id = 0

    @property
    def rpc_urls(self) -> list[str]:
        return self.urls

    def _next_request_id(self) -> int:
        """Generate next request ID."""
        self._request_id += 1
        return self._request_id

    async def call(
        self,
        method: str,
        params: list | None = None,
    ) -> RPCResponse:
        """
        Make an RPC call with failover.

        Args:
            method: RPC method name
            params: Method parameters

        Returns:
            RPCResponse with result and metadata

        Raises:
            InvalidAddressError: If eth_getBalance params are rejected as invalid
            NotFoundError: If a hash or height param is rejected as invalid
            TransportError: If all endpoints fail
        """
        if not self.rpc_urls:
            raise TransportError(
                "No RPC endpoints configured",
                details={"method": method},
            )

        client = await self._get_client()
        last_error: str | None = None

        for url in self.rpc_urls:
            self.stats[url].total_requests += 1

            payload = {
                "jsonrpc": "2.0",
                "method": method,
                "params": params or [],
                "id": self._next_request_id(),
            }

            start_ms = int(time.time() * 1000)

            try:
                resp = await client.post(url, json=payload)
                latency_ms = int(time.time() * 1000) - start_ms
                resp.raise_for_status()
                body = resp.json()
            except httpx.TimeoutException:
                latency_ms = int(time.time() * 1000) - start_ms
                last_error = f"Timeout after {latency_ms}ms"
                self._record_failure(url, last_error)
                logger.debug(f"RPC timeout for {method}: {latency_ms}ms")
                continue
            except (httpx.HTTPError, ValueError) as e:
                last_error = str(e)
                self._record_failure(url, last_error)
                logger.debug(f"RPC failed for {method}: {e}")
                continue

            if not isinstance(body, dict):
                last_error = f"Malformed RPC response: {type(body).__name__}"
                self._record_failure(url, last_error)
                continue

            if "error" in body:
                error = body["error"] or {}
                error_msg = error.get("message", str(error))
                self._record_failure(url, error_msg)
                if error.get("code") == RPC_INVALID_PARAMS:
                    error_cls = ADDRESS_METHODS.get(method, NotFoundError)
                    raise error_cls(
                        f"Provider rejected params for {method}: {error_msg}",
                        details={"method": method, "params": params},
                    )
                last_error = error_msg
                logger.debug(f"RPC error for {method}: {error_msg}")
                continue

            self._record_success(url, latency_ms)
            log_lookup(logger, method, latency_ms)

            return RPCResponse(
                result=body.get("result"),
                latency_ms=latency_ms,
                endpoint_used=url,
            )

        raise TransportError(
            f"All RPC endpoints failed for {method}",
            details={
                "method": method,
                "endpoints_tried": len(self.rpc_urls),
                "last_error": last_error,
            },
        )


class NftApiProvider(_HttpEndpoints):
    """
    REST provider for the NFT API (getNFTs and friends).

    URLs are base templates such as
    "https://eth-mainnet.g.alchemy.com/nft/v2/${ALCHEMY_API_KEY}".
    """

    def __init__(
        self,
        base_urls: list[str],
        timeout_seconds: int = DEFAULT_TIMEOUT_SECONDS,
        api_key: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        super().__init__(base_urls, timeout_seconds, api_key, transport)

    async def get(self, path: str, params: dict[str, Any] | None = None) -> RPCResponse:
        """
        GET a JSON document from the NFT API with failover.

        Raises:
            InvalidAddressError: On HTTP 400 (the API's answer to a bad owner)
            TransportError: If all endpoints fail
        """
        if not self.urls:
            raise TransportError(
                "No NFT API endpoints configured",
                details={"path": path},
            )

        client = await self._get_client()
        last_error: str | None = None

        for base_url in self.urls:
            self.stats[base_url].total_requests += 1
            url = f"{base_url.rstrip('/')}/{path.lstrip('/')}"
            start_ms = int(time.time() * 1000)

            try:
                resp = await client.get(url, params=params)
                latency_ms = int(time.time() * 1000) - start_ms
                if resp.status_code == 400:
                    self._record_failure(base_url, resp.text[:200])
                    raise InvalidAddressError(
                        f"NFT API rejected request: {resp.text[:200]}",
                        details={"path": path, "params": params},
                    )
                resp.raise_for_status()
                body = resp.json()
            except httpx.TimeoutException:
                latency_ms = int(time.time() * 1000) - start_ms
                last_error = f"Timeout after {latency_ms}ms"
                self._record_failure(base_url, last_error)
                logger.debug(f"NFT API timeout for {path}: {latency_ms}ms")
                continue
            except (httpx.HTTPError, ValueError) as e:
                last_error = str(e)
                self._record_failure(base_url, last_error)
                logger.debug(f"NFT API failed for {path}: {e}")
                continue

            self._record_success(base_url, latency_ms)
            log_lookup(logger, path, latency_ms)

            return RPCResponse(result=body, latency_ms=latency_ms, endpoint_used=base_url)

        raise TransportError(
            f"All NFT API endpoints failed for {path}",
            details={
                "path": path,
                "endpoints_tried": len(self.urls),
                "last_error": last_error,
            },
        )
