# PATH: tests/conftest.py
"""
Pytest configuration and fixtures for chainview tests.
"""

import json
import sys
from pathlib import Path
from typing import Any, Callable
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from core.models import BlockDetail, BlockSummary, TransactionSummary  # noqa: E402

ADDRESS_A = "0x" + "a1" * 20
ADDRESS_B = "0x" + "b2" * 20


def pytest_configure(config):
    """Configure pytest."""
    # Add custom markers
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )


def make_block_summary(height: int) -> BlockSummary:
    return BlockSummary(height=height, miner=f"0xminer{height}", gas_used=height * 1000)


@pytest.fixture
def fake_client():
    """
    ChainClient stand-in with AsyncMock lookups.

    Chain head is 100; every height 0..100 exists.
    """
    client = MagicMock()
    client.current_height = AsyncMock(return_value=100)

    async def get_block(height: int) -> BlockSummary:
        return make_block_summary(height)

    client.get_block = AsyncMock(side_effect=get_block)
    client.get_block_with_transactions = AsyncMock(
        return_value=BlockDetail(
            height=100,
            miner="0xminer100",
            gas_used=100_000,
            transactions=(
                TransactionSummary("0x01", 100, ADDRESS_A, ADDRESS_B, 5),
                TransactionSummary("0x02", 100, ADDRESS_B, None, 0),
            ),
        )
    )
    client.get_transaction_receipt = AsyncMock(return_value=None)
    client.get_transaction = AsyncMock(return_value=None)
    client.get_balance = AsyncMock(return_value=0)
    client.get_nfts_for_owner = AsyncMock(return_value=[])
    client.close = AsyncMock()
    return client


@pytest.fixture
def rpc_transport() -> Callable[..., httpx.MockTransport]:
    """
    Build an httpx.MockTransport answering JSON-RPC by method name.

    Values in `results` are either the result itself or a callable
    taking params; an `{"error": {...}}` dict is returned as an RPC error.
    GET requests are answered from `rest` keyed by the last path segment.
    """

    def build(
        results: dict[str, Any] | None = None,
        rest: dict[str, Any] | None = None,
        calls: list | None = None,
    ) -> httpx.MockTransport:
        results = results or {}
        rest = rest or {}

        def handler(request: httpx.Request) -> httpx.Response:
            if request.method == "GET":
                segment = request.url.path.rsplit("/", 1)[-1]
                if calls is not None:
                    calls.append((segment, dict(request.url.params)))
                answer = rest.get(segment)
                if callable(answer):
                    answer = answer(dict(request.url.params))
                if isinstance(answer, httpx.Response):
                    return answer
                return httpx.Response(200, json=answer)

            payload = json.loads(request.content)
            method = payload["method"]
            params = payload.get("params", [])
            if calls is not None:
                calls.append((method, params))

            answer = results.get(method)
            if callable(answer):
                answer = answer(params)
            if isinstance(answer, dict) and set(answer) == {"error"}:
                return httpx.Response(
                    200, json={"jsonrpc": "2.0", "id": payload["id"], **answer}
                )
            return httpx.Response(
                200, json={"jsonrpc": "2.0", "id": payload["id"], "result": answer}
            )

        return httpx.MockTransport(handler)

    return build
