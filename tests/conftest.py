"""Pytest configuration and shared fixtures for node-dashboard tests."""

import json
from collections.abc import Callable
from typing import Any

import httpx
import pytest

from node_dashboard.core.models import ChainProfile, DashboardConfig
from node_dashboard.data import get_chain_profile
from node_dashboard.rpc.client import RpcClient
from node_dashboard.rpc.retry import RetryConfig


class FakeNode:
    """
    In-memory node answering RPC requests through ``httpx.MockTransport``.

    ``responses`` maps a method name to a payload, an exception instance
    (raised as a transport error) or a callable taking the request params.
    ``errors`` maps a method name to an RPC error object. JSON-RPC envelopes
    get ``{"result": ..., "error": None}`` back; bare requests get the
    payload as the whole body.

    """

    def __init__(self, responses: dict[str, Any] | None = None) -> None:
        self.responses = dict(responses or {})
        self.errors: dict[str, Any] = {}
        self.requests: list[httpx.Request] = []

    def calls_to(self, method: str) -> int:
        return sum(1 for request in self.requests if self.method_of(request) == method)

    @staticmethod
    def method_of(request: httpx.Request) -> str:
        body = json.loads(request.content or b"{}")
        if isinstance(body, dict) and body.get("jsonrpc") == "2.0":
            return body["method"]
        return request.url.path.rsplit("/", 1)[-1]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        body = json.loads(request.content or b"{}")
        enveloped = isinstance(body, dict) and body.get("jsonrpc") == "2.0"
        method = self.method_of(request)

        if method in self.errors:
            return httpx.Response(500, json={"result": None, "error": self.errors[method], "id": body.get("id")})

        if method not in self.responses:
            return httpx.Response(404, text="not found")

        payload = self.responses[method]
        if isinstance(payload, Exception):
            raise payload
        if callable(payload):
            payload = payload(body.get("params") if enveloped else body)

        if enveloped:
            return httpx.Response(200, json={"result": payload, "error": None, "id": body["id"]})
        return httpx.Response(200, json=payload)

    def client(self, **kwargs: Any) -> RpcClient:
        kwargs.setdefault("retry_config", RetryConfig(max_retries=0))
        return RpcClient(transport=httpx.MockTransport(self.handler), **kwargs)


class FakeClock:
    """Settable time source for cache tests."""

    def __init__(self, now: float = 1_700_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def btc_profile() -> ChainProfile:
    return get_chain_profile("BTC")


@pytest.fixture
def ltc_profile() -> ChainProfile:
    return get_chain_profile("LTC")


@pytest.fixture
def xmr_profile() -> ChainProfile:
    return get_chain_profile("XMR")


@pytest.fixture
def make_config(tmp_path) -> Callable[..., DashboardConfig]:
    """Build a dashboard config whose cache lives in a temporary directory."""

    def _make(chain: str = "BTC", **overrides: Any) -> DashboardConfig:
        overrides.setdefault("cache_dir", str(tmp_path))
        return DashboardConfig(chain=chain, **overrides)

    return _make


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


BTC_BLOCKCHAIN_INFO = {
    "chain": "main",
    "blocks": 840000,
    "headers": 840005,
    "difficulty": 86388558925171.02,
    "verificationprogress": 0.9999987,
    "size_on_disk": 634_000_000_000,
    "pruned": False,
}
BTC_NETWORK_INFO = {"subversion": "/Satoshi:27.0.0/", "connections": 10}
BTC_MEMPOOL_INFO = {"size": 12345, "bytes": 1536, "total_fee": 0.5}
BTC_MINING_INFO = {"networkhashps": 2.5e15, "blocks": 840000}
BTC_CHAIN_TX_STATS = {"txcount": 1_000_000_000, "txrate": 5.4321, "window_tx_count": 9_000_000}
BTC_FEE_RATES = {1: 0.0002, 6: 0.0001, 144: 0.00001}

BTC_RESPONSES = {
    "getblockchaininfo": BTC_BLOCKCHAIN_INFO,
    "getnetworkinfo": BTC_NETWORK_INFO,
    "getmempoolinfo": BTC_MEMPOOL_INFO,
    "getmininginfo": BTC_MINING_INFO,
    "getchaintxstats": BTC_CHAIN_TX_STATS,
    "estimatesmartfee": lambda params: {"feerate": BTC_FEE_RATES[params[0]], "blocks": params[0]},
}

XMR_INFO = {
    "version": "0.18.3.3-release",
    "nettype": "mainnet",
    "incoming_connections_count": 4,
    "outgoing_connections_count": 12,
    "synchronized": True,
    "database_size": 200_000_000_000,
    "difficulty": 240_000_000_000,
    "height": 3_100_000,
    "tx_count": 40_000_000,
    "tx_pool_size": 25,
}

XMR_RESPONSES = {
    "get_info": XMR_INFO,
    "get_block_count": {"count": 3_100_000, "status": "OK"},
    "get_last_block_header": {"block_header": {"reward": 600_000_000_000, "height": 3_099_999}},
    "get_transaction_pool_stats": {"pool_stats": {"txs_total": 25, "bytes_total": 2048, "fee_total": 1_500_000_000}},
    "get_miner_data": {"already_generated_coins": 18_400_000_000_000_000_000},
    "get_fee_estimate": {"fees": [20000, 80000, 320000, 4000000], "status": "OK"},
}


@pytest.fixture
def btc_node() -> FakeNode:
    return FakeNode(BTC_RESPONSES)


@pytest.fixture
def xmr_node() -> FakeNode:
    return FakeNode(XMR_RESPONSES)
