"""Tests for chain profile loading."""

import pytest

from node_dashboard.core.models import RpcDialect
from node_dashboard.data import (
    ChainNotSupportedError,
    get_all_supported_chains,
    get_chain_profile,
    get_ttl_overrides,
)


def test_get_all_supported_chains():
    """Test getting all supported chain identifiers."""
    assert get_all_supported_chains() == ["BTC", "LTC", "XMR"]


def test_get_chain_profile_is_case_insensitive():
    """Test that chain lookups ignore case."""
    assert get_chain_profile("ltc") == get_chain_profile("LTC")


def test_bitcoin_profile():
    profile = get_chain_profile("BTC")

    assert profile.dialect == RpcDialect.JSON_RPC
    assert profile.default_port == 8332
    assert profile.has_halving
    assert profile.halving_interval == 210000
    assert profile.endpoint("node.local") == "http://node.local:8332"


def test_monero_profile():
    profile = get_chain_profile("XMR")

    assert profile.dialect == RpcDialect.MONERO
    assert not profile.has_halving
    assert profile.atomic_units == 10**12
    assert profile.endpoint("127.0.0.1", 18089) == "http://127.0.0.1:18089/json_rpc"
    assert {"get_info", "get_transaction_pool_stats"} <= set(profile.native_methods)
    assert set(profile.bare_overrides) == {"get_info", "get_transaction_pool_stats"}


@pytest.mark.parametrize(
    ("chain", "method", "ttl"),
    [
        ("BTC", "getblockchaininfo", 30),
        ("BTC", "getmempoolinfo", 20),
        ("LTC", "getchaintxstats", 1800),
        ("XMR", "get_block_count", 15),
        ("XMR", "get_info", 30),
    ],
)
def test_ttl_overrides(chain, method, ttl):
    assert get_ttl_overrides(chain)[method] == ttl


def test_unsupported_chain():
    """Test that unknown chains raise a descriptive error."""
    with pytest.raises(ChainNotSupportedError, match="BTC, LTC, XMR"):
        get_chain_profile("DOGE")
