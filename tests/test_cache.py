"""Tests for the TTL cache store."""

import json

import pytest

from node_dashboard.core.models import FailureKind, RpcCall
from node_dashboard.rpc.cache import CacheEntry, TtlCacheStore, TtlPolicy
from node_dashboard.rpc.client import RpcTransportError


class CountingFetch:
    """Fetch callable returning a new payload per call."""

    def __init__(self, fail: bool = False) -> None:
        self.calls = 0
        self.fail = fail

    def __call__(self, call: RpcCall):
        self.calls += 1
        if self.fail:
            raise RpcTransportError(call.method, "connection refused")
        return {"method": call.method, "n": self.calls}


@pytest.fixture
def store(tmp_path, clock) -> TtlCacheStore:
    return TtlCacheStore("BTC", cache_dir=tmp_path, policy=TtlPolicy({"getmempoolinfo": 20}, default=300), clock=clock)


def test_ttl_policy_override_and_default():
    policy = TtlPolicy({"getblockchaininfo": 30}, default=120)

    assert policy.ttl_for("getblockchaininfo") == 30
    assert policy.ttl_for("getnetworkinfo") == 120


def test_store_file_named_after_chain(tmp_path):
    assert TtlCacheStore("XMR", cache_dir=tmp_path).path == tmp_path / "xmr_cache.json"


def test_cache_key_depends_on_params():
    plain = RpcCall(method="estimatesmartfee", params=[1])
    other = RpcCall(method="estimatesmartfee", params=[6])

    assert plain.cache_key.startswith("estimatesmartfee_")
    assert plain.cache_key != other.cache_key
    assert plain.cache_key == RpcCall(method="estimatesmartfee", params=[1]).cache_key


def test_cache_key_ignores_dict_ordering():
    first = RpcCall(method="get_block", params={"height": 1, "fill_pow_hash": False})
    second = RpcCall(method="get_block", params={"fill_pow_hash": False, "height": 1})

    assert first.cache_key == second.cache_key


def test_second_get_within_ttl_is_served_from_cache(store, clock):
    """Two calls within TTL give identical payloads and one network call."""
    fetch = CountingFetch()
    call = RpcCall(method="getblockchaininfo")

    first = store.get(call, fetch)
    clock.advance(299)
    second = store.get(call, fetch)

    assert fetch.calls == 1
    assert first.payload == second.payload
    assert json.dumps(first.payload) == json.dumps(second.payload)
    assert first.cached is False
    assert second.cached is True


def test_expired_entry_is_refetched(store, clock):
    fetch = CountingFetch()
    call = RpcCall(method="getblockchaininfo")

    store.get(call, fetch)
    clock.advance(300)
    outcome = store.get(call, fetch)

    assert fetch.calls == 2
    assert outcome.payload["n"] == 2


def test_override_changes_refetch_timing(store, clock):
    """A method with a 20s override refetches after 20s; the default still holds at 299s."""
    fetch = CountingFetch()
    mempool = RpcCall(method="getmempoolinfo")
    network = RpcCall(method="getnetworkinfo")

    store.get(mempool, fetch)
    store.get(network, fetch)
    clock.advance(19)
    store.get(mempool, fetch)
    assert fetch.calls == 2

    clock.advance(1)
    store.get(mempool, fetch)
    store.get(network, fetch)
    assert fetch.calls == 3


def test_ttl_shared_across_params(store, clock):
    """Different params occupy different keys but share the method's TTL."""
    fetch = CountingFetch()
    store.policy = TtlPolicy({"estimatesmartfee": 120})

    store.get(RpcCall(method="estimatesmartfee", params=[1]), fetch)
    store.get(RpcCall(method="estimatesmartfee", params=[6]), fetch)
    assert fetch.calls == 2
    assert len(store.entries()) == 2

    clock.advance(120)
    store.get(RpcCall(method="estimatesmartfee", params=[1]), fetch)
    store.get(RpcCall(method="estimatesmartfee", params=[6]), fetch)
    assert fetch.calls == 4


def test_failure_returns_failed_outcome_and_keeps_stale_entry(store, clock):
    call = RpcCall(method="getblockchaininfo")
    store.get(call, CountingFetch())
    before = store.path.read_text()

    clock.advance(1000)
    outcome = store.get(call, CountingFetch(fail=True))

    assert not outcome.ok
    assert outcome.payload is None
    assert outcome.failure.method == "getblockchaininfo"
    assert outcome.failure.kind == FailureKind.TRANSPORT
    assert store.path.read_text() == before


def test_failure_on_empty_store_writes_nothing(store):
    outcome = store.get(RpcCall(method="getmininginfo"), CountingFetch(fail=True))

    assert not outcome.ok
    assert not store.path.exists()


def test_persisted_format_round_trips(store, clock):
    call = RpcCall(method="getnetworkinfo")
    store.get(call, lambda c: {"subversion": "/Satoshi:27.0.0/", "connections": 8})

    raw = json.loads(store.path.read_text())

    assert raw == {
        call.cache_key: {
            "timestamp": int(clock.now),
            "data": {"subversion": "/Satoshi:27.0.0/", "connections": 8},
        }
    }
    reloaded = store.load()
    assert set(reloaded) == {call.cache_key}
    assert reloaded[call.cache_key].data == raw[call.cache_key]["data"]


def test_corrupt_store_is_treated_as_empty(store):
    """Invalid JSON is ignored, a fresh fetch happens and the file ends with one valid entry."""
    store.path.write_text("{not json", encoding="utf-8")
    fetch = CountingFetch()
    call = RpcCall(method="getblockchaininfo")

    outcome = store.get(call, fetch)

    assert outcome.ok
    assert fetch.calls == 1
    raw = json.loads(store.path.read_text())
    assert list(raw) == [call.cache_key]
    assert raw[call.cache_key]["data"] == outcome.payload


@pytest.mark.parametrize("content", ["[]", '"text"', "42", "null"])
def test_wrongly_shaped_store_is_treated_as_empty(store, content):
    store.path.write_text(content, encoding="utf-8")

    assert store.load() == {}


def test_malformed_records_are_dropped(store, clock):
    good = {"timestamp": int(clock.now), "data": {"ok": True}}
    store.path.write_text(
        json.dumps({"good": good, "no_data": {"timestamp": 1}, "bad_ts": {"timestamp": "x", "data": 1}, "scalar": 5}),
        encoding="utf-8",
    )

    assert list(store.load()) == ["good"]


def test_put_preserves_other_entries(store):
    store.put("a_1", {"x": 1})
    store.put("b_2", [1, 2])

    assert {entry.key for entry in store.entries()} == {"a_1", "b_2"}
    assert not list(store.path.parent.glob(".btc_cache.json.*"))


def test_cache_entry_freshness():
    entry = CacheEntry("k", 100, None)

    assert entry.is_fresh(10, 109.9)
    assert not entry.is_fresh(10, 110)
    assert CacheEntry.from_json("k", {"timestamp": True, "data": 1}) is None


def test_write_failure_keeps_fetched_payload(tmp_path, clock, caplog):
    blocker = tmp_path / "blocker"
    blocker.write_text("", encoding="utf-8")
    store = TtlCacheStore("BTC", cache_dir=blocker / "sub", clock=clock)
    fetch = CountingFetch()

    with caplog.at_level("WARNING", logger="node_dashboard.rpc.cache"):
        outcome = store.get(RpcCall(method="getblockchaininfo"), fetch)

    assert outcome.ok
    assert outcome.payload == {"method": "getblockchaininfo", "n": 1}
    assert "Could not persist" in caplog.text
