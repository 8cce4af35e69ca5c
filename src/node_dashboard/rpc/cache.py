"""File-backed TTL cache for node RPC responses, one JSON store per chain."""

import json
import logging
import os
import tempfile
import threading
import time
from collections.abc import Callable
from pathlib import Path
from typing import Any

from node_dashboard.core.models import RpcCall, RpcOutcome
from node_dashboard.rpc.client import RpcError

logger = logging.getLogger(__name__)

DEFAULT_TTL = 300


class TtlPolicy:
    """
    Per-method TTL lookup with a fallback default.

    TTL is per method, not per (method, params): two calls to one method with
    different params share a TTL while occupying different cache keys.

    Parameters
    ----------
    overrides : dict[str, int] | None
        Method name to TTL in seconds
    default : int
        TTL for methods without an override

    """

    def __init__(self, overrides: dict[str, int] | None = None, default: int = DEFAULT_TTL) -> None:
        self.overrides = dict(overrides or {})
        self.default = default

    def ttl_for(self, method: str) -> int:
        """
        Get the TTL for a method.

        Parameters
        ----------
        method : str
            RPC method name

        Returns
        -------
        int
            TTL in seconds

        """
        return self.overrides.get(method, self.default)


class CacheEntry:
    """
    Cached RPC payload with its fetch timestamp.

    Parameters
    ----------
    key : str
        Cache key
    timestamp : int
        Fetch time in epoch seconds
    data : Any
        Cached payload

    """

    def __init__(self, key: str, timestamp: int, data: Any) -> None:
        self.key = key
        self.timestamp = timestamp
        self.data = data

    def is_fresh(self, ttl: int, now: float) -> bool:
        """Check whether the entry is younger than ``ttl`` seconds."""
        return (now - self.timestamp) < ttl

    def to_json(self) -> dict[str, Any]:
        """Serialise to the on-disk record shape."""
        return {"timestamp": self.timestamp, "data": self.data}

    @classmethod
    def from_json(cls, key: str, record: Any) -> "CacheEntry | None":
        """Parse an on-disk record, returning None when it is malformed."""
        if not isinstance(record, dict) or "data" not in record:
            return None
        timestamp = record.get("timestamp")
        if isinstance(timestamp, bool) or not isinstance(timestamp, int | float):
            return None
        return cls(key, int(timestamp), record["data"])


class TtlCacheStore:
    """
    Persistent cache of RPC payloads for a single chain.

    The whole store lives in ``<cache_dir>/<chain>_cache.json`` as a JSON object
    mapping cache key to ``{"timestamp": int, "data": ...}``. Entries are only
    ever replaced by a later successful fetch; failures never evict stale data.

    Writes go to a temporary file that is renamed over the store, and an
    in-process lock serialises read-modify-write cycles. Separate processes
    sharing one cache directory can still lose an update when they race.

    Parameters
    ----------
    chain_id : str
        Chain identifier, used to name the store file
    cache_dir : str | Path
        Directory holding the store
    policy : TtlPolicy | None
        TTL policy (default: every method uses ``DEFAULT_TTL``)
    clock : Callable[[], float]
        Time source in epoch seconds

    """

    def __init__(
        self,
        chain_id: str,
        cache_dir: str | Path = ".",
        policy: TtlPolicy | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.chain_id = chain_id
        self.path = Path(cache_dir) / f"{chain_id.lower()}_cache.json"
        self.policy = policy or TtlPolicy()
        self.clock = clock
        self._lock = threading.Lock()

    def get(self, call: RpcCall, fetch: Callable[[RpcCall], Any]) -> RpcOutcome:
        """
        Return a fresh cached payload or fetch, store and return a new one.

        Parameters
        ----------
        call : RpcCall
            Logical RPC call
        fetch : Callable[[RpcCall], Any]
            Fetches the payload from the node; raises ``RpcError`` on failure

        Returns
        -------
        RpcOutcome
            Payload outcome, or a failed outcome when the fetch failed

        """
        key = call.cache_key
        ttl = self.policy.ttl_for(call.method)

        entry = self.load().get(key)
        if entry is not None and entry.is_fresh(ttl, self.clock()):
            logger.debug("cache hit %s (%s)", call, self.chain_id)
            return RpcOutcome(call=call, payload=entry.data, cached=True)

        try:
            payload = fetch(call)
        except RpcError as e:
            return RpcOutcome(call=call, failure=e.to_failure())

        try:
            self.put(key, payload)
        except OSError as e:
            logger.warning("Could not persist %s to cache store %s: %s", call, self.path, e)
        return RpcOutcome(call=call, payload=payload)

    def put(self, key: str, payload: Any) -> CacheEntry:
        """
        Upsert one entry and persist the whole store.

        Parameters
        ----------
        key : str
            Cache key
        payload : Any
            JSON-serialisable payload

        Returns
        -------
        CacheEntry
            The stored entry

        """
        entry = CacheEntry(key, int(self.clock()), payload)
        with self._lock:
            entries = self.load()
            entries[key] = entry
            self._write(entries)
        return entry

    def load(self) -> dict[str, CacheEntry]:
        """
        Read the store from disk.

        A missing, unreadable or wrongly shaped file is treated as empty;
        malformed records are skipped.

        Returns
        -------
        dict[str, CacheEntry]
            Entries keyed by cache key

        """
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as e:
            logger.warning("Ignoring unreadable cache store %s: %s", self.path, e)
            return {}

        if not isinstance(raw, dict):
            logger.warning("Ignoring cache store %s: expected a JSON object", self.path)
            return {}

        entries = {}
        for key, record in raw.items():
            entry = CacheEntry.from_json(key, record)
            if entry is None:
                logger.debug("Dropping malformed cache record %s", key)
                continue
            entries[key] = entry
        return entries

    def entries(self) -> list[CacheEntry]:
        """List all stored entries."""
        return list(self.load().values())

    def _write(self, entries: dict[str, CacheEntry]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        data = {key: entry.to_json() for key, entry in entries.items()}

        fd, tmp_name = tempfile.mkstemp(prefix=f".{self.path.name}.", dir=self.path.parent)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
