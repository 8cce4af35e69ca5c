"""Gateway composing the protocol adapter, RPC client and TTL cache."""

import logging
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor
from typing import Any

from node_dashboard.core.models import ChainProfile, DashboardConfig, FailureRecord, RpcCall, RpcOutcome
from node_dashboard.rpc.cache import TtlCacheStore, TtlPolicy
from node_dashboard.rpc.client import RpcClient
from node_dashboard.rpc.protocol import build_request

logger = logging.getLogger(__name__)


class Gateway:
    """
    Cached, failure-tolerant access to one node for one dashboard pass.

    Every call goes through the chain's cache store; failures are recorded
    in an append-only log instead of being raised, so one failing method
    never prevents fetching the others.

    Parameters
    ----------
    profile : ChainProfile
        Chain profile of the node
    config : DashboardConfig
        Dashboard configuration (endpoint, credentials, TTLs, timeout)
    client : RpcClient | None
        RPC client (created from the config if None)
    store : TtlCacheStore | None
        Cache store (created from the config if None)

    """

    def __init__(
        self,
        profile: ChainProfile,
        config: DashboardConfig,
        client: RpcClient | None = None,
        store: TtlCacheStore | None = None,
    ) -> None:
        self.profile = profile
        self.config = config
        self.endpoint = profile.endpoint(config.host, config.port)
        self.client = client or RpcClient(
            username=config.username,
            password=config.password,
            timeout=config.timeout,
        )
        self.store = store or TtlCacheStore(
            profile.id,
            cache_dir=config.cache_dir,
            policy=TtlPolicy({**profile.ttl_overrides, **config.ttl_overrides}, default=config.default_ttl),
        )
        self._failures: list[FailureRecord] = []

    def fetch(self, call: RpcCall) -> RpcOutcome:
        """
        Get one call's outcome from the cache or the node.

        Parameters
        ----------
        call : RpcCall
            Logical RPC call

        Returns
        -------
        RpcOutcome
            Payload or failure; failures are also appended to the error log

        """
        outcome = self._resolve(call)
        if outcome.failure is not None:
            self._failures.append(outcome.failure)
        return outcome

    def fetch_many(self, calls: Iterable[RpcCall]) -> dict[RpcCall, RpcOutcome]:
        """
        Get outcomes for a batch of calls.

        Duplicate calls are resolved once. With ``max_workers > 1`` calls run
        concurrently; the error log is still appended in call order.

        Parameters
        ----------
        calls : Iterable[RpcCall]
            Calls to resolve

        Returns
        -------
        dict[RpcCall, RpcOutcome]
            Outcomes in call insertion order

        """
        unique = list(dict.fromkeys(calls))
        workers = min(self.config.max_workers, len(unique))

        if workers > 1:
            with ThreadPoolExecutor(max_workers=workers) as executor:
                resolved = list(executor.map(self._resolve, unique))
        else:
            resolved = [self._resolve(call) for call in unique]

        outcomes = {}
        for call, outcome in zip(unique, resolved, strict=True):
            if outcome.failure is not None:
                self._failures.append(outcome.failure)
            outcomes[call] = outcome
        return outcomes

    def errors(self) -> list[FailureRecord]:
        """
        Failures recorded during this gateway session, in order.

        Returns
        -------
        list[FailureRecord]
            Copy of the failure log

        """
        return list(self._failures)

    def _resolve(self, call: RpcCall) -> RpcOutcome:
        return self.store.get(call, self._fetch_from_node)

    def _fetch_from_node(self, call: RpcCall) -> Any:
        request = build_request(
            self.profile,
            self.endpoint,
            call.method,
            call.params,
            username=self.config.username,
            password=self.config.password,
        )
        return self.client.execute(request, call.method)

    def close(self) -> None:
        """Close the underlying RPC client."""
        self.client.close()

    def __enter__(self) -> "Gateway":
        """Context manager entry."""
        return self

    def __exit__(self, exc_type: type, exc_val: Exception, exc_tb: object) -> None:
        """Context manager exit."""
        self.close()
