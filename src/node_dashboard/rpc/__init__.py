"""RPC layer: protocol adapter, HTTP client, retry logic, TTL cache and gateway."""

from node_dashboard.rpc.cache import CacheEntry, TtlCacheStore, TtlPolicy
from node_dashboard.rpc.client import RpcClient, RpcError, RpcProtocolError, RpcTransportError
from node_dashboard.rpc.gateway import Gateway
from node_dashboard.rpc.protocol import RpcRequest, build_request
from node_dashboard.rpc.retry import RetryConfig, with_retry

__all__ = [
    "CacheEntry",
    "Gateway",
    "RetryConfig",
    "RpcClient",
    "RpcError",
    "RpcProtocolError",
    "RpcRequest",
    "RpcTransportError",
    "TtlCacheStore",
    "TtlPolicy",
    "build_request",
    "with_retry",
]
