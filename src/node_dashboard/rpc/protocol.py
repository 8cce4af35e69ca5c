"""Protocol adapter: turns a logical RPC call into an HTTP request per chain dialect."""

from typing import Any

from pydantic import BaseModel

from node_dashboard.core.models import ChainProfile, RpcDialect

JSON_RPC_VERSION = "2.0"
CLIENT_ID = "node-dashboard"
MONERO_RPC_SUFFIX = "/json_rpc"


class RpcRequest(BaseModel):
    """
    A ready-to-send HTTP request.

    Attributes
    ----------
    url : str
        Target URL
    body : Any
        JSON-serialisable request body
    use_auth : bool
        Whether Basic auth credentials should be attached
    enveloped : bool
        True for JSON-RPC envelopes, False for bare JSON POSTs

    """

    url: str
    body: Any
    use_auth: bool = False
    enveloped: bool = True


def json_rpc_envelope(method: str, params: list[Any] | dict[str, Any]) -> dict[str, Any]:
    """Build a JSON-RPC 2.0 request envelope."""
    return {
        "jsonrpc": JSON_RPC_VERSION,
        "id": CLIENT_ID,
        "method": method,
        "params": params,
    }


def bare_params(params: list[Any] | dict[str, Any]) -> dict[str, Any]:
    """Params object for a bare POST; positional params are keyed by index."""
    if isinstance(params, dict):
        return dict(params)
    return {str(index): value for index, value in enumerate(params)}


def is_bare_call(chain: ChainProfile, method: str) -> bool:
    """
    Check whether a method bypasses the JSON-RPC envelope on this chain.

    Overrides win over the native allow-list.

    Parameters
    ----------
    chain : ChainProfile
        Chain profile
    method : str
        RPC method name

    Returns
    -------
    bool
        True if the call must be a bare JSON POST to ``<base>/<method>``

    """
    if chain.dialect != RpcDialect.MONERO:
        return False
    if method in chain.bare_overrides:
        return True
    return method not in chain.native_methods


def build_request(
    chain: ChainProfile,
    endpoint: str,
    method: str,
    params: list[Any] | dict[str, Any] | None = None,
    *,
    username: str = "",
    password: str = "",
) -> RpcRequest:
    """
    Build the HTTP request for one RPC call.

    Parameters
    ----------
    chain : ChainProfile
        Chain profile deciding the dialect
    endpoint : str
        Configured RPC endpoint (ends in ``/json_rpc`` for Monero)
    method : str
        RPC method name
    params : list[Any] | dict[str, Any] | None
        Method parameters (default: none)
    username : str
        RPC username
    password : str
        RPC password

    Returns
    -------
    RpcRequest
        URL, body and auth flag

    """
    if params is None:
        params = []
    use_auth = bool(username or password)

    if is_bare_call(chain, method):
        base = endpoint.removesuffix(MONERO_RPC_SUFFIX)
        return RpcRequest(
            url=f"{base}/{method}",
            body=bare_params(params),
            use_auth=use_auth,
            enveloped=False,
        )

    return RpcRequest(url=endpoint, body=json_rpc_envelope(method, params), use_auth=use_auth)
