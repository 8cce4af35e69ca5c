"""HTTP client that executes node RPC requests and unwraps their results."""

import json
import logging
import time
from collections.abc import Callable
from typing import Any

import httpx

from node_dashboard.core.models import FailureKind, FailureRecord
from node_dashboard.rpc.protocol import RpcRequest
from node_dashboard.rpc.retry import RetryConfig, with_retry

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0


class RpcError(Exception):
    """Base class for failed RPC calls."""

    kind: FailureKind = FailureKind.TRANSPORT

    def __init__(self, method: str, cause: str) -> None:
        super().__init__(f"{method}: {cause}")
        self.method = method
        self.cause = cause

    def to_failure(self) -> FailureRecord:
        """Convert to a failure record for the gateway's error log."""
        return FailureRecord(method=self.method, kind=self.kind, cause=self.cause)


class RpcTransportError(RpcError):
    """Connection error, timeout, bad HTTP status or undecodable response."""

    kind = FailureKind.TRANSPORT


class RpcProtocolError(RpcError):
    """The node answered with a non-null ``error`` field."""

    kind = FailureKind.PROTOCOL


def unwrap_response(method: str, data: Any) -> Any:
    """
    Extract the payload from a decoded RPC response.

    Parameters
    ----------
    method : str
        Method name, for error reporting
    data : Any
        Decoded JSON body

    Returns
    -------
    Any
        ``result`` when present, otherwise the whole body (bare endpoints)

    Raises
    ------
    RpcProtocolError
        If the body carries a non-null ``error``

    """
    if not isinstance(data, dict):
        return data
    if data.get("error") is not None:
        raise RpcProtocolError(method, json.dumps(data["error"], sort_keys=True))
    if "result" in data:
        return data["result"]
    return data


class RpcClient:
    """
    Executes RPC requests against a node over HTTP.

    Parameters
    ----------
    username : str
        Basic auth username
    password : str
        Basic auth password
    timeout : float
        Request timeout in seconds
    retry_config : RetryConfig | None
        Retry policy for transport errors
    transport : httpx.BaseTransport | None
        Custom transport (e.g., ``httpx.MockTransport`` in tests)
    sleep : Callable[[float], None]
        Sleep function used between retries

    """

    def __init__(
        self,
        username: str = "",
        password: str = "",
        timeout: float = DEFAULT_TIMEOUT,
        retry_config: RetryConfig | None = None,
        transport: httpx.BaseTransport | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.username = username
        self.password = password
        self.retry_config = retry_config or RetryConfig()
        self.client = httpx.Client(
            timeout=timeout,
            headers={"Content-Type": "application/json"},
            transport=transport,
        )
        self._send = with_retry(self.retry_config, retry_on=(RpcTransportError,), sleep=sleep)(self._send_once)

    def execute(self, request: RpcRequest, method: str) -> Any:
        """
        Execute one request and return its payload.

        Parameters
        ----------
        request : RpcRequest
            Request built by the protocol adapter
        method : str
            RPC method name, for error reporting

        Returns
        -------
        Any
            Decoded result payload

        Raises
        ------
        RpcTransportError
            If the node could not be reached or answered with garbage
        RpcProtocolError
            If the node reported an RPC error

        """
        try:
            return unwrap_response(method, self._send(request, method))
        except RpcError as e:
            logger.warning("%s", e.to_failure())
            raise

    def _send_once(self, request: RpcRequest, method: str) -> Any:
        auth = (self.username, self.password) if request.use_auth else None
        logger.debug("POST %s method=%s", request.url, method)

        try:
            response = self.client.post(request.url, content=json.dumps(request.body), auth=auth)
        except httpx.TimeoutException as e:
            raise RpcTransportError(method, f"request timed out: {e}") from e
        except httpx.HTTPError as e:
            raise RpcTransportError(method, f"HTTP request failed: {e}") from e

        try:
            data = response.json()
        except ValueError as e:
            if response.is_error:
                raise RpcTransportError(method, f"HTTP error {response.status_code}") from e
            raise RpcTransportError(method, f"invalid JSON response: {e}") from e

        # bitcoind answers RPC errors with HTTP 500 and a JSON-RPC error body
        if response.is_error and not (isinstance(data, dict) and data.get("error") is not None):
            raise RpcTransportError(method, f"HTTP error {response.status_code}")

        return data

    def close(self) -> None:
        """Close HTTP client."""
        self.client.close()

    def __enter__(self) -> "RpcClient":
        """Context manager entry."""
        return self

    def __exit__(self, exc_type: type, exc_val: Exception, exc_tb: object) -> None:
        """Context manager exit."""
        self.close()
