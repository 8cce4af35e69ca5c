"""Data models for chain profiles, RPC calls, outcomes, and dashboard reports."""

import hashlib
import json
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class RpcDialect(StrEnum):
    """Shape of the RPC interface exposed by a node."""

    JSON_RPC = "json_rpc"
    MONERO = "monero"


class SectionName(StrEnum):
    """Dashboard section identifiers."""

    NODE_INFO = "node_info"
    BLOCKCHAIN = "blockchain"
    MEMPOOL = "mempool"
    MINING = "mining"
    TRANSACTIONS = "transactions"
    FEES = "fees"


class ChainProfile(BaseModel):
    """
    Capabilities of one supported chain.

    Attributes
    ----------
    id : str
        Chain identifier (e.g., 'BTC', 'XMR')
    name : str
        Display name
    unit : str
        Native unit label
    dialect : RpcDialect
        RPC dialect spoken by the node
    default_port : int
        Default RPC port of the node daemon
    rpc_path : str
        Path appended to host:port to form the RPC endpoint
    halving_interval : int | None
        Blocks between subsidy halvings (None when the chain has no halving schedule)
    initial_subsidy : float | None
        Block subsidy of the first epoch
    retarget_interval : int | None
        Blocks between difficulty retargets
    block_time : int
        Target block time in seconds
    atomic_units : int
        Smallest units per coin
    fee_rate_label : str
        Label rendered next to fee estimates
    native_methods : list[str]
        Methods sent as JSON-RPC envelopes (Monero dialect only)
    bare_overrides : list[str]
        Methods always sent as bare JSON POSTs, even when listed as native
    ttl_overrides : dict[str, int]
        Per-method cache TTL in seconds

    """

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    unit: str
    dialect: RpcDialect
    default_port: int
    rpc_path: str = ""
    halving_interval: int | None = None
    initial_subsidy: float | None = None
    retarget_interval: int | None = None
    block_time: int = 600
    atomic_units: int = 100_000_000
    fee_rate_label: str = ""
    native_methods: list[str] = Field(default_factory=list)
    bare_overrides: list[str] = Field(default_factory=list)
    ttl_overrides: dict[str, int] = Field(default_factory=dict)

    @property
    def has_halving(self) -> bool:
        """Whether the chain follows a block-subsidy halving schedule."""
        return self.halving_interval is not None and self.initial_subsidy is not None

    def endpoint(self, host: str, port: int | None = None) -> str:
        """Build the RPC endpoint URL for a node reachable at host:port."""
        return f"http://{host}:{port or self.default_port}{self.rpc_path}"


def canonical_params(params: list[Any] | dict[str, Any]) -> str:
    """Serialize RPC params to a stable JSON string."""
    return json.dumps(params, sort_keys=True, separators=(",", ":"))


class RpcCall(BaseModel):
    """
    A logical RPC request: method name plus parameters.

    Two calls are the same call when method and canonically serialized
    params are equal, so calls can be used as mapping keys.

    """

    model_config = ConfigDict(frozen=True)

    method: str
    params: list[Any] | dict[str, Any] = Field(default_factory=list)

    @property
    def cache_key(self) -> str:
        """Cache key: method name plus a digest of the canonical params."""
        digest = hashlib.sha256(canonical_params(self.params).encode()).hexdigest()
        return f"{self.method}_{digest}"

    def __hash__(self) -> int:
        return hash((self.method, canonical_params(self.params)))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RpcCall):
            return NotImplemented
        return self.method == other.method and canonical_params(self.params) == canonical_params(other.params)

    def __str__(self) -> str:
        if not self.params:
            return self.method
        return f"{self.method}({canonical_params(self.params)})"


class FailureKind(StrEnum):
    """Why an RPC call produced no payload."""

    TRANSPORT = "transport"
    PROTOCOL = "protocol"


class FailureRecord(BaseModel):
    """
    A failed RPC call.

    Attributes
    ----------
    method : str
        Method that failed
    kind : FailureKind
        Transport failure or error returned by the node
    cause : str
        Human-readable cause

    """

    method: str
    kind: FailureKind
    cause: str

    def __str__(self) -> str:
        label = "Transport error" if self.kind == FailureKind.TRANSPORT else "RPC error"
        return f"{label} on `{self.method}`: {self.cause}"


class RpcOutcome(BaseModel):
    """
    Result of one RPC call: either a payload or a failure, never both.

    Attributes
    ----------
    call : RpcCall
        The call this outcome answers
    payload : Any
        Decoded result (schema-less JSON value)
    failure : FailureRecord | None
        Failure record when the call did not succeed
    cached : bool
        True when the payload was served from the cache without a network call

    """

    call: RpcCall
    payload: Any = None
    failure: FailureRecord | None = None
    cached: bool = False

    @model_validator(mode="after")
    def _payload_xor_failure(self) -> "RpcOutcome":
        if self.failure is not None and self.payload is not None:
            msg = "an RPC outcome carries either a payload or a failure"
            raise ValueError(msg)
        return self

    @property
    def ok(self) -> bool:
        """True when the call produced a payload."""
        return self.failure is None


class DashboardConfig(BaseModel):
    """
    Validated dashboard configuration.

    Attributes
    ----------
    chain : str
        Chain identifier ('BTC', 'LTC' or 'XMR')
    host : str
        Node host
    port : int | None
        RPC port (None uses the chain's default port)
    username : str
        RPC username (empty disables Basic auth unless a password is set)
    password : str
        RPC password
    sections : dict[SectionName, bool]
        Per-section toggles
    cache_dir : str
        Directory holding the per-chain cache files
    default_ttl : int
        TTL in seconds for methods without an override
    ttl_overrides : dict[str, int]
        Extra per-method TTLs merged over the chain profile's
    timeout : float
        Per-request network timeout in seconds
    max_workers : int
        Concurrent RPC calls per batch (1 fetches sequentially)

    """

    chain: str
    host: str = "127.0.0.1"
    port: int | None = None
    username: str = ""
    password: str = ""
    sections: dict[SectionName, bool] = Field(default_factory=lambda: dict.fromkeys(SectionName, True))
    cache_dir: str = "."
    default_ttl: int = Field(default=300, ge=0)
    ttl_overrides: dict[str, int] = Field(default_factory=dict)
    timeout: float = Field(default=10.0, gt=0)
    max_workers: int = Field(default=1, ge=1)

    @model_validator(mode="after")
    def _normalise(self) -> "DashboardConfig":
        self.chain = self.chain.upper()
        for section in SectionName:
            self.sections.setdefault(section, True)
        return self

    def enabled_sections(self) -> list[SectionName]:
        """Sections switched on, in display order."""
        return [section for section in SectionName if self.sections.get(section, True)]


class SectionReport(BaseModel):
    """
    Derived values for one dashboard section.

    Attributes
    ----------
    name : SectionName
        Section identifier
    title : str
        Display title
    available : bool
        False when the RPC data required by the section could not be fetched
    values : dict[str, str]
        Display label to formatted value

    """

    name: SectionName
    title: str
    available: bool = True
    values: dict[str, str] = Field(default_factory=dict)


class DashboardReport(BaseModel):
    """
    Everything handed to a renderer for one dashboard pass.

    Attributes
    ----------
    chain : str
        Chain identifier
    chain_name : str
        Chain display name
    sections : dict[str, SectionReport]
        Section reports keyed by section name
    errors : list[str]
        Human-readable failure lines in call order
    generated_at : datetime
        When the report was built (UTC)

    """

    chain: str
    chain_name: str
    sections: dict[str, SectionReport] = Field(default_factory=dict)
    errors: list[str] = Field(default_factory=list)
    generated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
