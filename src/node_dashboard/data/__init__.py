"""Chain profile data and loading."""

from node_dashboard.data.loader import (
    ChainNotSupportedError,
    get_all_supported_chains,
    get_chain_profile,
    get_ttl_overrides,
    load_chains,
)

__all__ = [
    "ChainNotSupportedError",
    "get_all_supported_chains",
    "get_chain_profile",
    "get_ttl_overrides",
    "load_chains",
]
