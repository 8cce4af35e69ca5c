"""Chain profile loader backed by chains.yaml."""

from functools import cache
from pathlib import Path
from typing import Any

import yaml

from node_dashboard.core.models import ChainProfile


class ChainNotSupportedError(ValueError):
    """Raised when a chain identifier has no profile."""


@cache
def load_chains() -> dict[str, Any]:
    """
    Load raw chain definitions from chains.yaml.

    Returns
    -------
    dict[str, Any]
        Chain definitions keyed by chain identifier

    """
    path = Path(__file__).parent / "chains.yaml"
    with open(path, encoding="utf-8") as f:
        return yaml.safe_load(f)["chains"]


def get_chain_profile(chain: str) -> ChainProfile:
    """
    Get the profile of a supported chain.

    Parameters
    ----------
    chain : str
        Chain identifier, case-insensitive (e.g., 'btc', 'XMR')

    Returns
    -------
    ChainProfile
        Validated chain profile

    Raises
    ------
    ChainNotSupportedError
        If the chain is not defined in chains.yaml

    """
    chain_id = chain.upper()
    chains = load_chains()
    if chain_id not in chains:
        supported = ", ".join(chains)
        msg = f"Unsupported chain {chain!r}; expected one of: {supported}"
        raise ChainNotSupportedError(msg)
    return ChainProfile(id=chain_id, **chains[chain_id])


def get_all_supported_chains() -> list[str]:
    """
    Get list of all supported chain identifiers.

    Returns
    -------
    list[str]
        Chain identifiers in definition order

    """
    return list(load_chains().keys())


def get_ttl_overrides(chain: str) -> dict[str, int]:
    """
    Get the per-method cache TTLs of a chain.

    Parameters
    ----------
    chain : str
        Chain identifier

    Returns
    -------
    dict[str, int]
        Method name to TTL in seconds

    """
    return dict(get_chain_profile(chain).ttl_overrides)
