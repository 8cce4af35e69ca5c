"""Pure derivations turning raw RPC payloads into display-ready values."""

from node_dashboard.metrics.fees import (
    atomic_to_coin,
    difficulty_to_hashrate,
    feerate_to_vbyte,
    format_coin,
    monero_fee_tiers,
)
from node_dashboard.metrics.payload import Payload
from node_dashboard.metrics.supply import (
    blocks_until_retarget,
    circulating_supply,
    closed_form_supply,
    current_subsidy,
    next_halving,
)
from node_dashboard.metrics.units import (
    NOT_AVAILABLE,
    format_bytes,
    format_count,
    format_decimal,
    format_disk_size,
    format_hashrate,
    format_sync_progress,
    format_yes_no,
)

__all__ = [
    "NOT_AVAILABLE",
    "Payload",
    "atomic_to_coin",
    "blocks_until_retarget",
    "circulating_supply",
    "closed_form_supply",
    "current_subsidy",
    "difficulty_to_hashrate",
    "feerate_to_vbyte",
    "format_bytes",
    "format_coin",
    "format_count",
    "format_decimal",
    "format_disk_size",
    "format_hashrate",
    "format_sync_progress",
    "format_yes_no",
    "monero_fee_tiers",
    "next_halving",
]
