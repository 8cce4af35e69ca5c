"""Fee-rate, atomic-unit and hash-rate conversions."""

from collections.abc import Sequence

from node_dashboard.metrics.units import NOT_AVAILABLE, is_number

SATOSHIS_PER_COIN = 100_000_000
PICONERO_PER_XMR = 1_000_000_000_000
MONERO_FEE_PRECISION = 12

# get_fee_estimate priority tiers, lowest first
MONERO_FEE_TIERS = ("slowest", "slow", "medium", "fast")


def feerate_to_vbyte(rate: float | None, units_per_coin: int = SATOSHIS_PER_COIN) -> int | str:
    """
    Convert a coin-per-kvB fee estimate to smallest units per vbyte.

    Parameters
    ----------
    rate : float | None
        ``feerate`` from ``estimatesmartfee`` (coins per 1000 vbytes)
    units_per_coin : int
        Smallest units per coin

    Returns
    -------
    int | str
        Rounded rate, or ``"N/A"`` when the node gave no estimate

    """
    if not is_number(rate):
        return NOT_AVAILABLE
    return round(rate * units_per_coin / 1000)


def atomic_to_coin(amount: float | None, units_per_coin: int = PICONERO_PER_XMR) -> float:
    """Amount in atomic units as whole coins."""
    if not is_number(amount):
        return 0.0
    return amount / units_per_coin


def format_coin(amount: float, places: int) -> str:
    """Coin amount with thousands separators and fixed precision."""
    return f"{amount:,.{places}f}"


def monero_fee_tiers(fees: Sequence[object] | None, units_per_coin: int = PICONERO_PER_XMR) -> dict[str, str]:
    """
    Convert the four ``get_fee_estimate`` priority tiers to whole coins.

    Parameters
    ----------
    fees : Sequence[object] | None
        Tier fees in atomic units per byte, lowest priority first
    units_per_coin : int
        Atomic units per coin

    Returns
    -------
    dict[str, str]
        Tier name to value with 12 decimals; missing tiers read as zero

    """
    fees = list(fees or [])
    tiers = {}
    for index, tier in enumerate(MONERO_FEE_TIERS):
        raw = fees[index] if index < len(fees) else None
        tiers[tier] = format_coin(atomic_to_coin(raw, units_per_coin), MONERO_FEE_PRECISION)
    return tiers


def difficulty_to_hashrate(difficulty: float | None, block_time: int) -> float:
    """Network hash rate implied by difficulty and target block time."""
    if not is_number(difficulty) or block_time <= 0:
        return 0.0
    return difficulty / block_time
