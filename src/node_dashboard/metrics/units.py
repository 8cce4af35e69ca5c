"""Unit scaling and number formatting for dashboard values."""

import math

BYTE_UNITS = ("Bytes", "KB", "MB", "GB")
HASHRATE_UNITS = ("H/s", "KH/s", "MH/s", "GH/s", "TH/s", "PH/s")

NOT_AVAILABLE = "N/A"
SYNCED_THRESHOLD = 0.99999


def is_number(value: object) -> bool:
    """Whether ``value`` is a finite int or float (bools and NaN/inf excluded)."""
    if isinstance(value, bool):
        return False
    return isinstance(value, int) or (isinstance(value, float) and math.isfinite(value))


def scale(value: float | None, step: int, units: tuple[str, ...]) -> str:
    """
    Scale a magnitude by repeated division, clamped at the largest unit.

    Parameters
    ----------
    value : float | None
        Magnitude in the base unit
    step : int
        Factor between consecutive units
    units : tuple[str, ...]
        Unit labels from smallest to largest

    Returns
    -------
    str
        Value with two decimals, thousands separators and unit suffix

    Examples
    --------
    >>> scale(1536, 1024, BYTE_UNITS)
    '1.50 KB'

    """
    if not is_number(value) or value <= 0:
        return f"{0:,.2f} {units[0]}"

    magnitude = float(value)
    index = 0
    while magnitude >= step and index < len(units) - 1:
        magnitude /= step
        index += 1
    return f"{magnitude:,.2f} {units[index]}"


def format_bytes(size: float | None) -> str:
    """Byte count scaled through Bytes, KB, MB and GB."""
    return scale(size, 1024, BYTE_UNITS)


def format_hashrate(rate: float | None) -> str:
    """Hash rate scaled through H/s up to PH/s."""
    return scale(rate, 1000, HASHRATE_UNITS)


def format_sync_progress(progress: float | None) -> str:
    """
    Verification progress as a percentage.

    Progress at or above 0.99999 reports as exactly 100%.

    """
    if not is_number(progress):
        return NOT_AVAILABLE
    if progress >= SYNCED_THRESHOLD:
        return "100%"
    return f"{round(progress * 100)}%"


def format_disk_size(size: float | None) -> str:
    """On-disk size in decimal gigabytes."""
    if not is_number(size):
        size = 0
    return f"{round(size / 1_000_000_000, 2)} GB"


def format_count(value: float | None) -> str:
    """Whole number with thousands separators."""
    if not is_number(value):
        value = 0
    return f"{round(value):,}"


def format_decimal(value: float | None, places: int = 2) -> str:
    """Fixed-point number without thousands separators."""
    if not is_number(value):
        value = 0
    return f"{value:.{places}f}"


def format_yes_no(value: bool | None) -> str:
    """Boolean flag as Yes/No, or N/A when unknown."""
    if value is None:
        return NOT_AVAILABLE
    return "Yes" if value else "No"
