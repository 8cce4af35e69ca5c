"""Typed, never-raising accessors over schema-less RPC payloads."""

from typing import Any

from node_dashboard.metrics.units import is_number


class Payload:
    """
    Read-only view over a decoded RPC result.

    Every accessor returns the given default when the field is missing or
    has the wrong type, so derivations never fail on partial payloads.

    Parameters
    ----------
    raw : Any
        Decoded JSON value (usually a dict)

    """

    def __init__(self, raw: Any) -> None:
        self.raw = raw

    def __bool__(self) -> bool:
        return isinstance(self.raw, dict)

    def has(self, key: str) -> bool:
        """Whether the payload is a mapping holding ``key`` with a non-null value."""
        return isinstance(self.raw, dict) and self.raw.get(key) is not None

    def get(self, key: str, default: Any = None) -> Any:
        """Raw field value."""
        if not isinstance(self.raw, dict):
            return default
        value = self.raw.get(key)
        return default if value is None else value

    def get_float(self, key: str, default: float | None = 0.0) -> float | None:
        """Numeric field as float."""
        value = self.get(key)
        if not is_number(value):
            return default
        try:
            return float(value)
        except OverflowError:
            return default

    def get_int(self, key: str, default: int | None = 0) -> int | None:
        """Numeric field as int."""
        value = self.get(key)
        if not is_number(value):
            return default
        return int(value)

    def get_str(self, key: str, default: str = "N/A") -> str:
        """Field rendered as a string."""
        value = self.get(key)
        if value is None or isinstance(value, dict | list):
            return default
        return str(value)

    def get_bool(self, key: str, default: bool = False) -> bool:
        """Field as bool."""
        value = self.get(key)
        if isinstance(value, bool):
            return value
        return default

    def get_list(self, key: str) -> list[Any]:
        """Field as list (empty when missing)."""
        value = self.get(key)
        return value if isinstance(value, list) else []

    def child(self, key: str) -> "Payload":
        """Nested mapping as another payload view."""
        return Payload(self.get(key))
