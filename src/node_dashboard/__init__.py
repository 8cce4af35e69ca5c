"""Read-only status dashboard for Bitcoin, Litecoin and Monero full nodes."""

__version__ = "0.1.0"
