"""Dialect handlers for the supported node RPC interfaces."""

# Import all handlers to trigger auto-registration
from node_dashboard.dialects.base import BaseDialectHandler
from node_dashboard.dialects.bitcoin import BitcoinHandler
from node_dashboard.dialects.monero import MoneroHandler

__all__ = [
    "BaseDialectHandler",
    "BitcoinHandler",
    "MoneroHandler",
]
