"""Tests for dialect handler registry."""

import pytest

from node_dashboard.core.models import RpcDialect
from node_dashboard.core.registry import DialectRegistry


def test_dialect_registration():
    """Test that handlers auto-register on import."""
    # Import triggers registration
    from node_dashboard import dialects  # noqa: F401

    registered = DialectRegistry.list_dialects()

    assert RpcDialect.JSON_RPC in registered
    assert RpcDialect.MONERO in registered
    assert len(registered) == 2


def test_get_handler():
    """Test retrieving handler by dialect."""
    from node_dashboard.dialects import MoneroHandler

    assert DialectRegistry.get_handler(RpcDialect.MONERO) is MoneroHandler
    assert DialectRegistry.get_handler("unknown") is None


def test_register_requires_dialect(monkeypatch):
    """Test that handlers without a dialect are rejected."""
    monkeypatch.setattr(DialectRegistry, "_handlers", {})

    class Nameless:
        dialect = None

    with pytest.raises(ValueError, match="must define 'dialect'"):
        DialectRegistry.register(Nameless)
    assert DialectRegistry.list_dialects() == []


def test_handler_for_unregistered_dialect(monkeypatch, xmr_profile):
    """Test lookup failure once the registry is cleared."""
    monkeypatch.setattr(DialectRegistry, "_handlers", {})

    with pytest.raises(LookupError, match="monero"):
        DialectRegistry.handler_for(xmr_profile)
