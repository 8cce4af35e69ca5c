"""Core functionality including models and the dialect registry."""

from node_dashboard.core.models import (
    ChainProfile,
    DashboardConfig,
    DashboardReport,
    FailureKind,
    FailureRecord,
    RpcCall,
    RpcDialect,
    RpcOutcome,
    SectionName,
    SectionReport,
)
from node_dashboard.core.registry import DialectRegistry

__all__ = [
    "ChainProfile",
    "DashboardConfig",
    "DashboardReport",
    "DialectRegistry",
    "FailureKind",
    "FailureRecord",
    "RpcCall",
    "RpcDialect",
    "RpcOutcome",
    "SectionName",
    "SectionReport",
]
