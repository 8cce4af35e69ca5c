"""Dashboard aggregator orchestrating one status pass over a node."""

import logging

# Import all dialect handlers to trigger auto-registration
from node_dashboard import dialects  # noqa: F401

from node_dashboard.core.models import ChainProfile, DashboardConfig, DashboardReport, RpcCall, SectionName
from node_dashboard.core.registry import DialectHandlerInterface, DialectRegistry
from node_dashboard.data import get_chain_profile
from node_dashboard.rpc.gateway import Gateway

logger = logging.getLogger(__name__)


class DashboardAggregator:
    """
    Builds a dashboard report for one node.

    Workflow:
    1. Resolve the dialect handler for the configured chain
    2. Collect the RPC calls of every enabled section
    3. Fetch them in one gateway batch (cached, failure-tolerant)
    4. Derive each section's display values
    5. Attach the batch failure log

    Parameters
    ----------
    config : DashboardConfig
        Validated dashboard configuration
    gateway : Gateway | None
        Gateway to fetch through (created from the config if None)
    profile : ChainProfile | None
        Chain profile (loaded from chains.yaml if None)

    """

    def __init__(
        self,
        config: DashboardConfig,
        gateway: Gateway | None = None,
        profile: ChainProfile | None = None,
    ) -> None:
        self.config = config
        self.profile = profile or get_chain_profile(config.chain)
        self.gateway = gateway or Gateway(self.profile, config)
        self.handler: DialectHandlerInterface = DialectRegistry.handler_for(self.profile)

    def planned_calls(self) -> list[RpcCall]:
        """
        RPC calls needed by the enabled sections, deduplicated in order.

        Returns
        -------
        list[RpcCall]
            Calls to fetch

        """
        calls: dict[RpcCall, None] = {}
        for section in self.config.enabled_sections():
            for call in self.handler.calls_for(section):
                calls.setdefault(call, None)
        return list(calls)

    def build(self) -> DashboardReport:
        """
        Fetch and derive every enabled section.

        Returns
        -------
        DashboardReport
            Section reports plus human-readable failure lines

        """
        sections: list[SectionName] = self.config.enabled_sections()
        calls = self.planned_calls()
        logger.debug("Fetching %d calls for %s sections on %s", len(calls), len(sections), self.profile.id)

        outcomes = self.gateway.fetch_many(calls)
        report = DashboardReport(chain=self.profile.id, chain_name=self.profile.name)

        for section in sections:
            report.sections[section.value] = self.handler.build_section(section, outcomes)

        report.errors = [str(failure) for failure in self.gateway.errors()]
        if report.errors:
            logger.info("%d RPC calls failed on %s", len(report.errors), self.profile.id)
        return report

    def close(self) -> None:
        """Release the gateway's HTTP client."""
        self.gateway.close()

    def __enter__(self) -> "DashboardAggregator":
        """Context manager entry."""
        return self

    def __exit__(self, exc_type: type, exc_val: Exception, exc_tb: object) -> None:
        """Context manager exit."""
        self.close()
