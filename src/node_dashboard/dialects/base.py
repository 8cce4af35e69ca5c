"""Base dialect handler class with common section-building functionality."""

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import ClassVar

from node_dashboard.core.models import ChainProfile, RpcCall, RpcDialect, RpcOutcome, SectionName, SectionReport
from node_dashboard.metrics import NOT_AVAILABLE, Payload

SECTION_TITLES = {
    SectionName.NODE_INFO: "Node Info",
    SectionName.BLOCKCHAIN: "Blockchain",
    SectionName.MEMPOOL: "Mempool",
    SectionName.MINING: "Mining",
    SectionName.TRANSACTIONS: "Transactions",
    SectionName.FEES: "Fees",
}

Deriver = Callable[[list[Payload]], dict[str, str]]


class BaseDialectHandler(ABC):
    """
    Abstract base class for dialect handlers.

    A handler knows which RPC calls each dashboard section needs on its
    dialect and how to turn their payloads into labelled display values.

    Attributes
    ----------
    dialect : RpcDialect
        Dialect served by the handler (must be set in subclass)
    partial_sections : frozenset[SectionName]
        Sections that still derive values when only some of their calls succeed

    """

    dialect: ClassVar[RpcDialect | None] = None
    partial_sections: ClassVar[frozenset[SectionName]] = frozenset()

    def __init__(self, profile: ChainProfile) -> None:
        """
        Initialize the handler.

        Parameters
        ----------
        profile : ChainProfile
            Chain profile the handler derives values for

        """
        if not self.dialect:
            msg = f"{self.__class__.__name__} must define 'dialect' attribute"
            raise ValueError(msg)
        if profile.dialect != self.dialect:
            msg = f"{self.__class__.__name__} cannot serve {profile.id} ({profile.dialect.value} dialect)"
            raise ValueError(msg)
        self.profile = profile

    @abstractmethod
    def calls_for(self, section: SectionName) -> list[RpcCall]:
        """
        RPC calls a section needs, in the order their payloads are derived.

        Parameters
        ----------
        section : SectionName
            Dashboard section

        Returns
        -------
        list[RpcCall]
            Calls to fetch

        """
        ...

    @abstractmethod
    def labels_for(self, section: SectionName) -> list[str]:
        """Display labels of a section, used for placeholder rows."""
        ...

    @abstractmethod
    def derivers(self) -> dict[SectionName, Deriver]:
        """Section to function deriving its values from the ordered payloads."""
        ...

    def build_section(self, section: SectionName, outcomes: dict[RpcCall, RpcOutcome]) -> SectionReport:
        """
        Derive one section from fetched outcomes.

        A section missing any of its calls renders with placeholder values,
        unless it is listed in ``partial_sections`` and at least one call
        succeeded.

        Parameters
        ----------
        section : SectionName
            Dashboard section
        outcomes : dict[RpcCall, RpcOutcome]
            Outcomes fetched by the gateway

        Returns
        -------
        SectionReport
            Section values and availability

        """
        calls = self.calls_for(section)
        resolved = [outcomes.get(call) for call in calls]
        succeeded = [outcome is not None and outcome.ok for outcome in resolved]
        available = all(succeeded)
        title = SECTION_TITLES[section]

        if not available and not (section in self.partial_sections and any(succeeded)):
            return SectionReport(
                name=section,
                title=title,
                available=False,
                values=dict.fromkeys(self.labels_for(section), NOT_AVAILABLE),
            )

        payloads = [Payload(outcome.payload if outcome is not None else None) for outcome in resolved]
        values = self.derivers()[section](payloads)
        return SectionReport(name=section, title=title, available=available, values=values)
