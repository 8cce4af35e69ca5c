"""Dialect handler registry with auto-registration pattern."""

from typing import Protocol

from node_dashboard.core.models import ChainProfile, RpcCall, RpcDialect, RpcOutcome, SectionName, SectionReport


class DialectHandlerInterface(Protocol):
    """
    Interface that all dialect handlers must implement.

    Attributes
    ----------
    dialect : RpcDialect
        RPC dialect served by the handler

    Methods
    -------
    calls_for(section)
        RPC calls a section needs
    build_section(section, outcomes)
        Derive the section's display values from fetched outcomes

    """

    dialect: RpcDialect

    def calls_for(self, section: SectionName) -> list[RpcCall]:
        """RPC calls required by a section."""
        ...

    def build_section(self, section: SectionName, outcomes: dict[RpcCall, RpcOutcome]) -> SectionReport:
        """Derive a section report from fetched outcomes."""
        ...


class DialectRegistry:
    """
    Registry for dialect handlers with auto-registration.

    Handlers register themselves using the @DialectRegistry.register decorator.
    The aggregator looks up the handler matching a chain profile's dialect.

    """

    _handlers: dict[RpcDialect, type] = {}

    @classmethod
    def register(cls, handler_class: type) -> type:
        """
        Decorator to register a dialect handler.

        Parameters
        ----------
        handler_class : type
            Handler class to register

        Returns
        -------
        type
            The handler class (for decorator chaining)

        Examples
        --------
        >>> @DialectRegistry.register
        ... class MoneroHandler(BaseDialectHandler):
        ...     dialect = RpcDialect.MONERO

        """
        if not getattr(handler_class, "dialect", None):
            msg = f"Handler {handler_class.__name__} must define 'dialect' attribute"
            raise ValueError(msg)

        cls._handlers[handler_class.dialect] = handler_class
        return handler_class

    @classmethod
    def get_handler(cls, dialect: RpcDialect) -> type | None:
        """
        Get handler class by dialect.

        Parameters
        ----------
        dialect : RpcDialect
            RPC dialect

        Returns
        -------
        type | None
            Handler class or None if not found

        """
        return cls._handlers.get(dialect)

    @classmethod
    def handler_for(cls, profile: ChainProfile) -> DialectHandlerInterface:
        """
        Instantiate the handler serving a chain.

        Parameters
        ----------
        profile : ChainProfile
            Chain profile

        Returns
        -------
        DialectHandlerInterface
            Handler bound to the profile

        Raises
        ------
        LookupError
            If no handler is registered for the chain's dialect

        """
        handler_class = cls.get_handler(profile.dialect)
        if handler_class is None:
            msg = f"No handler registered for dialect {profile.dialect.value!r}"
            raise LookupError(msg)
        return handler_class(profile)

    @classmethod
    def list_dialects(cls) -> list[RpcDialect]:
        """
        Get list of all registered dialects.

        Returns
        -------
        list[RpcDialect]
            Registered dialects

        """
        return list(cls._handlers.keys())
