"""CLI for the node dashboard."""

import json
import logging
import time
from enum import StrEnum
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table
from rich.traceback import install

from node_dashboard.core.aggregator import DashboardAggregator
from node_dashboard.core.models import DashboardConfig, DashboardReport, SectionName
from node_dashboard.data import ChainNotSupportedError, get_all_supported_chains, get_chain_profile, get_ttl_overrides
from node_dashboard.rpc.cache import TtlCacheStore, TtlPolicy

# Install rich traceback handler
install(show_locals=False)

app = typer.Typer(
    name="node-dashboard",
    help="Read-only status dashboard for Bitcoin, Litecoin and Monero full nodes",
    add_completion=False,
)

console = Console()


class OutputFormat(StrEnum):
    """Output format options."""

    TABLE = "table"
    JSON = "json"


def _configure_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@app.command()
def status(
    chain: str = typer.Option(..., "--chain", "-c", envvar="NETWORK", help="Chain to query (BTC, LTC or XMR)"),
    host: str = typer.Option("127.0.0.1", "--host", "-H", envvar="NODE_IP", help="Node host"),
    port: int | None = typer.Option(None, "--port", "-p", envvar="RPC_PORT", help="RPC port (default: chain default)"),
    user: str = typer.Option("", "--user", "-u", envvar="RPC_USER", help="RPC username"),
    password: str = typer.Option("", "--password", envvar="RPC_PASS", help="RPC password"),
    cache_dir: Path = typer.Option(Path("."), "--cache-dir", envvar="CACHE_DIR", help="Directory for cache files"),
    timeout: float = typer.Option(10.0, "--timeout", "-t", help="Per-request timeout in seconds"),
    workers: int = typer.Option(1, "--workers", "-w", min=1, help="Concurrent RPC calls per batch"),
    node_info: bool = typer.Option(True, "--node-info/--no-node-info", envvar="SHOW_NODE_INFO"),
    blockchain: bool = typer.Option(True, "--blockchain/--no-blockchain", envvar="SHOW_BLOCKCHAIN"),
    mempool: bool = typer.Option(True, "--mempool/--no-mempool", envvar="SHOW_MEMPOOL"),
    mining: bool = typer.Option(True, "--mining/--no-mining", envvar="SHOW_MINING"),
    transactions: bool = typer.Option(True, "--transactions/--no-transactions", envvar="SHOW_TRANSACTIONS"),
    fees: bool = typer.Option(True, "--fees/--no-fees", envvar="SHOW_FEES"),
    format: OutputFormat = typer.Option(
        OutputFormat.TABLE,
        "--format",
        "-f",
        help="Output format",
    ),
    debug: bool = typer.Option(False, "--debug", "-d", help="Enable debug output"),
) -> None:
    """
    Show node status.

    Examples:

        # Query a local Bitcoin node
        node-dashboard status --chain BTC --user rpc --password secret

        # Query a Monero node, mempool and fees only, as JSON
        node-dashboard status -c XMR --no-node-info --no-blockchain --no-mining --no-transactions -f json
    """
    _configure_logging(debug)

    try:
        profile = get_chain_profile(chain)
    except ChainNotSupportedError as e:
        console.print(f"[bold red]Configuration error:[/bold red] {e}")
        raise typer.Exit(code=1)

    config = DashboardConfig(
        chain=profile.id,
        host=host,
        port=port,
        username=user,
        password=password,
        cache_dir=str(cache_dir),
        timeout=timeout,
        max_workers=workers,
        sections={
            SectionName.NODE_INFO: node_info,
            SectionName.BLOCKCHAIN: blockchain,
            SectionName.MEMPOOL: mempool,
            SectionName.MINING: mining,
            SectionName.TRANSACTIONS: transactions,
            SectionName.FEES: fees,
        },
    )

    with DashboardAggregator(config, profile=profile) as aggregator:
        if format == OutputFormat.JSON:
            report = aggregator.build()
        else:
            with Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                console=console,
                transient=True,
            ) as progress:
                progress.add_task(f"Querying {profile.name} node at {aggregator.gateway.endpoint}...", total=None)
                report = aggregator.build()

    if format == OutputFormat.JSON:
        _output_json(report)
    else:
        _output_table(report)


@app.command()
def list_chains() -> None:
    """List all supported chains."""
    table = Table(title="Supported Chains", show_header=True, header_style="bold magenta")
    table.add_column("Chain", style="cyan")
    table.add_column("Name", style="green")
    table.add_column("Dialect", style="yellow")
    table.add_column("Default Port", justify="right")
    table.add_column("Halving Interval", justify="right")

    for chain in get_all_supported_chains():
        profile = get_chain_profile(chain)
        halving = f"{profile.halving_interval:,}" if profile.halving_interval else "-"
        table.add_row(profile.id, profile.name, profile.dialect.value, str(profile.default_port), halving)

    console.print(table)


@app.command()
def cache_info(
    chain: str = typer.Option(..., "--chain", "-c", envvar="NETWORK", help="Chain whose cache to inspect"),
    cache_dir: Path = typer.Option(Path("."), "--cache-dir", envvar="CACHE_DIR", help="Directory for cache files"),
) -> None:
    """Show cached RPC responses and their freshness."""
    try:
        profile = get_chain_profile(chain)
    except ChainNotSupportedError as e:
        console.print(f"[bold red]Configuration error:[/bold red] {e}")
        raise typer.Exit(code=1)

    store = TtlCacheStore(profile.id, cache_dir=cache_dir, policy=TtlPolicy(get_ttl_overrides(profile.id)))
    entries = store.entries()
    if not entries:
        console.print(f"\n[yellow]No cached responses in {store.path}[/yellow]")
        return

    table = Table(title=f"Cache for {profile.name} ({store.path})", show_header=True, header_style="bold magenta")
    table.add_column("Method", style="cyan")
    table.add_column("Key", style="dim")
    table.add_column("Age (s)", justify="right")
    table.add_column("TTL (s)", justify="right")
    table.add_column("Fresh", justify="center")

    now = time.time()
    for entry in sorted(entries, key=lambda e: e.key):
        method = entry.key.rsplit("_", 1)[0]
        ttl = store.policy.ttl_for(method)
        fresh = "[green]yes[/green]" if entry.is_fresh(ttl, now) else "[red]no[/red]"
        table.add_row(method, entry.key[-12:], str(int(now - entry.timestamp)), str(ttl), fresh)

    console.print(table)


def _output_table(report: DashboardReport) -> None:
    """Output the report as rich tables."""
    console.print(f"\n[bold cyan]{report.chain_name} Node Dashboard[/bold cyan]")
    console.print(f"[dim]Updated: {report.generated_at:%H:%M:%S} UTC[/dim]")

    for section in report.sections.values():
        title = section.title if section.available else f"{section.title} [red](unavailable)[/red]"
        table = Table(title=title, show_header=False, title_justify="left", min_width=40)
        table.add_column("Label", style="bold")
        table.add_column("Value", style="green", justify="right")
        for label, value in section.values.items():
            table.add_row(label, value)
        console.print(table)

    if report.errors:
        console.print("\n[bold red]Errors:[/bold red]")
        for error in report.errors:
            console.print(f"  • {error}", markup=False, highlight=False)
    console.print()


def _output_json(report: DashboardReport) -> None:
    """Output the report as JSON."""
    data = report.model_dump(mode="json")
    print(json.dumps(data, indent=2))


if __name__ == "__main__":
    app()
