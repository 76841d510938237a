"""
logstash-exporter entry point.

Usage:
    logstash-exporter                                   Serve /metrics on :8080
    logstash-exporter --logstash-host ls01:9600 --port 9198
    logstash-exporter probe                             One-shot scrape, printed as a table
"""

from __future__ import annotations

import logging

import click

from logstash_exporter import __version__
from logstash_exporter.collector.logstash_collector import LogstashCollector
from logstash_exporter.collector.node_stats import DEFAULT_HOST, DEFAULT_TIMEOUT_SECONDS
from logstash_exporter.server import (
    DEFAULT_LISTEN_ADDRESS,
    DEFAULT_METRICS_PATH,
    DEFAULT_PORT,
    build_registry,
    create_app,
    serve as run_server,
)


log = logging.getLogger("logstash_exporter")


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="logstash-exporter")
@click.option("--logstash-host", default=DEFAULT_HOST, show_default=True,
              envvar="LOGSTASH_EXPORTER_HOST",
              help="Logstash monitoring API address (host:port)")
@click.option("--timeout", default=DEFAULT_TIMEOUT_SECONDS, show_default=True,
              envvar="LOGSTASH_EXPORTER_TIMEOUT",
              help="Upstream request timeout in seconds")
@click.option("--listen-address", default=DEFAULT_LISTEN_ADDRESS, show_default=True,
              envvar="LOGSTASH_EXPORTER_LISTEN_ADDRESS",
              help="Address to bind the scrape endpoint to")
@click.option("--port", default=DEFAULT_PORT, show_default=True,
              envvar="LOGSTASH_EXPORTER_PORT", help="Port for the scrape endpoint")
@click.option("--path", "metrics_path", default=DEFAULT_METRICS_PATH, show_default=True,
              help="HTTP path metrics are served on")
@click.option("--verbose", is_flag=True, default=False, help="Enable debug logging")
@click.pass_context
def cli(ctx, logstash_host: str, timeout: float, listen_address: str, port: int,
        metrics_path: str, verbose: bool):
    """Prometheus exporter for Logstash node stats."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    ctx.ensure_object(dict)
    ctx.obj["logstash_host"] = logstash_host
    ctx.obj["timeout"] = timeout
    ctx.obj["listen_address"] = listen_address
    ctx.obj["port"] = port
    ctx.obj["metrics_path"] = metrics_path

    # No subcommand means serve
    if ctx.invoked_subcommand is None:
        ctx.invoke(serve)


def _make_collector(ctx) -> LogstashCollector:
    return LogstashCollector(ctx.obj["logstash_host"], timeout_seconds=ctx.obj["timeout"])


@cli.command()
@click.pass_context
def serve(ctx):
    """Serve Prometheus metrics over HTTP."""
    collector = _make_collector(ctx)
    registry = build_registry(collector)

    listen_address = ctx.obj["listen_address"]
    port = ctx.obj["port"]
    metrics_path = ctx.obj["metrics_path"]
    app = create_app(registry, path=metrics_path)

    click.echo(f"Exporting {collector.name()} at http://{listen_address}:{port}{metrics_path}")
    run_server(app, listen_address, port)


@cli.command()
@click.pass_context
def probe(ctx):
    """Run a single collection and print the samples."""
    from rich.console import Console
    from rich.table import Table

    collector = _make_collector(ctx)
    families = list(collector.collect())
    log.debug("Collected %d metric families from %s", len(families), collector.url)

    console = Console()
    console.print(f"[bold]{collector.name()}[/bold]")
    table = Table(show_header=True, header_style="bold")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")
    table.add_column("Help", style="dim")

    for family in families:
        for sample in family.samples:
            table.add_row(sample.name, f"{sample.value:g}", family.documentation)
    console.print(table)

    # `up` alone means the fetch or every section failed
    if len(families) == 1:
        console.print("[yellow]No data samples collected -- is Logstash reachable?[/yellow]")


if __name__ == "__main__":
    cli()
