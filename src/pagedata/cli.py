"""Typer CLI for pagedata — bundled pages with injected per-route data."""

from __future__ import annotations

import dataclasses
import logging
from typing import Optional

import typer

app = typer.Typer(
    help="Serve bundled pages with per-route JSON data and a dev live-reload channel.",
    add_completion=False,
)


# ── Helpers ────────────────────────────────────────────────────────


def _context(
    port: Optional[int] = None,
    host: Optional[str] = None,
    dev: Optional[bool] = None,
    ip_timeout: Optional[float] = None,
):
    """Environment-derived context with any explicit CLI flags applied on top."""
    from pagedata.config import AppContext

    try:
        ctx = AppContext.from_env()
    except ValueError as e:
        typer.secho(f"Error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1)

    overrides = {
        "port": port,
        "host": host,
        "dev": dev,
        "ip_lookup_timeout": ip_timeout,
    }
    return dataclasses.replace(ctx, **{k: v for k, v in overrides.items() if v is not None})


def _setup_logging(level: str) -> None:
    from rich.logging import RichHandler

    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(show_path=False)],
    )


# ── Commands ───────────────────────────────────────────────────────


@app.command()
def serve(
    port: Optional[int] = typer.Option(None, help="Port to listen on (default: $PORT or 8000)"),
    host: Optional[str] = typer.Option(None, help="Interface to bind (default: $HOST or 0.0.0.0)"),
    dev: Optional[bool] = typer.Option(
        None, "--dev/--no-dev", help="Enable the live-reload channel (default: on when $DEV is set)"
    ),
    ip_timeout: Optional[float] = typer.Option(
        None, "--ip-timeout", help="Timeout in seconds for the upstream IP lookup (default: none)"
    ),
    log_level: str = typer.Option("INFO", "--log-level", help="Logging level"),
) -> None:
    """Start the pagedata server."""
    from pagedata.server import create_app, serve as run_server

    _setup_logging(log_level)
    ctx = _context(port=port, host=host, dev=dev, ip_timeout=ip_timeout)
    log = logging.getLogger("pagedata")

    bottle_app = create_app(ctx)
    if ctx.dev:
        log.info("websocket enabled")
    log.info("listening on %s", ctx.port)
    log.info("  Assets: %s", ctx.dist_dir)
    log.info("  Version: %s (%s)", ctx.version, ctx.tag)

    run_server(bottle_app, ctx.host, ctx.port)


@app.command()
def routes(
    dev: Optional[bool] = typer.Option(
        None, "--dev/--no-dev", help="Include dev-only routes (default: on when $DEV is set)"
    ),
) -> None:
    """Print the dispatch table."""
    from rich.console import Console
    from rich.table import Table

    from pagedata.server import create_app, describe_routes

    ctx = _context(dev=dev)
    table = Table(show_header=True, header_style="bold")
    table.add_column("Method", style="cyan")
    table.add_column("Path")
    table.add_column("Handler", style="green")
    for method, rule, handler in describe_routes(create_app(ctx)):
        table.add_row(method, rule, handler)

    Console().print(table)


@app.command()
def version() -> None:
    """Print the build version and tag."""
    from pagedata import __tag__, __version__

    typer.echo(f"{__version__} ({__tag__})")


def main() -> None:
    app()
