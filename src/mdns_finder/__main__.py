"""CLI entry point for the mDNS finder."""

import asyncio
import json
import sys
from pathlib import Path
from typing import List, Optional

import click

from .config import Config
from .discovery import discover_services
from .models import DiscoveryError, ServiceEntry
from .service_types import SERVICE_TYPES, display_name, service_type_key
from .utils import configure_logging


@click.group()
@click.option(
    "--config-file", "-c",
    type=click.Path(exists=True, dir_okay=False, resolve_path=True),
    help="Path to a JSON configuration file.",
    envvar="MDNS_FINDER_CONFIG_FILE"
)
@click.option(
    "--log-level", "-l",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], case_sensitive=False),
    default=None, # Falls back to the Config default
    help="Override the logging level (e.g., DEBUG, INFO).",
    envvar="MDNS_FINDER_LOGGING_LEVEL"
)
@click.option(
    "--log-format",
    type=click.Choice(["console", "json"], case_sensitive=False),
    default=None,
    help="Override logging format.",
    envvar="MDNS_FINDER_LOGGING_FORMAT"
)
@click.pass_context
def cli(ctx: click.Context, config_file: Optional[str], log_level: Optional[str], log_format: Optional[str]) -> None:
    """mDNS Finder - lists DNS-SD services advertised on the local network."""
    try:
        if config_file:
            cfg = Config.from_file(Path(config_file))
        else:
            cfg = Config()
    except Exception as e:
        click.echo(f"Error loading configuration: {e}", err=True)
        sys.exit(1)

    if log_level:
        cfg.logging.level = log_level.upper()
    if log_format:
        cfg.logging.format = log_format.lower()

    configure_logging(cfg.logging)
    ctx.ensure_object(dict)
    ctx.obj["config"] = cfg


def _render_table(entries: List[ServiceEntry]) -> str:
    lines = []
    for entry in entries:
        title = f"{entry.service} ({entry.display_name})" if entry.display_name else entry.service
        lines.append(title)
        lines.extend(f"  {ip}" for ip in entry.ips)
    return "\n".join(lines)


@cli.command()
@click.option(
    "--duration", "-d",
    type=click.FloatRange(min=0.1),
    default=None,
    help="Seconds to listen for responses. Defaults to the configured timeout."
)
@click.option(
    "--output-format", "-f",
    type=click.Choice(["table", "json"], case_sensitive=False),
    default="table",
    help="How to print discovered services."
)
@click.pass_context
def discover(ctx: click.Context, duration: Optional[float], output_format: str) -> None:
    """Broadcasts a service enumeration query and prints what answers."""
    config: Config = ctx.obj["config"]
    listen_for = duration if duration is not None else config.discovery.timeout_seconds

    def on_error(error: DiscoveryError) -> None:
        click.echo(f"Warning: {error}", err=True)

    try:
        entries = asyncio.run(discover_services(listen_for, app_config=config, on_error=on_error))
    except KeyboardInterrupt:
        click.echo("\nDiscovery interrupted by user.", err=True)
        sys.exit(130)

    if output_format.lower() == "json":
        click.echo(json.dumps([entry.model_dump() for entry in entries], indent=2))
    elif entries:
        click.echo(_render_table(entries))
    else:
        click.echo("No mDNS services found.")


@cli.command("service-types")
@click.argument("service", required=False)
def service_types(service: Optional[str]) -> None:
    """Shows the known DNS-SD service types, or the name of one."""
    if service:
        name = display_name(service)
        if name is None:
            click.echo(f"Unknown service type: {service_type_key(service)}", err=True)
            sys.exit(1)
        click.echo(name)
        return
    for key in sorted(SERVICE_TYPES, key=str.lower):
        click.echo(f"{key:<28} {SERVICE_TYPES[key]}")


@cli.command()
def version() -> None:
    """Show version information."""
    from . import __version__
    click.echo(f"mDNS Finder v{__version__}")


@cli.command()
@click.pass_context
def config_show(ctx: click.Context) -> None:
    """Show current configuration."""
    config: Config = ctx.obj["config"]
    click.echo(json.dumps(config.model_dump(), indent=2))


if __name__ == "__main__":
    cli()
