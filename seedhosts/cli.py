"""CLI entry point for the seedhosts tool."""

import logging
import sys

import click

from seedhosts.config import ConfigError, load_config
from seedhosts.output import render
from seedhosts.resolver import HostsResolver
from seedhosts.sources import LoopbackAddressSource, SeedHostsSource

logger = logging.getLogger(__name__)

FORMATS = ("table", "json")


@click.command()
@click.option(
    "--config",
    "-c",
    "config_path",
    default=None,
    type=click.Path(exists=False),
    help="Path to YAML config file (default: ~/.seedhosts/config.yaml).",
)
@click.option(
    "--format",
    "-f",
    "output_format",
    default="table",
    type=click.Choice(FORMATS, case_sensitive=False),
    show_default=True,
    help="Output format.",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
def main(config_path: str | None, output_format: str, verbose: bool) -> None:
    """Resolve the seed addresses used to bootstrap cluster discovery."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
    )

    try:
        settings = load_config(config_path)
        source = SeedHostsSource(settings, LoopbackAddressSource(settings.transport_port))
    except (ConfigError, FileNotFoundError) as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)

    logger.debug("Settings loaded: %s", settings)

    with HostsResolver(
        settings.transport_port.low,
        resolve_timeout=settings.resolve_timeout,
        max_concurrent_resolvers=settings.max_concurrent_resolvers,
    ) as resolver:
        result = resolver.resolve(source.configured_hosts, source.limit)

    render(source.config, result, output_format.lower())
