#!/usr/bin/env python3
"""
Main CLI entry point for appsettings-edu.

Provides commands for:
- Running the demo services
- Listing configuration sources
- Showing the merged configuration
- Reading a single typed value
"""

from __future__ import annotations

import json
import os
import sys
from decimal import Decimal
from typing import Any, Dict, Optional

import click
import yaml

from appsettings_edu.config.environment import ENVIRONMENT_VARIABLES, describe_environment
from appsettings_edu.config.logging_config import get_logger, setup_logging, shutdown_logging
from appsettings_edu.config.resolver import ConfigResolver
from appsettings_edu.config.sources import SourceKind
from appsettings_edu.core.application import Application
from appsettings_edu.core.exceptions import AppSettingsError


logger = get_logger(__name__)

VALUE_TYPES: Dict[str, Any] = {
    "string": str,
    "int": int,
    "bool": bool,
    "decimal": Decimal,
}


def get_version() -> str:
    """Get package version."""
    try:
        from importlib.metadata import version
        return version("appsettings-edu")
    except Exception:
        return "1.0.0"


def build_resolver(ctx: click.Context) -> ConfigResolver:
    """Create a resolver from the global CLI options."""
    environ: Dict[str, str] = dict(os.environ)
    environment = ctx.obj.get("environment")
    if environment:
        # The first candidate variable has the highest precedence
        environ[ENVIRONMENT_VARIABLES[0]] = environment

    return ConfigResolver(
        base_dir=ctx.obj.get("base_dir"),
        environ=environ,
        strict=ctx.obj.get("strict", False),
    )


def fail(ctx: click.Context, message: str) -> None:
    """Print an error in red and exit with status 1."""
    click.echo(click.style(message, fg="red"), err=True)
    ctx.exit(1)


@click.group(invoke_without_command=True)
@click.option("-v", "--version", is_flag=True, help="Show version and exit")
@click.option(
    "-d",
    "--base-dir",
    type=click.Path(file_okay=False),
    help="Directory containing appsettings.json",
)
@click.option("-e", "--environment", help="Environment name selecting the overlay file")
@click.option("--strict", is_flag=True, help="Fail on unresolved settings model fields")
@click.option("--debug", is_flag=True, help="Enable debug mode")
@click.pass_context
def cli(
    ctx: click.Context,
    version: bool,
    base_dir: Optional[str],
    environment: Optional[str],
    strict: bool,
    debug: bool,
) -> None:
    """appsettings-edu - Read layered application settings."""
    ctx.ensure_object(dict)
    ctx.obj["base_dir"] = base_dir
    ctx.obj["environment"] = environment
    ctx.obj["strict"] = strict
    ctx.obj["debug"] = debug

    if version:
        click.echo(f"appsettings-edu, version {get_version()}")
        ctx.exit(0)

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@cli.command()
@click.option("--pause/--no-pause", default=False, help="Wait for a key press before exiting")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]),
    default=None,
    help="Override the configured log level",
)
@click.pass_context
def run(ctx: click.Context, pause: bool, log_level: Optional[str]) -> None:
    """Run the demo services and log the settings they read."""
    if ctx.obj.get("debug"):
        log_level = "DEBUG"

    setup_logging(level=log_level or "INFO")
    resolver = build_resolver(ctx)
    application = Application(resolver, log_level=log_level)

    try:
        application.setup()
    except AppSettingsError as e:
        logger.error(f"Failed to load configuration: {e}")
        shutdown_logging()
        ctx.exit(1)

    succeeded = application.run(
        pause=(lambda: click.pause("Press any key to exit ...")) if pause else None
    )
    application.stop()

    if not succeeded:
        ctx.exit(1)


@cli.group()
def config() -> None:
    """Configuration inspection commands."""
    pass


@config.command("sources")
@click.pass_context
def config_sources(ctx: click.Context) -> None:
    """List configuration sources in priority order."""
    resolver = build_resolver(ctx)

    try:
        sources = resolver.build_configuration_sources()
    except AppSettingsError as e:
        fail(ctx, f"Error: {e}")
        return

    click.echo(f"Environment: {describe_environment(resolver.environ)}")
    for priority, source in enumerate(sources, start=1):
        if source.kind is SourceKind.ENVIRONMENT:
            status = "always"
        elif source.exists():
            status = click.style("found", fg="green")
        else:
            status = click.style("missing", fg="yellow")
        optional = "optional" if source.optional else "required"
        click.echo(f"  {priority}. [{source.kind.value}] {source.name} ({optional}, {status})")


@config.command("show")
@click.option("-s", "--section", default="", help="Section path to show (default: everything)")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["json", "yaml"]),
    default="json",
)
@click.pass_context
def config_show(ctx: click.Context, section: str, output_format: str) -> None:
    """Show the merged configuration."""
    resolver = build_resolver(ctx)

    try:
        data = resolver.build().to_dict(section)
    except AppSettingsError as e:
        fail(ctx, f"Error loading configuration: {e}")
        return

    if output_format == "yaml":
        click.echo(yaml.safe_dump(data, default_flow_style=False, sort_keys=False), nl=False)
    else:
        click.echo(json.dumps(data, indent=2))


@config.command("get")
@click.argument("key")
@click.option(
    "-t",
    "--type",
    "value_type",
    type=click.Choice(sorted(VALUE_TYPES)),
    default="string",
    help="Type to convert the value to",
)
@click.option(
    "--connection-string",
    is_flag=True,
    help="Read from ConnectionStrings instead of AppSettings",
)
@click.pass_context
def config_get(ctx: click.Context, key: str, value_type: str, connection_string: bool) -> None:
    """Read a single value from AppSettings or ConnectionStrings."""
    resolver = build_resolver(ctx)

    try:
        if connection_string:
            value: Any = resolver.get_connection_string(key)
        else:
            value = resolver.get_value(key, VALUE_TYPES[value_type])
    except AppSettingsError as e:
        fail(ctx, f"Error: {e}")
        return

    if isinstance(value, bool):
        value = str(value).lower()
    click.echo(value)


def main() -> int:
    """Main entry point."""
    try:
        cli(obj={})
        return 0
    except SystemExit as e:
        return e.code if isinstance(e.code, int) else 1
    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
