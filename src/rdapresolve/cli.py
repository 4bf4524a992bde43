#!/usr/bin/env python3
"""
Command-line interface for rdapresolve.
"""

import asyncio
import json
import logging
import sys
from datetime import timedelta

import click
import structlog

from rdapresolve.config import Config
from rdapresolve.errors import RdapError
from rdapresolve.models.bootstrap import RegistryType
from rdapresolve.models.rdap_models import VCard
from rdapresolve.services.bootstrap_service import BootstrapResolver
from rdapresolve.services.cache_service import CacheService
from rdapresolve.services.concurrent_service import ConcurrentResolveService
from rdapresolve.services.rdap_service import RDAPService

TYPE_CHOICES = click.Choice([t.value for t in RegistryType])


def _query_type(value: str | None) -> RegistryType | None:
    return RegistryType(value) if value else None


def _stderr_logger_factory(*args) -> structlog.PrintLogger:
    # Looked up per call so a swapped sys.stderr is honoured
    return structlog.PrintLogger(sys.stderr)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """RDAP bootstrap resolver CLI tool."""
    ctx.ensure_object(dict)

    config = Config.from_env()
    try:
        config.validate()
    except ValueError as e:
        raise click.ClickException(f"Invalid configuration: {e}") from e

    level_name = "DEBUG" if verbose else config.log_level
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(level_name)
        ),
        logger_factory=_stderr_logger_factory,
    )

    ctx.obj["config"] = config


@cli.command()
@click.argument("target")
@click.option("--type", "query_type", type=TYPE_CHOICES, default=None, help="Force a registry type")
@click.option(
    "--output",
    "-o",
    type=click.Choice(["json", "text"]),
    default="text",
    help="Output format",
)
@click.pass_context
def resolve(ctx: click.Context, target: str, query_type: str | None, output: str) -> None:
    """Show the RDAP servers responsible for TARGET."""

    async def run_resolve() -> None:
        resolver = BootstrapResolver(ctx.obj["config"])
        try:
            service = await resolver.resolve_service(target, _query_type(query_type))
        except RdapError as e:
            click.echo(f"Error: {e}", err=True)
            sys.exit(1)
        finally:
            await resolver.close()

        if output == "json":
            click.echo(json.dumps(service.model_dump(mode="json"), indent=2))
            return

        click.echo(f"Target: {service.normalized}")
        click.echo(f"Registry: {service.registry_type.value}")
        if service.matched_key:
            click.echo(f"Matched: {service.matched_key} ({service.source})")
        click.echo("Servers:")
        for url in service.urls:
            click.echo(f"  - {url}")

    asyncio.run(run_resolve())


def _echo_rdap(response_data: dict) -> None:
    """Print the commonly useful fields of an RDAP object."""
    for field_name, label in (
        ("ldhName", "Name"),
        ("unicodeName", "Unicode Name"),
        ("handle", "Handle"),
        ("startAddress", "Start Address"),
        ("endAddress", "End Address"),
        ("country", "Country"),
    ):
        if field_name in response_data:
            click.echo(f"{label}: {response_data[field_name]}")

    if response_data.get("status"):
        click.echo(f"Status: {', '.join(response_data['status'])}")

    nameservers = response_data.get("nameservers", [])
    if nameservers:
        click.echo("Nameservers:")
        for ns in nameservers:
            if "ldhName" in ns:
                click.echo(f"  - {ns['ldhName']}")

    for entity in response_data.get("entities", []):
        roles = entity.get("roles", [])
        vcard = VCard.from_jcard(entity.get("vcardArray"))
        if roles and vcard and vcard.name:
            click.echo(f"{', '.join(roles).title()}: {vcard.name}")

    for event in response_data.get("events", []):
        action = event.get("eventAction", "")
        date = event.get("eventDate", "")
        if action and date:
            click.echo(f"{action.replace('_', ' ').title()}: {date}")


@cli.command()
@click.argument("target")
@click.option("--type", "query_type", type=TYPE_CHOICES, default=None, help="Force a registry type")
@click.option(
    "--output",
    "-o",
    type=click.Choice(["json", "text"]),
    default="text",
    help="Output format",
)
@click.pass_context
def lookup(ctx: click.Context, target: str, query_type: str | None, output: str) -> None:
    """Perform an RDAP lookup for TARGET."""

    async def run_lookup() -> None:
        service = RDAPService(ctx.obj["config"])
        try:
            result = await service.lookup(target, _query_type(query_type))
        except RdapError as e:
            click.echo(f"Error: {e}", err=True)
            sys.exit(1)
        finally:
            await service.close()

        if output == "json":
            click.echo(json.dumps(result.model_dump(mode="json"), indent=2))
            return

        if not result.success:
            click.echo(f"Error: {result.error}", err=True)
            sys.exit(1)

        click.echo(f"Target: {result.target}")
        click.echo(f"Type: {result.target_type}")
        click.echo(f"Server: {result.rdap_server}")
        click.echo("\nRDAP Information:")
        click.echo("-" * 40)
        _echo_rdap(result.response_data)

    asyncio.run(run_lookup())


@cli.command("bulk")
@click.argument("targets", nargs=-1, required=True)
@click.option("--max-concurrent", default=None, type=int, help="Maximum concurrent resolutions")
@click.option("--output", "-o", type=click.Choice(["json", "text"]), default="text", help="Output format")
@click.pass_context
def bulk(ctx: click.Context, targets: tuple, max_concurrent: int | None, output: str) -> None:
    """Resolve several targets concurrently."""

    async def run_bulk() -> None:
        service = ConcurrentResolveService(ctx.obj["config"])
        try:
            results = await service.bulk_resolve(list(targets), max_concurrent=max_concurrent)
        finally:
            await service.resolver.close()

        if output == "json":
            click.echo(json.dumps([r.model_dump(mode="json") for r in results], indent=2))
            return

        for result in results:
            if result.status == "success":
                click.echo(f"✓ {result.identifier}: {', '.join(result.urls)}")
            else:
                click.echo(f"✗ {result.identifier}: {result.error}")

        stats = service.get_statistics()
        click.echo(f"\nCompleted {stats['total_lookups']} resolutions")
        click.echo(f"Success rate: {stats['success_rate']:.1%}")

    asyncio.run(run_bulk())


@cli.command("cache-clear")
@click.pass_context
def cache_clear(ctx: click.Context) -> None:
    """Delete all cached bootstrap registries."""
    config = ctx.obj["config"]
    try:
        cache = CacheService(config.cache_dir, ttl=timedelta(seconds=config.cache_ttl))
        cache.clear()
    except RdapError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    click.echo(f"Cleared cache at {cache.cache_dir}")


@cli.command("config")
@click.pass_context
def config_show(ctx: click.Context) -> None:
    """Show current configuration."""
    config = ctx.obj["config"]

    click.echo("Current Configuration:")
    click.echo("=" * 40)

    for key, value in config.to_dict().items():
        click.echo(f"{key}: {value}")


def main() -> None:
    """Main CLI entry point."""
    cli()


if __name__ == "__main__":
    main()
