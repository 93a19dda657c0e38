"""CLI interface for Sitestage.

Command-line tool for building the sitemap, checking the route registry
and catalogs, and resolving paths.
"""

import logging
import sys
from pathlib import Path
from typing import NoReturn

import click

from sitestage.config import Config
from sitestage.core.catalog import extract_ids
from sitestage.core.errors import NotFoundError, SitestageError
from sitestage.core.sitemap import write_sitemap
from sitestage.site import Site

config_option = click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Path to configuration file (default: auto-discover sitestage.toml)",
)


@click.group()
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output (show debug logging)",
)
def cli(verbose: bool) -> None:
    """Sitestage - bilingual routes, head tags and sitemaps."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@config_option
@click.option(
    "--host",
    default=None,
    help="Host to bind to (overrides config)",
)
@click.option(
    "--port",
    "-p",
    type=int,
    default=None,
    help="Port to bind to (overrides config)",
)
def serve(config_path: Path | None, host: str | None, port: int | None) -> None:
    """Start the resolution API server."""
    from sitestage.server import run_server

    config = _load_config(config_path).with_overrides(host=host, port=port)

    click.echo(f"Starting server on {config.server.host}:{config.server.port}")
    click.echo(f"Site origin: {config.site.origin}")

    run_server(config)


@cli.command()
@config_option
@click.option(
    "--output",
    "-o",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="Sitemap output file (overrides config)",
)
@click.option(
    "--origin",
    default=None,
    help="Site origin, e.g. https://www.example.com (overrides config)",
)
def sitemap(config_path: Path | None, output: Path | None, origin: str | None) -> None:
    """Build the sitemap from the route registry and catalogs."""
    config = _load_config(config_path)
    try:
        config = config.with_overrides(origin=origin, sitemap_output=output)
    except ValueError as e:
        _fail(str(e))
    site = _load_site(config)

    try:
        entries = site.sitemap_builder().build()
        path = write_sitemap(entries, config.sitemap.output)
    except (SitestageError, OSError) as e:
        _fail(f"Sitemap build failed: {e}")

    click.echo(click.style(f"Sitemap generated at {path}", fg="green"))
    click.echo(f"Total URLs: {len(entries)}")


@cli.command()
@config_option
def check(config_path: Path | None) -> None:
    """Validate the route registry and every bound catalog."""
    site = _load_site(_load_config(config_path))
    registry = site.registry

    dynamic = [entry for entry in registry.all_entries() if entry.is_dynamic]
    click.echo(
        f"Routes: {len(registry)} ({len(registry) - len(dynamic)} static, "
        f"{len(dynamic)} dynamic)",
    )
    click.echo(f"Locales: {', '.join(registry.locales)} (default: {registry.default_locale})")

    failed = False
    for name in dict.fromkeys(entry.catalog for entry in dynamic if entry.catalog):
        try:
            ids = extract_ids(site.catalogs.load(name))
        except SitestageError as e:
            click.echo(click.style(f"  {name}: {e}", fg="red"), err=True)
            failed = True
            continue
        click.echo(f"  {name}: {len(ids)} records")

    if failed:
        sys.exit(1)

    try:
        entries = site.sitemap_builder().build()
    except SitestageError as e:
        _fail(str(e))
    click.echo(f"Sitemap URLs: {len(entries)}")
    click.echo(click.style("Registry and catalogs OK", fg="green"))


@cli.command()
@config_option
def routes(config_path: Path | None) -> None:
    """List registered routes and their localized paths."""
    site = _load_site(_load_config(config_path))

    for entry in site.registry.all_entries():
        flags = "" if entry.indexed else " (not indexed)"
        click.echo(click.style(f"{entry.key}{flags}", bold=True))
        for locale, template in entry.paths.items():
            click.echo(f"  {locale}: {template.template}")


@cli.command()
@click.argument("path")
@config_option
def resolve(path: str, config_path: Path | None) -> None:
    """Resolve PATH to its route key."""
    site = _load_site(_load_config(config_path))

    try:
        match = site.resolver.resolve_key_from_path(path)
    except NotFoundError as e:
        _fail(str(e))

    click.echo(f"Key: {match.key}")
    click.echo(f"Locale: {match.locale}")
    if match.dynamic_value is not None:
        click.echo(f"Value: {match.dynamic_value}")


@cli.command()
@click.argument("path")
@click.argument("locale")
@config_option
def translate(path: str, locale: str, config_path: Path | None) -> None:
    """Translate PATH to the same page in LOCALE."""
    site = _load_site(_load_config(config_path))
    click.echo(site.resolver.translate_path(path, locale))


def _load_config(config_path: Path | None) -> Config:
    """Load configuration or exit with error."""
    try:
        return Config.load(config_path)
    except (FileNotFoundError, ValueError) as e:
        _fail(f"Invalid configuration: {e}")


def _load_site(config: Config) -> Site:
    """Load site from configuration or exit with error."""
    try:
        return Site.from_config(config)
    except (FileNotFoundError, ValueError) as e:
        _fail(str(e))


def _fail(message: str) -> NoReturn:
    click.echo(click.style(f"Error: {message}", fg="red"), err=True)
    sys.exit(1)


if __name__ == "__main__":
    cli()
