"""Command-line interface for markdownify-viewmodes."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from . import context
from .canonical import canonical_link_header
from .config import DEFAULT_CONFIG_FILENAME, SiteConfig, discover_config
from .exceptions import MarkdownifyViewModesError
from .logger import setup_logger
from .models import FALLBACK_VIEW_MODE, ContentEntity
from .services import Services

app = typer.Typer(
    name="markdownify-viewmodes",
    help="Resolve the view modes used to render entities as Markdown",
    add_completion=False,
)


@app.callback()
def main_callback(
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose",
            "-v",
            help="Verbosity level: 0=errors only (default), 1=warnings, 2=show all checks, 3=debug",
            min=0,
            max=3,
        ),
    ] = 0,
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help=f"Path to the site config file (default: {DEFAULT_CONFIG_FILENAME})",
        ),
    ] = None,
) -> None:
    """Global options for markdownify-viewmodes commands."""
    setup_logger(verbose)
    context.set_config_path(config)
    context.get_state().verbosity = verbose


def _load_services() -> Services:
    """Load the site config and wire services, exiting with an error message on failure."""
    try:
        site_config = discover_config()
    except (FileNotFoundError, MarkdownifyViewModesError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from None

    if site_config is None:
        typer.echo(
            f"Error: No config found (use --config or create {DEFAULT_CONFIG_FILENAME})",
            err=True,
        )
        raise typer.Exit(1)
    return Services.from_config(site_config)


@app.command()
def resolve(
    entity_type: Annotated[str, typer.Argument(help="Entity type ID, e.g. node")],
    bundle: Annotated[str, typer.Argument(help="Bundle ID, e.g. article")],
) -> None:
    """Print the view mode used to render entities of a bundle as Markdown."""
    services = _load_services()
    view_mode = services.resolver.get_view_mode(
        ContentEntity(entity_type_id=entity_type, bundle=bundle)
    )
    typer.echo(view_mode)


def _describe_source(services: Services, entity_type: str, bundle: str, view_mode: str) -> str:
    """Name the tier a resolved view mode came from."""
    resolver = services.resolver
    if view_mode == resolver.get_bundle_view_mode(entity_type, bundle):
        return "bundle override"
    if view_mode == resolver.get_entity_type_default_view_mode(entity_type):
        return "entity-type default"
    return "fallback"


def _find_problems(services: Services, site_config: SiteConfig) -> list[str]:
    """Find configured view modes that are not available for their bundle."""
    resolver = services.resolver
    problems: list[str] = []
    defaults = site_config.markdownify.entity_type_view_modes()

    for entity_type in defaults:
        if entity_type not in site_config.entity_types:
            problems.append(f"Entity-type default set for unknown entity type '{entity_type}'")

    for entity_type, entity_type_config in site_config.entity_types.items():
        default = defaults.get(entity_type)
        for bundle, bundle_config in entity_type_config.bundles.items():
            settings = bundle_config.view_mode_settings
            if entity_type_config.bundle_entity_type is None and settings.enable_override:
                problems.append(
                    f"{entity_type}/{bundle}: override ignored, entity type has no bundle records"
                )
            elif settings.enable_override:
                if settings.view_mode is None:
                    problems.append(f"{entity_type}/{bundle}: override enabled without a view mode")
                elif not resolver.validate_view_mode(entity_type, bundle, settings.view_mode):
                    problems.append(
                        f"{entity_type}/{bundle}: invalid override view mode '{settings.view_mode}'"
                    )
            if (
                default is not None
                and default != FALLBACK_VIEW_MODE
                and not resolver.validate_view_mode(entity_type, bundle, default)
            ):
                problems.append(
                    f"{entity_type}/{bundle}: entity-type default '{default}' is not available"
                )
    return problems


@app.command()
def check() -> None:
    """Show the resolved view mode of every bundle and report misconfiguration."""
    services = _load_services()
    site_config = services.site_config

    for entity_type, entity_type_config in site_config.entity_types.items():
        for bundle in entity_type_config.bundles:
            view_mode = services.resolver.get_view_mode(
                ContentEntity(entity_type_id=entity_type, bundle=bundle)
            )
            source = _describe_source(services, entity_type, bundle, view_mode)
            typer.echo(f"{entity_type}/{bundle}: {view_mode} ({source})")

    problems = _find_problems(services, site_config)
    if problems:
        typer.echo(f"\n{len(problems)} problem(s) found:", err=True)
        for problem in problems:
            typer.echo(f"  - {problem}", err=True)
        raise typer.Exit(1)


@app.command()
def canonical(
    node_id: Annotated[int, typer.Argument(help="Node ID")],
    *,
    base_url: Annotated[
        str, typer.Option("--base-url", help="Scheme and host of the site")
    ] = "http://localhost",
    langcode: Annotated[
        str | None,
        typer.Option("--langcode", "-l", help="Language code (default: site default language)"),
    ] = None,
) -> None:
    """Print the Link header a Markdown response for a node would carry."""
    services = _load_services()
    if langcode is None:
        langcode = services.language_manager.get_current_language().id
    elif langcode not in services.language_manager.enabled:
        typer.echo(f"Error: Language '{langcode}' is not enabled", err=True)
        raise typer.Exit(1)

    typer.echo(canonical_link_header(base_url, node_id, langcode, services.alias_repository))


def main() -> int:
    """Main entry point."""
    # Typer handles sys.exit() internally
    app()
    return 0


if __name__ == "__main__":
    main()
