"""Distro Registry CLI — validate and inspect a distribution definitions directory."""

import logging
import sys

import click
from rich.console import Console
from rich.table import Table

from distro_registry import __version__
from distro_registry.config import Config
from distro_registry.distribution import (
    DistributionError,
    DistroRegistry,
    load_distro_registry,
)

console = Console()

_dir_option = click.option(
    "--dir", "-d", "definitions_dir", default=None,
    help="Definitions directory (default: $DISTRO_REGISTRY_DIR or ./distributions)",
)
_entitled_option = click.option(
    "--entitled/--unentitled", default=False,
    help="Show the view of a caller holding the subscription",
)


@click.group()
@click.version_option(version=__version__)
@click.pass_context
def main(ctx: click.Context):
    """Distro Registry — OS build definitions and entitlement-aware lookups.

    Loads distribution definitions (architectures, repositories, package
    indices) from a directory, validates them, and answers the same lookups
    the build service performs per request.
    """
    config = Config()
    logging.basicConfig(level=config.LOG_LEVEL, format="%(levelname)s %(name)s: %(message)s")
    ctx.obj = config


def _view(config: Config, definitions_dir: str | None, entitled: bool) -> DistroRegistry:
    directory = definitions_dir or config.DISTRIBUTIONS_DIR
    try:
        return load_distro_registry(directory).available(entitled)
    except DistributionError as e:
        console.print(f"[red]Failed to load {directory}:[/] {e}")
        sys.exit(1)


# ── Validate ─────────────────────────────────────────────────────────


@main.command()
@click.argument("definitions_dir", required=False)
@click.pass_obj
def validate(config: Config, definitions_dir: str | None):
    """Load a definitions directory and report the first error, if any."""
    directory = definitions_dir or config.DISTRIBUTIONS_DIR
    console.print(f"\n[bold blue]Distro Registry[/] — Validating: {directory}\n")

    try:
        registry = load_distro_registry(directory)
    except DistributionError as e:
        console.print(f"  [red]x[/] {e}")
        console.print("\n[red]FAIL[/]")
        sys.exit(1)

    for distro in registry:
        archs = ", ".join(distro.architecture_names())
        console.print(f"  [green]v[/] {distro.name} ({archs})")
    console.print(f"\n[green]Valid![/] {len(registry)} distributions")


# ── List ─────────────────────────────────────────────────────────────


@main.command(name="list")
@_dir_option
@_entitled_option
@click.pass_obj
def list_distributions(config: Config, definitions_dir: str | None, entitled: bool):
    """List the distributions visible to a caller."""
    view = _view(config, definitions_dir, entitled)

    if not len(view):
        console.print("[yellow]No distributions available.[/]")
        return

    table = Table(title=f"Distributions ({len(view)})")
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Description")
    table.add_column("Architectures")
    table.add_column("Restricted", justify="center")
    table.add_column("Entitlement", justify="center")

    for distro in view:
        table.add_row(
            distro.name,
            distro.description,
            ", ".join(distro.architecture_names()),
            "[red]Y[/]" if distro.is_restricted() else "N",
            "[yellow]Y[/]" if distro.needs_entitlement() else "N",
        )

    console.print(table)


# ── Show ─────────────────────────────────────────────────────────────


@main.command()
@click.argument("name")
@_dir_option
@_entitled_option
@click.pass_obj
def show(config: Config, name: str, definitions_dir: str | None, entitled: bool):
    """Show one distribution's architectures and repositories."""
    view = _view(config, definitions_dir, entitled)
    try:
        distro = view.get(name)
    except DistributionError as e:
        console.print(f"[red]{e}[/]")
        sys.exit(1)

    console.print(f"\n[bold cyan]{distro.name}[/] — {distro.description}")
    if distro.module_platform_id:
        console.print(f"  Module platform: {distro.module_platform_id}")
    if distro.is_restricted():
        console.print("  [red]Restricted access[/]")

    for arch_name in distro.architecture_names():
        arch = distro.architecture(arch_name)
        indexed = "no package list" if arch.packages is None else f"{len(arch.packages)} packages"
        console.print(f"\n  [bold]{arch_name}[/] ({indexed})")
        console.print(f"    Image types: {', '.join(arch.image_types)}")
        for repo in arch.repositories:
            source = repo.baseurl or repo.metalink
            tags = f" [dim]({', '.join(repo.image_type_tags)})[/]" if repo.image_type_tags else ""
            rhsm = " [yellow]rhsm[/]" if repo.rhsm else ""
            console.print(f"    - {repo.id}: {source}{rhsm}{tags}")


# ── Packages ─────────────────────────────────────────────────────────


@main.command()
@click.argument("name")
@click.argument("architecture")
@click.argument("query")
@_dir_option
@_entitled_option
@click.option("--case-sensitive/--ignore-case", default=None, help="Override the configured search policy")
@click.pass_obj
def packages(
    config: Config,
    name: str,
    architecture: str,
    query: str,
    definitions_dir: str | None,
    entitled: bool,
    case_sensitive: bool | None,
):
    """Search a distribution's package index for names containing QUERY."""
    view = _view(config, definitions_dir, entitled)
    try:
        arch = view.get(name).architecture(architecture)
    except DistributionError as e:
        console.print(f"[red]{e}[/]")
        sys.exit(1)

    if case_sensitive is None:
        case_sensitive = config.CASE_SENSITIVE_SEARCH
    found = arch.find_packages(query, case_sensitive=case_sensitive)

    if not found:
        console.print("[yellow]No matching packages found.[/]")
        return

    table = Table(title=f"{name}/{architecture}: {len(found)} packages")
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Summary")
    for pkg in found:
        table.add_row(pkg.name, pkg.summary)
    console.print(table)


# ── Access ───────────────────────────────────────────────────────────


@main.command(name="check-access")
@click.argument("name")
@click.argument("org_id")
@_dir_option
@_entitled_option
@click.option("--allow-file", default=None, help="Allow list file (default: $DISTRO_REGISTRY_ALLOW_FILE)")
@click.pass_obj
def check_access(
    config: Config,
    name: str,
    org_id: str,
    definitions_dir: str | None,
    entitled: bool,
    allow_file: str | None,
):
    """Check whether ORG_ID may build distribution NAME."""
    from distro_registry.access import AccessDeniedError, AllowList, AllowListError, get_distro

    view = _view(config, definitions_dir, entitled)
    try:
        allow_list = AllowList.load(allow_file or config.ALLOW_FILE)
        distro = get_distro(view, name, org_id, allow_list)
    except (DistributionError, AccessDeniedError, AllowListError) as e:
        console.print(f"[red]DENIED[/] {e}")
        sys.exit(1)

    console.print(f"[green]ALLOWED[/] {org_id} may build {distro.name}")


if __name__ == "__main__":
    main()
