"""
brew-search — CLI entrypoint.

Usage:
    brew-search                  # browse, add to ~/Brewfile, brew bundle
    brew-search --immediate      # browse, brew install directly
    brew-search cache clear
    brew-search brewfile show
    python -m brew_search.main --help
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import click

from brew_search import __build_date__, __commit__, __version__
from brew_search.core.observability.logging_config import resolve_level, setup_logging

_VERSION_MESSAGE = (
    "🍺 %(prog)s %(version)s\n"
    f"📅 Built: {__build_date__}\n"
    f"🔨 Commit: {__commit__}"
)


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="brew-search", message=_VERSION_MESSAGE)
@click.option(
    "--immediate",
    is_flag=True,
    help="Install packages immediately without updating Brewfile.",
)
@click.option("--dry-run", is_flag=True, help="Print brew commands instead of running them.")
@click.option(
    "--brewfile",
    "brewfile_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Brewfile to update (default: ~/Brewfile).",
)
@click.option("--no-cache", is_flag=True, help="Ignore cached catalog responses.")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False, dir_okay=False, path_type=Path),
    default=None,
    help="Path to config.yml (default: ~/.config/brew-search/config.yml).",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.pass_context
def cli(
    ctx: click.Context,
    immediate: bool,
    dry_run: bool,
    brewfile_path: Path | None,
    no_cache: bool,
    config_path: Path | None,
    verbose: bool,
    quiet: bool,
    debug: bool,
) -> None:
    """brew-search — fuzzy-find Homebrew packages and add them to your Brewfile."""
    ctx.ensure_object(dict)

    setup_logging(
        level=resolve_level(
            debug=debug,
            verbose=verbose,
            quiet=quiet,
            env_level=os.environ.get("BREW_SEARCH_LOG_LEVEL"),
        ),
        log_file=os.environ.get("BREW_SEARCH_LOG_FILE"),
        log_file_level=os.environ.get("BREW_SEARCH_LOG_FILE_LEVEL"),
        quiet_third_party=not debug,
    )

    # Tests hand in a ready-made context.
    if "app" not in ctx.obj:
        from brew_search.core.config.loader import ConfigError, load_settings
        from brew_search.core.context import build_context

        try:
            settings = load_settings(config_path, overrides={"brewfile": brewfile_path})
        except ConfigError as e:
            click.secho(f"❌ {e}", fg="red")
            sys.exit(1)
        ctx.obj["app"] = build_context(settings, use_cache=not no_cache, dry_run=dry_run)

    if ctx.invoked_subcommand is None:
        _browse(ctx.obj["app"], immediate=immediate)


# ── Browse flow ─────────────────────────────────────────────────


def _prepare_catalog(app, announce: bool = True):  # type: ignore[no-untyped-def]
    """Create the cache directory and fetch the catalog, or exit."""
    from brew_search.core.persistence.response_cache import CacheError
    from brew_search.core.services.registry_client import RegistryError

    try:
        app.cache.prepare()
    except CacheError as e:
        click.secho(f"❌ Failed to create cache directory: {e}", fg="red")
        sys.exit(1)

    if announce:
        click.echo("🔄 Fetching Homebrew packages...")
    try:
        packages = app.client.fetch_all()
    except RegistryError as e:
        click.secho(f"❌ Failed to fetch packages: {e}", fg="red")
        sys.exit(1)

    if announce:
        click.secho(f"✅ Loaded {len(packages)} packages", fg="green")
    return packages


def _browse(app, immediate: bool) -> None:  # type: ignore[no-untyped-def]
    from brew_search.core.services.brewfile_ops import ApplyError, ManifestWriteError
    from brew_search.core.use_cases.browse import load_known, new_packages
    from brew_search.ui.selector import SelectorError

    known = load_known(app.brewfile)
    if known.warning:
        click.secho(f"⚠️  Warning: {known.warning}", fg="yellow")

    packages = _prepare_catalog(app)

    try:
        selected = app.selector(packages, known.identifiers)
    except SelectorError as e:
        click.secho(f"❌ Error in package selector: {e}", fg="red")
        sys.exit(1)

    if not selected:
        click.echo("👋 No packages selected")
        return

    if immediate:
        _require_brew(app)
        _install(app, selected)
        return

    pending = new_packages(selected, known.identifiers, known.declared)
    if not pending:
        click.secho("✅ All selected packages are already in Brewfile", fg="green")
        return

    _require_brew(app)

    click.echo(f"📝 Adding {len(pending)} new packages to Brewfile...")
    try:
        app.brewfile.add_packages(pending)
    except ManifestWriteError as e:
        click.secho(f"❌ Failed to update Brewfile: {e}", fg="red")
        sys.exit(1)

    click.echo("🚀 Running brew bundle...")
    try:
        app.brewfile.run_bundle()
    except ApplyError as e:
        _echo_dry_run(app)
        click.secho(f"❌ Failed to run brew bundle: {e}", fg="red")
        sys.exit(1)

    _echo_dry_run(app)
    click.secho("✨ Done!", fg="green", bold=True)


def _install(app, selected) -> None:  # type: ignore[no-untyped-def]
    from brew_search.core.use_cases.browse import install_packages

    click.echo(f"🚀 Installing {len(selected)} packages directly...")

    def on_start(pkg):  # type: ignore[no-untyped-def]
        click.echo(f"📦 Installing {pkg.identifier}...")

    def on_done(pkg, receipt):  # type: ignore[no-untyped-def]
        if receipt.ok:
            click.secho(f"✅ Installed {pkg.identifier}", fg="green")
        else:
            click.secho(
                f"⚠️  Failed to install {pkg.identifier}: {receipt.error}",
                fg="yellow",
            )

    report = install_packages(app.adapter, selected, on_start=on_start, on_done=on_done)
    _echo_dry_run(app)
    if not report.ok:
        click.secho(
            f"⚠️  {len(report.failed)} of {len(selected)} packages failed to install",
            fg="yellow",
        )
    click.secho("✨ Done!", fg="green", bold=True)


def _require_brew(app) -> None:  # type: ignore[no-untyped-def]
    if not app.adapter.is_available():
        click.secho(f"❌ brew not found: {app.settings.brew_bin}", fg="red")
        sys.exit(1)


def _echo_dry_run(app) -> None:  # type: ignore[no-untyped-def]
    from brew_search.adapters.mock import DryRunBrewAdapter

    if not isinstance(app.adapter, DryRunBrewAdapter):
        return
    click.secho("   [dry-run] commands not executed:", fg="yellow")
    for command in app.adapter.call_log:
        click.echo(f"     $ {' '.join(command)}")


# ── Package details ─────────────────────────────────────────────


@cli.command()
@click.argument("identifier")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def info(ctx: click.Context, identifier: str, as_json: bool) -> None:
    """Show catalog details for a formula or cask."""
    from brew_search.core.use_cases.browse import load_known
    from brew_search.ui.selector import render_preview

    app = ctx.obj["app"]
    known = load_known(app.brewfile)
    packages = _prepare_catalog(app, announce=not as_json)

    matches = [p for p in packages if p.identifier == identifier]
    if not matches:
        click.secho(f"❌ No formula or cask named {identifier!r}", fg="red")
        sys.exit(1)

    if as_json:
        click.echo(json.dumps([p.model_dump(mode="json") for p in matches], indent=2))
        return

    for pkg in matches:
        click.echo()
        click.echo(render_preview(pkg, known.identifiers))
    click.echo()


# ── Register sub-command groups from brew_search/ui/cli/ ─────────

from brew_search.ui.cli.brewfile import brewfile  # noqa: E402
from brew_search.ui.cli.cache import cache  # noqa: E402

cli.add_command(cache)
cli.add_command(brewfile)


if __name__ == "__main__":
    cli()
