"""
CLI commands for the Brewfile.

Thin wrappers over ``brew_search.core.services.brewfile_ops``.
"""

from __future__ import annotations

import json
import sys

import click

_KEYWORD_ICONS = {"brew": "⚡", "cask": "🖥️ ", "tap": "🚰"}


@click.group()
def brewfile() -> None:
    """Brewfile — inspect declared formulae, casks and taps."""


@brewfile.command("show")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def show(ctx: click.Context, as_json: bool) -> None:
    """List brew, cask and tap declarations in the Brewfile."""
    from brew_search.core.services.brewfile_ops import ManifestReadError

    manager = ctx.obj["app"].brewfile
    try:
        entries = manager.load_entries()
    except ManifestReadError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)

    if as_json:
        click.echo(json.dumps({
            "path": str(manager.path),
            "entries": [e.to_dict() for e in entries],
        }, indent=2))
        return

    click.secho(f"📋 {manager.path}", fg="cyan", bold=True)
    if not entries:
        click.echo("   No declarations yet")
        click.echo()
        return

    counts: dict[str, int] = {}
    for entry in entries:
        counts[entry.keyword] = counts.get(entry.keyword, 0) + 1
        click.echo(f"   {_KEYWORD_ICONS.get(entry.keyword, '•')} {entry.identifier}")

    click.echo()
    summary = ", ".join(f"{n} {kw}" for kw, n in sorted(counts.items()))
    click.secho(f"   Total: {len(entries)} ({summary})", bold=True)
    click.echo()
