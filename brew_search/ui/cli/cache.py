"""
CLI commands for the catalog response cache.

Thin wrappers over ``brew_search.core.persistence.response_cache``.
"""

from __future__ import annotations

import json
from datetime import timedelta

import click


def _format_age(age: timedelta | None) -> str:
    if age is None:
        return "?"
    # Entries stamped in the future (clock skew) read as fresh.
    seconds = max(0, int(age.total_seconds()))
    hours, rem = divmod(seconds, 3600)
    if hours:
        return f"{hours}h{rem // 60:02d}m"
    return f"{rem // 60}m{rem % 60:02d}s"


@click.group()
def cache() -> None:
    """Cache — inspect or clear cached catalog responses."""


@cache.command("clear")
@click.pass_context
def clear(ctx: click.Context) -> None:
    """Delete every cached catalog response."""
    store = ctx.obj["app"].cache
    removed = store.clear()
    if removed:
        click.secho(f"🧹 Removed {removed} cached responses from {store.directory}", fg="green")
    else:
        click.echo(f"✨ Cache already empty ({store.directory})")


@cache.command("info")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def info(ctx: click.Context, as_json: bool) -> None:
    """Show cached collections, their age and expiry."""
    store = ctx.obj["app"].cache
    entries = store.entries()

    if as_json:
        click.echo(json.dumps({
            "directory": str(store.directory),
            "ttl_seconds": int(store.ttl.total_seconds()),
            "entries": [e.to_dict() for e in entries],
        }, indent=2))
        return

    click.secho(f"🗄️  Cache: {store.directory}", fg="cyan", bold=True)
    click.echo(f"   TTL: {_format_age(store.ttl)}")
    click.echo()

    if not entries:
        click.echo("   (empty)")
        click.echo()
        return

    for entry in entries:
        size_kb = entry.size_bytes // 1024
        if not entry.readable:
            click.secho(f"   ❌ {entry.key}  unreadable ({size_kb} KB)", fg="red")
        elif entry.expired:
            click.secho(f"   ⌛ {entry.key}  expired, {_format_age(entry.age)} old ({size_kb} KB)", fg="yellow")
        else:
            click.secho(f"   ✅ {entry.key}  {_format_age(entry.age)} old ({size_kb} KB)", fg="green")
    click.echo()
