"""
Package selector — fuzzy multi-select over the catalog.

The prompt itself is prompt_toolkit's; this module only decides what
the user sees (ordering, row text, preview) and turns accepted entries
back into Packages.
"""

from __future__ import annotations

import logging
import shutil

import click
from prompt_toolkit import PromptSession
from prompt_toolkit.completion import Completer, Completion, FuzzyCompleter
from prompt_toolkit.document import Document

from brew_search.core.models.package import Package

logger = logging.getLogger(__name__)

ICON_INSTALLED = "✅"
ICON_FORMULA = "⚡"
ICON_CASK = "🖥️ "
CASK_SUFFIX = ":cask"

NAME_WIDTH = 32
VERSION_WIDTH = 12
DESC_WIDTH = 60

_PROMPT = "🔍 Search packages: "
_TOOLBAR = (
    " {count} selected │ TAB: complete  ENTER: toggle  "
    "empty ENTER: confirm  Ctrl-C: cancel"
)


class SelectorError(Exception):
    """The interactive prompt could not run."""


# ── Presentation ────────────────────────────────────────────────


def sort_packages(packages: list[Package]) -> list[Package]:
    """Shortest identifiers first (likeliest to be searched), then A–Z."""
    return sorted(packages, key=lambda p: (len(p.identifier), p.identifier))


def _fit(text: str, width: int) -> str:
    """Pad to ``width``, or cut with an ellipsis when longer."""
    if len(text) <= width:
        return text.ljust(width)
    return text[: width - 3] + "..."


def _label(pkg: Package) -> str:
    if pkg.full_name and pkg.full_name != pkg.identifier:
        return f"{pkg.identifier} ({pkg.full_name})"
    return pkg.identifier


def format_row(pkg: Package, existing: dict[str, bool]) -> str:
    """One finder row: status, kind, name, version and description columns."""
    status = ICON_INSTALLED if existing.get(pkg.identifier) else "  "
    kind = ICON_CASK if pkg.is_cask else ICON_FORMULA

    desc = pkg.description or "—"
    if len(desc) > DESC_WIDTH:
        desc = desc[: DESC_WIDTH - 3] + "..."

    return (
        f"{status} {kind} {_fit(_label(pkg), NAME_WIDTH)} │ "
        f"{_fit(pkg.version or 'unknown', VERSION_WIDTH)} │ {desc}"
    )


def word_wrap(text: str, width: int) -> str:
    if width <= 0:
        return text

    lines: list[str] = []
    current = ""
    for word in text.split():
        if current and len(current) + len(word) + 1 > width:
            lines.append(current)
            current = word
        else:
            current = f"{current} {word}" if current else word
    if current:
        lines.append(current)
    return "\n".join(lines)


def render_preview(pkg: Package, existing: dict[str, bool], width: int = 80) -> str:
    """Multi-line package details shown after a package is picked."""
    kind_icon, kind_name = ("🖥️", "Cask") if pkg.is_cask else ("⚡", "Formula")

    out = [f"{kind_icon} {pkg.identifier}"]
    out.append("─" * min(len(pkg.identifier) + 3, width))
    out.append("")

    if existing.get(pkg.identifier):
        out.append("✅ Already in Brewfile")
    else:
        out.append("📦 Not in Brewfile")
    out.append(f"📋 Type: {kind_name}")
    if pkg.version:
        out.append(f"🏷️  Version: {pkg.version}")
    if pkg.full_name and pkg.full_name != pkg.identifier:
        out.append(f"📛 Full Name: {pkg.full_name}")

    if pkg.description:
        out += ["", "📄 Description:", word_wrap(pkg.description, width - 2)]
    if pkg.homepage:
        out += ["", "🌐 Homepage:", pkg.homepage]

    flag = "--cask " if pkg.is_cask else ""
    install = f"brew install {flag}{pkg.identifier}"
    out += ["", "💻 Install command:", install]
    return "\n".join(out)


def selection_keys(packages: list[Package]) -> dict[str, Package]:
    """Map the text a user types to the package it stands for.

    A cask whose token is also a formula name is keyed ``<token>:cask``.
    """
    formula_ids = {p.identifier for p in packages if not p.is_cask}
    keys: dict[str, Package] = {}
    for pkg in sort_packages(packages):
        key = pkg.identifier
        if pkg.is_cask and key in formula_ids:
            key += CASK_SUFFIX
        keys.setdefault(key, pkg)
    return keys


# ── Interactive prompt ──────────────────────────────────────────


class PackageCompleter(Completer):
    """Offers every package; FuzzyCompleter does the filtering."""

    def __init__(self, keys: dict[str, Package], existing: dict[str, bool]):
        self._items = [
            (key, format_row(pkg, existing)) for key, pkg in keys.items()
        ]

    def get_completions(self, document: Document, complete_event):  # type: ignore[no-untyped-def]
        for key, row in self._items:
            yield Completion(key, start_position=0, display_meta=row)


def select_packages(
    packages: list[Package],
    existing: dict[str, bool],
) -> list[Package]:
    """Let the user pick packages interactively.

    Each accepted entry toggles that package; an empty entry confirms.
    Ctrl-C / Ctrl-D cancel and return an empty selection.

    Raises:
        SelectorError: If the terminal cannot host the prompt.
    """
    keys = selection_keys(packages)
    chosen: dict[str, Package] = {}

    session: PromptSession[str] = PromptSession(
        _PROMPT,
        completer=FuzzyCompleter(PackageCompleter(keys, existing), WORD=True),
        complete_while_typing=True,
        complete_in_thread=True,
        bottom_toolbar=lambda: _TOOLBAR.format(count=len(chosen)),
    )

    while True:
        try:
            text = session.prompt()
        except (KeyboardInterrupt, EOFError):
            logger.debug("Selection cancelled")
            return []
        except OSError as e:
            raise SelectorError(f"Cannot start interactive prompt: {e}") from e

        key = text.strip()
        if not key:
            break

        pkg = keys.get(key)
        if pkg is None:
            click.secho(f"⚠️  No package named {key!r}", fg="yellow")
            continue

        if key in chosen:
            del chosen[key]
            click.secho(f"➖ {key}", fg="yellow")
            continue

        chosen[key] = pkg
        click.echo(render_preview(pkg, existing, width=shutil.get_terminal_size().columns))
        click.echo()

    return list(chosen.values())
