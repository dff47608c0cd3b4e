"""
Browse use case — the steps between fetching the catalog and applying it.

The CLI drives these in order and owns all printing and exiting:

    load_known → client.fetch_all → selector → new_packages
        → brewfile.add_packages → brewfile.run_bundle   (default)
        → install_packages           (--immediate)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable

from brew_search.adapters.base import BrewAdapter
from brew_search.core.models.action import Receipt
from brew_search.core.models.package import Package
from brew_search.core.services.brewfile_ops import BrewfileManager, ManifestReadError

logger = logging.getLogger(__name__)


@dataclass
class KnownPackages:
    """What the Brewfile already declares.

    ``identifiers`` is the flat view shown in the finder; ``declared``
    keeps the statement keyword so a cask and a formula sharing a name
    are told apart when filtering.
    """

    identifiers: dict[str, bool] = field(default_factory=dict)
    declared: set[tuple[str, str]] = field(default_factory=set)
    warning: str | None = None


@dataclass
class InstallReport:
    """Outcome of an immediate-mode install."""

    installed: list[Package] = field(default_factory=list)
    failed: list[tuple[Package, Receipt]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed


def load_known(manager: BrewfileManager) -> KnownPackages:
    """Read the Brewfile, treating an unreadable one as empty."""
    try:
        entries = manager.load_entries()
    except ManifestReadError as e:
        logger.warning("Brewfile unreadable, assuming nothing declared: %s", e)
        return KnownPackages(warning=f"Could not load Brewfile: {e}")

    return KnownPackages(
        identifiers={e.identifier: True for e in entries},
        declared={(e.keyword, e.identifier) for e in entries},
    )


def new_packages(
    selected: list[Package],
    existing: dict[str, bool],
    declared: set[tuple[str, str]] | None = None,
) -> list[Package]:
    """Selected packages not declared yet, in selection order.

    With ``declared``, a package counts as present only when its own
    statement is (``cask "docker"`` does not cover ``brew "docker"``).
    Without it, any declaration of the identifier counts.
    """
    if declared is None:
        return [pkg for pkg in selected if not existing.get(pkg.identifier)]
    return [pkg for pkg in selected if (pkg.keyword, pkg.identifier) not in declared]


def install_packages(
    adapter: BrewAdapter,
    packages: list[Package],
    on_start: Callable[[Package], None] | None = None,
    on_done: Callable[[Package, Receipt], None] | None = None,
) -> InstallReport:
    """Install each package directly; a failure does not stop the rest.

    Args:
        adapter: Runs ``brew install``.
        packages: Packages to install, in order.
        on_start: Optional ``callback(package)`` before each install.
        on_done: Optional ``callback(package, receipt)`` after each install.
    """
    report = InstallReport()
    for pkg in packages:
        if on_start:
            on_start(pkg)
        receipt = adapter.install(pkg)
        if on_done:
            on_done(pkg, receipt)

        if receipt.ok:
            report.installed.append(pkg)
        else:
            logger.warning("Install of %s failed: %s", pkg.identifier, receipt.error)
            report.failed.append((pkg, receipt))
    return report
