"""
Adapter base — the contract between services and external tools.

Services never spawn processes themselves; they ask an adapter, and
the adapter answers with a Receipt.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from brew_search.core.models.action import Receipt
from brew_search.core.models.package import Package


class Adapter(ABC):
    """Something that drives an external tool on brew-search's behalf.

    Every call answers with a Receipt; spawn errors and non-zero exits
    are reported there, not raised.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Short label recorded on receipts ('brew', 'dry-run')."""

    @abstractmethod
    def is_available(self) -> bool:
        """Whether the tool can be run here.  Cheap; never raises."""

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"


class BrewAdapter(Adapter):
    """Operations brew-search needs from the package manager."""

    @abstractmethod
    def install(self, package: Package) -> Receipt:
        """Install one package (``brew install [--cask] <id>``)."""

    @abstractmethod
    def bundle(self, brewfile: Path) -> Receipt:
        """Apply a Brewfile (``brew bundle --file <path>``)."""


def install_command(brew_bin: str, package: Package) -> list[str]:
    if package.is_cask:
        return [brew_bin, "install", "--cask", package.identifier]
    return [brew_bin, "install", package.identifier]


def bundle_command(brew_bin: str, brewfile: Path) -> list[str]:
    return [brew_bin, "bundle", "--file", str(brewfile)]
