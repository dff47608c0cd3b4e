"""
Dry-run adapter — records brew commands instead of running them.

Backs the ``--dry-run`` flag and doubles as the test adapter.  Returns
success for everything unless told otherwise per identifier.
"""

from __future__ import annotations

from pathlib import Path

from brew_search.adapters.base import BrewAdapter, bundle_command, install_command
from brew_search.core.models.action import Receipt
from brew_search.core.models.package import Package


class DryRunBrewAdapter(BrewAdapter):
    """Brew adapter that never touches the system."""

    def __init__(self, brew_bin: str = "brew", available: bool = True):
        self.brew_bin = brew_bin
        self._available = available
        self._failures: dict[str, str] = {}
        self._call_log: list[list[str]] = []

    @property
    def name(self) -> str:
        return "dry-run"

    @property
    def call_log(self) -> list[list[str]]:
        """Every command this adapter was asked to run."""
        return self._call_log

    def is_available(self) -> bool:
        return self._available

    def set_failure(self, target: str, error: str = "Mock failure") -> None:
        """Fail installs of ``target`` (an identifier) or bundles when target is ``"bundle"``."""
        self._failures[target] = error

    def install(self, package: Package) -> Receipt:
        return self._record(install_command(self.brew_bin, package), package.identifier)

    def bundle(self, brewfile: Path) -> Receipt:
        return self._record(bundle_command(self.brew_bin, brewfile), "bundle")

    def _record(self, command: list[str], target: str) -> Receipt:
        self._call_log.append(command)
        if target in self._failures:
            return Receipt.failure(
                adapter=self.name,
                command=command,
                error=self._failures[target],
                return_code=1,
            )
        return Receipt.success(
            adapter=self.name,
            command=command,
            return_code=0,
        )
