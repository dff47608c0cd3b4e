"""
Brew command adapter — run ``brew`` sub-commands on the user's terminal.

Output is not captured: stdin, stdout and stderr are inherited so
``brew`` can prompt for passwords and draw its own progress.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
import time
from pathlib import Path

from brew_search.adapters.base import BrewAdapter, bundle_command, install_command
from brew_search.core.models.action import Receipt
from brew_search.core.models.package import Package

logger = logging.getLogger(__name__)


class BrewCommandAdapter(BrewAdapter):
    """Execute ``brew`` attached to the controlling terminal.

    Args:
        brew_bin: Executable name or path of the Homebrew CLI.
    """

    def __init__(self, brew_bin: str = "brew"):
        self.brew_bin = brew_bin

    @property
    def name(self) -> str:
        return "brew"

    def is_available(self) -> bool:
        return shutil.which(self.brew_bin) is not None

    def install(self, package: Package) -> Receipt:
        return self.run(install_command(self.brew_bin, package))

    def bundle(self, brewfile: Path) -> Receipt:
        return self.run(bundle_command(self.brew_bin, brewfile))

    def run(self, command: list[str]) -> Receipt:
        """Run ``command`` in the foreground and wait for it to exit."""
        logger.info("$ %s", " ".join(command))
        start = time.monotonic()

        try:
            proc = subprocess.run(command, check=False)
        except FileNotFoundError:
            return Receipt.failure(self.name, command, error=f"{command[0]}: command not found")
        except OSError as e:
            return Receipt.failure(self.name, command, error=f"cannot start {command[0]}: {e}")

        receipt = Receipt.from_exit(
            self.name,
            command,
            proc.returncode,
            duration_ms=int((time.monotonic() - start) * 1000),
        )
        if receipt.failed:
            logger.warning("%s failed: %s", receipt.command_line, receipt.error)
        return receipt
