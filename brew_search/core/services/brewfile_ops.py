"""
Brewfile operations — read declared packages, append new ones, apply.

The Brewfile is the source of truth.  Reading rebuilds the set of
declared identifiers from scratch; writing only ever appends a
timestamped block, so hand edits above it are never touched.

Grammar (one statement per line)::

    brew "<identifier>"   [# comment]
    cask "<identifier>"   [# comment]
    tap "<user/repo>"     [# comment]
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Callable

from brew_search.adapters.base import BrewAdapter
from brew_search.core.models.package import Package

logger = logging.getLogger(__name__)

DECLARATION_KEYWORDS = ("brew", "cask", "tap")
DESCRIPTION_LIMIT = 60
HEADER_FORMAT = "# Added by brew-search on {stamp}"
_STAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
_QUOTES = "\"'"


class BrewfileError(Exception):
    """Base class for Brewfile failures."""


class ManifestReadError(BrewfileError):
    """The Brewfile exists but cannot be read."""


class ManifestWriteError(BrewfileError):
    """New declarations could not be appended."""


class ApplyError(BrewfileError):
    """``brew bundle`` failed or could not be started."""


@dataclass(frozen=True)
class BrewfileEntry:
    """One parsed declaration line."""

    keyword: str
    identifier: str
    line_number: int

    def to_dict(self) -> dict:
        return {
            "keyword": self.keyword,
            "identifier": self.identifier,
            "line": self.line_number,
        }


def parse_line(line: str) -> tuple[str, str] | None:
    """Parse one Brewfile line into ``(keyword, identifier)``.

    Returns None for blank lines, comments, unknown statements and
    declarations with nothing after the keyword.
    """
    stripped = line.strip()
    if not stripped or stripped.startswith("#"):
        return None

    parts = stripped.split()
    if parts[0] not in DECLARATION_KEYWORDS or len(parts) < 2:
        return None

    # brew "foo", args: ["with-bar"]
    identifier = parts[1].rstrip(",").strip(_QUOTES)
    if not identifier:
        return None
    return parts[0], identifier


def describe(package: Package) -> str:
    """Single-line description for the inline Brewfile comment."""
    desc = " ".join(package.description.split())
    if len(desc) > DESCRIPTION_LIMIT:
        desc = desc[:DESCRIPTION_LIMIT] + "..."
    return desc


def declaration_line(package: Package) -> str:
    """``brew "x" # description`` for one package."""
    line = package.declaration
    desc = describe(package)
    if desc:
        line += f" # {desc}"
    return line


class BrewfileManager:
    """Read and append to a Brewfile, and apply it with ``brew bundle``.

    Args:
        path: Brewfile location.
        adapter: Runs ``brew bundle``.
        clock: Returns local time for the block header.
    """

    def __init__(
        self,
        path: Path,
        adapter: BrewAdapter | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.path = path
        self.adapter = adapter
        self._clock = clock

    def __repr__(self) -> str:
        return f"<BrewfileManager path={str(self.path)!r}>"

    # ── Read ────────────────────────────────────────────────────

    def load_entries(self) -> list[BrewfileEntry]:
        """Parse every declaration in the Brewfile.

        A missing Brewfile is simply empty.

        Raises:
            ManifestReadError: If the file exists but cannot be read.
        """
        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.info("No Brewfile at %s — nothing declared yet", self.path)
            return []
        except (OSError, UnicodeDecodeError) as e:
            raise ManifestReadError(f"Cannot read {self.path}: {e}") from e

        entries: list[BrewfileEntry] = []
        for number, line in enumerate(text.splitlines(), start=1):
            parsed = parse_line(line)
            if parsed is None:
                continue
            keyword, identifier = parsed
            entries.append(BrewfileEntry(keyword, identifier, number))

        logger.debug("Parsed %d declarations from %s", len(entries), self.path)
        return entries

    def load_existing(self) -> dict[str, bool]:
        """Identifiers declared as brew, cask or tap.

        One flat namespace: a formula and a cask with the same name
        share a key.
        """
        return {entry.identifier: True for entry in self.load_entries()}

    # ── Write ───────────────────────────────────────────────────

    def add_packages(self, packages: list[Package]) -> None:
        """Append a timestamped block declaring ``packages``.

        Existing content is never rewritten, and nothing is deduplicated:
        filter against ``load_existing()`` first.

        Raises:
            ManifestWriteError: If the directory or file cannot be written.
        """
        if not packages:
            return

        lines = [HEADER_FORMAT.format(stamp=self._clock().strftime(_STAMP_FORMAT))]
        lines.extend(declaration_line(pkg) for pkg in packages)
        block = "\n".join(lines) + "\n"

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "a+b") as fh:
                fh.write(self._separator(fh) + block.encode("utf-8"))
        except OSError as e:
            raise ManifestWriteError(f"Cannot update {self.path}: {e}") from e

        logger.info("Appended %d declarations to %s", len(packages), self.path)

    @staticmethod
    def _separator(fh) -> bytes:  # type: ignore[no-untyped-def]
        """Bytes needed so the new block follows exactly one blank line."""
        size = fh.seek(0, 2)
        if size == 0:
            return b""
        fh.seek(size - 1)
        last = fh.read(1)
        return b"\n" if last == b"\n" else b"\n\n"

    # ── Apply ───────────────────────────────────────────────────

    def run_bundle(self) -> None:
        """Apply the Brewfile with ``brew bundle``.

        Raises:
            ApplyError: If the command fails or cannot be started.
        """
        if self.adapter is None:
            raise ApplyError("No brew adapter configured")

        receipt = self.adapter.bundle(self.path)
        if receipt.failed:
            raise ApplyError(f"{receipt.command_line}: {receipt.error}")
        logger.info("brew bundle finished in %dms", receipt.duration_ms)
