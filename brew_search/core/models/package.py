"""
Package models — catalog records from the Homebrew JSON API.

The registry returns loosely-typed objects.  ``FormulaRecord`` and
``CaskRecord`` are tolerant schemas: every field is optional, anything
of an unexpected shape collapses to an empty string, and only the
identifier decides whether a record survives normalization.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class PackageKind(str, Enum):
    """Install target kind."""

    FORMULA = "formula"   # command-line package
    CASK = "cask"         # GUI application


class Package(BaseModel):
    """A normalized, installable package.

    ``identifier`` is the formula name or cask token — the key used for
    Brewfile membership and for ``brew install``.
    """

    model_config = ConfigDict(frozen=True)

    identifier: str
    display_name: str = ""
    full_name: str = ""
    description: str = ""
    homepage: str = ""
    version: str = ""
    kind: PackageKind = PackageKind.FORMULA

    @property
    def is_cask(self) -> bool:
        return self.kind is PackageKind.CASK

    @property
    def keyword(self) -> str:
        """Brewfile statement that declares this kind (``brew`` or ``cask``)."""
        return "cask" if self.is_cask else "brew"

    @property
    def declaration(self) -> str:
        """Brewfile declaration for this package (``brew "x"`` / ``cask "x"``)."""
        return f'{self.keyword} "{self.identifier}"'


def _as_text(value: Any) -> str:
    return value if isinstance(value, str) else ""


class FormulaRecord(BaseModel):
    """Raw formula object as served by ``formula.json``."""

    model_config = ConfigDict(extra="ignore")

    name: str = ""
    full_name: str = ""
    desc: str = ""
    homepage: str = ""
    stable_version: str = Field(default="", validation_alias="versions")

    @field_validator("name", "full_name", "desc", "homepage", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str:
        return _as_text(value)

    @field_validator("stable_version", mode="before")
    @classmethod
    def _coerce_versions(cls, value: Any) -> str:
        # {"stable": "1.2", "head": "HEAD", ...}
        if isinstance(value, dict):
            return _as_text(value.get("stable"))
        return ""

    def to_package(self) -> Package | None:
        """Normalize into a Package, or None when the record has no name."""
        if not self.name:
            return None
        return Package(
            identifier=self.name,
            display_name=self.name,
            full_name=self.full_name,
            description=self.desc,
            homepage=self.homepage,
            version=self.stable_version,
            kind=PackageKind.FORMULA,
        )


class CaskRecord(BaseModel):
    """Raw cask object as served by ``cask.json``."""

    model_config = ConfigDict(extra="ignore")

    token: str = ""
    full_name: str = Field(default="", validation_alias="name")
    desc: str = ""
    homepage: str = ""
    version: str = ""

    @field_validator("token", "desc", "homepage", "version", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str:
        return _as_text(value)

    @field_validator("full_name", mode="before")
    @classmethod
    def _first_name(cls, value: Any) -> str:
        # Casks carry a list of display names; the first one wins.
        if isinstance(value, list) and value:
            return _as_text(value[0])
        return ""

    def to_package(self) -> Package | None:
        """Normalize into a Package, or None when the record has no token."""
        if not self.token:
            return None
        return Package(
            identifier=self.token,
            display_name=self.token,
            full_name=self.full_name,
            description=self.desc,
            homepage=self.homepage,
            version=self.version,
            kind=PackageKind.CASK,
        )


def normalize_formulae(raw: list[Any]) -> list[Package]:
    """Normalize raw formula objects, dropping nameless or non-object entries."""
    packages: list[Package] = []
    for item in raw:
        if not isinstance(item, dict):
            continue
        pkg = FormulaRecord.model_validate(item).to_package()
        if pkg is not None:
            packages.append(pkg)
    return packages


def normalize_casks(raw: list[Any]) -> list[Package]:
    """Normalize raw cask objects, dropping tokenless or non-object entries."""
    packages: list[Package] = []
    for item in raw:
        if not isinstance(item, dict):
            continue
        pkg = CaskRecord.model_validate(item).to_package()
        if pkg is not None:
            packages.append(pkg)
    return packages
