"""
Shared test fixtures and configuration.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Any

import pytest
import requests

from brew_search.adapters.mock import DryRunBrewAdapter
from brew_search.core.config.loader import Settings
from brew_search.core.context import AppContext
from brew_search.core.models.package import Package, PackageKind
from brew_search.core.persistence.response_cache import ResponseCache
from brew_search.core.services.brewfile_ops import BrewfileManager
from brew_search.core.services.registry_client import (
    CASKS_API_URL,
    FORMULAE_API_URL,
    RegistryClient,
)

FIXED_NOW = datetime(2024, 3, 1, 12, 30, 45)

FORMULAE_PAYLOAD: list[Any] = [
    {
        "name": "wget",
        "full_name": "wget",
        "desc": "Internet file retriever",
        "homepage": "https://www.gnu.org/software/wget/",
        "versions": {"stable": "1.24.5", "head": "HEAD"},
    },
    {
        "name": "jq",
        "full_name": "jq",
        "desc": "Lightweight and flexible command-line JSON processor",
        "homepage": "https://jqlang.github.io/jq/",
        "versions": {"stable": "1.7.1"},
    },
    {"name": "", "desc": "nameless records are dropped"},
]

CASKS_PAYLOAD: list[Any] = [
    {
        "token": "vlc",
        "name": ["VLC media player"],
        "desc": "Multimedia player",
        "homepage": "https://www.videolan.org/vlc/",
        "version": "3.0.21",
    },
    {
        "token": "docker",
        "name": ["Docker Desktop", "Docker Community Edition"],
        "desc": "App to build and share containerised applications",
        "homepage": "https://www.docker.com/products/docker-desktop",
        "version": "4.28.0",
    },
]


# ── Fake HTTP ───────────────────────────────────────────────────


class DummyResponse:
    """Just enough of ``requests.Response`` for the registry client."""

    def __init__(self, payload: Any = None, status_code: int = 200, text: str = ""):
        self._payload = payload
        self.status_code = status_code
        self.text = text

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    def json(self) -> Any:
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


class FakeSession:
    """Serves canned responses per URL and records every request."""

    def __init__(self, routes: dict[str, Any] | None = None):
        self.routes: dict[str, Any] = routes if routes is not None else {
            FORMULAE_API_URL: DummyResponse(FORMULAE_PAYLOAD),
            CASKS_API_URL: DummyResponse(CASKS_PAYLOAD),
        }
        self.calls: list[dict[str, Any]] = []

    def get(self, url: str, headers: dict | None = None, timeout: float | None = None):
        self.calls.append({"url": url, "headers": headers, "timeout": timeout})
        route = self.routes.get(url)
        if route is None:
            raise requests.ConnectionError(f"no route to {url}")
        if isinstance(route, Exception):
            raise route
        return route

    @property
    def urls(self) -> list[str]:
        return [c["url"] for c in self.calls]


class FakeSelector:
    """Stands in for the interactive finder: picks identifiers up front."""

    def __init__(self, picks: list[str] | None = None):
        self.picks = picks or []
        self.seen_existing: dict[str, bool] | None = None
        self.calls = 0

    def __call__(self, packages: list[Package], existing: dict[str, bool]) -> list[Package]:
        self.calls += 1
        self.seen_existing = dict(existing)
        by_id = {p.identifier: p for p in packages}
        return [by_id[i] for i in self.picks if i in by_id]


# ── Fixtures ────────────────────────────────────────────────────


@pytest.fixture
def fake_session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def cache(tmp_path: Path) -> ResponseCache:
    return ResponseCache(tmp_path / "cache")


@pytest.fixture
def brewfile_path(tmp_path: Path) -> Path:
    return tmp_path / "Brewfile"


@pytest.fixture
def make_package():
    """Factory for Package objects with sensible defaults."""

    def _make(identifier: str, kind: PackageKind = PackageKind.FORMULA, **kwargs: Any) -> Package:
        kwargs.setdefault("display_name", identifier)
        kwargs.setdefault("full_name", identifier)
        return Package(identifier=identifier, kind=kind, **kwargs)

    return _make


@pytest.fixture
def make_app(tmp_path: Path, fake_session: FakeSession):
    """Build an AppContext wired to fakes; nothing leaves ``tmp_path``."""

    def _make(
        picks: list[str] | None = None,
        session: FakeSession | None = None,
        adapter: DryRunBrewAdapter | None = None,
    ) -> AppContext:
        settings = Settings(brewfile=tmp_path / "Brewfile", cache_dir=tmp_path / "cache")
        cache = ResponseCache(settings.cache_dir)
        adapter = adapter or DryRunBrewAdapter()
        return AppContext(
            settings=settings,
            cache=cache,
            client=RegistryClient(cache, session=session or fake_session),
            brewfile=BrewfileManager(settings.brewfile, adapter=adapter, clock=lambda: FIXED_NOW),
            adapter=adapter,
            selector=FakeSelector(picks),
        )

    return _make
