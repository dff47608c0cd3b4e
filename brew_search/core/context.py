"""
Application context — every collaborator of a run, wired once.

The CLI builds one ``AppContext`` at startup and hands it to commands
through ``click.Context.obj``.  Nothing is kept in module globals, so
tests construct their own context with fakes:

    - CLI:    main.py  → build_context(settings)
    - Tests:  AppContext(settings=..., client=FakeClient(), ...)
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Callable

from brew_search.adapters.base import BrewAdapter
from brew_search.adapters.mock import DryRunBrewAdapter
from brew_search.adapters.shell.command import BrewCommandAdapter
from brew_search.core.config.loader import Settings
from brew_search.core.models.package import Package
from brew_search.core.persistence.response_cache import ResponseCache
from brew_search.core.services.brewfile_ops import BrewfileManager
from brew_search.core.services.registry_client import RegistryClient

# (catalog, already-declared identifiers) → chosen packages
Selector = Callable[[list[Package], dict[str, bool]], list[Package]]


@dataclass
class AppContext:
    """Collaborators shared by every command of one run."""

    settings: Settings
    cache: ResponseCache
    client: RegistryClient
    brewfile: BrewfileManager
    adapter: BrewAdapter
    selector: Selector


def build_context(
    settings: Settings,
    *,
    use_cache: bool = True,
    dry_run: bool = False,
) -> AppContext:
    """Construct the real collaborators for ``settings``.

    Does not touch the filesystem; call ``cache.prepare()`` before
    fetching.
    """
    from brew_search.ui.selector import select_packages

    cache = ResponseCache(
        settings.cache_dir,
        ttl=timedelta(hours=settings.cache_ttl_hours),
    )
    client = RegistryClient(
        cache,
        timeout=settings.request_timeout,
        formulae_url=settings.formulae_url,
        casks_url=settings.casks_url,
        use_cache=use_cache,
    )
    adapter: BrewAdapter
    if dry_run:
        adapter = DryRunBrewAdapter(settings.brew_bin)
    else:
        adapter = BrewCommandAdapter(settings.brew_bin)

    return AppContext(
        settings=settings,
        cache=cache,
        client=client,
        brewfile=BrewfileManager(settings.brewfile, adapter=adapter),
        adapter=adapter,
        selector=select_packages,
    )
