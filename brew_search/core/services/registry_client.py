"""
Registry client — fetches the Homebrew formula and cask catalogs.

Each collection is served from the response cache when fresh, or from
the Homebrew JSON API otherwise.  Both collections are fetched in
parallel and joined; a run never proceeds with half a catalog.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable

import requests

from brew_search.core.models.package import Package, normalize_casks, normalize_formulae
from brew_search.core.persistence.response_cache import CacheError, ResponseCache

logger = logging.getLogger(__name__)

FORMULAE_API_URL = "https://formulae.brew.sh/api/formula.json"
CASKS_API_URL = "https://formulae.brew.sh/api/cask.json"
DEFAULT_TIMEOUT_S = 30.0

FORMULAE_KEY = "formulae"
CASKS_KEY = "casks"

_RAW_SHAPE = list[Any]


class RegistryError(Exception):
    """A catalog collection could not be fetched."""


class NetworkError(RegistryError):
    """Transport failure or non-success HTTP status."""


class DecodeError(RegistryError):
    """The response body is not a JSON array."""


class RegistryClient:
    """Fetch and normalize the Homebrew package catalog.

    Args:
        cache: Response cache consulted before the network.
        session: HTTP session (anything with a requests-style ``get``).
        timeout: Per-request timeout in seconds.
        formulae_url: Formula collection endpoint.
        casks_url: Cask collection endpoint.
        use_cache: When False, cached entries are ignored (fresh results
            are still written back).
    """

    def __init__(
        self,
        cache: ResponseCache,
        session: Any = None,
        timeout: float = DEFAULT_TIMEOUT_S,
        formulae_url: str = FORMULAE_API_URL,
        casks_url: str = CASKS_API_URL,
        use_cache: bool = True,
    ):
        self.cache = cache
        self.session = session if session is not None else requests.Session()
        self.timeout = timeout
        self.formulae_url = formulae_url
        self.casks_url = casks_url
        self.use_cache = use_cache

    # ── Public API ──────────────────────────────────────────────

    def fetch_all(self) -> list[Package]:
        """Fetch formulae and casks concurrently.

        Returns:
            Formulae followed by casks, each in source order.  An
            identifier present in both collections appears twice.

        Raises:
            RegistryError: Naming the collection that failed.  When both
                fail, the formulae failure is reported.
        """
        fetchers: list[tuple[str, Callable[[], list[Package]]]] = [
            (FORMULAE_KEY, self.fetch_formulae),
            (CASKS_KEY, self.fetch_casks),
        ]

        with ThreadPoolExecutor(max_workers=len(fetchers)) as pool:
            futures = [(name, pool.submit(fn)) for name, fn in fetchers]

        # Leaving the with-block joins both workers.
        packages: list[Package] = []
        for name, future in futures:
            exc = future.exception()
            if exc is not None:
                raise RegistryError(f"failed to fetch {name}: {exc}") from exc
            packages.extend(future.result())

        logger.info("Catalog ready: %d packages", len(packages))
        return packages

    def fetch_formulae(self) -> list[Package]:
        """Fetch and normalize the formula collection."""
        raw = self._fetch_collection(FORMULAE_KEY, self.formulae_url)
        return normalize_formulae(raw)

    def fetch_casks(self) -> list[Package]:
        """Fetch and normalize the cask collection."""
        raw = self._fetch_collection(CASKS_KEY, self.casks_url)
        return normalize_casks(raw)

    # ── Internal helpers ────────────────────────────────────────

    def _fetch_collection(self, key: str, url: str) -> list[Any]:
        if self.use_cache:
            try:
                return self.cache.get(key, shape=_RAW_SHAPE)
            except CacheError as e:
                logger.debug("%s not served from cache: %s", key, e)

        raw = self._download(url)

        try:
            self.cache.set(key, raw)
        except CacheError as e:
            logger.warning("Could not cache %s: %s", key, e)

        return raw

    def _download(self, url: str) -> list[Any]:
        logger.info("GET %s", url)
        try:
            resp = self.session.get(
                url,
                headers={"Accept": "application/json"},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise NetworkError(f"GET {url}: {e}") from e

        if not resp.ok:
            snippet = resp.text[:200].replace("\n", " ")
            raise NetworkError(f"GET {url}: HTTP {resp.status_code}: {snippet}")

        try:
            data = resp.json()
        except ValueError as e:
            raise DecodeError(f"invalid JSON from {url}: {e}") from e

        if not isinstance(data, list):
            raise DecodeError(
                f"expected a JSON array from {url}, got {type(data).__name__}"
            )
        return data
