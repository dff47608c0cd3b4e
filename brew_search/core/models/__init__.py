"""
Domain models — Pydantic types for brew-search.

All models are re-exported here for convenient access:

    from brew_search.core.models import Package, PackageKind, CacheEntry, Receipt
"""

from brew_search.core.models.action import Receipt
from brew_search.core.models.cache import CacheEntry, CacheEntryInfo
from brew_search.core.models.package import (
    CaskRecord,
    FormulaRecord,
    Package,
    PackageKind,
    normalize_casks,
    normalize_formulae,
)

__all__ = [
    # cache.py
    "CacheEntry",
    "CacheEntryInfo",
    # package.py
    "CaskRecord",
    "FormulaRecord",
    "Package",
    "PackageKind",
    "normalize_casks",
    "normalize_formulae",
    # action.py
    "Receipt",
]
