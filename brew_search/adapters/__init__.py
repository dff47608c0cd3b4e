"""Adapters — bindings for the external ``brew`` tool.

Public re-exports for convenient access.
"""

from brew_search.adapters.base import Adapter, BrewAdapter
from brew_search.adapters.mock import DryRunBrewAdapter
from brew_search.adapters.shell.command import BrewCommandAdapter

__all__ = [
    "Adapter",
    "BrewAdapter",
    "BrewCommandAdapter",
    "DryRunBrewAdapter",
]
