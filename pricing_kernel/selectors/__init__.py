"""Selectors for the pricing kernel (read side)."""

from pricing_kernel.selectors.catalog_selector import CatalogSelector
from pricing_kernel.selectors.in_memory import InMemoryCatalog

__all__ = [
    "CatalogSelector",
    "InMemoryCatalog",
]
