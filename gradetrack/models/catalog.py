"""
Catalog data model.

Static reference courses used only for autocomplete.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class CatalogItem:
    code: str       # e.g. "CSE101"
    name: str       # e.g. "Computer Programming"
    credits: float
