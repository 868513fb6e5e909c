"""
Catalog loading and caching.

This module loads the static course catalog used for autocomplete, caching
it so repeated searches do not re-read the file.
"""

import json
from pathlib import Path
from typing import Optional

from ..config import CATALOG_FILE
from ..exceptions import ConfigError
from ..models import CatalogItem


class DataLoader:
    """
    Loads and caches static reference data.

    WHY LAZY LOADING: the catalog is only read the first time it is
    accessed, so commands that never search never touch the file.

    DATA SOURCES:
    - catalog.json (packaged): the default course catalog
    - any JSON file with the same shape, passed as ``catalog_file``:
      [{"code": "CSE101", "name": "Computer Programming", "credits": 3}, ...]

    Usage:
        loader = DataLoader()
        items = loader.catalog
    """

    def __init__(self, catalog_file: Optional[str] = None):
        self.catalog_file = Path(catalog_file) if catalog_file else CATALOG_FILE
        # None means "not loaded yet"
        self._catalog = None

    @property
    def catalog(self) -> list:
        """Catalog entries as CatalogItem objects, in file order."""
        if self._catalog is None:
            self._catalog = self._load_catalog(self.catalog_file)
        return self._catalog

    @staticmethod
    def _load_catalog(path: Path) -> list:
        if not path.exists():
            raise ConfigError(f"Catalog file not found: {path}")
        try:
            with open(path, "r", encoding="utf-8") as f:
                raw = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigError(f"Could not read catalog {path}: {e}") from e
        if not isinstance(raw, list):
            raise ConfigError(f"Catalog {path} must contain a list of courses")

        items = []
        for entry in raw:
            code = str(entry.get("code", "")).strip()
            name = str(entry.get("name", "")).strip()
            if not code or not name:
                continue  # Unusable for autocomplete
            items.append(CatalogItem(code=code, name=name, credits=float(entry.get("credits", 0))))
        return items

    def find_by_code(self, code: str) -> Optional[CatalogItem]:
        """Exact, case-insensitive code lookup."""
        wanted = code.strip().lower()
        for item in self.catalog:
            if item.code.lower() == wanted:
                return item
        return None
