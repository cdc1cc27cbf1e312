"""Fixed category catalog used to validate model-suggested categories."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Iterator
from importlib import resources
from pathlib import Path

from site_intel.models import Category

logger = logging.getLogger(__name__)


class CategoryCatalog:
    """Read-only list of categories, looked up by id."""

    def __init__(self, categories: Iterable[Category]) -> None:
        self._categories = tuple(categories)
        self._by_id = {cat.id: cat for cat in self._categories}

    def __contains__(self, category_id: object) -> bool:
        return category_id in self._by_id

    def __iter__(self) -> Iterator[Category]:
        return iter(self._categories)

    def __len__(self) -> int:
        return len(self._categories)

    def get(self, category_id: str) -> Category | None:
        return self._by_id.get(category_id)

    def prompt_listing(self) -> str:
        """One `id: name - description` line per category."""
        return "\n".join(f"{cat.id}: {cat.name} - {cat.description}" for cat in self._categories)

    @classmethod
    def from_dict(cls, data: dict) -> CategoryCatalog:
        return cls(Category.model_validate(item) for item in data.get("categories", []))


def load_catalog(path: str | Path | None = None) -> CategoryCatalog:
    """Load a catalog from a JSON file, or the bundled one when no path is given."""
    if path:
        text = Path(path).read_text(encoding="utf-8")
        source = str(path)
    else:
        text = resources.files("site_intel").joinpath("data/categories.json").read_text(encoding="utf-8")
        source = "bundled catalog"

    catalog = CategoryCatalog.from_dict(json.loads(text))
    logger.debug("Loaded %d categories from %s", len(catalog), source)
    return catalog
