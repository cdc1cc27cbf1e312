"""Tests for site_intel.catalog module."""

from __future__ import annotations

import json

import pytest

from site_intel.catalog import CategoryCatalog, load_catalog
from site_intel.models import Category


class TestBundledCatalog:
    def test_loads_bundled_categories(self, catalog):
        assert len(catalog) == 20
        assert "restaurants" in catalog
        assert "events" in catalog

    def test_unknown_id_not_contained(self, catalog):
        assert "xyz123" not in catalog
        assert catalog.get("xyz123") is None

    def test_ids_unique(self, catalog):
        ids = [cat.id for cat in catalog]
        assert len(ids) == len(set(ids))


class TestCategoryCatalog:
    def test_prompt_listing_format(self):
        catalog = CategoryCatalog([
            Category(id="restaurants", name="מסעדות", description="Restaurants and cafes"),
            Category(id="events", name="אירועים"),
        ])
        lines = catalog.prompt_listing().splitlines()
        assert lines == [
            "restaurants: מסעדות - Restaurants and cafes",
            "events: אירועים - ",
        ]

    def test_get_returns_category(self):
        catalog = CategoryCatalog([Category(id="pets", name="חיות מחמד")])
        assert catalog.get("pets").name == "חיות מחמד"

    def test_from_dict_missing_key_is_empty(self):
        assert len(CategoryCatalog.from_dict({})) == 0


class TestLoadCatalog:
    def test_load_from_path(self, tmp_path):
        path = tmp_path / "categories.json"
        path.write_text(json.dumps({"categories": [{"id": "bikes", "name": "אופניים"}]}), encoding="utf-8")
        catalog = load_catalog(path)
        assert list(cat.id for cat in catalog) == ["bikes"]

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_catalog(tmp_path / "nope.json")
