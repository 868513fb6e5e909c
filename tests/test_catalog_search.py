"""Tests for catalog autocomplete scoring."""

import json

import pytest

from gradetrack.data import DataLoader
from gradetrack.engines import score_item, search_catalog
from gradetrack.exceptions import ConfigError
from gradetrack.models import CatalogItem


@pytest.fixture(scope="module")
def catalog():
    return DataLoader().catalog


def test_exact_code_ranks_first(catalog):
    results = search_catalog("CSE101", catalog)
    assert results[0].code == "CSE101"
    assert score_item("cse101", results[0]) >= 100


def test_blank_query_returns_nothing(catalog):
    assert search_catalog("", catalog) == []
    assert search_catalog("   ", catalog) == []
    assert search_catalog(None, catalog) == []


def test_results_are_limited(catalog):
    assert len(search_catalog("e", catalog)) == 8
    assert len(search_catalog("e", catalog, limit=3)) == 3


def test_name_prefix_beats_word_start():
    items = [
        CatalogItem("XYZ200", "Big Data", 3),
        CatalogItem("ABC100", "Data Mining", 3),
        CatalogItem("DAT300", "Other", 3),
    ]
    results = search_catalog("data", items)
    assert [i.code for i in results] == ["ABC100", "XYZ200"]
    # prefix 70 + token 20
    assert score_item("data", items[1]) == 90
    # word start 50 + token 20
    assert score_item("data", items[0]) == 70


def test_token_bonus_stacks_across_words():
    item = CatalogItem("INT233", "Data Visualization", 3)
    # "vis" gives +20 (start of "visualization"), "at" gives +10 (inside "data")
    # plus +10 from "visualization" containing "at"; no name-level match
    assert score_item("vis at", item) == 40


def test_ties_keep_catalog_order():
    items = [
        CatalogItem("AAA1", "Intro Data", 3),
        CatalogItem("BBB1", "Intro Data", 3),
    ]
    assert search_catalog("intro", items) == items
    assert search_catalog("intro", list(reversed(items))) == list(reversed(items))


def test_case_insensitive(catalog):
    assert search_catalog("python", catalog)[0].code == "INT108"


def test_loader_skips_unusable_entries(tmp_path):
    path = tmp_path / "catalog.json"
    path.write_text(json.dumps([
        {"code": "AB1", "name": "Alpha", "credits": 2},
        {"code": "", "name": "No code"},
        {"code": "AB2"},
    ]))
    loader = DataLoader(str(path))
    assert [i.code for i in loader.catalog] == ["AB1"]
    assert loader.find_by_code("ab1").name == "Alpha"
    assert loader.find_by_code("ZZZ") is None


def test_loader_missing_file(tmp_path):
    with pytest.raises(ConfigError):
        DataLoader(str(tmp_path / "missing.json")).catalog


def test_loader_unreadable_json(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text('[{"code": "CSE101",', encoding="utf-8")
    with pytest.raises(ConfigError, match="Could not read catalog"):
        DataLoader(str(path)).catalog


def test_loader_rejects_non_list(tmp_path):
    path = tmp_path / "object.json"
    path.write_text(json.dumps({"code": "CSE101", "name": "Computer Programming"}), encoding="utf-8")
    with pytest.raises(ConfigError, match="must contain a list"):
        DataLoader(str(path)).catalog
