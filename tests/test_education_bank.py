"""Tests for the education content bank."""

from education_bank import CATEGORIES, MODULES, modules_in_category


def test_all_returns_every_module():
    assert len(modules_in_category("All")) == len(MODULES) == 6


def test_filter_by_category():
    titles = [m["title"] for m in modules_in_category("Nutrition")]
    assert titles == ["Heart-Healthy Diet"]


def test_unknown_category_is_empty():
    assert modules_in_category("Surgery") == []


def test_every_module_has_a_listed_category():
    for module in MODULES:
        assert module["category"] in CATEGORIES
        assert module["points"]
