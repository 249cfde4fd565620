# tests/test_change_detection.py

"""
Tests for field-level change detection.
"""

import pytest

from core.change_detection import MISSING, detect_changes, get_nested_value, values_equal
from models.seo_page import OpenGraph, SEOPageUpsert


SEO_FIELDS = ["meta_title", "meta_description", "slug", "open_graph.title", "open_graph.image"]

SNAPSHOTS = [
    {},
    {"meta_title": "Home", "slug": "home"},
    {"meta_title": None, "open_graph": {"title": "OG", "image": None}},
    {"tags": ["a", "b"], "nested": {"deep": {"value": 1}}},
    {"price": float("nan"), "flag": True},
]


@pytest.mark.parametrize("snapshot", SNAPSHOTS)
def test_diff_of_identical_snapshots_is_empty(snapshot):
    fields = SEO_FIELDS + ["tags", "tags.1", "nested.deep.value", "price", "flag"]
    assert detect_changes(snapshot, snapshot, fields) == []


def test_diff_detects_same_fields_in_both_directions():
    a = {"meta_title": "A", "slug": "a", "open_graph": {"title": "x"}}
    b = {"meta_title": "B", "slug": "a", "meta_description": "desc"}

    forward = detect_changes(a, b, SEO_FIELDS)
    backward = detect_changes(b, a, SEO_FIELDS)

    assert len(forward) == len(backward)
    assert [c.field for c in forward] == [c.field for c in backward]
    for f, r in zip(forward, backward):
        assert f.old_value == r.new_value
        assert f.new_value == r.old_value


def test_missing_nested_path_does_not_raise():
    assert detect_changes({}, {"a": {"b": 1}}, ["a.b.c"]) == []
    assert get_nested_value({"a": {"b": 1}}, "a.b.c") is MISSING
    assert get_nested_value(None, "a") is MISSING


def test_only_changed_tracked_fields_reported():
    changes = detect_changes({"meta_title": "Old"}, {"meta_title": "New"}, ["meta_title", "slug"])

    assert len(changes) == 1
    assert changes[0].model_dump() == {"field": "meta_title", "old_value": "Old", "new_value": "New"}


def test_explicit_null_differs_from_absent():
    changes = detect_changes({}, {"slug": None}, ["slug"])
    assert len(changes) == 1
    assert changes[0].old_value is None
    assert changes[0].new_value is None


def test_create_reports_only_fields_with_values():
    new = {"meta_title": "Title", "slug": None, "open_graph": {"image": "/og.png"}}
    changes = detect_changes(None, new, SEO_FIELDS)
    assert [c.field for c in changes] == ["meta_title", "open_graph.image"]
    assert all(c.old_value is None for c in changes)


def test_delete_reports_only_fields_that_had_values():
    old = {"meta_title": "Title", "meta_description": None}
    changes = detect_changes(old, None, SEO_FIELDS)
    assert [c.field for c in changes] == ["meta_title"]
    assert changes[0].new_value is None


def test_accepts_pydantic_models():
    old = SEOPageUpsert(path="/about", meta_title="About")
    new = SEOPageUpsert(path="/about", meta_title="About", open_graph=OpenGraph(title="About us"))

    changes = detect_changes(old, new, ["meta_title", "meta_description", "open_graph.title"])
    assert [c.field for c in changes] == ["open_graph.title"]


def test_list_index_paths():
    assert get_nested_value({"tags": ["a", "b"]}, "tags.1") == "b"
    assert get_nested_value({"tags": ["a"]}, "tags.5") is MISSING


def test_values_equal_is_structural_and_strict():
    assert values_equal({"a": [1, {"b": 2}]}, {"a": [1, {"b": 2}]})
    assert not values_equal([1, 2], [2, 1])
    assert not values_equal(True, 1)
    assert not values_equal(None, MISSING)
    assert not values_equal({"a": None}, {})
    assert values_equal(MISSING, MISSING)
