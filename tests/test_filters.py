"""Tests for the in-memory search, filter and sort helpers."""

from slf_backend.core.filters import matches_search, matches_filter, sort_by_timestamp, index_by_id


def test_empty_search_matches_everything():
    assert matches_search(None, "anything")
    assert matches_search("  ", None)


def test_search_is_case_insensitive_substring():
    assert matches_search("GEDUNG", "Gedung Serbaguna", None)
    assert matches_search("bandung", None, "Kota Bandung")
    assert not matches_search("surabaya", "Gedung", "Jakarta")


def test_all_filter_lets_everything_through():
    assert matches_filter("draft", "all")
    assert matches_filter("draft", None)
    assert not matches_filter("draft", "completed")


def test_sort_newest_first_with_undated_last():
    rows = [
        {"id": "a", "ts": "2024-01-01T10:00:00+00:00"},
        {"id": "b", "ts": None},
        {"id": "c", "ts": "2024-03-01T10:00:00Z"},
        {"id": "d", "ts": "2024-02-01T10:00:00"},
    ]
    assert [r["id"] for r in sort_by_timestamp(rows, "ts")] == ["c", "d", "a", "b"]


def test_sort_oldest_first():
    rows = [{"id": "x", "ts": "2024-05-01T00:00:00Z"}, {"id": "y", "ts": "2024-04-01T00:00:00Z"}]
    assert [r["id"] for r in sort_by_timestamp(rows, "ts", newest_first=False)] == ["y", "x"]


def test_index_by_id_skips_rows_without_key():
    assert index_by_id([{"id": 1, "n": "a"}, {"n": "b"}]) == {1: {"id": 1, "n": "a"}}
