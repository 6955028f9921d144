from models import Entry
from search import filter_entries


def test_empty_query_returns_view_unchanged():
    view = [Entry("b"), Entry(""), Entry("   "), Entry("a\nb")]
    assert filter_entries(view, "") == view


def test_empty_query_on_empty_view():
    assert filter_entries([], "") == []


def test_match_is_case_insensitive():
    hello, world = Entry("Hello"), Entry("world")
    assert filter_entries([hello, world], "HELLO") == [hello]


def test_matches_preserve_input_order():
    view = [Entry("apple pie"), Entry("banana"), Entry("Pineapple")]
    assert [e.content for e in filter_entries(view, "apple")] == ["apple pie", "Pineapple"]


def test_multi_line_and_whitespace_entries():
    multi, blank, empty = Entry("first\nSecond line"), Entry(" \t "), Entry("")
    view = [multi, blank, empty]
    assert filter_entries(view, "second") == [multi]
    assert filter_entries(view, "\t") == [blank]
    assert filter_entries(view, "zzz") == []


def test_filter_does_not_mutate_input():
    view = [Entry("a"), Entry("b")]
    original = list(view)
    filter_entries(view, "a")
    assert view == original
