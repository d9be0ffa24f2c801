"""
Availability overlap tests.
"""
from utils.overlap import find_overlapping_slots


def test_case_insensitive():
    assert find_overlapping_slots({"monday": {"morning"}}, {"Monday": {"Morning"}}) == [
        ("Monday", "Morning")
    ]


def test_symmetric():
    a = {"Monday": ["Morning", "Evening"], "Friday": ["Afternoon"], "Sunday": ["Evening"]}
    b = {"Friday": ["Afternoon", "Evening"], "Monday": ["Evening"], "Sunday": ["Evening"]}
    assert set(find_overlapping_slots(a, b)) == set(find_overlapping_slots(b, a))


def test_ordered_by_weekday_then_band():
    a = {"Sunday": ["Evening", "Morning"], "Monday": ["Evening"], "Wednesday": ["Afternoon"]}
    b = {"Sunday": ["Morning", "Evening"], "Monday": ["Evening"], "Wednesday": ["Afternoon"]}
    assert find_overlapping_slots(a, b) == [
        ("Monday", "Evening"),
        ("Wednesday", "Afternoon"),
        ("Sunday", "Morning"),
        ("Sunday", "Evening"),
    ]


def test_missing_day_is_empty_not_error():
    assert find_overlapping_slots({"Tuesday": ["Morning"]}, {}) == []
    assert find_overlapping_slots({"Tuesday": ["Morning"]}, None) == []


def test_unknown_band_is_ignored():
    a = {"Monday": ["Morning", "Brunch"]}
    b = {"Monday": ["Brunch", "Morning"]}
    assert find_overlapping_slots(a, b) == [("Monday", "Morning")]


def test_disjoint():
    assert find_overlapping_slots({"Monday": ["Morning"]}, {"Monday": ["Evening"]}) == []
