"""
Availability vocabulary and normalization tests.
"""
import logging
from datetime import date, time

import pytest

from models.availability import (
    REPRESENTATIVE_TIMES,
    TIME_BANDS,
    WEEKDAYS,
    format_availability,
    normalize_availability,
    normalize_time_band,
    normalize_weekday,
    parse_availability,
    weekday_name,
)
from models.errors import ValidationError


class TestVocabulary:

    def test_names_are_case_insensitive(self):
        assert normalize_weekday("  monday ") == "Monday"
        assert normalize_weekday("SUNDAY") == "Sunday"
        assert normalize_time_band("eVeNiNg") == "Evening"

    def test_unknown_names_return_none(self):
        assert normalize_weekday("Funday") is None
        assert normalize_time_band("Night") is None
        assert normalize_time_band(3) is None

    def test_weekday_name_matches_calendar(self):
        assert weekday_name(date(2026, 10, 19)) == "Monday"
        assert weekday_name(date(2026, 10, 24)) == "Saturday"

    def test_every_band_has_a_representative_time(self):
        assert set(REPRESENTATIVE_TIMES) == set(TIME_BANDS)
        assert REPRESENTATIVE_TIMES["Morning"] == time(9, 0)
        assert REPRESENTATIVE_TIMES["Evening"] == time(17, 0)


class TestNormalizeAvailability:

    def test_fills_all_weekdays(self):
        result = normalize_availability({"monday": ["morning"]})
        assert list(result) == list(WEEKDAYS)
        assert result["Monday"] == ("Morning",)
        assert result["Tuesday"] == ()

    def test_orders_and_dedupes_bands(self):
        result = normalize_availability({"Friday": ["evening", "Morning", "EVENING"]})
        assert result["Friday"] == ("Morning", "Evening")

    def test_merges_differently_cased_keys(self):
        result = normalize_availability({"monday": ["Morning"], "Monday": ["Evening"]})
        assert result["Monday"] == ("Morning", "Evening")

    def test_accepts_band_to_bool_mapping(self):
        result = normalize_availability({"Monday": {"Morning": True, "Evening": False}})
        assert result["Monday"] == ("Morning",)

    def test_none_means_unavailable(self):
        assert all(bands == () for bands in normalize_availability(None).values())

    def test_unknown_band_is_skipped_with_warning(self, caplog):
        with caplog.at_level(logging.WARNING):
            result = normalize_availability({"Monday": ["Morning", "Midnight"]})
        assert result["Monday"] == ("Morning",)
        assert "Midnight" in caplog.text

    def test_unknown_weekday_is_skipped_with_warning(self, caplog):
        with caplog.at_level(logging.WARNING):
            result = normalize_availability({"Someday": ["Morning"]})
        assert all(bands == () for bands in result.values())
        assert "Someday" in caplog.text

    def test_bare_string_value_is_rejected(self):
        with pytest.raises(ValidationError):
            normalize_availability({"Monday": "Morning"})

    def test_non_mapping_is_rejected(self):
        with pytest.raises(ValidationError):
            normalize_availability(["Monday", "Morning"])

    def test_non_string_band_is_rejected(self):
        with pytest.raises(ValidationError):
            normalize_availability({"Monday": [1]})


class TestFlatEncoding:

    def test_parse(self):
        assert parse_availability("Monday: Morning|Evening; saturday:Afternoon") == {
            "Monday": ["Morning", "Evening"],
            "saturday": ["Afternoon"],
        }

    def test_parse_blank(self):
        assert parse_availability("") == {}
        assert parse_availability("nan") == {}

    def test_parse_rejects_segment_without_day(self):
        with pytest.raises(ValidationError):
            parse_availability("Morning|Evening")

    def test_format_skips_empty_days(self):
        normalized = normalize_availability({"Monday": ["Evening", "Morning"], "Sunday": ["Afternoon"]})
        assert format_availability(normalized) == "Monday: Morning|Evening; Sunday: Afternoon"
