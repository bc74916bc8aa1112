"""Unit tests for the safety filter."""
import logging

import pytest

from guess_that.data_objects import Card
from guess_that.safety_filters import SafetyFilter, passes_stem_exclusion


def make_card(target, forbidden):
    return Card(language="en", category="family", difficulty="easy", target=target, forbidden=forbidden)


class TestSafetyFilter:
    """Test suite for SafetyFilter.is_family_friendly."""

    @pytest.fixture
    def safety(self):
        return SafetyFilter(["darn", "heck", "  ", "", "a+b"])

    def test_blank_entries_are_dropped(self, safety):
        assert safety.words == ("darn", "heck", "a+b")
        assert safety.is_permissive is False

    def test_clean_card_passes(self, safety):
        assert safety.is_family_friendly(make_card("Dog", ["Bark", "Leash"])) is True

    def test_profane_target_is_rejected(self, safety):
        assert safety.is_family_friendly(make_card("DARN", ["Bark"])) is False

    def test_profane_forbidden_word_is_rejected(self, safety):
        assert safety.is_family_friendly(make_card("Dog", ["Bark", "What the Heck"])) is False

    def test_substring_match(self, safety):
        assert safety.is_family_friendly(make_card("Darned socks", ["Wool"])) is False

    def test_entries_are_literal_not_regex(self, safety):
        # "a+b" must not match "aab"
        assert safety.is_family_friendly(make_card("aab", ["x"])) is True
        assert safety.is_family_friendly(make_card("a+b", ["x"])) is False

    def test_empty_filter_is_permissive(self):
        safety = SafetyFilter()
        assert safety.is_permissive is True
        assert safety.is_family_friendly(make_card("anything", ["goes"])) is True

    def test_from_text_splits_lines(self):
        safety = SafetyFilter.from_text("darn\r\nheck\n\n")
        assert safety.words == ("darn", "heck")

    def test_from_resource_loads_packaged_list(self):
        safety = SafetyFilter.from_resource("filter_profanity_list.txt")
        assert safety.is_permissive is False
        assert len(safety.words) > 0

    def test_from_resource_reads_override_directory(self, tmp_path):
        (tmp_path / "words.txt").write_text("gosh\n", encoding="utf-8")
        safety = SafetyFilter.from_resource("words.txt", base_dir=tmp_path)
        assert safety.words == ("gosh",)

    def test_missing_resource_fails_open_and_logs(self, tmp_path, caplog):
        with caplog.at_level(logging.WARNING, logger="guess_that.safety_filters"):
            safety = SafetyFilter.from_resource("missing.txt", base_dir=tmp_path)

        assert safety.is_permissive is True
        assert safety.is_family_friendly(make_card("darn", ["heck"])) is True
        assert any("missing.txt" in r.getMessage() for r in caplog.records)
        assert any(r.levelno == logging.WARNING for r in caplog.records)


class TestStemExclusion:
    """Test suite for passes_stem_exclusion."""

    def test_unrelated_words_pass(self):
        assert passes_stem_exclusion(make_card("Dog", ["Bark", "Leash"])) is True

    def test_forbidden_word_containing_target_is_rejected(self):
        assert passes_stem_exclusion(make_card("Dog", ["Bark", "Doghouse"])) is False

    def test_target_containing_forbidden_word_is_rejected(self):
        assert passes_stem_exclusion(make_card("Sunflower", ["Sun", "Yellow"])) is False

    def test_comparison_ignores_case_and_diacritics_on_both_sides(self):
        assert passes_stem_exclusion(make_card("Café", ["CAFE au lait"])) is False
        assert passes_stem_exclusion(make_card("cafe", ["Café"])) is False

    def test_forbidden_word_normalizing_to_empty_is_rejected(self):
        assert passes_stem_exclusion(make_card("Dog", ["   "])) is False
