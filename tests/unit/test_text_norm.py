"""Unit tests for text normalization."""
import pytest

from guess_that.text_norm import normalize


class TestNormalize:
    """Test suite for normalize."""

    def test_none_is_empty(self):
        assert normalize(None) == ""

    def test_empty_string(self):
        assert normalize("") == ""

    def test_case_and_diacritics_are_ignored(self):
        assert normalize("Café") == normalize("cafe")
        assert normalize("Café") == "cafe"

    def test_decomposed_input_matches_precomposed(self):
        assert normalize("Cafe\u0301") == normalize("Caf\u00e9")

    def test_trims_whitespace(self):
        assert normalize("  Hund \t\n") == "hund"

    def test_compatibility_forms(self):
        # Fullwidth letters and ligatures fold to plain ASCII
        assert normalize("ＨＵＮＤ") == "hund"
        assert normalize("ﬁsch") == "fisch"

    def test_umlauts_lose_their_marks(self):
        assert normalize("Äpfel") == "apfel"
        assert normalize("Grüezi") == "gruezi"

    @pytest.mark.parametrize(
        "text",
        ["Café", "İstanbul", "  Straße ", "ＨＵＮＤ", "Ωmega", "ǅemal", "한국어", "", "ẍ́"],
    )
    def test_idempotent(self, text):
        once = normalize(text)
        assert normalize(once) == once
