"""
Test suite for the lexical helpers used by the hallucination detector.
"""

from geo_backend.services.lexical import (
    extract_numbers,
    extract_proper_nouns,
    extract_words,
)


class TestExtractWords:
    """Tests for extract_words()."""

    def test_lowercases_and_drops_short_words(self):
        """Words of three characters or fewer are ignored."""
        assert extract_words("The Acme tool is GREAT for teams") == [
            "acme", "tool", "great", "teams"
        ]

    def test_punctuation_splits_words(self):
        assert extract_words("pricing:fair,cheap!") == ["pricing", "fair", "cheap"]

    def test_diacritics_preserved(self):
        assert extract_words("Solução rápida e confiável") == [
            "solução", "rápida", "confiável"
        ]

    def test_letters_of_any_script_preserved(self):
        assert extract_words("mañana straße привет") == ["mañana", "straße", "привет"]

    def test_empty_text(self):
        assert extract_words("") == []
        assert extract_words("a an the") == []


class TestExtractNumbers:
    """Tests for extract_numbers()."""

    def test_integers_and_decimals(self):
        assert extract_numbers("Founded 1998 with 2.5 million users") == [1998.0, 2.5]

    def test_comma_decimal_separator(self):
        assert extract_numbers("Receita de 4,5 bilhões") == [4.5]

    def test_no_numbers(self):
        assert extract_numbers("no digits here") == []


class TestExtractProperNouns:
    """Tests for extract_proper_nouns()."""

    def test_multi_word_names(self):
        assert extract_proper_nouns("made by Acme Corp in Berlin") == ["Acme Corp", "Berlin"]

    def test_accented_names(self):
        assert extract_proper_nouns("sede em São Paulo") == ["São Paulo"]

    def test_short_capitalized_words_dropped(self):
        """'Al' is only two characters long."""
        assert extract_proper_nouns("Al said hi") == []

    def test_all_caps_not_a_name(self):
        """A name needs lowercase letters after its capital."""
        assert extract_proper_nouns("CRM and ERP") == []
