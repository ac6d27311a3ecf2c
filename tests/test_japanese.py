"""Tests for script helpers, languages and the tokenizer."""

import pytest

from kotoba import tokenizer
from kotoba.japanese import (
    has_kanji,
    is_hiragana,
    is_japanese,
    is_katakana,
    is_roman_letter,
    kanji_literals,
    to_hiragana,
    to_katakana,
)
from kotoba.languages import Language


class TestScripts:
    """Tests for character class helpers."""

    def test_kana(self):
        assert is_hiragana("たべる")
        assert not is_hiragana("たべル")
        assert is_katakana("テスト")
        assert not is_katakana("")

    def test_japanese(self):
        """Japanese punctuation and spaces are allowed, latin letters are not."""
        assert is_japanese("私はりんごを食べる。")
        assert is_japanese("古 ふる")
        assert not is_japanese("食べる eat")
        assert not is_japanese("   ")

    def test_roman_letters(self):
        assert is_roman_letter("r")
        assert is_roman_letter("Ｒ")
        assert not is_roman_letter("る")

    def test_kanji_literals(self):
        """Kanji should be deduplicated in order of first occurrence."""
        assert kanji_literals("古い食べ物と古本") == ["古", "食", "物", "本"]
        assert kanji_literals("人々") == ["人"]
        assert has_kanji("食べる")
        assert not has_kanji("たべる")

    def test_conversion(self):
        """Kana conversion should leave other characters untouched."""
        assert to_katakana("てすと") == "テスト"
        assert to_hiragana("テスト") == "てすと"
        assert to_katakana("食べる") == "食ベル"
        assert to_hiragana("abc") == "abc"


class TestLanguage:
    """Tests for Language parsing."""

    @pytest.mark.parametrize(
        "value, expected",
        [
            ("en-US", Language.ENGLISH),
            ("en", Language.ENGLISH),
            ("English", Language.ENGLISH),
            ("de_DE", Language.GERMAN),
            ("ger", Language.GERMAN),
            ("de-AT", Language.GERMAN),
            ("ru", Language.RUSSIAN),
            ("jpn", Language.JAPANESE),
        ],
    )
    def test_parse(self, value: str, expected: Language):
        assert Language.parse(value) == expected

    def test_unknown(self):
        """Unknown codes should give None, or English as default."""
        assert Language.parse("xx") is None
        assert Language.parse(None) is None
        assert Language.parse_or_default("xx") == Language.ENGLISH

    def test_short_code(self):
        assert Language.GERMAN.short_code == "de"
        assert Language.HUNGARIAN.short_code == "hu"


class TestTokenizer:
    """Tests for the lazy loaded tokenizer."""

    def test_without_tagger(self, monkeypatch: pytest.MonkeyPatch):
        """Without a tagger nothing is tokenized."""
        monkeypatch.setattr(tokenizer, "get_tagger", lambda: None)

        assert tokenizer.tokenize("私はりんごを食べる") == []
        assert tokenizer.lemmas("食べた") == []
        assert tokenizer.morpheme_count("食べる") is None

    def test_tokenize(self):
        """The tagger should split a sentence into morphemes."""
        if tokenizer.get_tagger() is None:
            pytest.skip("tokenizer dictionary not installed")

        tokens = tokenizer.tokenize("私はりんごを食べる")

        assert "私" in tokens
        assert "".join(tokens) == "私はりんごを食べる"
        assert tokenizer.morpheme_count("私") == 1
        assert tokenizer.tokenize("") == []
