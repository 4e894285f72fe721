"""Tests for the translation step."""

import pytest

from islvideo.translate import (
    TranslationUnavailable,
    UnsupportedLanguage,
    check_language,
    language_code,
    translate_if_necessary,
)


class TestLanguages:
    def test_codes(self):
        assert language_code("English") == "en"
        assert language_code("Hindi") == "hi"
        assert language_code("Marathi") == "mr"
        assert language_code("Gujarati") == "gu"

    def test_case_insensitive(self):
        assert check_language("hindi") == "Hindi"

    def test_unsupported(self):
        with pytest.raises(UnsupportedLanguage, match="Klingon"):
            check_language("Klingon")


class TestTranslateIfNecessary:
    def test_english_passthrough_skips_backend(self):
        def backend(text, language):
            raise AssertionError("backend must not be called for English")

        assert translate_if_necessary("Hello there", "English", backend) == "Hello there"

    def test_non_english_uses_backend(self):
        calls = []

        def backend(text, language):
            calls.append((text, language))
            return "good morning"

        assert translate_if_necessary("सुप्रभात", "hindi", backend) == "good morning"
        assert calls == [("सुप्रभात", "Hindi")]

    def test_non_english_without_backend(self):
        with pytest.raises(TranslationUnavailable, match="Marathi"):
            translate_if_necessary("नमस्कार", "Marathi")
