"""Translation to English ahead of normalization.

The translation model itself is a black box: any callable
`backend(text, source_language) -> english_text`. English input never
reaches the backend.
"""

import logging
from typing import Callable

logger = logging.getLogger(__name__)

# Display name -> (whisper language code, cloud speech language tag).
LANGUAGES = {
    "English": ("en", "en-IN"),
    "Hindi": ("hi", "hi-IN"),
    "Marathi": ("mr", "mr-IN"),
    "Gujarati": ("gu", "gu-IN"),
}

TranslationBackend = Callable[[str, str], str]


class UnsupportedLanguage(ValueError):
    pass


class TranslationUnavailable(RuntimeError):
    pass


def check_language(name: str) -> str:
    """Return the canonical language name, accepting any letter case."""
    for known in LANGUAGES:
        if name and name.lower() == known.lower():
            return known
    raise UnsupportedLanguage(
        f"Unsupported language '{name}'. Valid: {sorted(LANGUAGES)}"
    )


def language_code(name: str) -> str:
    """'Hindi' -> 'hi'."""
    return LANGUAGES[check_language(name)][0]


def translate_if_necessary(
    text: str,
    source_language: str,
    backend: TranslationBackend | None = None,
) -> str:
    """Return `text` in English.

    Raises:
        UnsupportedLanguage: source_language is not supported.
        TranslationUnavailable: non-English text and no backend.
    """
    language = check_language(source_language)
    if language == "English":
        return text
    if backend is None:
        raise TranslationUnavailable(
            f"No translation backend configured for {language} text"
        )
    logger.info("Translating %d chars from %s", len(text), language)
    return backend(text, language)
