"""Text normalization — reduce English text to signable vocabulary words.

Lowercases, strips punctuation, spells multi-digit numbers as separate
digits ("42" -> "4 2", one sign per digit), and drops stop words that
have no sign of their own.
"""

import re

ENGLISH_STOP_WORDS = frozenset({
    "a", "an", "and", "are", "as", "at", "be", "by", "for", "from", "has", "he",
    "in", "is", "it", "its", "of", "on", "that", "the", "to", "was", "were",
    "will", "with", "i", "me", "my", "mine", "you", "your", "yours", "she",
    "her", "hers", "him", "his", "they", "them", "their", "theirs", "we", "us",
    "our", "ours", "myself", "yourself", "himself", "herself", "itself",
    "ourselves", "yourselves", "themselves", "what", "which", "who", "whom",
    "this", "these", "those", "am", "being", "been", "have", "had", "having",
    "do", "does", "did", "doing", "but", "if", "or", "because", "so", "than",
    "too", "very", "s", "t", "can", "cannot", "could", "should", "would", "may",
    "might", "must", "not", "no", "nor", "only", "own", "same", "just", "don",
    "should've", "now", "d", "ll", "m", "o", "re", "ve", "y", "ain", "aren",
    "couldn", "didn", "doesn", "hadn", "hasn", "haven", "isn", "ma", "mightn",
    "mustn", "needn", "shan", "shouldn", "wasn", "weren", "won", "wouldn",
    "about", "above", "after", "again", "against", "all", "any", "below",
    "between", "both", "down", "during", "each", "few", "further", "into",
    "more", "most", "once", "other", "out", "over", "some", "such", "then",
    "there", "through", "under", "until", "up", "while",
})

PUNCTUATION_RE = re.compile(r"""[.,!?;:"'`()\[\]{}]""")
DIGITS_RE = re.compile(r"^\d+$")


def clean_text(raw_text: str | None) -> str:
    """Normalize raw English text into space-separated sign words.

    >>> clean_text("I have 42 apples!")
    '4 2 apples'
    """
    if not raw_text or not raw_text.strip():
        return ""

    words = []
    for word in raw_text.lower().split():
        word = PUNCTUATION_RE.sub("", word)
        if DIGITS_RE.match(word):
            words.extend(word)
        elif word and word not in ENGLISH_STOP_WORDS:
            words.append(word)
    return " ".join(words)
