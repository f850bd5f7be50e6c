"""
Text helpers used by the hallucination detector.

Responses are compared lexically, so these functions define what counts as a
word, a number and a name. Words keep every Unicode letter (the regex word
class is Unicode-aware, so ñ, ß or Cyrillic survive). Names only start with
ASCII or Portuguese-accented capitals.
"""

import re
from typing import List

# Uppercase / lowercase letter classes for proper nouns, accented Latin included
_UPPER = "A-ZÁÉÍÓÚÀÈÌÒÙÂÊÎÔÛÃÕÄËÏÖÜÇ"
_LOWER = "a-záéíóúàèìòùâêîôûãõäëïöüç"

_PUNCTUATION_RE = re.compile(r"[^\w\s]")
_NUMBER_RE = re.compile(r"[0-9]+(?:[.,][0-9]+)?")
_PROPER_NOUN_RE = re.compile(
    rf"[{_UPPER}][{_LOWER}]+(?:\s[{_UPPER}][{_LOWER}]+)*"
)

MIN_WORD_LENGTH = 4
MIN_PROPER_NOUN_LENGTH = 3


def extract_words(text: str) -> List[str]:
    """
    Tokenize text into lowercase words of at least four characters.

    Anything that is not a Unicode letter, digit, underscore or whitespace
    becomes whitespace, so letters of any script are preserved.

    Example:
        >>> extract_words("Acme's pricing: fair, não caro!")
        ['acme', 'pricing', 'fair', 'caro']
    """
    cleaned = _PUNCTUATION_RE.sub(" ", text.lower())
    return [word for word in cleaned.split() if len(word) >= MIN_WORD_LENGTH]


def extract_numbers(text: str) -> List[float]:
    """
    Extract numeric literals, reading ',' or '.' as the decimal separator.

    Example:
        >>> extract_numbers("Founded in 1998, it has 4,5 million users")
        [1998.0, 4.5]
    """
    return [float(match.replace(",", ".")) for match in _NUMBER_RE.findall(text)]


def extract_proper_nouns(text: str) -> List[str]:
    """
    Extract runs of capitalized words, e.g. "Acme Corp" or "São Paulo".

    Runs shorter than three characters are dropped.
    """
    return [
        match for match in _PROPER_NOUN_RE.findall(text)
        if len(match) >= MIN_PROPER_NOUN_LENGTH
    ]
